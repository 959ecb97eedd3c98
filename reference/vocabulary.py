"""
Vocabulary guide ("golden words"): the terms AP Precalculus questions lean on.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import Field

from shared.models import CamelModel

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent / "data"


class GoldenWord(CamelModel):
    term: str
    definition: str
    formal_definition: str
    examples: List[str] = Field(default_factory=list)
    common_misconceptions: List[str] = Field(default_factory=list)
    related_terms: List[str] = Field(default_factory=list)
    ap_unit: int


class VocabularyCategory(CamelModel):
    name: str
    words: List[GoldenWord] = Field(default_factory=list)


class VocabularyEntry(GoldenWord):
    """A word flattened together with the category it belongs to."""
    category_key: str
    category_name: str


class VocabularyGuide:

    def __init__(self, categories: Dict[str, VocabularyCategory]):
        self._categories = dict(categories)
        self._entries = tuple(
            VocabularyEntry(**word.model_dump(), category_key=key, category_name=category.name)
            for key, category in self._categories.items()
            for word in category.words
        )

    @classmethod
    def from_file(cls, path: Path = DATA_DIR / "golden_words.json") -> "VocabularyGuide":
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        categories = {
            key: VocabularyCategory.model_validate(value)
            for key, value in raw.get("categories", {}).items()
        }
        logger.info("Loaded %d vocabulary categories from %s", len(categories), path.name)
        return cls(categories)

    @property
    def entries(self) -> List[VocabularyEntry]:
        return list(self._entries)

    def categories(self) -> Dict[str, str]:
        """Category key to display name, in file order."""
        return {key: category.name for key, category in self._categories.items()}

    def search(self, query: str = "", category: Optional[str] = None) -> List[VocabularyEntry]:
        """Match on term, definition or any related term; `category` is a category key."""
        needle = (query or "").lower()
        results = []
        for entry in self._entries:
            matches_query = (
                not needle
                or needle in entry.term.lower()
                or needle in entry.definition.lower()
                or any(needle in related.lower() for related in entry.related_terms)
            )
            if matches_query and (not category or entry.category_key == category):
                results.append(entry)
        return results


_vocabulary_guide = None


def get_vocabulary_guide() -> VocabularyGuide:
    global _vocabulary_guide
    if _vocabulary_guide is None:
        _vocabulary_guide = VocabularyGuide.from_file()
    return _vocabulary_guide
