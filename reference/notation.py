"""
Notation translator: looks up the math notation students most often misread.
"""

import json
import logging
from pathlib import Path
from typing import List, Optional

from pydantic import Field

from shared.models import CamelModel

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent / "data"


class NotationEntry(CamelModel):
    id: str
    notation: str
    meaning: str
    confused_with: str
    trap: str
    mnemonic: str
    examples: List[str] = Field(default_factory=list)
    category: str
    ap_unit: int


class NotationCatalog:
    """Read-only view over the bundled notation table."""

    def __init__(self, entries: List[NotationEntry]):
        self._entries = tuple(entries)
        self._by_id = {entry.id: entry for entry in self._entries}

    @classmethod
    def from_file(cls, path: Path = DATA_DIR / "notation_table.json") -> "NotationCatalog":
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        entries = [NotationEntry.model_validate(item) for item in raw.get("notations", [])]
        logger.info("Loaded %d notation entries from %s", len(entries), path.name)
        return cls(entries)

    @property
    def entries(self) -> List[NotationEntry]:
        return list(self._entries)

    def search(self, query: str = "", category: Optional[str] = None) -> List[NotationEntry]:
        """Case-insensitive substring match on notation, meaning or category."""
        needle = (query or "").lower()
        results = []
        for entry in self._entries:
            matches_query = (
                not needle
                or needle in entry.notation.lower()
                or needle in entry.meaning.lower()
                or needle in entry.category.lower()
            )
            if matches_query and (not category or entry.category == category):
                results.append(entry)
        return results

    def categories(self) -> List[str]:
        seen: List[str] = []
        for entry in self._entries:
            if entry.category not in seen:
                seen.append(entry.category)
        return seen

    def get(self, notation_id: str) -> Optional[NotationEntry]:
        return self._by_id.get(notation_id)


_notation_catalog = None


def get_notation_catalog() -> NotationCatalog:
    """Get the process-wide notation catalog, loading it on first use."""
    global _notation_catalog
    if _notation_catalog is None:
        _notation_catalog = NotationCatalog.from_file()
    return _notation_catalog
