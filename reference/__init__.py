"""Static reference data: the notation translator and the vocabulary guide."""

from .notation import NotationCatalog, NotationEntry, get_notation_catalog
from .vocabulary import GoldenWord, VocabularyEntry, VocabularyGuide, get_vocabulary_guide

__all__ = [
    "NotationCatalog",
    "NotationEntry",
    "get_notation_catalog",
    "GoldenWord",
    "VocabularyEntry",
    "VocabularyGuide",
    "get_vocabulary_guide",
]
