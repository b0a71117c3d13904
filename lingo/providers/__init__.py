"""
Providers - External collaborators of the game.

The game core only calls these interfaces:
- ImageProvider: picture + English words + Spanish translations
- SearchProvider: articles for conversation practice
- VocabularyStore: per-user learned word pairs
"""

from .base import ProviderError
from .images import ImageLookup, ImageProvider, WordBankImageProvider
from .search import SearchResult, SearchProvider, WikipediaSearchProvider
from .vocabulary import (
    WordPair,
    VocabularyStore,
    InMemoryVocabularyStore,
    JsonFileVocabularyStore,
)

__all__ = [
    "ProviderError",
    "ImageLookup",
    "ImageProvider",
    "WordBankImageProvider",
    "SearchResult",
    "SearchProvider",
    "WikipediaSearchProvider",
    "WordPair",
    "VocabularyStore",
    "InMemoryVocabularyStore",
    "JsonFileVocabularyStore",
]
