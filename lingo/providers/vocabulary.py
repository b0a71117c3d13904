"""
Vocabulary Store - Per-user collection of learned word pairs.

Writes have array-union semantics: appending a pair the user already has
is a no-op. Reads for an unknown user return an empty list.

Two stores:
- InMemoryVocabularyStore: process-local, for tests
- JsonFileVocabularyStore: one JSON file per user in a directory
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any
import hashlib
import json
import logging
import time

from .base import ProviderError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WordPair:
    """An English word and its Spanish translation."""
    english: str
    spanish: str

    def to_dict(self) -> dict[str, str]:
        return {"english": self.english, "spanish": self.spanish}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WordPair:
        return cls(english=str(data["english"]), spanish=str(data["spanish"]))


class VocabularyStore(ABC):
    """Append-only store of word pairs keyed by user id."""

    @abstractmethod
    def append_pair(self, user_id: str, english: str, spanish: str):
        """Add a pair to the user's collection (merge, no duplicates)."""

    @abstractmethod
    def fetch_pairs(self, user_id: str) -> list[WordPair]:
        """All pairs stored for the user, oldest first."""


class InMemoryVocabularyStore(VocabularyStore):

    def __init__(self):
        self._pairs: dict[str, list[WordPair]] = {}

    def append_pair(self, user_id: str, english: str, spanish: str):
        pairs = self._pairs.setdefault(user_id, [])
        pair = WordPair(english=english, spanish=spanish)
        if pair not in pairs:
            pairs.append(pair)

    def fetch_pairs(self, user_id: str) -> list[WordPair]:
        return list(self._pairs.get(user_id, []))


class JsonFileVocabularyStore(VocabularyStore):
    """
    File-based vocabulary store.

    Usage:
        store = JsonFileVocabularyStore(store_dir="~/.lingo/vocabulary")
        store.append_pair("uid-1", "cat", "gato")
        store.fetch_pairs("uid-1")

    Layout: <store_dir>/<sha256(user_id)[:16]>.json holding
    {"user_id": ..., "updated_at": ..., "translated_words": [...]}.
    """

    def __init__(self, store_dir: str | Path | None = None):
        if store_dir is None:
            store_dir = Path.home() / ".lingo" / "vocabulary"
        self.store_dir = Path(store_dir).expanduser()

    def append_pair(self, user_id: str, english: str, spanish: str):
        pairs = self.fetch_pairs(user_id)
        pair = WordPair(english=english, spanish=spanish)
        if pair in pairs:
            return
        pairs.append(pair)
        self._save(user_id, pairs)

    def fetch_pairs(self, user_id: str) -> list[WordPair]:
        path = self._get_path(user_id)
        if not path.exists():
            return []
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return [WordPair.from_dict(item) for item in data.get("translated_words", [])]
        except (OSError, ValueError, KeyError) as e:
            raise ProviderError(f"Unreadable vocabulary file {path}: {e}") from e

    def list_users(self) -> list[str]:
        """User ids with a vocabulary file."""
        users = []
        for path in self.store_dir.glob("*.json"):
            try:
                with open(path, "r", encoding="utf-8") as f:
                    users.append(json.load(f)["user_id"])
            except (OSError, ValueError, KeyError):
                logger.warning("Skipping unreadable vocabulary file %s", path)
        return users

    def _get_path(self, user_id: str) -> Path:
        digest = hashlib.sha256(user_id.encode("utf-8")).hexdigest()[:16]
        return self.store_dir / f"{digest}.json"

    def _save(self, user_id: str, pairs: list[WordPair]):
        path = self._get_path(user_id)
        data = {
            "user_id": user_id,
            "updated_at": time.time(),
            "translated_words": [p.to_dict() for p in pairs],
        }
        tmp_path = path.with_suffix(".tmp")
        try:
            # Directory is created on first write
            self.store_dir.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            tmp_path.replace(path)
        except OSError as e:
            raise ProviderError(f"Could not write vocabulary file {path}: {e}") from e
