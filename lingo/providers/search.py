"""
Search Provider - Finds short articles for conversation practice.

The default WikipediaSearchProvider queries the Spanish Wikipedia search
API so the learner reads real Spanish text about the topic they chose.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any
import html
import logging
import re

import requests

from .base import ProviderError

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_URL = "https://es.wikipedia.org/w/api.php"
DEFAULT_SEARCH_TIMEOUT = 5.0

_TAG_RE = re.compile(r"<[^>]+>")


@dataclass(frozen=True)
class SearchResult:
    """One article found for a topic."""
    title: str
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {"title": self.title, "description": self.description}


class SearchProvider(ABC):
    """Source of articles for conversation practice."""

    @abstractmethod
    def search(self, query: str, limit: int = 3) -> list[SearchResult]:
        """
        Find up to `limit` articles about `query`.

        Raises:
            ProviderError: if the search service fails
        """


def strip_markup(snippet: str) -> str:
    """Remove highlight tags and entities from a search snippet."""
    return html.unescape(_TAG_RE.sub("", snippet)).strip()


class WikipediaSearchProvider(SearchProvider):
    """Full-text search against a MediaWiki API endpoint."""

    def __init__(
        self,
        base_url: str = DEFAULT_SEARCH_URL,
        timeout: float = DEFAULT_SEARCH_TIMEOUT,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.session = session or requests.Session()

    def search(self, query: str, limit: int = 3) -> list[SearchResult]:
        params = {
            "action": "query",
            "list": "search",
            "srsearch": query,
            "srlimit": limit,
            "format": "json",
        }
        try:
            resp = self.session.get(self.base_url, params=params, timeout=self.timeout)
            resp.raise_for_status()
            payload = resp.json()
        except (requests.RequestException, ValueError) as e:
            raise ProviderError(f"Search for {query!r} failed: {e}") from e

        hits = payload.get("query", {}).get("search", [])
        logger.debug("Search %r returned %d hits", query, len(hits))
        return [
            SearchResult(
                title=hit.get("title", ""),
                description=strip_markup(hit.get("snippet", "")),
            )
            for hit in hits[:limit]
        ]
