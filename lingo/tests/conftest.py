"""
Pytest fixtures for Lingo tests.
"""

import pytest
import time

from ..game import GameConfig
from ..providers import (
    ImageLookup,
    ImageProvider,
    InMemoryVocabularyStore,
    ProviderError,
    SearchProvider,
    SearchResult,
    VocabularyStore,
)
from ..session import IntentHandlers, Session, TurnContext


class FakeImageProvider(ImageProvider):
    """Always returns the same pictures; can be switched to fail."""

    def __init__(self, single=None, multiple=None, fail=False):
        self.single = single or ImageLookup(
            url="/images/sky.jpg", words=("sky",), translations=("cielo",),
        )
        self.multiple = multiple or ImageLookup(
            url="/images/house.jpg",
            words=("sky", "blue", "house"),
            translations=("cielo", "azul", "casa"),
        )
        self.fail = fail
        self.calls = 0

    def lookup_single(self) -> ImageLookup:
        self.calls += 1
        if self.fail:
            raise ProviderError("image service down")
        return self.single

    def lookup_multiple(self, count: int = 3) -> ImageLookup:
        self.calls += 1
        if self.fail:
            raise ProviderError("image service down")
        return self.multiple


class FakeSearchProvider(SearchProvider):

    def __init__(self, results=None, fail=False):
        self.results = results if results is not None else [
            SearchResult(title="Gato", description="El gato doméstico es un mamífero."),
            SearchResult(title="Gato montés", description="Felino salvaje de Europa."),
        ]
        self.fail = fail
        self.queries = []

    def search(self, query: str, limit: int = 3) -> list[SearchResult]:
        self.queries.append(query)
        if self.fail:
            raise ProviderError("search service down")
        return self.results[:limit]


class FailingVocabularyStore(VocabularyStore):
    """Store whose writes always blow up."""

    def append_pair(self, user_id: str, english: str, spanish: str):
        raise RuntimeError("database unavailable")

    def fetch_pairs(self, user_id: str):
        raise ProviderError("database unavailable")


@pytest.fixture
def image_provider() -> FakeImageProvider:
    return FakeImageProvider()


@pytest.fixture
def search_provider() -> FakeSearchProvider:
    return FakeSearchProvider()


@pytest.fixture
def vocabulary_store() -> InMemoryVocabularyStore:
    return InMemoryVocabularyStore()


@pytest.fixture
def handlers(image_provider, search_provider, vocabulary_store) -> IntentHandlers:
    return IntentHandlers(
        image_provider=image_provider,
        search_provider=search_provider,
        vocabulary_store=vocabulary_store,
        canvas_url="https://canvas.example.test",
    )


def make_session(attempts: int = 5, seed: int = 7, user_id: str | None = "user-1") -> Session:
    return Session(
        session_id="session-1",
        created_at=time.time(),
        config=GameConfig(attempts=attempts, seed=seed),
        user_id=user_id,
        user_name="Ana",
    )


@pytest.fixture
def session() -> Session:
    """A linked user's session with the default attempt budget."""
    return make_session()


@pytest.fixture
def play(handlers):
    """Run one handler turn: play(session, "lang_word", word="sky")."""

    def run(session: Session, handler: str, **params):
        ctx = TurnContext(
            session=session,
            params=params,
            capabilities=["SPEECH", "INTERACTIVE_CANVAS"],
        )
        return handlers.handle(handler, ctx)

    return run
