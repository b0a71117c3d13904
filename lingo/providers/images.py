"""
Image Provider - Supplies a picture and the words it shows.

The games only need a picture URL, the English word(s) it depicts and
their Spanish translations. Image search and translation are external
services; the bundled WordBankImageProvider serves a fixed catalog so the
games run without network access.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
import random

from .base import ProviderError


@dataclass(frozen=True)
class ImageLookup:
    """A picture and its labels, English and Spanish in the same order."""
    url: str
    words: tuple[str, ...]
    translations: tuple[str, ...]

    def __post_init__(self):
        if not self.words:
            raise ValueError("ImageLookup needs at least one word")
        if len(self.words) != len(self.translations):
            raise ValueError("Every word needs a translation")

    @property
    def word(self) -> str:
        return self.words[0]

    @property
    def word_translated(self) -> str:
        return self.translations[0]


class ImageProvider(ABC):
    """Source of pictures for the guessing games."""

    @abstractmethod
    def lookup_single(self) -> ImageLookup:
        """A picture labelled with one word."""

    @abstractmethod
    def lookup_multiple(self, count: int = 3) -> ImageLookup:
        """A picture labelled with `count` words."""


# (picture, [(english, spanish), ...]) - first label is the main subject
DEFAULT_WORD_BANK: list[tuple[str, list[tuple[str, str]]]] = [
    ("/images/beach.jpg", [("beach", "playa"), ("sky", "cielo"), ("sand", "arena"), ("sea", "mar")]),
    ("/images/kitchen.jpg", [("kitchen", "cocina"), ("table", "mesa"), ("chair", "silla"), ("window", "ventana")]),
    ("/images/farm.jpg", [("horse", "caballo"), ("grass", "hierba"), ("tree", "árbol"), ("fence", "cerca")]),
    ("/images/city.jpg", [("city", "ciudad"), ("street", "calle"), ("car", "coche"), ("building", "edificio")]),
    ("/images/park.jpg", [("dog", "perro"), ("ball", "pelota"), ("flower", "flor"), ("bench", "banco")]),
    ("/images/dessert.jpg", [("ice cream", "helado"), ("spoon", "cuchara"), ("cup", "taza"), ("cherry", "cereza")]),
    ("/images/classroom.jpg", [("book", "libro"), ("teacher", "maestro"), ("pencil", "lápiz"), ("door", "puerta")]),
    ("/images/night.jpg", [("moon", "luna"), ("star", "estrella"), ("house", "casa"), ("cat", "gato")]),
]


@dataclass
class WordBankImageProvider(ImageProvider):
    """Picks pictures from a fixed, labelled catalog."""
    word_bank: list[tuple[str, list[tuple[str, str]]]] = field(
        default_factory=lambda: list(DEFAULT_WORD_BANK)
    )
    rng: random.Random = field(default_factory=random.Random)

    def lookup_single(self) -> ImageLookup:
        url, labels = self._pick(1)
        english, spanish = labels[0]
        return ImageLookup(url=url, words=(english,), translations=(spanish,))

    def lookup_multiple(self, count: int = 3) -> ImageLookup:
        url, labels = self._pick(count)
        chosen = self.rng.sample(labels, count)
        return ImageLookup(
            url=url,
            words=tuple(english for english, _ in chosen),
            translations=tuple(spanish for _, spanish in chosen),
        )

    def _pick(self, count: int) -> tuple[str, list[tuple[str, str]]]:
        candidates = [entry for entry in self.word_bank if len(entry[1]) >= count]
        if not candidates:
            raise ProviderError(f"No picture with {count} labels in the word bank")
        return self.rng.choice(candidates)
