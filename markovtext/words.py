#!/usr/bin/env python3
"""
Word Registry
=============
Interns surface tokens into canonical words and tracks how often each
surface form of a word was seen.

Identity is the canonical key: ASCII letters are folded to lowercase and
every other character is left untouched, so "Word", "word" and "WORD" are
one word while CJK tokens are keyed exactly as written. The surface forms
are kept as variants so generated text can reproduce the original casing
in proportion to how it appeared in the corpus.

Words are stored in an arena and get a stable integer id on creation.
States refer to words by that id.
"""

import random
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from .distribution import OnlineDistribution


_ASCII_UPPER = {chr(c): chr(c + 32) for c in range(ord('A'), ord('Z') + 1)}


def canonical_key(surface: str) -> str:
    """Fold ASCII uppercase letters to lowercase, leave everything else."""
    return ''.join(_ASCII_UPPER.get(ch, ch) for ch in surface)


@dataclass(eq=False)
class Word:
    """A canonical word and the surface forms it was observed with."""
    id: int
    canonical_key: str
    forms: OnlineDistribution = field(default_factory=OnlineDistribution, repr=False)

    @property
    def variants(self) -> List[Tuple[str, float]]:
        """(surface_form, probability) pairs in first-seen order."""
        return self.forms.items()

    @property
    def instance_count(self) -> int:
        return self.forms.observations

    def observe(self, surface: str) -> None:
        self.forms.observe(surface)

    def sample_surface_form(self, rng: Optional[random.Random] = None) -> str:
        return self.forms.sample(rng)

    def __str__(self) -> str:
        return self.canonical_key


def sample_surface_form(word: Word, rng: Optional[random.Random] = None) -> str:
    """Pick one of ``word``'s surface forms, weighted by frequency."""
    return word.sample_surface_form(rng)


class WordRegistry:
    """Owns every Word of a chain, keyed by canonical key."""

    def __init__(self):
        self._by_key: Dict[str, Word] = {}
        self._arena: List[Word] = []

    def resolve(self, surface: str, record: bool = True) -> Optional[Word]:
        """
        Look up the word for ``surface``.

        Args:
            surface: Token as it appeared in the text.
            record: Count this occurrence, creating the word if needed.
                With ``record=False`` the registry is never modified and
                unknown tokens return None.
        """
        key = canonical_key(surface)
        word = self._by_key.get(key)

        if word is not None:
            if record:
                word.observe(surface)
            return word

        if not record:
            return None

        word = Word(id=len(self._arena), canonical_key=key)
        word.observe(surface)
        self._arena.append(word)
        self._by_key[key] = word
        return word

    def get(self, surface: str) -> Optional[Word]:
        """Read-only lookup, same as ``resolve(surface, record=False)``."""
        return self.resolve(surface, record=False)

    def word(self, word_id: int) -> Word:
        """Return the word with the given id."""
        return self._arena[word_id]

    def __contains__(self, surface: str) -> bool:
        return canonical_key(surface) in self._by_key

    def __len__(self) -> int:
        return len(self._arena)

    def __iter__(self) -> Iterator[Word]:
        return iter(self._arena)


__all__ = ['Word', 'WordRegistry', 'canonical_key', 'sample_surface_form']
