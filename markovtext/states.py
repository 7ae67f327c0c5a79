#!/usr/bin/env python3
"""
State Table
===========
Maps a window of ``order`` consecutive words to the distribution of what
follows it: another word, or ``None`` for the end of a sentence.

States are keyed by the tuple of their word ids. The table keeps an
index list next to the mapping so that a uniformly random state can be
drawn in constant time when a sentence is seeded.
"""

import random
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from .distribution import OnlineDistribution
from .errors import EmptyModel
from .words import Word


StateKey = Tuple[int, ...]


def _same_target(a: Optional[Word], b: Optional[Word]) -> bool:
    if a is None or b is None:
        return a is b
    return a.id == b.id


def state_key(words: Sequence[Word]) -> StateKey:
    return tuple(w.id for w in words)


@dataclass(eq=False)
class State:
    """A context of ``order`` words and its learned next-word distribution."""
    words: Tuple[Word, ...]
    next_words: OnlineDistribution = field(
        default_factory=lambda: OnlineDistribution(matches=_same_target),
        repr=False,
    )

    @property
    def key(self) -> StateKey:
        return state_key(self.words)

    @property
    def transitions(self) -> List[Tuple[Optional[Word], float]]:
        """(next word or None, probability) pairs in first-seen order."""
        return self.next_words.items()

    @property
    def total_observations(self) -> int:
        return self.next_words.observations

    def add_next(self, word: Optional[Word]) -> None:
        self.next_words.observe(word)

    def sample_next(self, rng: Optional[random.Random] = None) -> Optional[Word]:
        if not self.next_words:
            raise EmptyModel(f"State {self.describe()!r} has no transitions")
        return self.next_words.sample(rng)

    def describe(self) -> str:
        return ' '.join(w.canonical_key for w in self.words)


class StateTable:
    """Owns every State of a chain."""

    def __init__(self, order: int):
        self.order = order
        self._by_key: Dict[StateKey, State] = {}
        self._index: List[State] = []

    def _check_window(self, words: Sequence[Word]) -> None:
        if len(words) != self.order:
            raise ValueError(
                f"State needs exactly {self.order} words, got {len(words)}"
            )

    def get_or_create_state(self, words: Sequence[Word]) -> State:
        """Return the state for ``words``, creating an empty one if unseen."""
        self._check_window(words)
        key = state_key(words)
        state = self._by_key.get(key)
        if state is None:
            state = State(words=tuple(words))
            self._by_key[key] = state
            self._index.append(state)
        return state

    def lookup(self, words: Sequence[Word]) -> Optional[State]:
        """Return the state for ``words`` without creating it."""
        self._check_window(words)
        return self._by_key.get(state_key(words))

    def add_transition(self, state: State, next_word: Optional[Word]) -> None:
        state.add_next(next_word)

    def sample_next(self, state: State,
                    rng: Optional[random.Random] = None) -> Optional[Word]:
        return state.sample_next(rng)

    def random_state(self, rng: Optional[random.Random] = None) -> State:
        """
        Pick a state uniformly at random.

        Raises:
            EmptyModel: If the table has no states.
        """
        if not self._index:
            raise EmptyModel("The chain has no states; train it on some text first")
        return self._index[(rng or random).randrange(len(self._index))]

    def transition_count(self) -> int:
        return sum(len(s.next_words) for s in self._index)

    def __len__(self) -> int:
        return len(self._index)

    def __iter__(self) -> Iterator[State]:
        return iter(self._index)


__all__ = ['State', 'StateTable', 'StateKey', 'state_key']
