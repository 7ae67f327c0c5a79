#!/usr/bin/env python3
"""
Online Distribution
===================
A discrete probability distribution that is re-estimated every time a
value is observed, without keeping raw counts around.

Both surface-form variants of a word and the transitions out of a state
are stored this way:

    dist = OnlineDistribution()
    dist.observe("a")          # a: 1.0
    dist.observe("b")          # a: 0.5, b: 0.5
    dist.observe("a")          # a: 2/3, b: 1/3

Each step multiplies the stored probability back up to a pseudo-count,
credits the observed value, and renormalises by the new total. A value
seen for the first time is appended with ``1 / n`` where ``n`` is the
already incremented observation count.

Sampling walks the entries in insertion order and returns the first one
whose cumulative mass reaches a uniform draw ``u`` in [0, 1). If
floating-point drift leaves ``u`` above every cumulative sum, the last
entry wins.
"""

import random
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, List, Optional, Tuple

from .errors import EmptyModel


Matcher = Callable[[Any, Any], bool]


def _equal(a: Any, b: Any) -> bool:
    return a == b


@dataclass
class Outcome:
    """One value of a distribution and its current probability."""
    value: Any
    probability: float


@dataclass
class OnlineDistribution:
    """
    Incrementally re-weighted distribution over arbitrary values.

    Args:
        matches: Predicate deciding whether a stored value and a newly
            observed one are the same outcome (defaults to ``==``).
    """
    matches: Matcher = field(default=_equal, repr=False, compare=False)
    outcomes: List[Outcome] = field(default_factory=list)
    observations: int = 0

    def observe(self, value: Any) -> None:
        """Record one more occurrence of ``value``."""
        n = self.observations
        credited = False
        for outcome in self.outcomes:
            raw = outcome.probability * n
            if not credited and self.matches(outcome.value, value):
                raw += 1
                credited = True
            outcome.probability = raw / (n + 1)

        self.observations += 1

        if not credited:
            self.outcomes.append(Outcome(value, 1.0 / self.observations))

    def sample(self, rng: Optional[random.Random] = None) -> Any:
        """
        Draw a value according to the current probabilities.

        Raises:
            EmptyModel: If nothing has been observed yet.
        """
        if not self.outcomes:
            raise EmptyModel("Cannot sample from an empty distribution")

        selection = (rng or random).random()
        processed = 0.0
        for outcome in self.outcomes:
            processed += outcome.probability
            if processed >= selection:
                return outcome.value
        return self.outcomes[-1].value

    def total(self) -> float:
        """Sum of all probabilities (1.0 up to rounding once observed)."""
        return sum(o.probability for o in self.outcomes)

    def items(self) -> List[Tuple[Any, float]]:
        return [(o.value, o.probability) for o in self.outcomes]

    def probability_of(self, value: Any) -> float:
        for outcome in self.outcomes:
            if self.matches(outcome.value, value):
                return outcome.probability
        return 0.0

    def __len__(self) -> int:
        return len(self.outcomes)

    def __iter__(self) -> Iterator[Outcome]:
        return iter(self.outcomes)


__all__ = ['Outcome', 'OnlineDistribution']
