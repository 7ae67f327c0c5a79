#!/usr/bin/env python3
"""
Markov Chain Text Generator
===========================
Word-level Markov chain of arbitrary order, trained incrementally on
tokenized sentences and used to generate new sentences by random walk.

Theory:
-------
A chain of order n models P(next_word | previous n words). Every window
of n consecutive words seen in training becomes a state; the word that
followed it (or the end of the sentence) is recorded as a transition.
Generation starts from a random state and keeps sampling the next word
from the state formed by the last n words until the end of a sentence is
drawn.

- Order 1: loose, mixes sentences freely
- Order 2: usually the sweet spot for short corpora
- Order 3+: reproduces long stretches of the corpus verbatim

Example:
--------
    from markovtext import build

    chain = build(text, order=2)
    print(chain.generate_sentence())
    print(chain.word_count(), chain.state_count())
"""

import logging
import random
from typing import Iterable, List, Optional, Sequence

from .errors import EmptyModel, InvalidOrder
from .states import State, StateTable
from .tokenizer import tokenize
from .words import Word, WordRegistry, sample_surface_form

logger = logging.getLogger(__name__)


# Appended to every generated sentence (ideographic full stop)
TERMINATOR = '。'

# Stripped when a sentence starts mid-clause (full-width comma)
LEADING_COMMA = '，'


class MarkovChain:
    """
    An n-th order word Markov chain.

    Args:
        order: Number of preceding words that form a state (>= 1).
        rng: Random source for all sampling. Pass a seeded
            ``random.Random`` for reproducible output.
        max_words: Optional cap on the length of a generated sentence.
            None walks until the end of a sentence is sampled, which a
            degenerate model may never do. Must be at least ``order``,
            since the seed state alone holds ``order`` words.
    """

    def __init__(self,
                 order: int,
                 rng: random.Random = None,
                 max_words: Optional[int] = None):
        if isinstance(order, bool) or not isinstance(order, int) or order < 1:
            raise InvalidOrder(order)
        if max_words is not None and max_words < order:
            raise ValueError(
                f"max_words must be at least the chain order ({order}), got {max_words}"
            )

        self.order = order
        self.rng = rng or random.Random()
        self.max_words = max_words
        self.registry = WordRegistry()
        self.states = StateTable(order)

    # -------------------------------------------------------------------------
    # Words and states
    # -------------------------------------------------------------------------

    def resolve(self, surface: str, record: bool = True) -> Optional[Word]:
        return self.registry.resolve(surface, record)

    def get_or_create_state(self, words: Sequence[Word]) -> State:
        return self.states.get_or_create_state(words)

    def add_transition(self, state: State, next_word: Optional[Word]) -> None:
        self.states.add_transition(state, next_word)

    def sample_next(self, state: State) -> Optional[Word]:
        return self.states.sample_next(state, self.rng)

    def random_state(self) -> State:
        return self.states.random_state(self.rng)

    # -------------------------------------------------------------------------
    # Training
    # -------------------------------------------------------------------------

    def train_sentence(self, tokens: Sequence[str]) -> int:
        """
        Learn from one tokenized sentence.

        Returns:
            Number of transitions recorded (0 if the sentence is shorter
            than the chain order).
        """
        words = [self.registry.resolve(token, record=True) for token in tokens]

        if len(words) < self.order:
            return 0

        recorded = 0
        last = len(words) - 1
        for j in range(self.order - 1, len(words)):
            phrase = words[j - self.order + 1:j + 1]
            next_word = None if j == last else words[j + 1]
            self.add_transition(self.get_or_create_state(phrase), next_word)
            recorded += 1
        return recorded

    def train(self, sentences: Iterable[Sequence[str]]) -> None:
        """Learn from an iterable of tokenized sentences."""
        count = 0
        transitions = 0
        for tokens in sentences:
            transitions += self.train_sentence(tokens)
            count += 1
        logger.debug(
            f"Trained on {count} sentences: {transitions} transitions, "
            f"{self.word_count()} words, {self.state_count()} states"
        )

    def train_text(self, text: str, split_characters: bool = False) -> None:
        """Tokenize raw prose and learn from it."""
        self.train(tokenize(text, split_characters=split_characters))

    # -------------------------------------------------------------------------
    # Generation
    # -------------------------------------------------------------------------

    def walk(self) -> List[Word]:
        """
        Random walk from a random state to the end of a sentence.

        Raises:
            EmptyModel: If the chain has no states, or the walk reaches a
                state nothing was ever observed after.
        """
        buffer = list(self.random_state().words)

        while True:
            state = self.get_or_create_state(buffer[-self.order:])
            if not state.next_words:
                logger.warning(f"Walk reached state without transitions: {state.describe()!r}")
                raise EmptyModel(f"No continuation learned for {state.describe()!r}")

            next_word = self.sample_next(state)
            if next_word is None:
                break
            if self.max_words is not None and len(buffer) >= self.max_words:
                logger.warning(
                    f"Sentence reached max_words={self.max_words}, stopping early"
                )
                break
            buffer.append(next_word)

        return buffer

    def render(self, words: Sequence[Word]) -> str:
        """Join sampled surface forms and terminate the sentence."""
        output = ''.join(sample_surface_form(w, self.rng) for w in words) + TERMINATOR
        if output.startswith(LEADING_COMMA):
            output = output[1:]
        return output

    def generate_sentence(self) -> str:
        """
        Generate one sentence.

        Capitalization and HTML escaping are left to the caller (see
        ``markovtext.presentation``).

        Raises:
            EmptyModel: If nothing has been learned.
        """
        return self.render(self.walk())

    def generate_batch(self,
                       count: int,
                       unique: bool = True,
                       max_attempts: Optional[int] = None) -> List[str]:
        """
        Generate several sentences.

        Args:
            count: Number of sentences wanted.
            unique: Drop sentences that were already produced.
            max_attempts: Give up after this many generations
                (default: count * 20). Small corpora may not have
                ``count`` distinct sentences in them.

        Returns:
            Up to ``count`` sentences, in generation order.
        """
        if max_attempts is None:
            max_attempts = count * 20

        results = []
        seen = set()
        attempts = 0

        while len(results) < count and attempts < max_attempts:
            attempts += 1
            sentence = self.generate_sentence()
            if unique:
                if sentence in seen:
                    continue
                seen.add(sentence)
            results.append(sentence)

        if len(results) < count:
            logger.debug(f"Only {len(results)}/{count} sentences after {attempts} attempts")
        return results

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    def word_count(self) -> int:
        return len(self.registry)

    def state_count(self) -> int:
        return len(self.states)

    def stats(self) -> dict:
        return {
            'order': self.order,
            'words': self.word_count(),
            'states': self.state_count(),
            'transitions': self.states.transition_count(),
        }

    def __repr__(self) -> str:
        return (f"MarkovChain(order={self.order}, words={self.word_count()}, "
                f"states={self.state_count()})")

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def from_text(cls,
                  text: str,
                  order: int,
                  rng: random.Random = None,
                  split_characters: bool = False,
                  max_words: Optional[int] = None) -> 'MarkovChain':
        """Create a chain and train it on raw prose."""
        chain = cls(order, rng=rng, max_words=max_words)
        chain.train_text(text, split_characters=split_characters)
        return chain


def build(raw_text: str,
          order: int,
          rng: random.Random = None,
          split_characters: bool = False,
          max_words: Optional[int] = None) -> MarkovChain:
    """
    Tokenize ``raw_text`` and train a new chain of the given order on it.

    Empty or unusable text gives an empty chain; the problem surfaces as
    ``EmptyModel`` when generating.
    """
    return MarkovChain.from_text(
        raw_text, order,
        rng=rng,
        split_characters=split_characters,
        max_words=max_words,
    )


__all__ = ['MarkovChain', 'build', 'TERMINATOR', 'LEADING_COMMA']
