"""
Tests for MarkovChain
=====================
Training, generation, error handling and the build() entry point.
"""

import logging
import random
import sys
from pathlib import Path

import pytest

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from markovtext import (
    EmptyModel,
    InvalidOrder,
    MarkovChain,
    MarkovError,
    TERMINATOR,
    build,
)


CORPUS = (
    "我 喜欢 吃 苹果。我 喜欢 吃 香蕉！你 喜欢 吃 什么？"
    "The cat sat on the mat. the dog sat on the rug. THE cat ran!"
)


def snapshot(chain):
    """Every distribution of the chain as plain data."""
    words = {w.canonical_key: (w.instance_count, w.variants) for w in chain.registry}
    states = {
        s.describe(): (
            s.total_observations,
            [(None if w is None else w.canonical_key, p) for w, p in s.transitions],
        )
        for s in chain.states
    }
    return words, states


class TestConstruction:
    """Tests for chain construction and order validation."""

    @pytest.mark.parametrize("order", [1, 2, 3, 7])
    def test_valid_orders(self, order):
        chain = MarkovChain(order)
        assert chain.order == order
        assert chain.word_count() == 0
        assert chain.state_count() == 0

    @pytest.mark.parametrize("order", [0, -1, -10])
    def test_order_below_one(self, order):
        with pytest.raises(InvalidOrder):
            MarkovChain(order)

    @pytest.mark.parametrize("order", ["2", 1.5, None, True])
    def test_order_not_an_int(self, order):
        with pytest.raises(InvalidOrder):
            MarkovChain(order)

    def test_invalid_order_is_value_error(self):
        """InvalidOrder can be caught as ValueError or MarkovError."""
        with pytest.raises(ValueError):
            MarkovChain(0)
        with pytest.raises(MarkovError):
            build("some text", 0)

    def test_invalid_max_words(self):
        with pytest.raises(ValueError):
            MarkovChain(2, max_words=0)

    def test_max_words_below_order(self):
        """The seed state alone would already break a cap below the order."""
        with pytest.raises(ValueError):
            MarkovChain(3, max_words=2)
        assert MarkovChain(3, max_words=3).max_words == 3


class TestTraining:
    """Tests for train()."""

    def test_windows_and_end_marker(self):
        chain = MarkovChain(2)
        chain.train([["a", "b", "c"]])
        assert chain.word_count() == 3
        assert chain.state_count() == 2

        ab = chain.states.lookup([chain.resolve("a", False), chain.resolve("b", False)])
        bc = chain.states.lookup([chain.resolve("b", False), chain.resolve("c", False)])
        assert [(w.canonical_key, p) for w, p in ab.transitions] == [("c", 1.0)]
        assert bc.transitions == [(None, 1.0)]

    def test_order_one_windows(self):
        chain = MarkovChain(1)
        chain.train([["x", "y", "x"]])
        x = chain.states.lookup([chain.resolve("x", False)])
        keys = [None if w is None else w.canonical_key for w, _ in x.transitions]
        assert keys == ["y", None]
        assert chain.state_count() == 2

    def test_short_sentence_skipped(self):
        """Sentences shorter than the order add words but no states."""
        chain = MarkovChain(3)
        chain.train([["only", "two"]])
        assert chain.state_count() == 0
        assert chain.word_count() == 2

    def test_sentence_of_exactly_order_tokens(self):
        chain = MarkovChain(3)
        chain.train([["a", "b", "c"]])
        assert chain.state_count() == 1
        state = next(iter(chain.states))
        assert state.transitions == [(None, 1.0)]

    def test_empty_input(self):
        chain = MarkovChain(2)
        chain.train([])
        chain.train([[]])
        assert chain.word_count() == 0
        assert chain.state_count() == 0

    def test_transitions_accumulate_across_sentences(self):
        chain = MarkovChain(2)
        chain.train([["a", "b", "c"], ["A", "B", "d"]])
        ab = chain.states.lookup([chain.resolve("a", False), chain.resolve("b", False)])
        probs = {w.canonical_key: p for w, p in ab.transitions}
        assert probs == {"c": 0.5, "d": 0.5}
        assert ab.total_observations == 2

    def test_case_insensitive_words(self):
        chain = MarkovChain(1)
        chain.train([["Word", "word", "WORD"]])
        assert chain.word_count() == 1
        word = chain.resolve("word", record=False)
        assert word.instance_count == 3

    def test_probabilities_sum_to_one(self):
        chain = build(CORPUS, 1)
        for state in chain.states:
            assert abs(sum(p for _, p in state.transitions) - 1.0) < 1e-9
        for word in chain.registry:
            assert abs(sum(p for _, p in word.variants) - 1.0) < 1e-9

    def test_training_twice_keeps_distributions(self):
        """Identical data doubles the counts but not the probabilities."""
        once = build(CORPUS, 2)
        twice = build(CORPUS, 2)
        twice.train_text(CORPUS)

        words_once, states_once = snapshot(once)
        words_twice, states_twice = snapshot(twice)

        assert words_once.keys() == words_twice.keys()
        for key, (count, variants) in words_once.items():
            count2, variants2 = words_twice[key]
            assert count2 == 2 * count
            assert [f for f, _ in variants2] == [f for f, _ in variants]
            for (_, p), (_, p2) in zip(variants, variants2):
                assert p2 == pytest.approx(p, abs=1e-9)

        assert states_once.keys() == states_twice.keys()
        for key, (total, transitions) in states_once.items():
            total2, transitions2 = states_twice[key]
            assert total2 == 2 * total
            assert [w for w, _ in transitions2] == [w for w, _ in transitions]
            for (_, p), (_, p2) in zip(transitions, transitions2):
                assert p2 == pytest.approx(p, abs=1e-9)

    def test_stats(self):
        chain = MarkovChain(2)
        chain.train([["a", "b", "c"]])
        assert chain.stats() == {"order": 2, "words": 3, "states": 2, "transitions": 2}
        assert "states=2" in repr(chain)


class TestGeneration:
    """Tests for generate_sentence()."""

    def test_empty_chain(self):
        with pytest.raises(EmptyModel):
            MarkovChain(2).generate_sentence()

    @pytest.mark.parametrize("text", ["", "   ", "...!!!", "。？！", "<> && ##"])
    def test_unusable_text_builds_empty_chain(self, text):
        chain = build(text, 1)
        assert chain.state_count() == 0
        with pytest.raises(EmptyModel):
            chain.generate_sentence()

    def test_only_short_sentences(self):
        chain = build("one two. three four.", 3)
        assert chain.word_count() == 4
        with pytest.raises(EmptyModel):
            chain.generate_sentence()

    @pytest.mark.parametrize("seed", [0, 1, 2, 99])
    def test_single_state_is_deterministic(self, seed):
        chain = build("你 好", 2, rng=random.Random(seed))
        assert chain.state_count() == 1
        assert chain.generate_sentence() == "你好" + TERMINATOR

    def test_words_joined_without_separator(self):
        chain = build("Hello world", 2, rng=random.Random(0))
        assert chain.generate_sentence() == "Helloworld。"

    def test_leading_comma_stripped(self):
        chain = build("，你好", 1, rng=random.Random(0))
        assert chain.generate_sentence() == "你好。"

    def test_only_one_leading_comma_stripped(self):
        chain = build("，，好", 1, rng=random.Random(0))
        assert chain.generate_sentence() == "，好。"

    def test_surface_forms_sampled(self):
        chain = build("Hello world. hello world.", 2, rng=random.Random(4))
        outputs = {chain.generate_sentence() for _ in range(100)}
        assert outputs == {"Helloworld。", "helloworld。"}

    def test_output_is_a_corpus_path(self):
        """Every adjacent pair of generated words was seen in training."""
        chain = build("a b c. a b d. x a b c.", 1, rng=random.Random(6))
        for _ in range(50):
            words = chain.walk()
            for left, right in zip(words, words[1:]):
                state = chain.states.lookup([left])
                assert right in [w for w, _ in state.transitions]

    def test_seeded_chains_agree(self):
        first = build(CORPUS, 2, rng=random.Random(123))
        second = build(CORPUS, 2, rng=random.Random(123))
        assert [first.generate_sentence() for _ in range(10)] == \
               [second.generate_sentence() for _ in range(10)]

    def test_generation_does_not_add_states(self):
        chain = build(CORPUS, 2, rng=random.Random(8))
        before = chain.state_count()
        for _ in range(50):
            chain.generate_sentence()
        assert chain.state_count() == before

    def test_state_without_transitions(self):
        """A walk that lands on an untrained state reports EmptyModel."""
        chain = MarkovChain(2, rng=random.Random(0))
        chain.get_or_create_state([chain.resolve("a"), chain.resolve("b")])
        with pytest.raises(EmptyModel):
            chain.generate_sentence()

    def test_max_words_caps_endless_walk(self):
        chain = MarkovChain(1, rng=random.Random(0), max_words=5)
        a = chain.resolve("a")
        chain.add_transition(chain.get_or_create_state([a]), a)
        assert chain.generate_sentence() == "aaaaa。"

    def test_max_words_caps_endless_walk_warns(self, caplog):
        chain = MarkovChain(1, rng=random.Random(0), max_words=3)
        a = chain.resolve("a")
        chain.add_transition(chain.get_or_create_state([a]), a)
        with caplog.at_level(logging.WARNING, logger="markovtext.chain"):
            assert chain.generate_sentence() == "aaa。"
        assert "max_words=3" in caplog.text

    def test_natural_end_at_max_words_is_not_truncation(self, caplog):
        """A sentence ending exactly at the cap is left whole and unflagged."""
        chain = MarkovChain(2, rng=random.Random(0), max_words=2)
        chain.train([["a", "b"]])
        with caplog.at_level(logging.WARNING, logger="markovtext.chain"):
            assert chain.generate_sentence() == "ab。"
        assert "stopping early" not in caplog.text

    def test_sentence_never_exceeds_max_words(self):
        chain = build(CORPUS, 1, rng=random.Random(3), max_words=4)
        for _ in range(50):
            assert len(chain.walk()) <= 4


class TestGenerateBatch:
    """Tests for generate_batch()."""

    def test_unique_limited_by_corpus(self):
        chain = build("你 好", 2, rng=random.Random(0))
        assert chain.generate_batch(3) == ["你好。"]

    def test_non_unique_repeats(self):
        chain = build("你 好", 2, rng=random.Random(0))
        assert chain.generate_batch(3, unique=False) == ["你好。"] * 3

    def test_batch_sentences_are_distinct(self):
        chain = build(CORPUS, 1, rng=random.Random(5))
        batch = chain.generate_batch(5, max_attempts=500)
        assert len(batch) == len(set(batch))
        assert all(s.endswith(TERMINATOR) for s in batch)

    def test_max_attempts_respected(self):
        chain = build("你 好", 2, rng=random.Random(0))
        assert chain.generate_batch(10, max_attempts=1) == ["你好。"]

    def test_empty_chain_raises(self):
        with pytest.raises(EmptyModel):
            MarkovChain(1).generate_batch(2)


class TestBuild:
    """Tests for the build() entry point."""

    def test_counts(self):
        chain = build("我 喜欢 猫。我 喜欢 狗。", 2)
        assert chain.word_count() == 4
        # (我,喜欢) (喜欢,猫) (喜欢,狗)
        assert chain.state_count() == 3

    def test_long_runs_are_single_words(self):
        chain = build("state-of-the-art 你好，世界", 1)
        assert chain.word_count() == 2
        assert chain.resolve("STATE-OF-THE-ART", record=False) is not None

    def test_split_characters(self):
        chain = build("你好你", 1, split_characters=True)
        assert chain.word_count() == 2
        # 你 -> 好, 好 -> 你, 你 -> end (same state as the first)
        assert chain.state_count() == 2

    def test_from_text_matches_build(self):
        a = build(CORPUS, 2)
        b = MarkovChain.from_text(CORPUS, 2)
        assert a.stats() == b.stats()
