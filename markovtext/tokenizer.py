#!/usr/bin/env python3
"""
Tokenizer
=========
Turns raw prose into the token lists a chain is trained on.

Text is split into sentences on ``. ! ?`` and their full-width forms
``。 ！ ？``. Inside each sentence every maximal run of "word characters"
becomes one token. Word characters are ASCII letters, digits, ``_``,
``'``, ``-``, CJK unified ideographs (U+4E00 to U+9FCC) and the
full-width comma ``，``. The comma is included because Chinese is not
space delimited, so clause breaks have to survive inside tokens.

Runs are taken literally: ``state-of-the-art`` or ``你好，世界`` are one
token each. With ``split_characters=True`` every character of every run
becomes its own token instead, which gives a character-level model for
Chinese text.
"""

import re
from typing import Iterable, List

SENTENCE_BOUNDARY = re.compile(r"[.!?\u3002\uFF01\uFF1F]")
TOKEN_PATTERN = re.compile(r"[A-Za-z\u4E00-\u9FCC0-9_'\-\uFF0C]+")


def split_sentences(text: str) -> List[str]:
    """Split text on sentence-terminating punctuation."""
    if not text:
        return []
    return SENTENCE_BOUNDARY.split(text)


def scan_tokens(segment: str, split_characters: bool = False) -> List[str]:
    """Extract tokens from a single sentence."""
    runs = TOKEN_PATTERN.findall(segment)
    if split_characters:
        return [ch for run in runs for ch in run]
    return runs


def tokenize(text: str, split_characters: bool = False) -> List[List[str]]:
    """
    Tokenize prose into sentences of tokens.

    Sentences without any tokens are dropped.
    """
    sentences = []
    for segment in split_sentences(text):
        tokens = scan_tokens(segment, split_characters)
        if tokens:
            sentences.append(tokens)
    return sentences


def count_tokens(sentences: Iterable[List[str]]) -> int:
    return sum(len(s) for s in sentences)


__all__ = [
    'SENTENCE_BOUNDARY',
    'TOKEN_PATTERN',
    'split_sentences',
    'scan_tokens',
    'tokenize',
    'count_tokens',
]
