#!/usr/bin/env python3
"""
markovtext - Markov Chain Sentence Generator
============================================

Builds an n-th order word Markov chain from prose (Chinese, English or a
mix of both) and generates new sentences by random walk. Words are joined
without separators, as Chinese text is written.

Quick Start
-----------
    from markovtext import build

    chain = build(text, order=2)
    chain.generate_sentence()     # e.g. "我们今天去公园。"
    chain.word_count(), chain.state_count()

    # Reproducible output
    import random
    chain = build(text, order=2, rng=random.Random(42))

Modules
-------
    markovtext.words        - Word registry (canonical keys, surface variants)
    markovtext.states       - State table (transition distributions)
    markovtext.chain        - MarkovChain: training and generation
    markovtext.tokenizer    - Sentence splitting and token scanning
    markovtext.presentation - Capitalization and HTML escaping for display
    markovtext.config       - YAML/.env/environment configuration

CLI Usage
---------
    python -m markovtext generate corpus.txt -n 10 --order 2
    python -m markovtext stats corpus.txt --json
"""

__version__ = "0.1.0"

from .errors import MarkovError, EmptyModel, InvalidOrder
from .distribution import OnlineDistribution, Outcome
from .words import Word, WordRegistry, canonical_key, sample_surface_form
from .states import State, StateTable
from .chain import MarkovChain, build, TERMINATOR, LEADING_COMMA
from .tokenizer import split_sentences, scan_tokens, tokenize
from .presentation import capitalize_first_letter, to_html, present
from .config import Config, get_config


__all__ = [
    # Version
    '__version__',

    # Chain
    'MarkovChain',
    'build',
    'TERMINATOR',
    'LEADING_COMMA',

    # Model parts
    'OnlineDistribution',
    'Outcome',
    'Word',
    'WordRegistry',
    'canonical_key',
    'sample_surface_form',
    'State',
    'StateTable',

    # Tokenizer
    'split_sentences',
    'scan_tokens',
    'tokenize',

    # Presentation
    'capitalize_first_letter',
    'to_html',
    'present',

    # Config
    'Config',
    'get_config',

    # Errors
    'MarkovError',
    'EmptyModel',
    'InvalidOrder',
]
