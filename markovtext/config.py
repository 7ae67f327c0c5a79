#!/usr/bin/env python3
"""
Configuration Management
========================
Resolves chain and generation settings from three layers, later layers
winning:

1. ``markovtext/configs/app.yaml`` (bundled defaults)
2. a ``.env`` file (``KEY=value`` lines)
3. ``MARKOVTEXT_*`` environment variables

Recognised keys:

    MARKOVTEXT_ORDER              chain order (>= 1)
    MARKOVTEXT_COUNT              sentences per `generate` run
    MARKOVTEXT_MAX_WORDS          words per sentence cap, "none" to disable
    MARKOVTEXT_SPLIT_CHARACTERS   true/false, character-level tokens
    MARKOVTEXT_SEED               integer seed for reproducible output
"""

import os
import random
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

import yaml


ENV_PREFIX = 'MARKOVTEXT_'
DEFAULTS_PATH = Path(__file__).resolve().parent / 'configs' / 'app.yaml'

_TRUE = {'1', 'true', 'yes', 'on'}
_FALSE = {'0', 'false', 'no', 'off'}
_NONE = {'', 'none', 'null'}


# =============================================================================
# Bundled defaults
# =============================================================================

@lru_cache(maxsize=1)
def load_defaults() -> dict:
    """Parse the bundled app.yaml once."""
    if not DEFAULTS_PATH.exists():
        raise FileNotFoundError(f"Missing defaults file: {DEFAULTS_PATH}")
    return yaml.safe_load(DEFAULTS_PATH.read_text(encoding='utf-8')) or {}


def _section(name: str) -> dict:
    section = load_defaults().get(name) or {}
    if not isinstance(section, dict):
        raise ValueError(f"'{name}' in {DEFAULTS_PATH.name} must be a mapping")
    return section


def chain_defaults() -> dict:
    """The ``chain:`` section: model shape."""
    return {'order': _section('chain').get('order', 2)}


def generation_defaults() -> dict:
    """The ``generation:`` section: sentence count, length cap, batch retries."""
    section = _section('generation')
    return {
        'count': section.get('count', 5),
        'max_words': section.get('max_words', 200),
        'max_attempts_factor': section.get('max_attempts_factor', 20),
    }


def tokenizer_defaults() -> dict:
    return {'split_characters': _section('tokenizer').get('split_characters', False)}


# =============================================================================
# Value parsing
# =============================================================================

def parse_bool(value, name: str) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {value!r}")


def parse_int(value, name: str, minimum: int = None) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be an integer, got {value!r}") from None
    if minimum is not None and number < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {number}")
    return number


def parse_optional_int(value, name: str, minimum: int = None) -> Optional[int]:
    if value is None or str(value).strip().lower() in _NONE:
        return None
    return parse_int(value, name, minimum)


# =============================================================================
# Application Configuration
# =============================================================================

@dataclass
class Config:
    """Resolved settings for building and sampling a chain."""
    order: int = 2
    count: int = 5
    max_words: Optional[int] = 200
    max_attempts_factor: int = 20
    split_characters: bool = False
    seed: Optional[int] = None

    def __post_init__(self):
        self.order = parse_int(self.order, 'order', minimum=1)
        self.count = parse_int(self.count, 'count', minimum=1)
        # The seed state already holds `order` words
        self.max_words = parse_optional_int(self.max_words, 'max_words', minimum=self.order)
        self.max_attempts_factor = parse_int(self.max_attempts_factor, 'max_attempts_factor', minimum=1)
        self.split_characters = parse_bool(self.split_characters, 'split_characters')
        self.seed = parse_optional_int(self.seed, 'seed')

    def make_rng(self) -> random.Random:
        """Random source for a chain; seeded when a seed is configured."""
        return random.Random(self.seed)


def load_env(env_path: Path = None) -> dict:
    """Load variables from a .env file (without touching os.environ)."""
    if env_path is None:
        env_path = Path.cwd() / '.env'

    env_vars = {}
    if env_path.exists():
        for line in env_path.read_text(encoding='utf-8').splitlines():
            line = line.strip()
            if '=' in line and not line.startswith('#'):
                key, value = line.split('=', 1)
                env_vars[key.strip()] = value.strip().strip('"').strip("'")

    return env_vars


def get_config(env_path: Path = None, **overrides) -> Config:
    """
    Build a Config from YAML defaults, .env and the environment.

    Keyword overrides (e.g. from CLI flags) win over everything; pass None
    to leave a setting alone.

    Raises:
        ValueError: If any layer holds an invalid value, or max_words is
            below the order.
    """
    values = {
        **chain_defaults(),
        **generation_defaults(),
        **tokenizer_defaults(),
        'seed': None,
    }

    env = load_env(env_path)
    for field_name in values:
        key = ENV_PREFIX + field_name.upper()
        if key in os.environ:
            values[field_name] = os.environ[key]
        elif key in env:
            values[field_name] = env[key]

    for field_name, value in overrides.items():
        if field_name not in values:
            raise ValueError(f"Unknown setting: {field_name}")
        if value is not None:
            values[field_name] = value

    return Config(**values)


__all__ = [
    'Config',
    'ENV_PREFIX',
    'chain_defaults',
    'generation_defaults',
    'get_config',
    'load_defaults',
    'load_env',
    'parse_bool',
    'parse_int',
    'parse_optional_int',
    'tokenizer_defaults',
]
