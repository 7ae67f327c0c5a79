#!/usr/bin/env python3
"""
markovtext CLI
==============
Command-line interface for training a chain on a text and sampling it.

Usage:
    markovtext generate corpus.txt -n 10 --order 2
    cat corpus.txt | markovtext generate --seed 7 --characters
    markovtext stats corpus.txt --order 3 --json
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import __version__
from .chain import MarkovChain
from .config import Config, get_config
from .errors import MarkovError
from .presentation import present
from .profiler import ChainProfiler
from .tokenizer import count_tokens, tokenize

logger = logging.getLogger(__name__)


# =============================================================================
# Utilities
# =============================================================================

class Output:
    """Handles CLI output with quiet mode support."""

    def __init__(self, quiet: bool = False):
        self.quiet = quiet
        self.console = Console(highlight=False, soft_wrap=True)

    def print(self, *args, **kwargs):
        if not self.quiet:
            self.console.print(*args, markup=False, **kwargs)

    def result(self, text: str):
        """Always printed, even in quiet mode."""
        self.console.print(text, markup=False)

    def error(self, msg: str):
        print(f"Error: {msg}", file=sys.stderr)

    def render(self, renderable):
        if not self.quiet and renderable is not None:
            self.console.print(renderable)


def setup_logging(verbose: bool = False):
    """Route package logging through rich on stderr; DEBUG when verbose."""
    package_logger = logging.getLogger('markovtext')
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(isinstance(h, RichHandler) for h in package_logger.handlers):
        handler = RichHandler(console=Console(stderr=True), show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
        package_logger.addHandler(handler)
    return package_logger


def read_corpus(path: str) -> str:
    """Read corpus text from a file, or stdin for None / '-'."""
    if path in (None, '-'):
        return sys.stdin.read()
    return Path(path).expanduser().read_text(encoding='utf-8')


def resolve_config(args) -> Config:
    """Merge CLI flags over the configured defaults."""
    return get_config(
        order=args.order,
        count=getattr(args, 'count', None),
        max_words=getattr(args, 'max_words', None),
        split_characters=args.characters,
        seed=getattr(args, 'seed', None),
    )


def build_chain(text: str, cfg: Config, profiler: ChainProfiler) -> MarkovChain:
    with profiler.stage("tokenize", items=len(text)):
        sentences = tokenize(text, split_characters=cfg.split_characters)

    chain = MarkovChain(cfg.order, rng=cfg.make_rng(), max_words=cfg.max_words)
    with profiler.stage("train", items=count_tokens(sentences)):
        chain.train(sentences)
    return chain


# =============================================================================
# Commands
# =============================================================================

def cmd_generate(args, out: Output):
    """Generate sentences from a corpus."""
    cfg = resolve_config(args)
    text = read_corpus(args.file)

    profiler = ChainProfiler(enabled=args.profiling)

    chain = build_chain(text, cfg, profiler)
    out.print(f"Trained order-{chain.order} chain: "
              f"{chain.word_count()} words, {chain.state_count()} states")

    with profiler.stage("generate", items=cfg.count):
        if args.unique:
            sentences = chain.generate_batch(
                cfg.count,
                unique=True,
                max_attempts=cfg.count * cfg.max_attempts_factor,
            )
        else:
            sentences = [chain.generate_sentence() for _ in range(cfg.count)]

    out.print()
    for sentence in sentences:
        out.result(present(sentence, html=args.html))

    if args.profiling:
        out.render(profiler.report())
        if args.profile_output:
            profiler.save_json(args.profile_output)
            out.print(f"Profiling data saved to {args.profile_output}")

    return 0


def cmd_stats(args, out: Output):
    """Show the size of the chain learned from a corpus."""
    cfg = resolve_config(args)
    text = read_corpus(args.file)
    chain = build_chain(text, cfg, ChainProfiler(enabled=False))
    stats = chain.stats()

    if args.json:
        print(json.dumps(stats, indent=2))
        return 0

    table = Table(title="Chain statistics")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    for key, value in stats.items():
        table.add_row(key, str(value))
    out.console.print(table)
    return 0


# =============================================================================
# Main
# =============================================================================

def _add_corpus_options(p):
    p.add_argument('file', nargs='?', help="Corpus file (default: stdin, or '-')")
    p.add_argument('--order', '-o', type=int, help='Chain order (default: from config)')
    p.add_argument('--characters', '-c', action=argparse.BooleanOptionalAction,
                   help='One token per character (default: from config)')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='markovtext',
        description='markovtext - Markov chain sentence generator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s generate corpus.txt -n 10
  %(prog)s generate corpus.txt --order 3 --seed 42 --unique
  cat corpus.txt | %(prog)s generate --characters
  %(prog)s stats corpus.txt --json
"""
    )

    parser.add_argument('--version', '-V', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--quiet', '-q', action='store_true', help='Only print generated sentences')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # --- generate ---
    p = subparsers.add_parser('generate', aliases=['gen', 'g'], help='Generate sentences')
    _add_corpus_options(p)
    p.add_argument('-n', '--count', type=int, help='Number of sentences (default: from config)')
    p.add_argument('--seed', type=int, help='Random seed for reproducible output')
    p.add_argument('--max-words', type=int, help='Cap on words per sentence')
    p.add_argument('--unique', '-u', action='store_true', help='Skip duplicate sentences')
    p.add_argument('--html', action='store_true', help='HTML-escape the output')
    p.add_argument('--profiling', action='store_true', help='Time tokenize/train/generate stages')
    p.add_argument('--profile-output', help='Save profiling data to JSON file')

    # --- stats ---
    p = subparsers.add_parser('stats', help='Show chain statistics')
    _add_corpus_options(p)
    p.add_argument('--json', '-j', action='store_true', help='Output as JSON')

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    setup_logging(args.verbose)

    cmd_map = {'gen': 'generate', 'g': 'generate'}
    command = cmd_map.get(args.command, args.command)

    out = Output(quiet=args.quiet)

    commands = {
        'generate': cmd_generate,
        'stats': cmd_stats,
    }

    handler = commands.get(command)
    if handler is None:
        parser.print_help()
        return 0

    try:
        return handler(args, out)
    except KeyboardInterrupt:
        out.print("\nCancelled.")
        return 130
    except (MarkovError, ValueError, OSError) as e:
        out.error(str(e))
        if args.verbose:
            logger.exception("Command failed")
        return 1


if __name__ == '__main__':
    sys.exit(main())
