#!/usr/bin/env python3
"""
Profiler
========
Times the tokenize / train / generate stages of one CLI run.

Usage:
    markovtext generate corpus.txt --profiling
    markovtext generate corpus.txt --profiling --profile-output profile.json
"""

import json
import time
from contextlib import contextmanager
from typing import Dict, NamedTuple, Optional

from rich.table import Table


class StageTiming(NamedTuple):
    seconds: float
    items: int


class ChainProfiler:
    """Wall-clock seconds and item count per stage, in pipeline order."""

    def __init__(self, enabled: bool = False):
        self.enabled = enabled
        self.timings: Dict[str, StageTiming] = {}

    @contextmanager
    def stage(self, name: str, items: int = 0):
        """Time the enclosed block as ``name``; ``items`` is the work it covers."""
        if not self.enabled:
            yield
            return

        began = time.perf_counter()
        try:
            yield
        finally:
            self.timings[name] = StageTiming(time.perf_counter() - began, items)

    def report(self) -> Optional[Table]:
        if not self.timings:
            return None

        table = Table(title="Profiling report")
        table.add_column("Stage")
        table.add_column("Seconds", justify="right")
        table.add_column("Items", justify="right")
        for name, timing in self.timings.items():
            table.add_row(name, f"{timing.seconds:.4f}", str(timing.items))
        return table

    def to_dict(self) -> dict:
        return {
            'stages': {
                name: {'seconds': t.seconds, 'items': t.items}
                for name, t in self.timings.items()
            },
        }

    def save_json(self, path: str):
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2)


__all__ = ['ChainProfiler', 'StageTiming']
