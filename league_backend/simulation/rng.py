"""
Seeded RNG for reproducible match simulation.

A single process-wide generator is seeded once (from LEAGUE_RANDOM_SEED or the
OS) and reused across calls; tests and callers that need replayable results
pass their own SeededRNG instead.
"""
from __future__ import annotations

import random


class SeededRNG:
    """Wrapper around random.Random for reproducible simulations."""

    def __init__(self, seed: int | None = None) -> None:
        self._rng = random.Random(seed)
        self._seed = seed

    @property
    def seed(self) -> int | None:
        return self._seed

    def randint(self, a: int, b: int) -> int:
        """Uniform integer in [a, b], both ends inclusive."""
        return self._rng.randint(a, b)


_process_rng: SeededRNG | None = None


def process_rng() -> SeededRNG:
    """Return the process-wide generator, creating it on first use."""
    global _process_rng
    if _process_rng is None:
        # Imported lazily so the pure simulation modules do not require settings at import time
        from league_backend.config import get_config
        _process_rng = SeededRNG(get_config().random_seed)
    return _process_rng


def reset_process_rng(seed: int | None = None) -> SeededRNG:
    """Replace the process-wide generator. Used at startup and in tests."""
    global _process_rng
    _process_rng = SeededRNG(seed)
    return _process_rng
