"""
Random source for match simulation: a seedable generator plus the
process-wide instance used when callers do not supply one.
"""
from .rng import SeededRNG, process_rng, reset_process_rng

__all__ = [
    "SeededRNG",
    "process_rng",
    "reset_process_rng",
]
