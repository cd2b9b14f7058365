"""
utils
=====

Shared utility functions and helpers for fpsjnd.

This subpackage provides:
- plotting : staircase chart (matplotlib).
- rng : random number handling for reproducibility.
"""

from .plotting import plot_staircase
from .rng import coin_flip, seed, split

__all__ = [
    # plotting
    "plot_staircase",
    # rng
    "coin_flip",
    "seed",
    "split",
]
