"""
rng.py
------

Random number utilities for fpsjnd.

This module standardizes RNG handling across the package.
Every source of randomness (which side shows the higher frame rate,
simulated observer responses) is driven by an explicit JAX PRNG key,
so a whole staircase run is reproducible from a single integer seed.

Examples
--------
>>> from fpsjnd.utils.rng import seed, split, coin_flip
>>> key = seed(0)
>>> k1, k2 = split(key)
>>> heads = coin_flip(k1)
"""

from __future__ import annotations

import jax
import jax.random as jr


def seed(seed_value: int) -> jax.Array:
    """
    Create a new PRNG key from an integer seed.

    Parameters
    ----------
    seed_value : int
        Seed for random number generation.

    Returns
    -------
    jax.Array
        New PRNG key.
    """
    return jr.PRNGKey(seed_value)


def split(key: jax.Array, num: int = 2) -> jax.Array:
    """
    Split a PRNG key into multiple independent keys.

    Parameters
    ----------
    key : jax.Array
        RNG key to split.
    num : int, default=2
        Number of new keys to return.

    Returns
    -------
    jax.Array
        Array of shape (num, ...) holding the new keys; unpacks like a tuple.
    """
    return jr.split(key, num=num)


def coin_flip(key: jax.Array, p: float = 0.5) -> bool:
    """Draw a single Bernoulli(p) outcome as a Python bool."""
    return bool(jr.bernoulli(key, p))
