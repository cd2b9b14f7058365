"""
observer.py
-----------

Simulated 2AFC observer for the frame-rate discrimination task.

The observer sees two frame rates and reports the side it believes is
higher. Its probability of answering correctly falls from 1 to chance
(0.5) as the base frame rate rises past its threshold:

    p_correct(base) = lapse/2 + (1 - lapse) * (0.5 + 0.5 * sigmoid(slope * (threshold - base)))

A 1-down/2-up staircase run against this observer converges where
p_correct ~ 0.707. With no lapses the sigmoid term is then ~0.414, so

    base* = threshold - logit(0.414) / slope ~ threshold + 0.35 / slope

Used to drive demos and end-to-end tests without a human in the loop.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp
import jax.random as jr

from fpsjnd.data.dataset import Side
from fpsjnd.utils.rng import seed as make_key, split


class SimulatedObserver:
    """
    Logistic psychometric observer.

    Parameters
    ----------
    threshold_fps : float, default=45.0
        Base frame rate at which discrimination is halfway between perfect
        and chance.
    slope : float, default=0.3
        Steepness of the psychometric function (1/fps).
    lapse_rate : float, default=0.0
        Probability of answering at random regardless of the stimulus.
    key : jax.Array, optional
        PRNG key; takes precedence over ``seed``.
    seed : int, default=0
        Seed used when no key is given.
    """

    def __init__(
        self,
        threshold_fps: float = 45.0,
        slope: float = 0.3,
        lapse_rate: float = 0.0,
        *,
        key: jax.Array | None = None,
        seed: int = 0,
    ) -> None:
        if slope <= 0:
            raise ValueError(f"slope must be positive, got {slope}")
        if not 0.0 <= lapse_rate <= 1.0:
            raise ValueError(f"lapse_rate must be in [0, 1], got {lapse_rate}")
        self.threshold_fps = float(threshold_fps)
        self.slope = float(slope)
        self.lapse_rate = float(lapse_rate)
        self.chance_level: float = 0.5
        self.performance_range: float = 1.0 - self.chance_level
        self._key = key if key is not None else make_key(seed)

    def p_correct(self, base_fps) -> jnp.ndarray:
        """Probability of picking the higher frame rate at ``base_fps``."""
        base_fps = jnp.asarray(base_fps, dtype=jnp.float32)
        sensitivity = jax.nn.sigmoid(self.slope * (self.threshold_fps - base_fps))
        p = self.chance_level + self.performance_range * sensitivity
        return self.lapse_rate * self.chance_level + (1.0 - self.lapse_rate) * p

    def respond(self, left_fps: float, right_fps: float) -> Side:
        """Choose the side that looks higher."""
        if left_fps == right_fps:
            raise ValueError(f"both sides show {left_fps} fps; nothing to discriminate")
        higher: Side = "left" if left_fps > right_fps else "right"
        lower: Side = "right" if higher == "left" else "left"
        self._key, subkey = split(self._key)
        correct = bool(jr.bernoulli(subkey, self.p_correct(min(left_fps, right_fps))))
        return higher if correct else lower
