"""
Seedable uniform source for the Monte Carlo pass.

Mulberry32: a single 32-bit state advanced by a fixed additive constant on every
draw and passed through a small xor-shift/multiply mixer. Fast, well distributed
for simulation work, and fully reproducible from the seed. Not cryptographic.

Unseeded runs fall back to numpy's default generator (OS entropy).
Both sources expose random() -> float in [0, 1), which is all the event layer uses.
"""

from __future__ import annotations

import logging
import math
from typing import Optional, Union

import numpy as np

logger = logging.getLogger(__name__)

_MASK32 = 0xFFFFFFFF
_INCREMENT = 0x6D2B79F5
_TWO_POW_32 = 4294967296.0


class Mulberry32:
    """
    Deterministic PRNG with 32-bit state.

    Usage:
        rng = Mulberry32(42)
        u = rng.random()   # float in [0, 1)
    """

    def __init__(self, seed: int = 0):
        self.seed = int(seed) & _MASK32
        self._state = self.seed

    def random(self) -> float:
        self._state = (self._state + _INCREMENT) & _MASK32
        t = self._state
        r = ((t ^ (t >> 15)) * (t | 1)) & _MASK32
        r ^= (r + (((r ^ (r >> 7)) * (r | 61)) & _MASK32)) & _MASK32
        return ((r ^ (r >> 14)) & _MASK32) / _TWO_POW_32

    next = random

    def reset(self) -> None:
        """Rewind to the initial seed so the same stream can be replayed."""
        self._state = self.seed


UniformSource = Union[Mulberry32, np.random.Generator]


def make_rng(seed: Optional[int]) -> UniformSource:
    """Mulberry32 for an integer seed, otherwise a non-deterministic numpy Generator."""
    if seed is None:
        return np.random.default_rng()
    return Mulberry32(seed)


def parse_seed(value: object) -> Optional[int]:
    """
    Map the seed field of the input form to a generator seed.

    - None / blank text      -> None (non-deterministic run)
    - numeric text or number -> truncated and wrapped to an unsigned 32-bit integer
    - anything else          -> 0
    """
    if value is None:
        return None
    text = str(value).strip()
    if text == "":
        return None
    try:
        number = float(text)
    except ValueError:
        logger.warning(f"Seed {text!r} is not numeric; using 0.")
        return 0
    if not math.isfinite(number):
        logger.warning(f"Seed {text!r} is not finite; using 0.")
        return 0
    return int(math.trunc(number)) & _MASK32
