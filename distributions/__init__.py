"""
Random sources for the Monte Carlo pass.
"""

from .prng import Mulberry32, make_rng, parse_seed

__all__ = [
    "Mulberry32",
    "make_rng",
    "parse_seed",
]
