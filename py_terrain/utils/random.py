"""
Random number generation utilities.

The generator never touches a global random state. Every call takes a
random source explicitly; anything with a ``random()`` method returning a
float in [0, 1) qualifies, which lets tests feed fixed sequences. When no
source is supplied a fresh numpy Generator is created, so repeated calls
give different terrain.
"""

from typing import Optional, Protocol, Union

import numpy as np


class RandomSource(Protocol):
    """Anything that can hand out uniform floats in [0, 1)."""

    def random(self) -> float: ...


def get_prng(seed: Optional[Union[int, str]] = None) -> np.random.Generator:
    """
    Create a numpy random Generator.

    Args:
        seed: Optional seed. Strings are hashed to a stable integer so that
            API clients can pass human-readable seeds.

    Returns:
        numpy Generator instance
    """
    if isinstance(seed, str):
        seed = _seed_from_string(seed)
    return np.random.default_rng(seed)


def _seed_from_string(seed: str) -> int:
    """Stable (process independent) integer for a string seed."""
    value = 0
    for char in seed.encode("utf-8"):
        value = (value * 31 + char) & 0xFFFFFFFFFFFFFFFF
    return value
