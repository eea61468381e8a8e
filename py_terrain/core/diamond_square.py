"""
Diamond-square heightmap generation.

The classic midpoint-displacement algorithm on a square grid of side
2^k + 1. Corners are seeded at random, then each subdivision level runs a
square step (centre of every square from its four diagonal corners) and a
diamond step (edge midpoints from their orthogonal neighbours). Every new
value is perturbed by up to +/- scale and folded back into
[0, CATALOG_LENGTH) with a reflecting wrap, so the result can be read
directly as a tile index.
"""

import math
from dataclasses import dataclass
from typing import Optional, Union

import numpy as np
import structlog

from ..utils.random import RandomSource, get_prng
from .tiles import CATALOG_LENGTH

logger = structlog.get_logger()


@dataclass
class HeightmapConfig:
    """Configuration for heightmap generation."""

    width: int
    height: int
    variability: float = 75.0

    def __post_init__(self):
        for name in ("width", "height"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise ValueError(f"{name} must be an integer, got {value!r}")
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")
        self.variability = float(self.variability)
        if not math.isfinite(self.variability) or self.variability < 0:
            raise ValueError(
                f"variability must be a non-negative number, got {self.variability}"
            )


def wrap_number(min_value: float, max_value: float, value: float) -> float:
    """
    Fold a value back into [min_value, max_value).

    The fold reflects rather than jumps: with a range of [0, 10), 12 wraps to
    8 while 24 wraps to 4. The number of whole ranges in |value| decides the
    direction, so heights drifting past the top come back down smoothly
    instead of restarting at the bottom. A reflection landing exactly on
    max_value folds to min_value.

    Args:
        min_value: Lower bound (inclusive), normally 0
        max_value: Upper bound (exclusive), must be positive
        value: Value to wrap

    Returns:
        Wrapped value
    """
    if max_value <= 0:
        raise ValueError(f"max_value must be positive, got {max_value}")

    num_wraps, remainder = divmod(abs(value), max_value)
    if num_wraps % 2 == 0:
        result = min_value + remainder
    else:
        result = max_value - remainder

    if result >= max_value:
        return min_value
    return result


def _perturb(average: float, scale: float, rng: RandomSource, catalog_length: int) -> float:
    """Add uniform noise in [-scale, scale) and wrap into the catalog range."""
    return wrap_number(0, catalog_length, average + (rng.random() * scale * 2 - scale))


def square_step(
    grid: np.ndarray,
    col: int,
    row: int,
    size: int,
    scale: float,
    rng: RandomSource,
    catalog_length: int = CATALOG_LENGTH,
) -> None:
    """
    The 'square' step of diamond-square.

    Averages the four corners of the square of side ``size`` centred on
    (col, row), perturbs the average and stores it at the centre.
    """
    half = size // 2
    nw = grid[row - half, col - half]
    ne = grid[row - half, col + half]
    sw = grid[row + half, col - half]
    se = grid[row + half, col + half]

    average = (nw + ne + sw + se) / 4
    grid[row, col] = _perturb(average, scale, rng, catalog_length)


def diamond_step(
    grid: np.ndarray,
    col: int,
    row: int,
    size: int,
    scale: float,
    max_size: int,
    rng: RandomSource,
    catalog_length: int = CATALOG_LENGTH,
) -> None:
    """
    The 'diamond' step of diamond-square.

    Averages the north, east, south and west points of the diamond of size
    ``size`` centred on (col, row). Points falling outside the grid are
    left out, so cells on the border average two or three neighbours.
    """
    half = size // 2
    total = 0.0
    samples = 0

    if row - half >= 0:
        total += grid[row - half, col]
        samples += 1
    if col + half < max_size:
        total += grid[row, col + half]
        samples += 1
    if row + half < max_size:
        total += grid[row + half, col]
        samples += 1
    if col - half >= 0:
        total += grid[row, col - half]
        samples += 1

    grid[row, col] = _perturb(total / samples, scale, rng, catalog_length)


def grid_size(width: int, height: int) -> int:
    """
    Side of the working grid for a width x height request.

    Diamond-square needs a square of side 2^k + 1, so take the longest side
    and round it up to the next such value.
    """
    longest = max(width, height)
    k = max(longest - 2, 0).bit_length()
    return 2 ** k + 1


class DiamondSquareGenerator:
    """
    Generates a heightmap with the diamond-square algorithm.

    The full working grid is kept on ``self.grid`` after ``generate()`` so
    callers can inspect the untrimmed result.
    """

    def __init__(
        self,
        config: HeightmapConfig,
        rng: Optional[RandomSource] = None,
        catalog_length: int = CATALOG_LENGTH,
    ):
        """
        Initialize the heightmap generator.

        Args:
            config: Heightmap configuration
            rng: Random source; a fresh unseeded one is used when omitted
            catalog_length: Number of tile classes heights are wrapped into
        """
        self.config = config
        self.rng = rng if rng is not None else get_prng()
        self.catalog_length = catalog_length
        self.grid_size = grid_size(config.width, config.height)
        self.grid = np.zeros((self.grid_size, self.grid_size), dtype=np.float64)

    def seed_corners(self) -> None:
        """Seed the four corners with uniform values in the catalog range."""
        last = self.grid_size - 1
        for row, col in ((0, 0), (0, last), (last, 0), (last, last)):
            self.grid[row, col] = self.rng.random() * self.catalog_length

    def subdivide(self) -> None:
        """Run square and diamond steps at every level down to single cells."""
        size = self.grid_size
        step = size - 1
        scale = self.config.variability

        while step > 1:
            half = step // 2

            for row in range(half, size, step):
                for col in range(half, size, step):
                    square_step(self.grid, col, row, step, scale, self.rng, self.catalog_length)

            for row in range(0, size, half):
                for col in range((row + half) % step, size, step):
                    diamond_step(
                        self.grid, col, row, step, scale, size, self.rng, self.catalog_length
                    )

            step //= 2
            scale /= 2

    def trim(self) -> np.ndarray:
        """Read-only copy of the requested height x width region."""
        trimmed = self.grid[: self.config.height, : self.config.width].copy()
        trimmed.setflags(write=False)
        return trimmed

    def generate(self) -> np.ndarray:
        """
        Generate the heightmap.

        Returns:
            Array of shape (height, width) with values in [0, catalog_length)
        """
        logger.debug(
            "Generating heightmap",
            width=self.config.width,
            height=self.config.height,
            grid_size=self.grid_size,
            variability=self.config.variability,
        )
        self.grid.fill(0.0)
        self.seed_corners()
        self.subdivide()
        return self.trim()


def generate_height_map(
    width: int,
    height: int,
    variability: float,
    rng: Optional[Union[RandomSource, int, str]] = None,
) -> np.ndarray:
    """
    Generate a diamond-square heightmap.

    Args:
        width: Number of columns, positive
        height: Number of rows, positive
        variability: Perturbation amplitude at the coarsest level, >= 0
        rng: Random source, or a seed for a new one

    Returns:
        Read-only array of shape (height, width) with values in [0, 8)
    """
    if rng is None or isinstance(rng, (int, np.integer, str)):
        rng = get_prng(rng)
    config = HeightmapConfig(width=width, height=height, variability=variability)
    return DiamondSquareGenerator(config, rng).generate()
