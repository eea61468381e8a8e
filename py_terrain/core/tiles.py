"""
Tile catalog and height-to-tile classification.

Heights produced by the diamond-square generator are real numbers in
[0, len(TILE_TYPES)). A cell's tile is TILE_TYPES[floor(height)], so the
catalog order matters: low indices are low/wet terrain, high indices are
high/dry terrain. Entries 3 and 4 share a colour on purpose, which widens
the band of grassland in rendered maps.
"""

import numpy as np
from enum import IntEnum
from typing import Dict, List, Tuple

from PIL import ImageColor


class TileType(IntEnum):
    """Terrain classes in catalog order."""

    DEEP_WATER = 0
    WATER = 1
    SAND = 2
    GRASSLAND = 3
    MEADOW = 4
    FOREST = 5
    MOUNTAIN = 6
    SNOW = 7


# Display colour of each tile (CSS colour names)
TILE_TYPES: Tuple[str, ...] = (
    "DarkBlue",
    "Blue",
    "Khaki",
    "YellowGreen",
    "YellowGreen",
    "Green",
    "DarkGrey",
    "White",
)

TILE_NAMES: Dict[TileType, str] = {
    TileType.DEEP_WATER: "Deep Water",
    TileType.WATER: "Water",
    TileType.SAND: "Sand",
    TileType.GRASSLAND: "Grassland",
    TileType.MEADOW: "Meadow",
    TileType.FOREST: "Forest",
    TileType.MOUNTAIN: "Mountain",
    TileType.SNOW: "Snow",
}

CATALOG_LENGTH = len(TILE_TYPES)


def classify(grid: np.ndarray) -> np.ndarray:
    """
    Map heights to tile indices.

    Heights are floored, not rounded. Values outside the catalog range are
    clipped so a stray float at the upper bound can never index past the
    end.

    Args:
        grid: 2-D array of heights

    Returns:
        Integer array of the same shape
    """
    indices = np.floor(np.asarray(grid, dtype=np.float64)).astype(np.int64)
    return np.clip(indices, 0, CATALOG_LENGTH - 1)


def tile_names(grid: np.ndarray) -> List[List[str]]:
    """Colour names of every cell, row by row."""
    return [[TILE_TYPES[i] for i in row] for row in classify(grid).tolist()]


def tile_color(index: int) -> Tuple[int, int, int]:
    """RGB triple for a catalog index."""
    return ImageColor.getrgb(TILE_TYPES[index])[:3]


def tile_palette() -> np.ndarray:
    """(CATALOG_LENGTH, 3) uint8 array of RGB colours in catalog order."""
    return np.array([tile_color(i) for i in range(CATALOG_LENGTH)], dtype=np.uint8)
