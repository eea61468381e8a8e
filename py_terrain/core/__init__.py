"""
Core terrain generation functionality.
"""

from .diamond_square import (
    DiamondSquareGenerator,
    HeightmapConfig,
    diamond_step,
    generate_height_map,
    grid_size,
    square_step,
    wrap_number,
)
from .tiles import CATALOG_LENGTH, TILE_NAMES, TILE_TYPES, TileType, classify, tile_names
from .render import render_terrain, render_tiles, tile_counts

__all__ = ['DiamondSquareGenerator', 'HeightmapConfig', 'diamond_step', 'generate_height_map',
           'grid_size', 'square_step', 'wrap_number',
           'CATALOG_LENGTH', 'TILE_NAMES', 'TILE_TYPES', 'TileType', 'classify', 'tile_names',
           'render_terrain', 'render_tiles', 'tile_counts']
