"""
Raster rendering of tile grids.

Each heightmap cell becomes a tile_size x tile_size block in the colour of
its tile class. Images are built in memory with Pillow and never written
to disk here.
"""

import io
import math
from typing import Optional, Tuple

import numpy as np
import structlog
from PIL import Image

from ..utils.random import RandomSource
from .diamond_square import generate_height_map
from .tiles import classify, tile_palette

logger = structlog.get_logger()


def tile_counts(pixel_width: int, pixel_height: int, tile_size: int) -> Tuple[int, int]:
    """
    Number of tile columns and rows needed to cover a viewport.

    Partial tiles at the right and bottom edges count as whole tiles.

    Returns:
        (columns, rows)
    """
    if pixel_width <= 0 or pixel_height <= 0:
        raise ValueError("Viewport dimensions must be positive")
    if tile_size <= 0:
        raise ValueError(f"tile_size must be positive, got {tile_size}")
    return math.ceil(pixel_width / tile_size), math.ceil(pixel_height / tile_size)


def render_tiles(grid: np.ndarray, tile_size: int) -> Image.Image:
    """
    Paint a heightmap as coloured tiles.

    Args:
        grid: 2-D array of heights
        tile_size: Edge length of one tile in pixels

    Returns:
        RGB image of size (cols * tile_size, rows * tile_size)
    """
    if tile_size <= 0:
        raise ValueError(f"tile_size must be positive, got {tile_size}")

    pixels = tile_palette()[classify(grid)]
    pixels = np.repeat(np.repeat(pixels, tile_size, axis=0), tile_size, axis=1)
    return Image.fromarray(np.ascontiguousarray(pixels))


def render_terrain(
    pixel_width: int,
    pixel_height: int,
    variability: float,
    tile_size: int,
    rng: Optional[RandomSource] = None,
) -> Image.Image:
    """
    Generate a heightmap that covers a viewport and render it.

    Returns:
        RGB image of exactly pixel_width x pixel_height
    """
    cols, rows = tile_counts(pixel_width, pixel_height, tile_size)
    logger.info(
        "Rendering terrain",
        pixel_width=pixel_width,
        pixel_height=pixel_height,
        tile_size=tile_size,
        cols=cols,
        rows=rows,
    )

    heights = generate_height_map(cols, rows, variability, rng=rng)
    image = render_tiles(heights, tile_size)
    return image.crop((0, 0, pixel_width, pixel_height))


def to_png_bytes(image: Image.Image) -> bytes:
    """Encode an image as PNG."""
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()
