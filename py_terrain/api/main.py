"""FastAPI main application."""

import logging
import uuid
from typing import List, Optional, Tuple

import structlog
from fastapi import FastAPI, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from ..config import settings
from ..core.diamond_square import DiamondSquareGenerator, HeightmapConfig
from ..core.render import render_terrain, to_png_bytes
from ..core.tiles import TILE_NAMES, TILE_TYPES, TileType, classify, tile_color
from ..utils.random import get_prng

# Configure logging
logging.basicConfig(format="%(message)s", level=settings.log_level.upper())

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer()
        if settings.log_format == "json"
        else structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()

# Initialize FastAPI app
app = FastAPI(
    title="Terrain Generator API",
    description="Diamond-square terrain heightmaps and tile renderings",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request/Response models
class HeightmapRequest(BaseModel):
    """Request to generate a heightmap."""

    width: int = Field(..., gt=0, description="Number of columns")
    height: int = Field(..., gt=0, description="Number of rows")
    variability: Optional[float] = Field(
        None, ge=0, description="Perturbation amplitude at the coarsest level"
    )
    seed: Optional[str] = Field(None, description="Random seed for reproducible generation")


class HeightmapResponse(BaseModel):
    """Generated heightmap with its tile classes."""

    width: int
    height: int
    variability: float
    grid_size: int
    seed: str
    heights: List[List[float]]
    tiles: List[List[int]]


class RenderRequest(BaseModel):
    """Request to render terrain covering a pixel viewport."""

    pixel_width: int = Field(..., gt=0, description="Image width in pixels")
    pixel_height: int = Field(..., gt=0, description="Image height in pixels")
    variability: Optional[float] = Field(
        None, ge=0, description="Perturbation amplitude at the coarsest level"
    )
    tile_size: Optional[int] = Field(None, gt=0, description="Tile edge length in pixels")
    seed: Optional[str] = Field(None, description="Random seed for reproducible generation")


class TileInfo(BaseModel):
    """One entry of the tile catalog."""

    index: int
    type: str
    name: str
    color: str
    rgb: Tuple[int, int, int]


def _check_dimensions(width: int, height: int) -> None:
    if width > settings.max_map_width or height > settings.max_map_height:
        raise HTTPException(
            status_code=400,
            detail=(
                f"Requested {width}x{height} exceeds the maximum of "
                f"{settings.max_map_width}x{settings.max_map_height}"
            ),
        )


# API endpoints
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Terrain Generator API",
        "version": "0.1.0",
        "status": "running",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/tiles", response_model=List[TileInfo])
async def list_tiles():
    """Tile catalog in height order."""
    return [
        TileInfo(
            index=tile.value,
            type=tile.name,
            name=TILE_NAMES[tile],
            color=TILE_TYPES[tile.value],
            rgb=tile_color(tile.value),
        )
        for tile in TileType
    ]


@app.post("/heightmaps", response_model=HeightmapResponse)
def generate_heightmap(request: HeightmapRequest):
    """Generate a heightmap and classify every cell."""
    logger.info("Heightmap generation requested", request=request.model_dump())
    _check_dimensions(request.width, request.height)

    seed = request.seed or str(uuid.uuid4())[:8]
    variability = (
        request.variability if request.variability is not None else settings.default_variability
    )

    try:
        config = HeightmapConfig(
            width=request.width, height=request.height, variability=variability
        )
    except ValueError as e:
        logger.warning("Invalid heightmap request", error=str(e))
        raise HTTPException(status_code=400, detail=str(e))

    generator = DiamondSquareGenerator(config, get_prng(seed))
    heights = generator.generate()

    logger.info(
        "Heightmap generated",
        seed=seed,
        grid_size=generator.grid_size,
        min_height=float(heights.min()),
        max_height=float(heights.max()),
    )

    return HeightmapResponse(
        width=request.width,
        height=request.height,
        variability=config.variability,
        grid_size=generator.grid_size,
        seed=seed,
        heights=heights.tolist(),
        tiles=classify(heights).tolist(),
    )


@app.post("/terrain/render")
def render(request: RenderRequest):
    """Render terrain covering the requested viewport as a PNG."""
    logger.info("Terrain render requested", request=request.model_dump())
    _check_dimensions(request.pixel_width, request.pixel_height)

    seed = request.seed or str(uuid.uuid4())[:8]
    variability = (
        request.variability if request.variability is not None else settings.default_variability
    )
    tile_size = request.tile_size or settings.default_tile_size

    try:
        image = render_terrain(
            request.pixel_width, request.pixel_height, variability, tile_size, get_prng(seed)
        )
    except ValueError as e:
        logger.warning("Invalid render request", error=str(e))
        raise HTTPException(status_code=400, detail=str(e))

    return Response(
        content=to_png_bytes(image),
        media_type="image/png",
        headers={"X-Terrain-Seed": seed},
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
