"""Configuration management."""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # API
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")

    # Generation
    default_variability: float = Field(
        default=75.0, ge=0, description="Perturbation amplitude used when none is given"
    )
    default_tile_size: int = Field(default=2, gt=0, description="Tile edge length in pixels")
    max_map_width: int = Field(default=2000, gt=0, description="Max allowed map width")
    max_map_height: int = Field(default=2000, gt=0, description="Max allowed map height")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="json", description="Logging format (plain or json)")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
