"""Configuration management using Pydantic settings."""

from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from landmarks.errors import ConfigurationError

_PACKAGE_DATA = Path(__file__).parent / "data"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Landmarks"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Map tiles (no default key: a map surface refuses to build without one)
    maptiler_key: Optional[str] = None
    tile_host: str = "api.maptiler.com"
    map_style: str = "outdoor"

    # Bundled data (landmarkData.json, *.geojson, images/)
    resources_dir: Path = _PACKAGE_DATA

    # Headless map viewport, in screen points; must exceed the 10-point
    # overlay padding on both sides
    viewport_width: int = Field(default=390, gt=20)
    viewport_height: int = Field(default=420, gt=20)

    # Overlay loading
    geometry_workers: int = 2
    map_timeout: float = 10.0  # seconds to wait for style + overlay

    def require_maptiler_key(self) -> str:
        """Return the tile service key or raise ConfigurationError."""
        if not self.maptiler_key:
            raise ConfigurationError(
                "Failed to read MapTiler key (set MAPTILER_KEY in the environment or .env)"
            )
        return self.maptiler_key

    def style_url(self) -> str:
        """Base map style URL for the configured tile provider."""
        key = self.require_maptiler_key()
        return f"https://{self.tile_host}/maps/{self.map_style}/style.json?key={key}"


settings = Settings()
