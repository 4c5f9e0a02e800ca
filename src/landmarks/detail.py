"""A landmark detail owns one record plus its own map surface and overlay loader.

Each detail builds an independent MapSurface and MapOverlayLoader; nothing
is shared between details except the read-only bundle and worker pool.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from loguru import logger

from landmarks.config import Settings
from landmarks.dispatch import BackgroundDispatcher, RunLoop
from landmarks.errors import LandmarksError
from landmarks.overlay import MapOverlayLoader, OverlayState
from landmarks.resources import ResourceBundle
from landmarks.store import LandmarkRecord
from landmarks.surface import MapSurface, StyleFetcher


class LandmarkDetail:
    """Detail of a single landmark: title, photo and map."""

    def __init__(self, record: LandmarkRecord, bundle: ResourceBundle) -> None:
        self.record = record
        self._bundle = bundle

    @property
    def title(self) -> str:
        return self.record.name

    @property
    def image_path(self) -> Path | None:
        return self._bundle.image_path(self.record.image_name)

    def make_map(
        self,
        settings: Settings,
        dispatcher: BackgroundDispatcher,
        style_fetcher: Optional[StyleFetcher] = None,
        run_loop: Optional[RunLoop] = None,
    ) -> MapOverlayLoader:
        """Create the map surface and bind an overlay loader to it.

        Raises:
            ConfigurationError: If the tile service key is missing.
        """
        surface = MapSurface.from_settings(settings, style_fetcher=style_fetcher, run_loop=run_loop)
        return MapOverlayLoader(
            surface,
            shape_reference=self.record.shape_name,
            coordinate=self.record.location_coordinate,
            bundle=self._bundle,
            dispatcher=dispatcher,
        )

    def render_map(
        self,
        settings: Settings,
        dispatcher: BackgroundDispatcher,
        style_fetcher: Optional[StyleFetcher] = None,
    ) -> dict:
        """Load the style, wait for the overlay and serialise the map.

        Must be called on the thread that will own the map (the caller).

        Raises:
            ConfigurationError: If the tile service key is missing.
            ResourceLoadError: If the base style or the shape fails to load.
            TimeoutError: If the overlay is not attached within map_timeout.
        """
        loader = self.make_map(settings, dispatcher, style_fetcher=style_fetcher)
        loader.surface.load_style()
        if not loader.wait_until_settled(settings.map_timeout):
            raise TimeoutError(f"Overlay for {self.record.shape_name} not ready after {settings.map_timeout}s")
        if loader.state is OverlayState.FAILED:
            error = loader.error
            if isinstance(error, LandmarksError):
                raise error
            raise RuntimeError(f"Overlay for {self.record.shape_name} failed") from error

        logger.info(f"Rendered map for landmark {self.record.id} ({self.record.name})")
        return loader.surface.to_dict()

    def to_dict(self) -> dict:
        return {
            "id": self.record.id,
            "title": self.title,
            "name": self.record.name,
            "park": self.record.park,
            "state": self.record.state,
            "city": self.record.city,
            "category": self.record.category,
            "coordinates": {
                "latitude": self.record.coordinates.latitude,
                "longitude": self.record.coordinates.longitude,
            },
            "shape_name": self.record.shape_name,
            "has_image": self.image_path is not None,
        }
