"""MapSurface — headless map: base style, runtime style, camera.

The surface fetches its base style document from the tile provider, then
fires its style-loaded callbacks exactly once. Until then ``style`` is
None, so nothing can decorate a style that does not exist yet. Style and
camera mutations are confined to the surface's RunLoop owner thread.
"""

from __future__ import annotations

from typing import Callable, Optional

import httpx
from loguru import logger

from landmarks.camera import Camera, Viewport
from landmarks.config import Settings
from landmarks.dispatch import RunLoop
from landmarks.errors import ResourceLoadError
from landmarks.geometry import Coordinate
from landmarks.style import MapStyle

_USER_AGENT = "Landmarks/0.1.0"

StyleFetcher = Callable[[str], dict]
StyleCallback = Callable[["MapSurface", MapStyle], None]
CameraCallback = Callable[["MapSurface", Camera, float], None]


def fetch_style(url: str, client: Optional[httpx.Client] = None, timeout: float = 10.0) -> dict:
    """Fetch a MapLibre style document over HTTP(S).

    Raises:
        ResourceLoadError: On transport errors, non-2xx status or a body
            that is not a JSON object.
    """
    own_client = client is None
    if own_client:
        client = httpx.Client(timeout=timeout, headers={"User-Agent": _USER_AGENT})
    safe_url = redact_key(url)
    try:
        resp = client.get(url)
        resp.raise_for_status()
        doc = resp.json()
    except httpx.HTTPError as e:
        raise ResourceLoadError(safe_url, f"style request failed: {e.__class__.__name__}") from e
    except ValueError as e:
        raise ResourceLoadError(safe_url, "style response is not JSON") from e
    finally:
        if own_client:
            client.close()

    if not isinstance(doc, dict):
        raise ResourceLoadError(safe_url, "style document must be a JSON object")
    return doc


def redact_key(url: str) -> str:
    """Hide the API key in a style URL for logs and error messages."""
    if "key=" not in url:
        return url
    head, _, tail = url.partition("key=")
    _, amp, rest = tail.partition("&")
    return f"{head}key=***{amp}{rest}"


class MapSurface:
    """A map that owns one style and one camera."""

    def __init__(
        self,
        style_url: str,
        viewport: Viewport,
        style_fetcher: Optional[StyleFetcher] = None,
        run_loop: Optional[RunLoop] = None,
    ) -> None:
        self.style_url = style_url
        self.viewport = viewport
        self.run_loop = run_loop or RunLoop()
        self._fetch = style_fetcher or fetch_style
        self._style: MapStyle | None = None
        self._style_callbacks: list[StyleCallback] = []
        self._camera_callbacks: list[CameraCallback] = []
        self._camera = Camera(center=Coordinate(0.0, 0.0), zoom=0.0)
        self.last_animation_duration: float | None = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        style_fetcher: Optional[StyleFetcher] = None,
        run_loop: Optional[RunLoop] = None,
    ) -> MapSurface:
        """Build a surface for the configured tile provider.

        Raises:
            ConfigurationError: If the tile service key is not configured.
        """
        url = settings.style_url()
        viewport = Viewport(settings.viewport_width, settings.viewport_height)
        return cls(url, viewport, style_fetcher=style_fetcher, run_loop=run_loop)

    # -- style --------------------------------------------------------------

    @property
    def style(self) -> MapStyle | None:
        """The loaded style, or None before the base style has loaded."""
        return self._style

    @property
    def is_style_loaded(self) -> bool:
        return self._style is not None

    def on_style_loaded(self, callback: StyleCallback) -> None:
        """Register a callback fired once, on the owner thread, when the style loads.

        Registering after the style has loaded posts the callback to the
        run loop immediately.
        """
        if self._style is not None:
            style = self._style
            self.run_loop.post(lambda: callback(self, style))
            return
        self._style_callbacks.append(callback)

    def load_style(self) -> MapStyle:
        """Fetch the base style and fire the style-loaded callbacks.

        Raises:
            ResourceLoadError: If the base style cannot be fetched.
            RuntimeError: If called off the owner thread or twice.
        """
        self.run_loop.assert_owner_thread("MapSurface.load_style")
        if self._style is not None:
            raise RuntimeError("Style already loaded")

        base = self._fetch(self.style_url)
        self._style = MapStyle(base=base)
        logger.info(f"Map style loaded: {self._style.name or redact_key(self.style_url)}")

        callbacks, self._style_callbacks = self._style_callbacks, []
        for callback in callbacks:
            callback(self, self._style)
        return self._style

    # -- camera -------------------------------------------------------------

    @property
    def camera(self) -> Camera:
        return self._camera

    def on_camera_changed(self, callback: CameraCallback) -> None:
        self._camera_callbacks.append(callback)

    def fly_to(self, camera: Camera, duration: float) -> None:
        """Move to ``camera``; ``duration`` is the animation time in seconds."""
        self.run_loop.assert_owner_thread("MapSurface.fly_to")
        if duration < 0:
            raise ValueError(f"duration must be >= 0, got {duration}")
        self._camera = camera
        self.last_animation_duration = duration
        logger.debug(
            f"Camera -> ({camera.center.latitude:.5f}, {camera.center.longitude:.5f}) "
            f"z={camera.zoom:.2f} over {duration}s"
        )
        for callback in self._camera_callbacks:
            callback(self, camera, duration)

    def to_dict(self) -> dict:
        return {
            "viewport": {"width": self.viewport.width, "height": self.viewport.height},
            "camera": self._camera.to_dict(),
            "style": self._style.to_dict() if self._style is not None else None,
            "images": self._style.images if self._style is not None else {},
        }
