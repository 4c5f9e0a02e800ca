"""MapOverlayLoader — decorates a map with a landmark's park envelope and pin.

Lifecycle per map surface:

    UNINITIALIZED --style loaded--> STYLE_READY --attach--> OVERLAY_ATTACHED
                                         |
                                         +--load error--> FAILED

The geometry file is read and parsed on a background worker; the style is
only touched back on the surface's owner thread. The overlay is attached
at most once: repeated style-loaded signals are ignored.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from loguru import logger

from landmarks.camera import Camera, EdgeInsets, camera_that_fits
from landmarks.dispatch import BackgroundDispatcher
from landmarks.errors import ConfigurationError
from landmarks.geometry import Coordinate, GeometryShape, load_geometry
from landmarks.resources import ResourceBundle
from landmarks.style import Color, FillStyleLayer, MapStyle, ShapeSource, SymbolStyleLayer
from landmarks.surface import MapSurface

FILL_COLOR = Color.from_rgb(0x801A86, a=0.3)
OUTLINE_COLOR = Color.from_rgb(0x4E0250, a=0.8)
EDGE_PADDING = EdgeInsets(top=10, left=10, bottom=10, right=10)
FLY_DURATION = 0.25

POLYGON_SOURCE_ID = "polygon"
POLYGON_LAYER_ID = "polygon"
MARKER_SOURCE_ID = "marker-source"
MARKER_LAYER_ID = "marker-style"
MARKER_SYMBOL = "landmark-symbol"
MARKER_ICON_ASSET = "landmark-icon"


class OverlayState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    STYLE_READY = "style_ready"
    OVERLAY_ATTACHED = "overlay_attached"
    FAILED = "failed"


@dataclass
class MapOverlay:
    """The sources and layers one loader added to a style."""

    polygon_source: ShapeSource
    polygon_layer: FillStyleLayer
    marker_source: ShapeSource
    marker_layer: SymbolStyleLayer
    camera: Camera


class MapOverlayLoader:
    """Loads one landmark's shape and pins it onto one map surface."""

    def __init__(
        self,
        surface: MapSurface,
        shape_reference: str,
        coordinate: Coordinate,
        bundle: ResourceBundle,
        dispatcher: BackgroundDispatcher,
    ) -> None:
        self.surface = surface
        self.shape_reference = shape_reference
        self.coordinate = coordinate
        self._bundle = bundle
        self._dispatcher = dispatcher
        self.state = OverlayState.UNINITIALIZED
        self.shape: GeometryShape | None = None
        self.overlay: MapOverlay | None = None
        self.error: BaseException | None = None
        surface.on_style_loaded(self.on_style_ready)

    @property
    def settled(self) -> bool:
        return self.state in (OverlayState.OVERLAY_ATTACHED, OverlayState.FAILED)

    def on_style_ready(self, surface: MapSurface, style: MapStyle) -> None:
        """Style-loaded callback: start loading the geometry in the background."""
        if self.state is not OverlayState.UNINITIALIZED:
            logger.warning(f"Overlay {self.shape_reference}: style-ready ignored in state {self.state.value}")
            return
        self.state = OverlayState.STYLE_READY
        logger.debug(f"Overlay {self.shape_reference}: style ready, loading geometry")
        self._dispatcher.submit(
            lambda: self.load_geometry(self.shape_reference),
            surface.run_loop,
            on_success=lambda shape: self._attach_or_fail(style, shape),
            on_error=self._on_load_error,
        )

    def load_geometry(self, shape_reference: str) -> GeometryShape:
        """Read and parse ``<shape_reference>.geojson``. Runs on a worker thread."""
        return load_geometry(self._bundle, shape_reference)

    def attach_overlay(self, style: MapStyle, shape: GeometryShape) -> MapOverlay:
        """Add the fill and marker layers, then fly the camera to the shape.

        Raises:
            RuntimeError: Off the owner thread, or if not in STYLE_READY.
            ConfigurationError: If the viewport is too small for the padding.
                The style is left untouched.
        """
        self.surface.run_loop.assert_owner_thread("MapOverlayLoader.attach_overlay")
        if self.state is not OverlayState.STYLE_READY:
            raise RuntimeError(f"Cannot attach overlay in state {self.state.value}")

        try:
            camera = camera_that_fits(shape.bounds, self.surface.viewport, EDGE_PADDING, direction=0.0)
        except ValueError as e:
            raise ConfigurationError(f"Cannot frame {self.shape_reference}: {e}") from e

        self.shape = shape
        polygon_source, polygon_layer = self._add_park_envelope(style, shape)
        marker_source, marker_layer = self._add_marker(style)
        self.surface.fly_to(camera, duration=FLY_DURATION)

        self.overlay = MapOverlay(polygon_source, polygon_layer, marker_source, marker_layer, camera)
        self.state = OverlayState.OVERLAY_ATTACHED
        logger.info(
            f"Overlay {self.shape_reference}: attached {len(shape.features)} feature(s), "
            f"camera z={camera.zoom:.2f}"
        )
        return self.overlay

    def wait_until_settled(self, timeout: float) -> bool:
        """Pump the surface's run loop until attached or failed."""
        return self.surface.run_loop.run_until(lambda: self.settled, timeout)

    def _attach_or_fail(self, style: MapStyle, shape: GeometryShape) -> None:
        try:
            self.attach_overlay(style, shape)
        except ConfigurationError as e:
            self._on_load_error(e)

    def _on_load_error(self, error: BaseException) -> None:
        self.error = error
        self.state = OverlayState.FAILED
        logger.error(f"Overlay {self.shape_reference}: {error}")

    def _add_park_envelope(self, style: MapStyle, shape: GeometryShape) -> tuple[ShapeSource, FillStyleLayer]:
        source = ShapeSource(POLYGON_SOURCE_ID, shape.to_geojson())
        style.add_source(source)
        layer = FillStyleLayer(
            POLYGON_LAYER_ID,
            source=source.identifier,
            fill_color=FILL_COLOR,
            fill_outline_color=OUTLINE_COLOR,
        )
        style.add_layer(layer)
        return source, layer

    def _add_marker(self, style: MapStyle) -> tuple[ShapeSource, SymbolStyleLayer]:
        point = {
            "type": "Feature",
            "geometry": {"type": "Point", "coordinates": self.coordinate.to_geojson()},
            "properties": {},
        }
        source = ShapeSource(MARKER_SOURCE_ID, point)
        layer = SymbolStyleLayer(MARKER_LAYER_ID, source=source.identifier, icon_image_name=MARKER_SYMBOL)

        icon = self._bundle.image_path(MARKER_ICON_ASSET)
        if icon is not None:
            style.set_image(MARKER_SYMBOL, icon)
        else:
            logger.warning(f"Marker icon {MARKER_ICON_ASSET!r} not bundled; pin will use the style default")

        style.add_source(source)
        style.add_layer(layer)
        return source, layer
