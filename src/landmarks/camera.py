"""Map camera and camera fitting in Web Mercator.

Convention (MapLibre):
    - 512 px tiles, world width at zoom z = 512 * 2**z px
    - Screen origin top-left, +x right, +y down
    - Bearing 0 = north up, clockwise in degrees
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from landmarks.geometry import Coordinate, CoordinateBounds

TILE_SIZE = 512.0
MIN_ZOOM = 0.0
MAX_ZOOM = 22.0
MAX_LATITUDE = 85.051128779806604


@dataclass(frozen=True)
class EdgeInsets:
    """Padding in screen points around a fitted region."""

    top: float = 0.0
    left: float = 0.0
    bottom: float = 0.0
    right: float = 0.0

    @classmethod
    def uniform(cls, value: float) -> EdgeInsets:
        return cls(value, value, value, value)


@dataclass(frozen=True)
class Viewport:
    """Size of the map surface in screen points."""

    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Viewport must be positive, got {self.width}x{self.height}")


@dataclass(frozen=True)
class Camera:
    """Viewport transform: centre, zoom, bearing and pitch."""

    center: Coordinate
    zoom: float = 0.0
    bearing: float = 0.0
    pitch: float = 0.0

    def point_for(self, coord: Coordinate, viewport: Viewport) -> tuple[float, float]:
        """Project a coordinate to a screen point (x, y) in this camera's view."""
        world = world_size(self.zoom)
        cx, cy = project(self.center)
        px, py = project(coord)
        dx, dy = _rotate((px - cx) * world, (py - cy) * world, self.bearing)
        return viewport.width / 2 + dx, viewport.height / 2 + dy

    def coordinate_for(self, point: tuple[float, float], viewport: Viewport) -> Coordinate:
        """Inverse of point_for."""
        world = world_size(self.zoom)
        dx, dy = _rotate(point[0] - viewport.width / 2, point[1] - viewport.height / 2, -self.bearing)
        cx, cy = project(self.center)
        return unproject(cx + dx / world, cy + dy / world)

    def visible_bounds(self, viewport: Viewport) -> CoordinateBounds:
        """Coordinate envelope covered by the viewport at this camera."""
        corners = [
            self.coordinate_for((x, y), viewport)
            for x in (0.0, viewport.width)
            for y in (0.0, viewport.height)
        ]
        return CoordinateBounds.from_positions([c.to_geojson() for c in corners])

    def to_dict(self) -> dict:
        return {
            "center": self.center.to_geojson(),
            "zoom": self.zoom,
            "bearing": self.bearing,
            "pitch": self.pitch,
        }


def world_size(zoom: float) -> float:
    return TILE_SIZE * 2.0 ** zoom


def project(coord: Coordinate) -> tuple[float, float]:
    """Coordinate to normalised mercator (x, y) in 0..1, y growing south."""
    lat = max(-MAX_LATITUDE, min(MAX_LATITUDE, coord.latitude))
    x = (coord.longitude + 180.0) / 360.0
    sin_lat = math.sin(math.radians(lat))
    y = 0.5 - math.log((1 + sin_lat) / (1 - sin_lat)) / (4 * math.pi)
    return x, y


def unproject(x: float, y: float) -> Coordinate:
    lng = x * 360.0 - 180.0
    lat = math.degrees(math.atan(math.sinh(math.pi * (1 - 2 * y))))
    return Coordinate(lat, lng)


def camera_that_fits(
    bounds: CoordinateBounds,
    viewport: Viewport,
    padding: EdgeInsets = EdgeInsets(),
    direction: float = 0.0,
) -> Camera:
    """Return the camera that shows ``bounds`` inside the padded viewport.

    The zoom is the largest at which the projected envelope (rotated by
    ``direction``) fits within the viewport inset by ``padding``, clamped to
    [MIN_ZOOM, MAX_ZOOM].

    Raises:
        ValueError: If the padding leaves no room in the viewport.
    """
    avail_w = viewport.width - padding.left - padding.right
    avail_h = viewport.height - padding.top - padding.bottom
    if avail_w <= 0 or avail_h <= 0:
        raise ValueError(f"Padding {padding} leaves no room in viewport {viewport}")

    # Projected corners, rotated into screen orientation (units: world fractions)
    west, north = project(Coordinate(bounds.ne.latitude, bounds.sw.longitude))
    east, south = project(Coordinate(bounds.sw.latitude, bounds.ne.longitude))
    corners = [_rotate(x, y, direction) for x in (west, east) for y in (north, south)]
    xs = [c[0] for c in corners]
    ys = [c[1] for c in corners]
    span_x = max(xs) - min(xs)
    span_y = max(ys) - min(ys)

    scales = []
    if span_x > 0:
        scales.append(avail_w / (span_x * TILE_SIZE))
    if span_y > 0:
        scales.append(avail_h / (span_y * TILE_SIZE))
    zoom = math.log2(min(scales)) if scales else MAX_ZOOM
    zoom = max(MIN_ZOOM, min(MAX_ZOOM, zoom))

    # Shift the centre so the envelope centre lands in the middle of the padded box
    world = world_size(zoom)
    mid_x = (min(xs) + max(xs)) / 2
    mid_y = (min(ys) + max(ys)) / 2
    off_x = (padding.left - padding.right) / 2 / world
    off_y = (padding.top - padding.bottom) / 2 / world
    cx, cy = _rotate(mid_x - off_x, mid_y - off_y, -direction)
    return Camera(center=unproject(cx, cy), zoom=zoom, bearing=direction % 360.0)


def _rotate(x: float, y: float, bearing: float) -> tuple[float, float]:
    """Rotate a screen-space vector so that ``bearing`` points up."""
    if bearing == 0.0:
        return x, y
    theta = math.radians(-bearing)
    cos_t, sin_t = math.cos(theta), math.sin(theta)
    return x * cos_t - y * sin_t, x * sin_t + y * cos_t
