"""Landmarks — landmark catalogue with GeoJSON park overlays on a map.

Loads a bundled landmark catalogue, parses each landmark's park envelope
from GeoJSON and pins both onto a MapLibre style with a fitted camera.
"""

from landmarks.errors import ConfigurationError, LandmarksError, ResourceLoadError
from landmarks.geometry import Coordinate, CoordinateBounds, GeometryShape
from landmarks.overlay import MapOverlayLoader, OverlayState
from landmarks.store import LandmarkRecord, LandmarkStore
from landmarks.surface import MapSurface

__all__ = [
    "ConfigurationError",
    "Coordinate",
    "CoordinateBounds",
    "GeometryShape",
    "LandmarkRecord",
    "LandmarkStore",
    "LandmarksError",
    "MapOverlayLoader",
    "MapSurface",
    "OverlayState",
    "ResourceLoadError",
]
