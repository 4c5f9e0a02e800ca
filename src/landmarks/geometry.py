"""Geometry shapes decoded from GeoJSON (RFC 7946) using stdlib json.

Handles FeatureCollection, Feature and bare geometry objects carrying
Polygon, MultiPolygon, LineString or MultiLineString geometry. Coordinates
in GeoJSON are [lng, lat]; Coordinate stores (latitude, longitude).
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field

from loguru import logger

from landmarks.errors import ResourceLoadError
from landmarks.resources import ResourceBundle

SHAPE_TYPES = ("Polygon", "MultiPolygon", "LineString", "MultiLineString")

# Nesting depth of position arrays per geometry type
_POSITION_DEPTH = {
    "LineString": 1,
    "Polygon": 2,
    "MultiLineString": 2,
    "MultiPolygon": 3,
}


@dataclass(frozen=True)
class Coordinate:
    """A WGS84 position."""

    latitude: float
    longitude: float

    def to_geojson(self) -> list[float]:
        return [self.longitude, self.latitude]


@dataclass(frozen=True)
class CoordinateBounds:
    """Axis-aligned coordinate envelope (south-west / north-east corners)."""

    sw: Coordinate
    ne: Coordinate

    @classmethod
    def from_positions(cls, positions: list[list[float]]) -> CoordinateBounds:
        if not positions:
            raise ValueError("Cannot compute bounds of zero positions")
        lngs = [p[0] for p in positions]
        lats = [p[1] for p in positions]
        return cls(
            sw=Coordinate(min(lats), min(lngs)),
            ne=Coordinate(max(lats), max(lngs)),
        )

    @property
    def center(self) -> Coordinate:
        return Coordinate(
            (self.sw.latitude + self.ne.latitude) / 2,
            (self.sw.longitude + self.ne.longitude) / 2,
        )

    @property
    def lat_span(self) -> float:
        return self.ne.latitude - self.sw.latitude

    @property
    def lng_span(self) -> float:
        return self.ne.longitude - self.sw.longitude

    @property
    def is_empty(self) -> bool:
        """True when the envelope is a single point."""
        return self.lat_span == 0.0 and self.lng_span == 0.0

    def contains(self, coord: Coordinate) -> bool:
        return (
            self.sw.latitude <= coord.latitude <= self.ne.latitude
            and self.sw.longitude <= coord.longitude <= self.ne.longitude
        )

    def contains_bounds(self, other: CoordinateBounds) -> bool:
        return self.contains(other.sw) and self.contains(other.ne)

    def to_list(self) -> list[float]:
        """GeoJSON bbox order: [west, south, east, north]."""
        return [self.sw.longitude, self.sw.latitude, self.ne.longitude, self.ne.latitude]


@dataclass
class ShapeFeature:
    """One line or polygon feature of a shape.

    Attributes:
        geometry_type: One of SHAPE_TYPES.
        coordinates: GeoJSON-style coordinate arrays.
        properties: Feature properties, passed through untouched.
    """

    geometry_type: str
    coordinates: list
    properties: dict = field(default_factory=dict)

    def positions(self) -> list[list[float]]:
        """Flatten the coordinate arrays into a list of [lng, lat] positions."""
        items = [self.coordinates]
        for _ in range(_POSITION_DEPTH[self.geometry_type]):
            items = [child for item in items for child in item]
        return items

    def to_geojson(self) -> dict:
        return {
            "type": "Feature",
            "geometry": {"type": self.geometry_type, "coordinates": self.coordinates},
            "properties": dict(self.properties),
        }


@dataclass
class GeometryShape:
    """A parsed geometry document: one or more line/polygon features."""

    name: str
    features: list[ShapeFeature]

    @property
    def bounds(self) -> CoordinateBounds:
        positions = [p for f in self.features for p in f.positions()]
        return CoordinateBounds.from_positions(positions)

    @property
    def centroid(self) -> Coordinate:
        """Centre of the coordinate envelope."""
        return self.bounds.center

    def to_geojson(self) -> dict:
        return {
            "type": "FeatureCollection",
            "features": [f.to_geojson() for f in self.features],
        }


def parse_geometry(data: bytes | str, name: str = "shape") -> GeometryShape:
    """Parse GeoJSON bytes into a GeometryShape.

    Args:
        data: Raw GeoJSON document (UTF-8 bytes or string).
        name: Resource name used in error messages.

    Raises:
        ResourceLoadError: If the document is not valid JSON or holds no
            usable line/polygon feature.
    """
    try:
        doc = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError, TypeError, RecursionError) as e:
        raise ResourceLoadError(name, f"invalid JSON: {e}") from e

    if not isinstance(doc, dict):
        raise ResourceLoadError(name, "GeoJSON root must be an object")

    doc_type = doc.get("type")
    if doc_type == "FeatureCollection":
        raw_features = doc.get("features")
        if not isinstance(raw_features, list):
            raise ResourceLoadError(name, "FeatureCollection has no features array")
    elif doc_type == "Feature":
        raw_features = [doc]
    elif doc_type in SHAPE_TYPES:
        raw_features = [{"type": "Feature", "geometry": doc, "properties": {}}]
    else:
        raise ResourceLoadError(name, f"unsupported GeoJSON type: {doc_type!r}")

    features = []
    for idx, raw in enumerate(raw_features):
        feature = _parse_feature(raw)
        if feature is None:
            logger.debug(f"{name}: skipping feature {idx} (not a line or polygon)")
            continue
        features.append(feature)

    if not features:
        raise ResourceLoadError(name, "no line or polygon features")

    return GeometryShape(name=name, features=features)


def load_geometry(bundle: ResourceBundle, shape_reference: str) -> GeometryShape:
    """Read ``<shape_reference>.geojson`` from the bundle and parse it."""
    raw = bundle.read_bytes(shape_reference, "geojson")
    shape = parse_geometry(raw, name=f"{shape_reference}.geojson")
    logger.debug(f"Parsed {shape.name}: {len(shape.features)} feature(s), bbox={shape.bounds.to_list()}")
    return shape


def _parse_feature(raw: dict) -> ShapeFeature | None:
    """Parse a single GeoJSON Feature dict into a ShapeFeature."""
    if not isinstance(raw, dict):
        return None

    geometry = raw.get("geometry")
    if not isinstance(geometry, dict):
        return None

    geom_type = geometry.get("type", "")
    coordinates = geometry.get("coordinates")
    if geom_type not in SHAPE_TYPES or not isinstance(coordinates, list):
        return None

    properties = raw.get("properties") or {}
    if not isinstance(properties, dict):
        properties = {}

    feature = ShapeFeature(geom_type, coordinates, properties)
    try:
        positions = feature.positions()
    except TypeError:
        return None
    if not positions or not all(_is_position(p) for p in positions):
        return None
    return feature


def _is_position(p) -> bool:
    return (
        isinstance(p, list)
        and len(p) >= 2
        and all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in p[:2])
        and all(math.isfinite(v) for v in p[:2])
    )
