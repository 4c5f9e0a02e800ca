"""Shared fixtures for landmarks tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from landmarks.config import Settings
from landmarks.dispatch import BackgroundDispatcher
from landmarks.resources import ResourceBundle

PACKAGE_RESOURCES = Path(__file__).resolve().parents[2] / "src" / "landmarks" / "data"

# 0.2 x 0.1 degree rectangle near San Francisco Civic Center
RECT_WEST, RECT_SOUTH, RECT_EAST, RECT_NORTH = -122.52, 37.72, -122.32, 37.82
RECT_CENTROID = ((RECT_SOUTH + RECT_NORTH) / 2, (RECT_WEST + RECT_EAST) / 2)

RECTANGLE_GEOJSON = {
    "type": "FeatureCollection",
    "features": [
        {
            "type": "Feature",
            "properties": {"name": "Test Park"},
            "geometry": {
                "type": "Polygon",
                "coordinates": [[
                    [RECT_WEST, RECT_SOUTH],
                    [RECT_EAST, RECT_SOUTH],
                    [RECT_EAST, RECT_NORTH],
                    [RECT_WEST, RECT_NORTH],
                    [RECT_WEST, RECT_SOUTH],
                ]],
            },
        }
    ],
}

BASE_STYLE = {"version": 8, "name": "Outdoor", "sources": {}, "layers": []}

LANDMARKS = [
    {
        "id": 1,
        "name": "Test Rock",
        "park": "Test Park",
        "state": "California",
        "city": "San Francisco",
        "category": "Rivers",
        "coordinates": {"latitude": RECT_CENTROID[0], "longitude": RECT_CENTROID[1]},
        "imageName": "testrock",
        "shapeName": "test-park",
        "isFeatured": True,
    },
    {
        "id": 2,
        "name": "Nowhere Lake",
        "park": "Missing Park",
        "state": "Nevada",
        "coordinates": {"latitude": 39.0, "longitude": -117.0},
        "imageName": "nowhere",
        "shapeName": "missing-park",
    },
]


@pytest.fixture
def package_bundle():
    """The resources shipped with the package."""
    return ResourceBundle(PACKAGE_RESOURCES)


@pytest.fixture
def bundle_dir(tmp_path):
    """A small bundle: two landmarks, one shape, one photo, the marker icon."""
    (tmp_path / "images").mkdir()
    (tmp_path / "landmarkData.json").write_text(json.dumps(LANDMARKS), encoding="utf-8")
    (tmp_path / "test-park.geojson").write_text(json.dumps(RECTANGLE_GEOJSON), encoding="utf-8")
    (tmp_path / "images" / "testrock.jpg").write_bytes(b"\xff\xd8\xff\xe0fake-jpeg")
    (tmp_path / "images" / "landmark-icon.svg").write_text("<svg/>", encoding="utf-8")
    return tmp_path


@pytest.fixture
def bundle(bundle_dir):
    return ResourceBundle(bundle_dir)


@pytest.fixture
def settings(bundle_dir):
    return Settings(
        _env_file=None,
        maptiler_key="test-key",
        resources_dir=bundle_dir,
        viewport_width=400,
        viewport_height=300,
        map_timeout=5.0,
    )


@pytest.fixture
def style_fetcher():
    """Stand-in for the tile provider: records requested URLs."""
    requested: list[str] = []

    def fetch(url: str) -> dict:
        requested.append(url)
        return json.loads(json.dumps(BASE_STYLE))

    fetch.requested = requested
    return fetch


@pytest.fixture
def dispatcher():
    d = BackgroundDispatcher(max_workers=2)
    yield d
    d.shutdown()


@pytest.fixture
def rectangle_geojson():
    return json.loads(json.dumps(RECTANGLE_GEOJSON))


@pytest.fixture
def rectangle_bounds():
    """(west, south, east, north) of the rectangle fixture."""
    return RECT_WEST, RECT_SOUTH, RECT_EAST, RECT_NORTH


@pytest.fixture
def rectangle_centroid():
    """(latitude, longitude) of the rectangle fixture's centre."""
    return RECT_CENTROID
