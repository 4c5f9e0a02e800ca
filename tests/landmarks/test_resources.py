"""Tests for ResourceBundle lookup."""

import pytest

from landmarks.errors import ResourceLoadError
from landmarks.resources import ResourceBundle


@pytest.mark.unit
class TestResourceBundle:

    def test_url_for(self, bundle, bundle_dir):
        assert bundle.url_for("test-park", "geojson") == bundle_dir / "test-park.geojson"
        assert bundle.url_for("test-park", ".geojson") == bundle_dir / "test-park.geojson"

    def test_url_for_missing(self, bundle):
        assert bundle.url_for("nope", "geojson") is None

    @pytest.mark.parametrize("name", ["", "../etc/passwd", "a/b", ".hidden"])
    def test_rejects_unsafe_names(self, bundle, name):
        assert bundle.url_for(name, "json") is None
        assert bundle.image_path(name) is None

    def test_read_bytes(self, bundle):
        assert bundle.read_bytes("landmarkData", "json").startswith(b"[")

    def test_read_bytes_missing(self, bundle):
        with pytest.raises(ResourceLoadError) as exc:
            bundle.read_bytes("nope", "geojson")
        assert str(exc.value) == "Failed to load nope.geojson: resource not found in bundle"

    def test_image_path_tries_extensions(self, bundle, bundle_dir):
        assert bundle.image_path("testrock") == bundle_dir / "images" / "testrock.jpg"
        assert bundle.image_path("landmark-icon") == bundle_dir / "images" / "landmark-icon.svg"
        assert bundle.image_path("missing") is None

    def test_bundled_marker_icon(self, package_bundle):
        assert package_bundle.image_path("landmark-icon") is not None
