"""Tests for the style model: colours, sources, layers, serialisation."""

import pytest

from landmarks.style import Color, FillStyleLayer, MapStyle, ShapeSource, SymbolStyleLayer


POINT = {"type": "Feature", "geometry": {"type": "Point", "coordinates": [0, 0]}, "properties": {}}


@pytest.mark.unit
class TestColor:

    def test_channels(self):
        c = Color.from_rgb(0x801A86, a=0.3)
        assert (c.red, c.green, c.blue) == (0x80, 0x1A, 0x86)
        assert c.alpha == 0.3

    def test_components(self):
        r, g, b, a = Color.from_rgb(0xFF0000).components()
        assert (r, g, b, a) == (1.0, 0.0, 0.0, 1.0)

    def test_css(self):
        assert Color.from_rgb(0x4E0250, a=0.8).to_css() == "rgba(78, 2, 80, 0.8)"

    @pytest.mark.parametrize("rgb,alpha", [(-1, 1.0), (0x1000000, 1.0), (0, 1.5), (0, -0.1)])
    def test_out_of_range(self, rgb, alpha):
        with pytest.raises(ValueError):
            Color(rgb, alpha)


@pytest.mark.unit
class TestMapStyle:

    def test_add_source_and_layer(self):
        style = MapStyle()
        style.add_source(ShapeSource("pt", POINT))
        style.add_layer(SymbolStyleLayer("pt-layer", source="pt", icon_image_name="pin"))
        assert style.source("pt").geojson == POINT
        assert style.layer("pt-layer").kind == "symbol"
        assert [layer.identifier for layer in style.layers] == ["pt-layer"]

    def test_source_and_layer_namespaces_are_separate(self):
        style = MapStyle()
        style.add_source(ShapeSource("polygon", POINT))
        style.add_layer(FillStyleLayer("polygon", source="polygon"))
        assert style.layer("polygon") is not None

    def test_duplicate_source(self):
        style = MapStyle()
        style.add_source(ShapeSource("a", POINT))
        with pytest.raises(ValueError, match="already exists"):
            style.add_source(ShapeSource("a", POINT))

    def test_duplicate_layer(self):
        style = MapStyle()
        style.add_source(ShapeSource("a", POINT))
        style.add_layer(FillStyleLayer("l", source="a"))
        with pytest.raises(ValueError, match="already exists"):
            style.add_layer(FillStyleLayer("l", source="a"))

    def test_layer_needs_known_source(self):
        with pytest.raises(ValueError, match="unknown source"):
            MapStyle().add_layer(FillStyleLayer("l", source="missing"))

    def test_base_style_ids_are_reserved(self):
        style = MapStyle(base={
            "version": 8,
            "sources": {"openmaptiles": {"type": "vector"}},
            "layers": [{"id": "water", "type": "fill", "source": "openmaptiles"}],
        })
        with pytest.raises(ValueError):
            style.add_source(ShapeSource("openmaptiles", POINT))
        with pytest.raises(ValueError):
            style.add_layer(FillStyleLayer("water", source="openmaptiles"))
        style.add_layer(FillStyleLayer("parks", source="openmaptiles"))

    def test_to_dict_appends_after_base(self):
        style = MapStyle(base={
            "version": 8,
            "name": "Outdoor",
            "sources": {},
            "layers": [{"id": "background", "type": "background"}],
        })
        style.add_source(ShapeSource("polygon", POINT))
        style.add_layer(FillStyleLayer(
            "polygon", source="polygon",
            fill_color=Color.from_rgb(0x801A86, a=0.3),
            fill_outline_color=Color.from_rgb(0x4E0250, a=0.8),
        ))
        style.set_image("landmark-symbol", "/tmp/icon.svg")

        doc = style.to_dict()
        assert doc["name"] == "Outdoor"
        assert [layer["id"] for layer in doc["layers"]] == ["background", "polygon"]
        assert doc["sources"]["polygon"] == {"type": "geojson", "data": POINT}
        assert doc["layers"][1]["paint"] == {
            "fill-color": "rgba(128, 26, 134, 0.3)",
            "fill-outline-color": "rgba(78, 2, 80, 0.8)",
        }
        assert "images" not in doc
        assert style.images == {"landmark-symbol": "/tmp/icon.svg"}

    def test_to_dict_does_not_mutate_base(self):
        base = {"version": 8, "sources": {}, "layers": []}
        style = MapStyle(base=base)
        style.add_source(ShapeSource("a", POINT))
        style.to_dict()
        assert base["sources"] == {}

    def test_symbol_layout(self):
        layer = SymbolStyleLayer("m", source="s", icon_image_name="landmark-symbol")
        assert layer.to_dict()["layout"] == {"icon-image": "landmark-symbol", "icon-allow-overlap": True}
