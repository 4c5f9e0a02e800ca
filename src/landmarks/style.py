"""Map style model — sources, layers and images of a rendered map.

A MapStyle wraps a MapLibre style document (version 8). The base style
fetched from the tile provider is kept as-is; sources, layers and images
added at runtime are appended and serialised back by ``to_dict()``.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger


@dataclass(frozen=True)
class Color:
    """An sRGB colour with alpha.

    Attributes:
        rgb: 24-bit integer, 0xRRGGBB.
        alpha: Opacity (0.0 to 1.0).
    """

    rgb: int
    alpha: float = 1.0

    def __post_init__(self) -> None:
        if not 0 <= self.rgb <= 0xFFFFFF:
            raise ValueError(f"rgb must be 0x000000..0xFFFFFF, got {self.rgb:#x}")
        if not 0.0 <= self.alpha <= 1.0:
            raise ValueError(f"alpha must be 0.0..1.0, got {self.alpha}")

    @classmethod
    def from_rgb(cls, rgb: int, a: float = 1.0) -> Color:
        return cls(rgb=rgb, alpha=a)

    @property
    def red(self) -> int:
        return (self.rgb >> 16) & 0xFF

    @property
    def green(self) -> int:
        return (self.rgb >> 8) & 0xFF

    @property
    def blue(self) -> int:
        return self.rgb & 0xFF

    def components(self) -> tuple[float, float, float, float]:
        """Normalised (r, g, b, a) floats in 0.0..1.0."""
        return (self.red / 255.0, self.green / 255.0, self.blue / 255.0, self.alpha)

    def to_css(self) -> str:
        return f"rgba({self.red}, {self.green}, {self.blue}, {self.alpha:g})"


@dataclass
class ShapeSource:
    """A named GeoJSON source feeding one or more layers."""

    identifier: str
    geojson: dict

    def to_dict(self) -> dict:
        return {"type": "geojson", "data": self.geojson}


@dataclass
class StyleLayer:
    """A named rendering rule bound to a source."""

    identifier: str
    source: str

    kind = "background"

    def paint(self) -> dict:
        return {}

    def layout(self) -> dict:
        return {}

    def to_dict(self) -> dict:
        d = {"id": self.identifier, "type": self.kind, "source": self.source}
        layout = self.layout()
        if layout:
            d["layout"] = layout
        paint = self.paint()
        if paint:
            d["paint"] = paint
        return d


@dataclass
class FillStyleLayer(StyleLayer):
    """Filled polygon with an optional outline colour."""

    fill_color: Color | None = None
    fill_outline_color: Color | None = None

    kind = "fill"

    def paint(self) -> dict:
        paint = {}
        if self.fill_color is not None:
            paint["fill-color"] = self.fill_color.to_css()
        if self.fill_outline_color is not None:
            paint["fill-outline-color"] = self.fill_outline_color.to_css()
        return paint


@dataclass
class SymbolStyleLayer(StyleLayer):
    """Icon (and optional label) drawn at point features."""

    icon_image_name: str | None = None
    icon_allow_overlap: bool = True

    kind = "symbol"

    def layout(self) -> dict:
        layout = {}
        if self.icon_image_name is not None:
            layout["icon-image"] = self.icon_image_name
            layout["icon-allow-overlap"] = self.icon_allow_overlap
        return layout


@dataclass
class MapStyle:
    """Sources, layers and images rendered by a map surface.

    Identifiers are unique per kind: adding a second source or layer with
    an existing identifier raises ValueError rather than shadowing it.
    """

    base: dict = field(default_factory=lambda: {"version": 8, "sources": {}, "layers": []})
    _sources: dict[str, ShapeSource] = field(default_factory=dict, init=False, repr=False)
    _layers: list[StyleLayer] = field(default_factory=list, init=False, repr=False)
    _images: dict[str, str] = field(default_factory=dict, init=False, repr=False)

    @property
    def name(self) -> str:
        return self.base.get("name", "")

    def _base_source_ids(self) -> set[str]:
        return set((self.base.get("sources") or {}).keys())

    def _base_layer_ids(self) -> set[str]:
        return {layer.get("id") for layer in (self.base.get("layers") or []) if isinstance(layer, dict)}

    def add_source(self, source: ShapeSource) -> None:
        if source.identifier in self._sources or source.identifier in self._base_source_ids():
            raise ValueError(f"Source already exists: {source.identifier}")
        self._sources[source.identifier] = source
        logger.debug(f"Style: added source {source.identifier}")

    def add_layer(self, layer: StyleLayer) -> None:
        if self.layer(layer.identifier) is not None or layer.identifier in self._base_layer_ids():
            raise ValueError(f"Layer already exists: {layer.identifier}")
        if layer.source not in self._sources and layer.source not in self._base_source_ids():
            raise ValueError(f"Layer {layer.identifier} references unknown source: {layer.source}")
        self._layers.append(layer)
        logger.debug(f"Style: added {layer.kind} layer {layer.identifier}")

    def set_image(self, name: str, path: str | Path) -> None:
        """Register an image under ``name`` for use by symbol layers."""
        self._images[name] = str(path)

    def source(self, identifier: str) -> ShapeSource | None:
        return self._sources.get(identifier)

    def layer(self, identifier: str) -> StyleLayer | None:
        for layer in self._layers:
            if layer.identifier == identifier:
                return layer
        return None

    def image(self, name: str) -> str | None:
        return self._images.get(name)

    @property
    def images(self) -> dict[str, str]:
        """Registered symbol images; not part of the style document."""
        return dict(self._images)

    @property
    def sources(self) -> list[ShapeSource]:
        """Runtime-added sources in insertion order."""
        return list(self._sources.values())

    @property
    def layers(self) -> list[StyleLayer]:
        """Runtime-added layers in draw order."""
        return list(self._layers)

    def to_dict(self) -> dict:
        """Serialise to a MapLibre style document (base + runtime additions)."""
        doc = copy.deepcopy(self.base)
        sources = doc.setdefault("sources", {})
        for source in self._sources.values():
            sources[source.identifier] = source.to_dict()
        layers = doc.setdefault("layers", [])
        layers.extend(layer.to_dict() for layer in self._layers)
        return doc
