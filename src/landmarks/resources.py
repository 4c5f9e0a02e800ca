"""Bundled resource lookup for the data file, GeoJSON shapes and images.

Resources are addressed by name and extension, the way an application
bundle is queried. Images live under ``images/``.
"""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from landmarks.errors import ResourceLoadError

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".svg")


class ResourceBundle:
    """Read-only view of a directory of bundled resources."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def __repr__(self) -> str:
        return f"ResourceBundle({str(self.root)!r})"

    def url_for(self, name: str, extension: str) -> Path | None:
        """Return the path of ``<name>.<extension>``, or None if absent."""
        if not name or "/" in name or "\\" in name or name.startswith("."):
            return None
        path = self.root / f"{name}.{extension.lstrip('.')}"
        return path if path.is_file() else None

    def read_bytes(self, name: str, extension: str) -> bytes:
        """Read a bundled file.

        Raises:
            ResourceLoadError: If the file does not exist or cannot be read.
        """
        filename = f"{name}.{extension.lstrip('.')}"
        path = self.url_for(name, extension)
        if path is None:
            raise ResourceLoadError(filename, "resource not found in bundle")
        try:
            data = path.read_bytes()
        except OSError as e:
            raise ResourceLoadError(filename, str(e)) from e
        logger.debug(f"Read {len(data)} bytes from {path}")
        return data

    def image_path(self, name: str) -> Path | None:
        """Find a bundled image by name, trying the known extensions."""
        if not name or "/" in name or "\\" in name or name.startswith("."):
            return None
        images = self.root / "images"
        for ext in IMAGE_EXTENSIONS:
            candidate = images / f"{name}{ext}"
            if candidate.is_file():
                return candidate
        return None
