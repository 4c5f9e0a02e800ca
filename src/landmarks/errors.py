"""Error types raised by the landmarks package.

Missing configuration and missing/malformed bundled resources are packaging
bugs, but they are raised as typed errors so the hosting application can
render a fallback instead of terminating.
"""

from __future__ import annotations


class LandmarksError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(LandmarksError):
    """A required configuration value is absent or invalid."""


class ResourceLoadError(LandmarksError):
    """A bundled or remote resource could not be found or decoded.

    Attributes:
        resource: Name of the resource (file name or URL).
        reason: Human-readable description of what went wrong.
    """

    def __init__(self, resource: str, reason: str) -> None:
        super().__init__(f"Failed to load {resource}: {reason}")
        self.resource = resource
        self.reason = reason
