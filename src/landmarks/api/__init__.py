"""HTTP API for the landmark catalogue and maps."""
