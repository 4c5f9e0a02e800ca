"""API routers."""

from landmarks.api.routers.landmarks import router as landmarks_router

__all__ = ["landmarks_router"]
