"""Landmarks router — list, detail, photo and map endpoints.

The map endpoint builds a fresh map surface per request, waits for the
overlay to attach and returns the style document plus the fitted camera.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import FileResponse
from loguru import logger
from pydantic import BaseModel

from landmarks.detail import LandmarkDetail
from landmarks.errors import ConfigurationError, ResourceLoadError
from landmarks.store import LandmarkRecord

router = APIRouter(prefix="/api/landmarks", tags=["landmarks"])


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------

class LandmarkRow(BaseModel):
    """One row of the landmark list."""
    id: int
    name: str
    park: str
    state: str
    image_url: str | None


class LandmarkDetailResponse(BaseModel):
    """Everything the detail view shows."""
    id: int
    title: str
    name: str
    park: str
    state: str
    city: str
    category: str
    coordinates: dict
    shape_name: str
    image_url: str | None
    map_url: str


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _store(request: Request):
    try:
        return request.app.state.store
    except AttributeError:
        raise HTTPException(status_code=503, detail="Landmark store not initialized")


def _record(request: Request, landmark_id: int) -> LandmarkRecord:
    try:
        return _store(request).get(landmark_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Landmark not found: {landmark_id}")
    except ResourceLoadError as e:
        raise HTTPException(status_code=500, detail=str(e))


def _image_url(landmark_id: int) -> str:
    return f"{router.prefix}/{landmark_id}/image"


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("", response_model=list[LandmarkRow])
def list_landmarks(request: Request):
    """List every landmark, one row each."""
    try:
        records = _store(request).load_all()
    except ResourceLoadError as e:
        raise HTTPException(status_code=500, detail=str(e))
    bundle = request.app.state.bundle
    return [
        LandmarkRow(
            id=r.id, name=r.name, park=r.park, state=r.state,
            image_url=_image_url(r.id) if bundle.image_path(r.image_name) is not None else None,
        )
        for r in records
    ]


@router.get("/{landmark_id}", response_model=LandmarkDetailResponse)
def get_landmark(landmark_id: int, request: Request):
    """Detail of one landmark."""
    detail = LandmarkDetail(_record(request, landmark_id), request.app.state.bundle)
    data = detail.to_dict()
    has_image = data.pop("has_image")
    return LandmarkDetailResponse(
        **data,
        image_url=_image_url(landmark_id) if has_image else None,
        map_url=f"{router.prefix}/{landmark_id}/map",
    )


@router.get("/{landmark_id}/image")
def get_landmark_image(landmark_id: int, request: Request):
    """Serve the landmark's bundled photo."""
    detail = LandmarkDetail(_record(request, landmark_id), request.app.state.bundle)
    path = detail.image_path
    if path is None:
        raise HTTPException(status_code=404, detail=f"No image for landmark {landmark_id}")
    return FileResponse(path)


@router.get("/{landmark_id}/map")
def get_landmark_map(landmark_id: int, request: Request):
    """Map style with the park envelope and pin, plus the fitted camera.

    Runs synchronously in the request's worker thread, which owns the map
    surface for the duration of the call.
    """
    state = request.app.state
    detail = LandmarkDetail(_record(request, landmark_id), state.bundle)
    try:
        return detail.render_map(
            state.settings,
            state.dispatcher,
            style_fetcher=getattr(state, "style_fetcher", None),
        )
    except ConfigurationError as e:
        logger.error(f"Map unavailable: {e}")
        raise HTTPException(status_code=503, detail=str(e))
    except ResourceLoadError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except TimeoutError as e:
        raise HTTPException(status_code=504, detail=str(e))
