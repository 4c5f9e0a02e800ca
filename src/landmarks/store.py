"""Landmark store — the read-only catalogue loaded from landmarkData.json.

Records are validated with Pydantic on load. A missing or malformed data
file is reported as ResourceLoadError; nothing is ever written back.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from loguru import logger

from landmarks.errors import ResourceLoadError
from landmarks.geometry import Coordinate
from landmarks.resources import ResourceBundle

DATA_FILE = "landmarkData"


class Coordinates(BaseModel):
    """Latitude/longitude pair as stored in the data file."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)


class LandmarkRecord(BaseModel):
    """A single landmark. Immutable after load."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    name: str
    park: str
    state: str
    city: str = ""
    category: str = ""
    coordinates: Coordinates
    image_name: str = Field(alias="imageName")
    shape_name: str = Field(alias="shapeName")
    is_featured: bool = Field(default=False, alias="isFeatured")

    @property
    def location_coordinate(self) -> Coordinate:
        return Coordinate(self.coordinates.latitude, self.coordinates.longitude)


_RECORDS = TypeAdapter(list[LandmarkRecord])


class LandmarkStore:
    """Registry of landmark records backed by a bundled JSON file."""

    def __init__(self, bundle: ResourceBundle, data_file: str = DATA_FILE) -> None:
        self._bundle = bundle
        self._data_file = data_file
        self._records: list[LandmarkRecord] | None = None
        self._by_id: dict[int, LandmarkRecord] = {}

    def load_all(self) -> list[LandmarkRecord]:
        """Return every landmark in file order.

        The file is read on the first call; later calls return the same
        records.

        Raises:
            ResourceLoadError: If the data file is missing or malformed.
        """
        if self._records is None:
            self._records = self._load()
            self._by_id = {r.id: r for r in self._records}
        return list(self._records)

    def get(self, landmark_id: int) -> LandmarkRecord:
        """Look up a landmark by id.

        Raises:
            KeyError: If no landmark has this id.
        """
        self.load_all()
        record = self._by_id.get(landmark_id)
        if record is None:
            raise KeyError(f"Landmark not found: {landmark_id}")
        return record

    def __len__(self) -> int:
        return len(self.load_all())

    def _load(self) -> list[LandmarkRecord]:
        filename = f"{self._data_file}.json"
        raw = self._bundle.read_bytes(self._data_file, "json")
        try:
            records = _RECORDS.validate_json(raw)
        except ValidationError as e:
            raise ResourceLoadError(filename, f"invalid landmark data: {e.error_count()} error(s)") from e

        ids = [r.id for r in records]
        if len(set(ids)) != len(ids):
            raise ResourceLoadError(filename, "duplicate landmark ids")

        logger.info(f"Landmark store: loaded {len(records)} landmarks from {filename}")
        return records
