"""YAML-backed galleries of saved scenes, avatars and products."""

import logging
from pathlib import Path
from typing import Generic, Optional, TypeVar

import yaml
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .config import config
from .errors import RecordNotFoundError, ValidationError
from .models import PersonaProfile, ProductSpec, SceneSpec

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


class GalleryRepository(Generic[RecordT]):
    """A named collection of records stored in one YAML file.

    Records need an ``id`` and a ``display_name``; listings are sorted by
    display name, case-insensitively.
    """

    def __init__(self, path: Path, model: type[RecordT]) -> None:
        self._path = path
        self._model = model

    @property
    def path(self) -> Path:
        return self._path

    @property
    def model(self) -> type[RecordT]:
        return self._model

    def _load(self) -> list[RecordT]:
        if not self._path.exists():
            return []
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or []
        except yaml.YAMLError as e:
            raise ValidationError(f"Gallery file {self._path} is not valid YAML: {e}")
        if not isinstance(data, list):
            raise ValidationError(f"Gallery file {self._path} must contain a list")
        try:
            return [self._model.model_validate(item) for item in data]
        except PydanticValidationError as e:
            raise ValidationError(f"Gallery file {self._path} has an invalid record: {e}")

    def _save(self, records: list[RecordT]) -> None:
        records = sorted(records, key=lambda r: r.display_name.lower())
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._path, "w", encoding="utf-8") as f:
            yaml.safe_dump(
                [r.model_dump(mode="json") for r in records],
                f,
                allow_unicode=True,
                default_flow_style=False,
                sort_keys=False,
            )

    def list(self) -> list[RecordT]:
        """Return all records sorted by display name."""
        return sorted(self._load(), key=lambda r: r.display_name.lower())

    def find(self, record_id: str) -> Optional[RecordT]:
        return next((r for r in self._load() if r.id == record_id), None)

    def get(self, record_id: str) -> RecordT:
        """Return the record with ``record_id``.

        Raises:
            RecordNotFoundError: If no such record exists.
        """
        record = self.find(record_id)
        if record is None:
            raise RecordNotFoundError(f"No record with id {record_id} in {self._path.name}")
        return record

    def upsert(self, record: RecordT) -> RecordT:
        """Replace the record with the same id, or add it."""
        records = [r for r in self._load() if r.id != record.id]
        records.append(record)
        self._save(records)
        logger.debug(f"Saved {record.id} to {self._path}")
        return record

    def delete(self, record_id: str) -> bool:
        """Remove a record. Returns False if it did not exist."""
        records = self._load()
        remaining = [r for r in records if r.id != record_id]
        if len(remaining) == len(records):
            return False
        self._save(remaining)
        logger.debug(f"Deleted {record_id} from {self._path}")
        return True


GALLERY_MODELS = {
    "scenes": SceneSpec,
    "avatars": PersonaProfile,
    "products": ProductSpec,
}


def open_gallery(kind: str, gallery_dir: Optional[Path] = None) -> GalleryRepository:
    """Open the gallery named ``kind`` (scenes, avatars or products)."""
    if kind not in GALLERY_MODELS:
        raise ValidationError(
            f"Unknown gallery: {kind}. Must be one of: {', '.join(GALLERY_MODELS)}"
        )
    directory = gallery_dir or config.gallery_dir
    return GalleryRepository(directory / f"{kind}.yaml", GALLERY_MODELS[kind])
