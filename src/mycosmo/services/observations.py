"""Storage and form-layer services for personal observations."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Protocol

import structlog
from sqlmodel import Session, select

from mycosmo.db import ObservationImageRecord, ObservationRecord, get_engine
from mycosmo.exceptions import ObservationValidationError
from mycosmo.images import DEFAULT_JPEG_QUALITY, encode_images
from mycosmo.models import (
    CelestialBody,
    ImportanceLevel,
    Observation,
    ObservationCategory,
    ObservationDraft,
    ObservationFilter,
)
from mycosmo.settings import Settings

logger = structlog.get_logger(__name__)


class ObservationStore(Protocol):
    """Repository contract for observation persistence."""

    def add(self, observation: Observation) -> Observation:
        ...

    def list(self, criteria: ObservationFilter | None = None) -> list[Observation]:
        ...

    def get(self, observation_id: str) -> Observation | None:
        ...

    def delete(self, observation: Observation) -> None:
        ...

    def delete_many(self, observations: Iterable[Observation]) -> int:
        ...


def apply_filter(
    observations: Iterable[Observation], criteria: ObservationFilter | None
) -> list[Observation]:
    if criteria is None or criteria.is_empty:
        return list(observations)
    return [observation for observation in observations if criteria.matches(observation)]


def delete_at(
    store: ObservationStore, indices: Iterable[int], observations: Sequence[Observation]
) -> int:
    """Delete the entries of ``observations`` at ``indices`` (list-row deletion)."""
    targets = [observations[index] for index in sorted(set(indices))]
    return store.delete_many(targets)


class InMemoryObservationStore:
    """List-backed store used for tests and previews."""

    def __init__(self, observations: Iterable[Observation] = ()) -> None:
        self._items: dict[str, Observation] = {}
        for observation in observations:
            self.add(observation)

    def add(self, observation: Observation) -> Observation:
        self._items[observation.id] = observation.model_copy(deep=True)
        return observation

    def list(self, criteria: ObservationFilter | None = None) -> list[Observation]:
        ordered = sorted(self._items.values(), key=lambda item: item.timestamp, reverse=True)
        return apply_filter((item.model_copy(deep=True) for item in ordered), criteria)

    def get(self, observation_id: str) -> Observation | None:
        item = self._items.get(observation_id)
        return item.model_copy(deep=True) if item else None

    def delete(self, observation: Observation) -> None:
        self._items.pop(observation.id, None)

    def delete_many(self, observations: Iterable[Observation]) -> int:
        removed = 0
        for observation in observations:
            if self._items.pop(observation.id, None) is not None:
                removed += 1
        return removed


class SQLObservationStore:
    """SQLite-backed observation store."""

    def __init__(self, engine) -> None:
        self._engine = engine

    @classmethod
    def from_settings(cls, settings: Settings) -> "SQLObservationStore":
        settings.ensure_directories()
        return cls(get_engine(str(settings.db_path)))

    def add(self, observation: Observation) -> Observation:
        record = ObservationRecord(
            id=observation.id,
            title=observation.title,
            description=observation.description,
            celestial_body=observation.celestial_body.value,
            custom_body_name=observation.custom_body_name,
            category=observation.category.value,
            importance=observation.importance.value,
            timestamp=observation.timestamp,
            primary_image=observation.primary_image,
        )
        with Session(self._engine) as session:
            session.add(record)
            for position, data in enumerate(observation.additional_images):
                session.add(
                    ObservationImageRecord(observation_id=observation.id, position=position, data=data)
                )
            session.commit()
        logger.info(
            "observations.added",
            id=observation.id,
            body=observation.display_name,
            images=observation.image_count,
        )
        return observation

    def list(self, criteria: ObservationFilter | None = None) -> list[Observation]:
        with Session(self._engine) as session:
            statement = select(ObservationRecord).order_by(ObservationRecord.timestamp.desc())
            records = session.exec(statement).all()
            images = self._images_by_observation(session, [record.id for record in records])
            observations = [
                self._record_to_observation(record, images.get(record.id, [])) for record in records
            ]
        return apply_filter(observations, criteria)

    def get(self, observation_id: str) -> Observation | None:
        with Session(self._engine) as session:
            record = session.get(ObservationRecord, observation_id)
            if record is None:
                return None
            images = self._images_by_observation(session, [record.id])
            return self._record_to_observation(record, images.get(record.id, []))

    def delete(self, observation: Observation) -> None:
        self.delete_many([observation])

    def delete_many(self, observations: Iterable[Observation]) -> int:
        ids = list(dict.fromkeys(observation.id for observation in observations))
        if not ids:
            return 0
        removed = 0
        with Session(self._engine) as session:
            image_statement = select(ObservationImageRecord).where(
                ObservationImageRecord.observation_id.in_(ids)
            )
            for image in session.exec(image_statement).all():
                session.delete(image)
            for observation_id in ids:
                record = session.get(ObservationRecord, observation_id)
                if record is not None:
                    session.delete(record)
                    removed += 1
            session.commit()
        logger.info("observations.deleted", count=removed)
        return removed

    def _images_by_observation(self, session: Session, ids: list[str]) -> dict[str, list[bytes]]:
        if not ids:
            return {}
        statement = (
            select(ObservationImageRecord)
            .where(ObservationImageRecord.observation_id.in_(ids))
            .order_by(ObservationImageRecord.position)
        )
        grouped: dict[str, list[bytes]] = {}
        for image in session.exec(statement).all():
            grouped.setdefault(image.observation_id, []).append(image.data)
        return grouped

    def _record_to_observation(self, record: ObservationRecord, images: list[bytes]) -> Observation:
        return Observation(
            id=record.id,
            title=record.title,
            description=record.description,
            celestial_body=CelestialBody(record.celestial_body),
            custom_body_name=record.custom_body_name,
            category=ObservationCategory(record.category),
            importance=ImportanceLevel(record.importance),
            timestamp=record.timestamp,
            primary_image=record.primary_image,
            additional_images=images,
        )


class ObservationService:
    """Form-layer entry point: validates drafts before anything reaches the store."""

    def __init__(self, store: ObservationStore, *, jpeg_quality: int = DEFAULT_JPEG_QUALITY) -> None:
        self._store = store
        self._jpeg_quality = jpeg_quality

    @property
    def store(self) -> ObservationStore:
        return self._store

    def create(self, draft: ObservationDraft, images: Iterable[bytes] = ()) -> Observation:
        errors = draft.validation_errors()
        if errors:
            logger.info("observations.rejected", fields=sorted(errors))
            raise ObservationValidationError(errors)
        primary, additional = encode_images(images, quality=self._jpeg_quality)
        is_other = draft.celestial_body is CelestialBody.OTHER
        observation = Observation(
            title=draft.title.strip(),
            description=draft.description.strip(),
            celestial_body=draft.celestial_body,
            custom_body_name=draft.custom_body_name.strip() if is_other else None,
            category=draft.category,
            importance=draft.importance,
            timestamp=draft.timestamp or datetime.now(),
            primary_image=primary,
            additional_images=additional,
        )
        return self._store.add(observation)

    def list(self, criteria: ObservationFilter | None = None) -> list[Observation]:
        return self._store.list(criteria)

    def delete(self, observation: Observation) -> None:
        self._store.delete(observation)

    def delete_at(self, indices: Iterable[int], observations: Sequence[Observation]) -> int:
        return delete_at(self._store, indices, observations)
