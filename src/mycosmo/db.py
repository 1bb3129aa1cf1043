"""SQLite persistence layer for MyCosmo observations."""

from __future__ import annotations

from datetime import datetime
from functools import lru_cache
from pathlib import Path

from sqlalchemy.pool import StaticPool
from sqlmodel import Field, SQLModel, create_engine


class ObservationRecord(SQLModel, table=True):
    """Normalized observation row. Tags are stored by their labels."""

    id: str = Field(primary_key=True)
    title: str
    description: str
    celestial_body: str = Field(index=True)
    custom_body_name: str | None = None
    category: str = Field(index=True)
    importance: str = Field(index=True)
    timestamp: datetime = Field(default_factory=datetime.now, index=True)
    primary_image: bytes | None = None


class ObservationImageRecord(SQLModel, table=True):
    """Additional images attached to an observation, kept in selection order."""

    id: int | None = Field(default=None, primary_key=True)
    observation_id: str = Field(foreign_key="observationrecord.id", index=True)
    position: int
    data: bytes


def create_engine_for_path(db_path: Path):
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return create_engine(
        f"sqlite:///{db_path}",
        echo=False,
        connect_args={"check_same_thread": False},
    )


def create_memory_engine():
    """Engine for a private in-memory database shared across sessions."""
    return create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


def init_db(engine) -> None:
    SQLModel.metadata.create_all(engine)


@lru_cache(maxsize=4)
def get_engine(path_str: str):
    engine = create_engine_for_path(Path(path_str))
    init_db(engine)
    return engine
