"""Database model for recorded station measurements."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow


class StationResult(SQLModel, table=True):
    """One measurement per participant and station, scored at submission."""

    __tablename__ = "station_result"
    __table_args__ = (
        UniqueConstraint(
            "participant_id", "station_type", name="uq_station_result_participant_station"
        ),
        {"sqlite_autoincrement": True},
    )

    id: Optional[int] = ORMField(default=None, primary_key=True)
    participant_id: int = ORMField(foreign_key="participant.id", index=True)
    station_type: str = ORMField(index=True)
    measurements_json: str
    # NULL means the measurement had nothing scorable.
    score: Optional[int] = None
    recorded_by: Optional[str] = None
    created_at: datetime = ORMField(default_factory=utcnow)


__all__ = ["StationResult"]
