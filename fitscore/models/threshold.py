"""Database model for admin-managed scoring thresholds."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow


class ScoringThreshold(SQLModel, table=True):
    """Band table row: below ``min_average_value`` scores 1, above ``max_average_value`` scores 3."""

    __tablename__ = "scoring_threshold"
    __table_args__ = (
        UniqueConstraint(
            "station_type",
            "metric_name",
            "gender",
            "age_group",
            name="uq_scoring_threshold_key",
        ),
        {"sqlite_autoincrement": True},
    )

    id: Optional[int] = ORMField(default=None, primary_key=True)
    station_type: str = ORMField(index=True)
    metric_name: str
    gender: str
    age_group: str
    min_average_value: float
    max_average_value: float
    is_active: bool = True
    created_at: datetime = ORMField(default_factory=utcnow)
    updated_at: datetime = ORMField(default_factory=utcnow)


__all__ = ["ScoringThreshold"]
