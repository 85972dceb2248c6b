"""Database model for registered participants."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow


class Participant(SQLModel, table=True):
    """Event participant identified by a printed participant code."""

    __table_args__ = {"sqlite_autoincrement": True}

    id: Optional[int] = ORMField(default=None, primary_key=True)
    participant_code: str = ORMField(index=True, unique=True)
    name: str
    gender: Optional[str] = None
    date_of_birth: Optional[date] = None
    organisation: Optional[str] = ORMField(default=None, index=True)
    job_title: Optional[str] = None
    created_at: datetime = ORMField(default_factory=utcnow)


__all__ = ["Participant"]
