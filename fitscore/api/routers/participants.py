"""Participant registration and lookup endpoints."""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from ...core.database import get_session
from ...services.participants import (
    participant_progress,
    register_participant,
    require_participant,
    results_for,
)
from ...services.serializers import (
    participant_to_dict,
    progress_to_dict,
    station_result_to_dict,
)

router = APIRouter(tags=["participants"])


def _text(body: Dict[str, Any], name: str) -> Optional[str]:
    raw = body.get(name)
    if raw is None:
        return None
    if not isinstance(raw, str):
        raise HTTPException(400, f"{name} must be a string")
    return raw


def _parse_date_of_birth(raw: Any) -> Optional[date]:
    if raw in (None, ""):
        return None
    try:
        return date.fromisoformat(str(raw))
    except ValueError as exc:
        raise HTTPException(400, "date_of_birth must be an ISO date (YYYY-MM-DD)") from exc


@router.post("/participants", status_code=status.HTTP_201_CREATED)
def create_participant(body: Dict[str, Any], session: Session = Depends(get_session)):
    """Register a participant and allocate their participant code."""

    name = (_text(body, "name") or "").strip()
    if not name:
        raise HTTPException(400, "Name is required")
    if len(name) > 120:
        raise HTTPException(400, "Name must be 120 characters or less")

    participant = register_participant(
        session,
        name=name,
        gender=_text(body, "gender"),
        date_of_birth=_parse_date_of_birth(_text(body, "date_of_birth")),
        organisation=_text(body, "organisation") or _text(body, "organization"),
        job_title=_text(body, "job_title"),
        participant_code=_text(body, "participant_code"),
    )
    return participant_to_dict(participant)


@router.get("/participants/{participant_code}")
def get_participant(participant_code: str, session: Session = Depends(get_session)):
    """Get participant data by code."""

    return participant_to_dict(require_participant(session, participant_code))


@router.get("/participants/{participant_code}/results")
def get_participant_results(participant_code: str, session: Session = Depends(get_session)):
    """Get a participant's station results and overall progress."""

    participant = require_participant(session, participant_code)
    results = results_for(session, participant.id)
    return {
        "participantCode": participant.participant_code,
        "results": [station_result_to_dict(result) for result in results],
        "progress": progress_to_dict(participant_progress(results)),
    }


__all__ = ["router"]
