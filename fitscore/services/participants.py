"""Participant registration and lookup helpers."""

from __future__ import annotations

import logging
import secrets
from datetime import date
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ..core.errors import DuplicateParticipant, ParticipantNotFound
from ..core.time import today
from ..models import Participant, StationResult
from ..scoring.aggregate import StationAggregate, aggregate_scores
from ..scoring.demographics import Demographics, normalize_gender

logger = logging.getLogger(__name__)

_CODE_ATTEMPTS = 5


def generate_participant_code() -> str:
    return "P" + secrets.token_hex(3).upper()


def normalize_code(participant_code: str) -> str:
    return (participant_code or "").strip().upper()


def register_participant(
    session: Session,
    *,
    name: str,
    gender: Optional[str] = None,
    date_of_birth: Optional[date] = None,
    organisation: Optional[str] = None,
    job_title: Optional[str] = None,
    participant_code: Optional[str] = None,
) -> Participant:
    """Create a participant, generating a unique code unless one is supplied."""

    requested = normalize_code(participant_code) if participant_code else None
    if requested and get_participant(session, requested):
        raise DuplicateParticipant(requested)

    for _ in range(_CODE_ATTEMPTS):
        code = requested or generate_participant_code()
        participant = Participant(
            participant_code=code,
            name=name.strip(),
            gender=normalize_gender(gender),
            date_of_birth=date_of_birth,
            organisation=(organisation or "").strip() or None,
            job_title=(job_title or "").strip() or None,
        )
        session.add(participant)
        try:
            session.commit()
        except IntegrityError as exc:
            session.rollback()
            if requested:
                raise DuplicateParticipant(requested) from exc
            continue
        session.refresh(participant)
        logger.info("Registered participant %s", participant.participant_code)
        return participant

    raise RuntimeError("Could not allocate a unique participant code")


def get_participant(session: Session, participant_code: str) -> Optional[Participant]:
    return session.exec(
        select(Participant).where(
            Participant.participant_code == normalize_code(participant_code)
        )
    ).first()


def require_participant(session: Session, participant_code: str) -> Participant:
    participant = get_participant(session, participant_code)
    if not participant:
        raise ParticipantNotFound(participant_code)
    return participant


def demographics_for(participant: Participant, on: Optional[date] = None) -> Demographics:
    return Demographics.from_profile(
        participant.gender, participant.date_of_birth, on or today()
    )


def results_for(session: Session, participant_id: int) -> List[StationResult]:
    return list(
        session.exec(
            select(StationResult)
            .where(StationResult.participant_id == participant_id)
            .order_by(StationResult.created_at.desc())
        ).all()
    )


def participant_progress(results: List[StationResult]) -> StationAggregate:
    return aggregate_scores(
        (result.station_type, result.score, result.created_at) for result in results
    )


__all__ = [
    "demographics_for",
    "generate_participant_code",
    "get_participant",
    "normalize_code",
    "participant_progress",
    "register_participant",
    "require_participant",
    "results_for",
]
