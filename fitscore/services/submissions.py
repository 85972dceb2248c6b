"""Station result submission and deletion.

A result and its score are written in one transaction, and only once per
participant and station. A second submission for the same pair is reported
as :class:`DuplicateResult` with the identity of the stored record; it never
replaces it. Deleting the stored result is the only way to resubmit.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ..core.errors import DuplicateResult, StationResultNotFound
from ..models import Participant, StationResult
from ..scoring.scorer import score_measurement
from ..scoring.stations import StationType, parse_measurements
from .participants import demographics_for, require_participant
from .thresholds import load_thresholds

logger = logging.getLogger(__name__)


def find_result(session: Session, participant_id: int, station: StationType) -> Optional[StationResult]:
    return session.exec(
        select(StationResult).where(
            StationResult.participant_id == participant_id,
            StationResult.station_type == station.value,
        )
    ).first()


def _duplicate(participant: Participant, station: StationType, existing: StationResult) -> DuplicateResult:
    logger.warning(
        "Duplicate %s submission for participant %s (existing result %s)",
        station.value,
        participant.participant_code,
        existing.id,
    )
    return DuplicateResult(
        participant.participant_code, station.value, existing.id, existing.created_at
    )


def submit_station_result(
    session: Session,
    participant_code: str,
    station_type: Any,
    measurements: Any,
    recorded_by: Optional[str] = None,
) -> StationResult:
    """Validate, score and persist one station measurement."""

    station = StationType.parse(station_type)
    participant = require_participant(session, participant_code)

    existing = find_result(session, participant.id, station)
    if existing:
        raise _duplicate(participant, station, existing)

    measurement = parse_measurements(station, measurements)
    score = score_measurement(
        station,
        measurement,
        demographics_for(participant),
        load_thresholds(session, station.value),
    )

    result = StationResult(
        participant_id=participant.id,
        station_type=station.value,
        measurements_json=json.dumps(asdict(measurement)),
        score=score,
        recorded_by=recorded_by,
    )
    session.add(result)
    try:
        session.commit()
    except IntegrityError as exc:
        # Lost a race with a concurrent submission for the same station.
        session.rollback()
        existing = find_result(session, participant.id, station)
        if existing is None:
            raise
        raise _duplicate(participant, station, existing) from exc
    session.refresh(result)

    logger.info(
        "Recorded %s for participant %s: score=%s by=%s",
        station.value,
        participant.participant_code,
        score,
        recorded_by,
    )
    return result


def delete_station_result(session: Session, result_id: int) -> Dict[str, Any]:
    """Remove a stored result so the station can be resubmitted."""

    result = session.get(StationResult, result_id)
    if not result:
        raise StationResultNotFound(result_id)
    participant = session.get(Participant, result.participant_id)
    deleted = {
        "id": result.id,
        "participantCode": participant.participant_code if participant else None,
        "stationType": result.station_type,
        "recordedAt": result.created_at,
    }
    session.delete(result)
    session.commit()
    logger.info(
        "Deleted %s result %s for participant %s",
        deleted["stationType"],
        result_id,
        deleted["participantCode"],
    )
    return deleted


__all__ = ["delete_station_result", "find_result", "submit_station_result"]
