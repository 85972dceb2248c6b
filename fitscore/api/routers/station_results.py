"""Station measurement submission endpoints."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from ...core import isoformat
from ...core.database import get_session
from ...services.serializers import station_result_to_dict
from ...services.submissions import delete_station_result, submit_station_result

router = APIRouter(tags=["station-results"])


@router.post("/station-results", status_code=status.HTTP_201_CREATED)
def submit_result(body: Dict[str, Any], session: Session = Depends(get_session)):
    """Score and record a participant's measurements for one station."""

    participant_code = body.get("participantCode") or ""
    station_type = body.get("stationType")
    measurements = body.get("measurements")
    recorded_by = body.get("recordedBy")
    if not isinstance(participant_code, str) or (
        recorded_by is not None and not isinstance(recorded_by, str)
    ):
        raise HTTPException(400, "participantCode and recordedBy must be strings")
    participant_code = participant_code.strip()
    if not participant_code or not station_type or measurements is None:
        raise HTTPException(
            400, "Missing required fields: participantCode, stationType, measurements"
        )

    result = submit_station_result(
        session,
        participant_code,
        station_type,
        measurements,
        recorded_by=recorded_by,
    )
    return {
        "ok": True,
        "participant_code": participant_code.upper(),
        "result": station_result_to_dict(result),
    }


@router.delete("/station-results/{result_id}")
def delete_result(result_id: int, session: Session = Depends(get_session)):
    """Delete a recorded result so the station can be measured again."""

    deleted = delete_station_result(session, result_id)
    deleted["recordedAt"] = isoformat(deleted["recordedAt"])
    return {"ok": True, "deletedResult": deleted}


__all__ = ["router"]
