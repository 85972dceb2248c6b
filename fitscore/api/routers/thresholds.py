"""Scoring threshold administration endpoints."""

from __future__ import annotations

import math
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from ...core.database import get_session
from ...scoring.demographics import AGE_GROUPS, GENDERS
from ...scoring.stations import StationType
from ...services.serializers import threshold_to_dict
from ...services.thresholds import (
    THRESHOLD_FIELDS,
    create_threshold,
    delete_threshold,
    list_thresholds,
    update_threshold,
)

router = APIRouter(prefix="/admin/scoring-thresholds", tags=["thresholds"])

_KEY_FIELDS = ("station_type", "metric_name", "gender", "age_group")
_VALUE_FIELDS = ("min_average_value", "max_average_value")


def _validate_threshold(body: Dict[str, Any], *, partial: bool = False) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    for name in _KEY_FIELDS:
        raw = body.get(name)
        if raw in (None, ""):
            if not partial:
                raise HTTPException(400, f"Missing required field: {name}")
            continue
        data[name] = str(raw).strip().lower()

    if "station_type" in data:
        try:
            data["station_type"] = StationType(data["station_type"]).value
        except ValueError as exc:
            raise HTTPException(400, "Invalid station_type") from exc
    if "gender" in data and data["gender"] not in GENDERS:
        raise HTTPException(400, f"gender must be one of {', '.join(GENDERS)}")
    if "age_group" in data and data["age_group"] not in AGE_GROUPS:
        raise HTTPException(400, f"age_group must be one of {', '.join(AGE_GROUPS)}")

    for name in _VALUE_FIELDS:
        raw = body.get(name)
        if raw is None:
            if not partial:
                raise HTTPException(400, f"Missing required field: {name}")
            continue
        if isinstance(raw, bool):
            raise HTTPException(400, f"{name} must be a number")
        try:
            value = float(raw)
        except (TypeError, ValueError) as exc:
            raise HTTPException(400, f"{name} must be a number") from exc
        if not math.isfinite(value):
            raise HTTPException(400, f"{name} must be finite")
        data[name] = value

    if "is_active" in body:
        if not isinstance(body["is_active"], bool):
            raise HTTPException(400, "is_active must be true or false")
        data["is_active"] = body["is_active"]
    return data


@router.get("")
def get_thresholds(
    station_type: Optional[str] = None,
    gender: Optional[str] = None,
    age_group: Optional[str] = None,
    session: Session = Depends(get_session),
):
    """List scoring thresholds, optionally filtered."""

    rows = list_thresholds(session, station_type, gender, age_group)
    return [threshold_to_dict(row) for row in rows]


@router.post("", status_code=status.HTTP_201_CREATED)
def post_threshold(body: Dict[str, Any], session: Session = Depends(get_session)):
    """Create a scoring threshold for a station/metric/gender/age group."""

    threshold = create_threshold(session, _validate_threshold(body))
    return threshold_to_dict(threshold)


@router.put("/{threshold_id}")
def put_threshold(
    threshold_id: int, body: Dict[str, Any], session: Session = Depends(get_session)
):
    """Update fields of an existing threshold."""

    data = _validate_threshold(body, partial=True)
    if not any(name in data for name in THRESHOLD_FIELDS):
        raise HTTPException(400, "No threshold fields supplied")
    return threshold_to_dict(update_threshold(session, threshold_id, data))


@router.delete("/{threshold_id}")
def remove_threshold(threshold_id: int, session: Session = Depends(get_session)):
    """Delete a scoring threshold."""

    deleted = delete_threshold(session, threshold_id)
    return {"ok": True, "deletedThreshold": deleted}


__all__ = ["router"]
