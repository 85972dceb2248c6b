"""Scoring threshold persistence helpers."""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ..core.errors import DuplicateThreshold, InvalidThreshold, ThresholdNotFound
from ..core.time import utcnow
from ..models import ScoringThreshold
from ..scoring.scorer import THRESHOLD_METRICS, threshold_metric_allowed
from ..scoring.thresholds import Band, InMemoryThresholds

logger = logging.getLogger(__name__)

THRESHOLD_FIELDS = (
    "station_type",
    "metric_name",
    "gender",
    "age_group",
    "min_average_value",
    "max_average_value",
    "is_active",
)


def load_thresholds(session: Session, station_type: Optional[str] = None) -> InMemoryThresholds:
    """Read threshold rows once into an immutable lookup table for the scorer."""

    query = select(ScoringThreshold).where(ScoringThreshold.is_active == True)  # noqa: E712
    if station_type:
        query = query.where(ScoringThreshold.station_type == station_type)
    rows = session.exec(query).all()
    return InMemoryThresholds(
        (
            (row.station_type, row.metric_name, row.gender, row.age_group),
            Band(min_average=row.min_average_value, max_average=row.max_average_value),
        )
        for row in rows
    )


def list_thresholds(
    session: Session,
    station_type: Optional[str] = None,
    gender: Optional[str] = None,
    age_group: Optional[str] = None,
) -> List[ScoringThreshold]:
    query = select(ScoringThreshold).order_by(
        ScoringThreshold.station_type,
        ScoringThreshold.metric_name,
        ScoringThreshold.gender,
        ScoringThreshold.age_group,
    )
    if station_type:
        query = query.where(ScoringThreshold.station_type == station_type)
    if gender:
        query = query.where(ScoringThreshold.gender == gender)
    if age_group:
        query = query.where(ScoringThreshold.age_group == age_group)
    return list(session.exec(query).all())


def _find_by_key(session: Session, data: Dict[str, Any]) -> Optional[ScoringThreshold]:
    return session.exec(
        select(ScoringThreshold).where(
            ScoringThreshold.station_type == data["station_type"],
            ScoringThreshold.metric_name == data["metric_name"],
            ScoringThreshold.gender == data["gender"],
            ScoringThreshold.age_group == data["age_group"],
        )
    ).first()


def _duplicate(data: Dict[str, Any]) -> DuplicateThreshold:
    return DuplicateThreshold(
        data["station_type"], data["metric_name"], data["gender"], data["age_group"]
    )


def _check_row(data: Dict[str, Any]) -> None:
    """Reject rows the scorer would never consult or could not classify with."""

    station, metric = data["station_type"], data["metric_name"]
    if not threshold_metric_allowed(station, metric):
        allowed = ", ".join(
            name for names in THRESHOLD_METRICS.values() for name in names
        )
        raise InvalidThreshold(
            f"metric_name {metric!r} is not scored by thresholds for station {station!r}"
            f" (allowed: {allowed})"
        )
    low, high = data["min_average_value"], data["max_average_value"]
    for value in (low, high):
        if isinstance(value, bool) or not math.isfinite(value):
            raise InvalidThreshold("threshold values must be finite numbers")
    if low > high:
        raise InvalidThreshold("min_average_value cannot exceed max_average_value")


def _commit_or_conflict(
    session: Session, key: Dict[str, Any], threshold_id: Optional[int] = None
) -> None:
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        clash = _find_by_key(session, key)
        if clash is None or clash.id == threshold_id:
            raise
        raise _duplicate(key) from exc


def create_threshold(session: Session, data: Dict[str, Any]) -> ScoringThreshold:
    row = {name: data[name] for name in THRESHOLD_FIELDS if name in data}
    _check_row(row)
    if _find_by_key(session, row):
        raise _duplicate(row)

    threshold = ScoringThreshold(**row)
    session.add(threshold)
    _commit_or_conflict(session, row)
    session.refresh(threshold)
    logger.info(
        "Created scoring threshold %s/%s %s %s",
        threshold.station_type,
        threshold.metric_name,
        threshold.gender,
        threshold.age_group,
    )
    return threshold


def update_threshold(session: Session, threshold_id: int, data: Dict[str, Any]) -> ScoringThreshold:
    threshold = session.get(ScoringThreshold, threshold_id)
    if not threshold:
        raise ThresholdNotFound(threshold_id)

    merged = {name: data.get(name, getattr(threshold, name)) for name in THRESHOLD_FIELDS}
    _check_row(merged)
    clash = _find_by_key(session, merged)
    if clash is not None and clash.id != threshold.id:
        raise _duplicate(merged)

    for name in THRESHOLD_FIELDS:
        if name in data:
            setattr(threshold, name, data[name])
    threshold.updated_at = utcnow()
    session.add(threshold)
    _commit_or_conflict(session, merged, threshold_id)
    session.refresh(threshold)
    logger.info("Updated scoring threshold %s", threshold_id)
    return threshold


def delete_threshold(session: Session, threshold_id: int) -> Dict[str, Any]:
    """Delete a threshold and return a snapshot of the removed row."""

    threshold = session.get(ScoringThreshold, threshold_id)
    if not threshold:
        raise ThresholdNotFound(threshold_id)
    snapshot = threshold.model_dump()
    session.delete(threshold)
    session.commit()
    logger.info("Deleted scoring threshold %s", threshold_id)
    return snapshot


__all__ = [
    "THRESHOLD_FIELDS",
    "create_threshold",
    "delete_threshold",
    "list_thresholds",
    "load_thresholds",
    "update_threshold",
]
