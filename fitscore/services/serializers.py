"""Serialise models and engine values to API-friendly dicts."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from ..core.time import isoformat
from ..models import Participant, ScoringThreshold, StationResult
from ..scoring.aggregate import StationAggregate
from ..scoring.ranking import LeaderboardEntry, LeaderboardPage
from ..scoring.scorer import MAX_SCORE
from ..scoring.stations import STATIONS, StationInfo
from ..scoring.statistics import LeaderboardStats


def participant_to_dict(participant: Participant) -> Dict[str, Any]:
    return {
        "id": participant.id,
        "participant_code": participant.participant_code,
        "name": participant.name,
        "gender": participant.gender,
        "date_of_birth": (
            participant.date_of_birth.isoformat() if participant.date_of_birth else None
        ),
        "organisation": participant.organisation,
        "job_title": participant.job_title,
        "created_at": isoformat(participant.created_at),
    }


def station_result_to_dict(result: StationResult) -> Dict[str, Any]:
    return {
        "id": result.id,
        "participant_id": result.participant_id,
        "station_type": result.station_type,
        "measurements": json.loads(result.measurements_json or "{}"),
        "score": result.score,
        "max_score": MAX_SCORE,
        "recorded_by": result.recorded_by,
        "created_at": isoformat(result.created_at),
    }


def station_to_dict(info: StationInfo) -> Dict[str, Any]:
    return {
        "station_type": info.station_type.value,
        "name": info.name,
        "description": info.description,
        "sort_order": info.sort_order,
        "metrics": list(info.metrics),
        "max_score": MAX_SCORE,
    }


def stations_catalogue() -> List[Dict[str, Any]]:
    return [station_to_dict(info) for info in STATIONS]


def progress_to_dict(aggregate: StationAggregate) -> Dict[str, Any]:
    return {
        "completedStations": aggregate.completed_stations,
        "totalStations": len(STATIONS),
        "remainingStations": [station.value for station in aggregate.remaining_stations],
        "unscoredStations": [station.value for station in aggregate.unscored_stations],
        "totalScore": aggregate.total_score,
        "maxPossibleScore": aggregate.max_possible_score,
        "grade": aggregate.grade.value if aggregate.grade else None,
    }


def entry_to_dict(entry: LeaderboardEntry) -> Dict[str, Any]:
    return {
        "id": entry.id,
        "participant_code": entry.participant_code,
        "name": entry.name,
        "organisation": entry.organisation,
        "gender": entry.gender,
        "balance": entry.balance,
        "breath": entry.breath,
        "grip": entry.grip,
        "health": entry.health,
        "total_score": entry.total_score,
        "completed_stations": entry.completed_stations,
        "grade": entry.grade.value if entry.grade else None,
        "latest_completion": isoformat(entry.latest_completion),
        "rank": entry.rank,
    }


def stats_to_dict(stats: LeaderboardStats) -> Dict[str, Any]:
    return {
        "totalParticipants": stats.total_participants,
        "avgScore": stats.avg_score,
        "aboveAverage": stats.above_average_count,
        "topOrganization": stats.top_organization,
    }


def page_to_dict(page: LeaderboardPage, stats: LeaderboardStats) -> Dict[str, Any]:
    return {
        "results": [entry_to_dict(entry) for entry in page.results],
        "pagination": {
            "total": page.total,
            "limit": page.limit,
            "offset": page.offset,
            "hasMore": page.has_more,
        },
        "filters": {
            "sort": page.query.sort,
            "order": page.query.order,
            "name_filter": page.query.name_filter,
            "org_filter": page.query.org_filter,
        },
        "stats": stats_to_dict(stats),
    }


def threshold_to_dict(threshold: ScoringThreshold) -> Dict[str, Any]:
    return {
        "id": threshold.id,
        "station_type": threshold.station_type,
        "metric_name": threshold.metric_name,
        "gender": threshold.gender,
        "age_group": threshold.age_group,
        "min_average_value": threshold.min_average_value,
        "max_average_value": threshold.max_average_value,
        "is_active": threshold.is_active,
        "created_at": isoformat(threshold.created_at),
        "updated_at": isoformat(threshold.updated_at),
    }


__all__ = [
    "entry_to_dict",
    "page_to_dict",
    "participant_to_dict",
    "progress_to_dict",
    "station_result_to_dict",
    "station_to_dict",
    "stations_catalogue",
    "stats_to_dict",
    "threshold_to_dict",
]
