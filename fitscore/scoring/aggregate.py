"""Per-participant score aggregation and grading."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, FrozenSet, Iterable, Optional, Tuple

from .scorer import MAX_SCORE
from .stations import STATION_ORDER, StationType

ABOVE_AVERAGE_PERCENT = 83
AVERAGE_PERCENT = 50


class Grade(str, Enum):
    ABOVE_AVERAGE = "Above Average"
    AVERAGE = "Average"
    BAD = "Bad"


def grade_for(total_score: Optional[int], completed_stations: int) -> Optional[Grade]:
    """Grade a total against the maximum possible for the completed stations.

    No completed stations means no grade, never ``Bad``.
    """

    if not completed_stations or total_score is None:
        return None
    percentage = total_score / (completed_stations * MAX_SCORE) * 100
    if percentage >= ABOVE_AVERAGE_PERCENT:
        return Grade.ABOVE_AVERAGE
    if percentage >= AVERAGE_PERCENT:
        return Grade.AVERAGE
    return Grade.BAD


@dataclass(frozen=True)
class StationAggregate:
    scores: Dict[StationType, Optional[int]] = field(default_factory=dict)
    total_score: Optional[int] = None
    completed_stations: int = 0
    grade: Optional[Grade] = None
    latest_completion: Optional[datetime] = None
    recorded: FrozenSet[StationType] = frozenset()

    def score_for(self, station: StationType) -> Optional[int]:
        return self.scores.get(station)

    @property
    def max_possible_score(self) -> int:
        return self.completed_stations * MAX_SCORE

    @property
    def remaining_stations(self) -> Tuple[StationType, ...]:
        """Stations with no stored result; a stored result blocks resubmission."""
        return tuple(s for s in STATION_ORDER if s not in self.recorded)

    @property
    def unscored_stations(self) -> Tuple[StationType, ...]:
        return tuple(
            s for s in STATION_ORDER if s in self.recorded and self.scores.get(s) is None
        )


def aggregate_scores(
    results: Iterable[Tuple[StationType | str, Optional[int], Optional[datetime]]],
) -> StationAggregate:
    """Combine ``(station_type, score, recorded_at)`` rows for one participant.

    Results without a score are kept out of the total and the station count,
    but still mark their station as recorded.
    """

    scores: Dict[StationType, Optional[int]] = {station: None for station in STATION_ORDER}
    latest: Optional[datetime] = None
    recorded = set()
    for station_type, score, recorded_at in results:
        station = StationType.parse(station_type)
        recorded.add(station)
        if score is None:
            continue
        scores[station] = score
        if recorded_at is not None and (latest is None or recorded_at > latest):
            latest = recorded_at

    present = [score for score in scores.values() if score is not None]
    completed = len(present)
    total = sum(present) if present else None
    return StationAggregate(
        scores=scores,
        total_score=total,
        completed_stations=completed,
        grade=grade_for(total, completed),
        latest_completion=latest,
        recorded=frozenset(recorded),
    )


__all__ = [
    "ABOVE_AVERAGE_PERCENT",
    "AVERAGE_PERCENT",
    "Grade",
    "StationAggregate",
    "aggregate_scores",
    "grade_for",
]
