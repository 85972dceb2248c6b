"""Pure scoring and leaderboard engine."""

from .aggregate import Grade, StationAggregate, aggregate_scores, grade_for
from .demographics import Demographics, age_group_for, age_on
from .ranking import (
    LeaderboardEntry,
    LeaderboardPage,
    LeaderboardQuery,
    query_leaderboard,
    rank_entries,
)
from .scorer import score_measurement
from .stations import STATIONS, StationType, parse_measurements
from .statistics import LeaderboardStats, compute_stats
from .thresholds import Band, InMemoryThresholds, ThresholdLookup

__all__ = [
    "Band",
    "Demographics",
    "Grade",
    "InMemoryThresholds",
    "LeaderboardEntry",
    "LeaderboardPage",
    "LeaderboardQuery",
    "LeaderboardStats",
    "STATIONS",
    "StationAggregate",
    "StationType",
    "ThresholdLookup",
    "age_group_for",
    "age_on",
    "aggregate_scores",
    "compute_stats",
    "grade_for",
    "parse_measurements",
    "query_leaderboard",
    "rank_entries",
    "score_measurement",
]
