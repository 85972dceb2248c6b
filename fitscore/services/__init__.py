"""Service layer helpers."""

from .leaderboard import build_leaderboard, leaderboard_page, load_entries
from .participants import (
    get_participant,
    participant_progress,
    register_participant,
    require_participant,
    results_for,
)
from .submissions import delete_station_result, submit_station_result
from .thresholds import (
    create_threshold,
    delete_threshold,
    list_thresholds,
    load_thresholds,
    update_threshold,
)

__all__ = [
    "build_leaderboard",
    "create_threshold",
    "delete_station_result",
    "delete_threshold",
    "get_participant",
    "leaderboard_page",
    "list_thresholds",
    "load_entries",
    "load_thresholds",
    "participant_progress",
    "register_participant",
    "require_participant",
    "results_for",
    "submit_station_result",
    "update_threshold",
]
