"""Tests for per-participant aggregation and grading."""

from datetime import datetime

import pytest

from fitscore.scoring.aggregate import Grade, aggregate_scores, grade_for
from fitscore.scoring.stations import StationType


def test_three_station_scenario_grades_average():
    aggregate = aggregate_scores(
        [
            ("balance", 3, datetime(2025, 9, 20, 9, 0)),
            ("breath", 1, datetime(2025, 9, 20, 9, 10)),
            ("grip", 2, datetime(2025, 9, 20, 9, 20)),
        ]
    )
    assert aggregate.total_score == 6
    assert aggregate.completed_stations == 3
    assert aggregate.max_possible_score == 9
    assert aggregate.grade is Grade.AVERAGE
    assert aggregate.remaining_stations == (StationType.HEALTH,)


def test_no_results_means_no_total_and_no_grade():
    aggregate = aggregate_scores([])
    assert aggregate.total_score is None
    assert aggregate.completed_stations == 0
    assert aggregate.grade is None
    assert aggregate.latest_completion is None


def test_unscored_results_do_not_count_as_completed():
    aggregate = aggregate_scores(
        [
            ("health", None, datetime(2025, 9, 20, 10, 0)),
            ("balance", 2, datetime(2025, 9, 20, 9, 0)),
        ]
    )
    assert aggregate.completed_stations == 1
    assert aggregate.total_score == 2
    assert aggregate.score_for(StationType.HEALTH) is None
    assert aggregate.latest_completion == datetime(2025, 9, 20, 9, 0)


def test_latest_completion_is_most_recent_scored_result():
    aggregate = aggregate_scores(
        [
            ("grip", 3, datetime(2025, 9, 20, 11, 0)),
            ("balance", 1, datetime(2025, 9, 20, 9, 0)),
        ]
    )
    assert aggregate.latest_completion == datetime(2025, 9, 20, 11, 0)


@pytest.mark.parametrize(
    "total,completed,expected",
    [
        (10, 4, Grade.ABOVE_AVERAGE),
        (9, 4, Grade.AVERAGE),
        (6, 4, Grade.AVERAGE),
        (5, 4, Grade.BAD),
        (3, 1, Grade.ABOVE_AVERAGE),
        (2, 1, Grade.AVERAGE),
        (1, 1, Grade.BAD),
        (3, 2, Grade.AVERAGE),
        (4, 2, Grade.AVERAGE),
        (5, 2, Grade.ABOVE_AVERAGE),
        (2, 2, Grade.BAD),
    ],
)
def test_grade_thresholds(total, completed, expected):
    assert grade_for(total, completed) is expected


def test_zero_completed_is_never_bad():
    assert grade_for(0, 0) is None
    assert grade_for(None, 0) is None


_GRADE_ORDER = {Grade.BAD: 0, Grade.AVERAGE: 1, Grade.ABOVE_AVERAGE: 2}


@pytest.mark.parametrize("completed", [1, 2, 3, 4])
def test_grade_is_monotonic_in_total(completed):
    grades = [grade_for(total, completed) for total in range(completed, completed * 3 + 1)]
    ranks = [_GRADE_ORDER[grade] for grade in grades]
    assert ranks == sorted(ranks)


def test_completed_count_matches_scored_results():
    rows = [
        ("balance", 1, None),
        ("breath", None, None),
        ("grip", 3, None),
        ("health", 2, None),
    ]
    aggregate = aggregate_scores(rows)
    assert aggregate.completed_stations == sum(1 for _, score, _ in rows if score is not None)


def test_unscored_result_is_recorded_but_not_remaining():
    aggregate = aggregate_scores(
        [
            ("health", None, datetime(2025, 9, 20, 10, 0)),
            ("grip", 2, datetime(2025, 9, 20, 9, 0)),
        ]
    )
    assert aggregate.remaining_stations == (StationType.BALANCE, StationType.BREATH)
    assert aggregate.unscored_stations == (StationType.HEALTH,)
    assert aggregate.completed_stations == 1
