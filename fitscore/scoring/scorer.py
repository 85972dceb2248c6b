"""Measurement scoring.

Turns one station's raw measurement into a 1-3 score. ``None`` means the
measurement carries no scorable data (a health check with every metric
missing); it is never used to signal an error, and a score is never 0.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, Optional, Tuple

from .demographics import Demographics
from .stations import (
    BalanceMeasurement,
    BreathMeasurement,
    GripMeasurement,
    HealthMeasurement,
    StationType,
    parse_measurements,
)
from .thresholds import Band, NoThresholds, StepBand, ThresholdLookup

logger = logging.getLogger(__name__)

MIN_SCORE = 1
MAX_SCORE = 3

DEFAULT_DURATION_BANDS: Dict[StationType, StepBand] = {
    StationType.BALANCE: StepBand(good=25, excellent=45),
    StationType.BREATH: StepBand(good=30, excellent=60),
}

DEFAULT_GRIP_BANDS: Dict[Optional[str], Band] = {
    "male": Band(min_average=30, max_average=40),
    "female": Band(min_average=20, max_average=27),
    None: Band(min_average=25, max_average=40),
}

GRIP_METRIC = "grip_kg"

# Metrics an admin threshold row can override, per station. Health uses fixed bands.
THRESHOLD_METRICS: Dict[StationType, Tuple[str, ...]] = {
    StationType.BALANCE: ("balance_seconds",),
    StationType.BREATH: ("breath_seconds",),
    StationType.GRIP: (GRIP_METRIC,),
}

# (low, high, high_inclusive) -> score, first match wins, anything else scores 1.
HealthBand = Tuple[Tuple[float, float, bool], int]

HEALTH_BANDS: Dict[str, Tuple[HealthBand, ...]] = {
    "bp_systolic": (((100, 130, False), 3), ((100, 140, False), 2)),
    "bp_diastolic": (((60, 80, False), 3), ((60, 90, False), 2)),
    "pulse": (((50, 70, True), 3), ((50, 85, True), 2)),
    "spo2": (((97, 100, True), 3), ((94, 100, True), 2)),
    "bmi": (((18.5, 25, False), 3), ((18.5, 30, False), 2)),
}


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _clamp(score: int) -> int:
    return max(MIN_SCORE, min(MAX_SCORE, score))


def classify_health_metric(metric_name: str, value: float) -> int:
    for (low, high, high_inclusive), score in HEALTH_BANDS[metric_name]:
        upper_ok = value <= high if high_inclusive else value < high
        if value >= low and upper_ok:
            return score
    return MIN_SCORE


def threshold_metric_allowed(station_type: str, metric_name: str) -> bool:
    """Whether an admin threshold row for this station/metric is ever consulted."""

    try:
        station = StationType(station_type)
    except ValueError:
        return False
    return metric_name in THRESHOLD_METRICS.get(station, ())


def _lookup(
    thresholds: ThresholdLookup,
    station: StationType,
    metric_name: str,
    demographics: Demographics,
) -> Optional[Band]:
    gender = demographics.gender
    age_group = demographics.age_group
    band = None
    if gender and age_group:
        band = thresholds.get_threshold(station.value, metric_name, gender, age_group)
    if band is None:
        logger.debug(
            "No scoring threshold for %s/%s gender=%s age_group=%s, using default bands",
            station.value,
            metric_name,
            gender,
            age_group,
        )
    return band


def _score_duration(
    station: StationType,
    metric_name: str,
    seconds: float,
    demographics: Demographics,
    thresholds: ThresholdLookup,
) -> int:
    band = _lookup(thresholds, station, metric_name, demographics)
    if band is not None:
        return band.classify(seconds)
    return DEFAULT_DURATION_BANDS[station].classify(seconds)


def _score_grip(
    measurement: GripMeasurement, demographics: Demographics, thresholds: ThresholdLookup
) -> int:
    dominant = measurement.dominant_kg
    band = _lookup(thresholds, StationType.GRIP, GRIP_METRIC, demographics)
    if band is None:
        band = DEFAULT_GRIP_BANDS.get(demographics.gender, DEFAULT_GRIP_BANDS[None])
    return band.classify(dominant)


def _score_health(measurement: HealthMeasurement) -> Optional[int]:
    metric_scores = [
        classify_health_metric(name, value)
        for name, value in measurement.present_metrics().items()
    ]
    if not metric_scores:
        return None
    return _clamp(_round_half_up(sum(metric_scores) / len(metric_scores)))


def score_measurement(
    station_type: Any,
    measurements: Any,
    demographics: Optional[Demographics] = None,
    thresholds: Optional[ThresholdLookup] = None,
) -> Optional[int]:
    """Score one station measurement.

    ``measurements`` may be a raw mapping or an already parsed measurement.
    Raises :class:`~fitscore.core.errors.InvalidStationType` or
    :class:`~fitscore.core.errors.InvalidMeasurement` for bad input.
    """

    station = StationType.parse(station_type)
    measurement = parse_measurements(station, measurements)
    if demographics is None:
        demographics = Demographics()
    if thresholds is None:
        thresholds = NoThresholds()

    if isinstance(measurement, BalanceMeasurement):
        return _score_duration(
            station, THRESHOLD_METRICS[station][0], measurement.balance_seconds,
            demographics, thresholds,
        )
    if isinstance(measurement, BreathMeasurement):
        return _score_duration(
            station, THRESHOLD_METRICS[station][0], measurement.breath_seconds,
            demographics, thresholds,
        )
    if isinstance(measurement, GripMeasurement):
        return _score_grip(measurement, demographics, thresholds)
    return _score_health(measurement)


__all__ = [
    "DEFAULT_DURATION_BANDS",
    "DEFAULT_GRIP_BANDS",
    "GRIP_METRIC",
    "HEALTH_BANDS",
    "MAX_SCORE",
    "MIN_SCORE",
    "THRESHOLD_METRICS",
    "classify_health_metric",
    "threshold_metric_allowed",
    "score_measurement",
]
