"""Station catalogue and measurement payload parsing.

Raw measurement payloads arrive as loosely shaped JSON objects whose valid
fields depend on the station. :func:`parse_measurements` turns them into one
of the frozen measurement dataclasses below, so the scorer only ever sees a
complete, typed value. Anything it cannot make sense of is rejected here,
before scoring or persistence.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from ..core.errors import InvalidMeasurement, InvalidStationType


class StationType(str, Enum):
    BALANCE = "balance"
    BREATH = "breath"
    GRIP = "grip"
    HEALTH = "health"

    @classmethod
    def parse(cls, value: Any) -> "StationType":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidStationType(value)


@dataclass(frozen=True)
class StationInfo:
    station_type: StationType
    name: str
    description: str
    sort_order: int
    metrics: Tuple[str, ...]


STATIONS: Tuple[StationInfo, ...] = (
    StationInfo(
        StationType.BALANCE,
        "Balance Challenge",
        "Stand on one leg for as long as possible",
        1,
        ("balance_seconds",),
    ),
    StationInfo(
        StationType.BREATH,
        "Breath Hold",
        "Hold your breath for as long as possible",
        2,
        ("breath_seconds",),
    ),
    StationInfo(
        StationType.GRIP,
        "Grip Strength",
        "Squeeze the dynamometer with each hand",
        3,
        ("grip_left_kg", "grip_right_kg"),
    ),
    StationInfo(
        StationType.HEALTH,
        "Health Horizon",
        "Blood pressure, heart rate, oxygen saturation and BMI",
        4,
        ("bp_systolic", "bp_diastolic", "pulse", "spo2", "bmi"),
    ),
)

STATION_ORDER: Tuple[StationType, ...] = tuple(info.station_type for info in STATIONS)


@dataclass(frozen=True)
class BalanceMeasurement:
    balance_seconds: float


@dataclass(frozen=True)
class BreathMeasurement:
    breath_seconds: float


@dataclass(frozen=True)
class GripMeasurement:
    grip_left_kg: Optional[float] = None
    grip_right_kg: Optional[float] = None

    @property
    def dominant_kg(self) -> float:
        return max(v for v in (self.grip_left_kg, self.grip_right_kg) if v is not None)


@dataclass(frozen=True)
class HealthMeasurement:
    bp_systolic: Optional[float] = None
    bp_diastolic: Optional[float] = None
    pulse: Optional[float] = None
    spo2: Optional[float] = None
    bmi: Optional[float] = None

    def present_metrics(self) -> Dict[str, float]:
        values = {
            "bp_systolic": self.bp_systolic,
            "bp_diastolic": self.bp_diastolic,
            "pulse": self.pulse,
            "spo2": self.spo2,
            "bmi": self.bmi,
        }
        return {name: value for name, value in values.items() if value is not None}


Measurement = Union[BalanceMeasurement, BreathMeasurement, GripMeasurement, HealthMeasurement]

_MEASUREMENT_TYPES = {
    StationType.BALANCE: BalanceMeasurement,
    StationType.BREATH: BreathMeasurement,
    StationType.GRIP: GripMeasurement,
    StationType.HEALTH: HealthMeasurement,
}


def _number(station: StationType, payload: Mapping[str, Any], name: str) -> Optional[float]:
    """Read an optional non-negative number from the payload."""

    raw = payload.get(name)
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None
    if isinstance(raw, bool):
        raise InvalidMeasurement(station.value, f"{name} must be a number", field=name)
    try:
        value = float(raw)
    except (TypeError, ValueError) as exc:
        raise InvalidMeasurement(station.value, f"{name} must be a number", field=name) from exc
    if math.isnan(value) or math.isinf(value):
        raise InvalidMeasurement(station.value, f"{name} must be finite", field=name)
    if value < 0:
        raise InvalidMeasurement(station.value, f"{name} cannot be negative", field=name)
    return value


def _required(station: StationType, payload: Mapping[str, Any], name: str) -> float:
    value = _number(station, payload, name)
    if value is None:
        raise InvalidMeasurement(station.value, f"{name} is required", field=name)
    return value


def parse_measurements(station_type: Any, payload: Any) -> Measurement:
    """Validate a raw payload for ``station_type`` into a measurement value.

    Raises :class:`InvalidStationType` for an unknown station and
    :class:`InvalidMeasurement` when a field the station needs is missing or
    malformed. The health station tolerates missing metrics.
    """

    station = StationType.parse(station_type)
    if isinstance(payload, _MEASUREMENT_TYPES[station]):
        return payload
    if not isinstance(payload, Mapping):
        raise InvalidMeasurement(station.value, "measurements must be an object")

    if station is StationType.BALANCE:
        return BalanceMeasurement(_required(station, payload, "balance_seconds"))
    if station is StationType.BREATH:
        return BreathMeasurement(_required(station, payload, "breath_seconds"))
    if station is StationType.GRIP:
        left = _number(station, payload, "grip_left_kg")
        right = _number(station, payload, "grip_right_kg")
        if left is None and right is None:
            raise InvalidMeasurement(
                station.value, "grip_left_kg or grip_right_kg is required"
            )
        return GripMeasurement(left, right)
    if station is StationType.HEALTH:
        return HealthMeasurement(
            bp_systolic=_number(station, payload, "bp_systolic"),
            bp_diastolic=_number(station, payload, "bp_diastolic"),
            pulse=_number(station, payload, "pulse"),
            spo2=_number(station, payload, "spo2"),
            bmi=_number(station, payload, "bmi"),
        )
    raise InvalidStationType(station_type)  # pragma: no cover - enum is exhaustive


__all__ = [
    "BalanceMeasurement",
    "BreathMeasurement",
    "GripMeasurement",
    "HealthMeasurement",
    "Measurement",
    "STATIONS",
    "STATION_ORDER",
    "StationInfo",
    "StationType",
    "parse_measurements",
]
