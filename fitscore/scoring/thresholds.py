"""Score bands and the read-only threshold lookup interface."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Protocol, Tuple

ThresholdKey = Tuple[str, str, str, str]


@dataclass(frozen=True)
class Band:
    """Admin-configured band: below ``min_average`` is 1, above ``max_average`` is 3."""

    min_average: float
    max_average: float

    def classify(self, value: float) -> int:
        if value > self.max_average:
            return 3
        if value >= self.min_average:
            return 2
        return 1


@dataclass(frozen=True)
class StepBand:
    """Built-in band where reaching ``good`` scores 2 and reaching ``excellent`` scores 3."""

    good: float
    excellent: float

    def classify(self, value: float) -> int:
        if value >= self.excellent:
            return 3
        if value >= self.good:
            return 2
        return 1


class ThresholdLookup(Protocol):
    def get_threshold(
        self, station_type: str, metric_name: str, gender: str, age_group: str
    ) -> Optional[Band]:
        ...


class NoThresholds:
    """Lookup that never matches, so every station uses its built-in bands."""

    def get_threshold(
        self, station_type: str, metric_name: str, gender: str, age_group: str
    ) -> Optional[Band]:
        return None


class InMemoryThresholds:
    """Immutable threshold table keyed by station, metric, gender and age group."""

    def __init__(self, rows: Iterable[Tuple[ThresholdKey, Band]] = ()) -> None:
        self._table: Dict[ThresholdKey, Band] = {}
        for key, band in rows:
            self._table[tuple(part.lower() for part in key)] = band

    def __len__(self) -> int:
        return len(self._table)

    def get_threshold(
        self, station_type: str, metric_name: str, gender: str, age_group: str
    ) -> Optional[Band]:
        key = (station_type.lower(), metric_name.lower(), gender.lower(), age_group.lower())
        return self._table.get(key)


__all__ = [
    "Band",
    "InMemoryThresholds",
    "NoThresholds",
    "StepBand",
    "ThresholdKey",
    "ThresholdLookup",
]
