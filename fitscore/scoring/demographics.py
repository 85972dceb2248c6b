"""Participant demographics used for threshold lookups."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

MIN_SCORING_AGE = 18

AGE_GROUPS = ("18-39", "40-59", "60+")

GENDERS = ("male", "female")


def normalize_gender(value: Optional[str]) -> Optional[str]:
    """Return ``male``/``female`` or ``None`` for anything unspecified."""

    normalized = (value or "").strip().lower()
    if normalized in ("m", "man"):
        normalized = "male"
    elif normalized in ("f", "woman"):
        normalized = "female"
    return normalized if normalized in GENDERS else None


def age_on(date_of_birth: date, on: date) -> int:
    """Whole years between ``date_of_birth`` and ``on``, never below 18."""

    years = on.year - date_of_birth.year
    if (on.month, on.day) < (date_of_birth.month, date_of_birth.day):
        years -= 1
    return max(MIN_SCORING_AGE, years)


def age_group_for(age: int) -> str:
    if age < 40:
        return "18-39"
    if age < 60:
        return "40-59"
    return "60+"


@dataclass(frozen=True)
class Demographics:
    gender: Optional[str] = None
    age: Optional[int] = None

    @property
    def age_group(self) -> Optional[str]:
        if self.age is None:
            return None
        return age_group_for(self.age)

    @classmethod
    def from_profile(
        cls, gender: Optional[str], date_of_birth: Optional[date], on: date
    ) -> "Demographics":
        age = age_on(date_of_birth, on) if date_of_birth else None
        return cls(gender=normalize_gender(gender), age=age)


__all__ = [
    "AGE_GROUPS",
    "Demographics",
    "GENDERS",
    "MIN_SCORING_AGE",
    "age_group_for",
    "age_on",
    "normalize_gender",
]
