"""Leaderboard summary statistics."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from fractions import Fraction
from typing import Dict, List, Optional, Sequence

from .aggregate import Grade
from .ranking import LeaderboardEntry

NO_ORGANIZATION = "None"


@dataclass(frozen=True)
class LeaderboardStats:
    total_participants: int = 0
    avg_score: float = 0.0
    above_average_count: int = 0
    top_organization: str = NO_ORGANIZATION


def _round_one_decimal(value: Fraction) -> float:
    exact = Decimal(value.numerator) / Decimal(value.denominator)
    return float(exact.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def top_organization(entries: Sequence[LeaderboardEntry]) -> str:
    """Organisation with the best mean total score; alphabetical on ties."""

    members: Dict[str, List[int]] = defaultdict(list)
    for entry in entries:
        if entry.organisation and entry.total_score is not None:
            members[entry.organisation].append(entry.total_score)
    if not members:
        return NO_ORGANIZATION

    best: Optional[str] = None
    best_mean: Optional[Fraction] = None
    for organisation in sorted(members):
        scores = members[organisation]
        mean = Fraction(sum(scores), len(scores))
        if best_mean is None or mean > best_mean:
            best, best_mean = organisation, mean
    return best or NO_ORGANIZATION


def compute_stats(entries: Sequence[LeaderboardEntry]) -> LeaderboardStats:
    scored = [entry for entry in entries if entry.total_score is not None]
    if not scored:
        return LeaderboardStats()

    mean = Fraction(sum(entry.total_score for entry in scored), len(scored))
    return LeaderboardStats(
        total_participants=len(scored),
        avg_score=_round_one_decimal(mean),
        above_average_count=sum(1 for entry in scored if entry.grade is Grade.ABOVE_AVERAGE),
        top_organization=top_organization(scored),
    )


__all__ = ["LeaderboardStats", "NO_ORGANIZATION", "compute_stats", "top_organization"]
