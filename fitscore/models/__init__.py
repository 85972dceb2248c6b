"""Database model exports."""

from .participant import Participant
from .station_result import StationResult
from .threshold import ScoringThreshold

__all__ = [
    "Participant",
    "ScoringThreshold",
    "StationResult",
]
