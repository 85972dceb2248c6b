"""Scoring and leaderboard service for multi-station fitness assessments."""

__version__ = "0.1.0"
