"""Domain error types and their HTTP translation.

Every failure the engine can report is a subclass of :class:`FitScoreError`.
Each carries a machine-readable ``code``, the HTTP status the API should use,
and optional ``details`` merged into the JSON body, so callers can branch on
the kind of failure rather than on a sentinel value::

    {"error": "DUPLICATE_RESULT", "message": "...", "existingResultId": 7, ...}
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from .time import isoformat

logger = logging.getLogger(__name__)


class FitScoreError(Exception):
    """Base class for domain errors raised by the scoring service."""

    code = "FITSCORE_ERROR"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = details

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.code, "message": self.message, **self.details}


class InvalidStationType(FitScoreError):
    code = "INVALID_STATION_TYPE"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, station_type: Any) -> None:
        super().__init__(
            f"Unknown station type: {station_type!r}", stationType=station_type
        )
        self.station_type = station_type


class InvalidMeasurement(FitScoreError):
    code = "INVALID_MEASUREMENT"
    status_code = 422

    def __init__(self, station_type: str, message: str, field: Optional[str] = None) -> None:
        super().__init__(message, stationType=station_type, field=field)
        self.station_type = station_type
        self.field = field


class DuplicateResult(FitScoreError):
    """A result for this participant/station pair is already recorded."""

    code = "DUPLICATE_RESULT"
    status_code = status.HTTP_409_CONFLICT

    def __init__(
        self,
        participant_code: str,
        station_type: str,
        existing_result_id: Optional[int],
        recorded_at: Optional[datetime],
    ) -> None:
        super().__init__(
            "Participant score is already recorded for this station. "
            "Delete the existing result to resubmit.",
            participantCode=participant_code,
            stationType=station_type,
            existingResultId=existing_result_id,
            recordedAt=isoformat(recorded_at),
        )
        self.participant_code = participant_code
        self.station_type = station_type
        self.existing_result_id = existing_result_id
        self.recorded_at = recorded_at


class ParticipantNotFound(FitScoreError):
    code = "PARTICIPANT_NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, participant_code: str) -> None:
        super().__init__("Participant not found", participantCode=participant_code)
        self.participant_code = participant_code


class DuplicateParticipant(FitScoreError):
    code = "DUPLICATE_PARTICIPANT"
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, participant_code: str) -> None:
        super().__init__(
            "A participant with this code already exists",
            participantCode=participant_code,
        )


class StationResultNotFound(FitScoreError):
    code = "STATION_RESULT_NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, result_id: int) -> None:
        super().__init__("Station result not found", resultId=result_id)


class ThresholdNotFound(FitScoreError):
    code = "THRESHOLD_NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, threshold_id: int) -> None:
        super().__init__("Scoring threshold not found", thresholdId=threshold_id)


class InvalidThreshold(FitScoreError):
    code = "INVALID_THRESHOLD"
    status_code = status.HTTP_400_BAD_REQUEST


class DuplicateThreshold(FitScoreError):
    code = "DUPLICATE_THRESHOLD"
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, station_type: str, metric_name: str, gender: str, age_group: str) -> None:
        super().__init__(
            "Scoring threshold already exists for this combination",
            stationType=station_type,
            metricName=metric_name,
            gender=gender,
            ageGroup=age_group,
        )


async def _handle_fitscore_error(request: Request, exc: FitScoreError) -> JSONResponse:
    logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    """Translate domain errors into structured JSON responses."""

    app.add_exception_handler(FitScoreError, _handle_fitscore_error)


__all__ = [
    "DuplicateParticipant",
    "DuplicateResult",
    "DuplicateThreshold",
    "FitScoreError",
    "InvalidMeasurement",
    "InvalidStationType",
    "InvalidThreshold",
    "ParticipantNotFound",
    "StationResultNotFound",
    "ThresholdNotFound",
    "register_exception_handlers",
]
