"""Domain error codes for the course scheduling module."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Domain error codes."""

    INVALID_SERIES_ID = "INVALID_SERIES_ID"
    INVALID_RANGE = "INVALID_RANGE"
    UNSUPPORTED_RECURRENCE_TOKEN = "UNSUPPORTED_RECURRENCE_TOKEN"
    SERIES_NOT_FOUND = "SERIES_NOT_FOUND"
    SERIES_NOT_IN_PLANNED_STATE = "SERIES_NOT_IN_PLANNED_STATE"
    SERIES_ALREADY_PUBLISHED = "SERIES_ALREADY_PUBLISHED"
    PREVIEW_STALE = "PREVIEW_STALE"
    UNKNOWN_OCCURRENCE_KEY = "UNKNOWN_OCCURRENCE_KEY"
    LEAD_COACH_REQUIRED = "LEAD_COACH_REQUIRED"
    INVALID_CUSTOM_SESSION = "INVALID_CUSTOM_SESSION"
    EMPTY_SCHEDULE = "EMPTY_SCHEDULE"
    ACCESS_DENIED = "ACCESS_DENIED"
    COMMIT_FAILED = "COMMIT_FAILED"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    def context(self) -> dict[str, Any]:
        """Caller-correctable details safe to return to the client."""
        return {}


class InvalidSeriesIdError(DomainError):
    """Raised when a series ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_SERIES_ID,
            message="Invalid series ID format",
        )


class InvalidRangeError(DomainError):
    """Raised when the series date range cannot be expanded."""

    def __init__(self, reason: str) -> None:
        super().__init__(code=ErrorCode.INVALID_RANGE, message=reason)


class UnsupportedRecurrenceTokenError(DomainError):
    """Raised when a recurrence rule contains a token the parser cannot handle."""

    def __init__(self, token: str) -> None:
        super().__init__(
            code=ErrorCode.UNSUPPORTED_RECURRENCE_TOKEN,
            message="Unsupported recurrence rule token",
        )
        self.token = token

    def context(self) -> dict[str, Any]:
        return {"token": self.token}


class SeriesNotFoundError(DomainError):
    """Raised when a series is not found."""

    def __init__(self, series_id: int) -> None:
        super().__init__(
            code=ErrorCode.SERIES_NOT_FOUND,
            message="Series not found",
        )
        self.series_id = series_id


class SeriesNotInPlannedStateError(DomainError):
    """Raised when a preview is requested for a series that is no longer planned."""

    def __init__(self, series_id: int, status: str) -> None:
        super().__init__(
            code=ErrorCode.SERIES_NOT_IN_PLANNED_STATE,
            message="Series schedule can only be previewed while planned",
        )
        self.series_id = series_id
        self.status = status

    def context(self) -> dict[str, Any]:
        return {"status": self.status}


class SeriesAlreadyPublishedError(DomainError):
    """Raised when publish is attempted on a series that left the planned state."""

    def __init__(self, series_id: int, status: str) -> None:
        super().__init__(
            code=ErrorCode.SERIES_ALREADY_PUBLISHED,
            message="Series has already been published",
        )
        self.series_id = series_id
        self.status = status

    def context(self) -> dict[str, Any]:
        return {"status": self.status}


class PreviewStaleError(DomainError):
    """Raised when the supplied preview hash no longer matches the series schedule."""

    def __init__(self, expected_hash: str, supplied_hash: str) -> None:
        super().__init__(
            code=ErrorCode.PREVIEW_STALE,
            message="Schedule preview is out of date, preview again before publishing",
        )
        self.expected_hash = expected_hash
        self.supplied_hash = supplied_hash

    def context(self) -> dict[str, Any]:
        return {"previewHash": self.supplied_hash, "currentHash": self.expected_hash}


class UnknownOccurrenceKeyError(DomainError):
    """Raised when a selected key is not part of the series schedule."""

    def __init__(self, key: str) -> None:
        super().__init__(
            code=ErrorCode.UNKNOWN_OCCURRENCE_KEY,
            message="Selected occurrence is not part of the schedule",
        )
        self.key = key

    def context(self) -> dict[str, Any]:
        return {"key": self.key}


class LeadCoachRequiredError(DomainError):
    """Raised when a manager or admin publishes without naming a lead coach."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.LEAD_COACH_REQUIRED,
            message="A lead coach must be specified",
        )


class InvalidCustomSessionError(DomainError):
    """Raised when an ad-hoc session supplied at publish time is invalid."""

    def __init__(self, reason: str, start: str | None = None) -> None:
        super().__init__(code=ErrorCode.INVALID_CUSTOM_SESSION, message=reason)
        self.start = start

    def context(self) -> dict[str, Any]:
        return {"start": self.start} if self.start else {}


class EmptyScheduleError(DomainError):
    """Raised when a publish would not materialize a single session."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.EMPTY_SCHEDULE,
            message="Schedule must contain at least one session",
        )


class AccessDeniedError(DomainError):
    """Raised when the caller may not operate on the series schedule."""

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(code=ErrorCode.ACCESS_DENIED, message=message)


class CommitFailedError(DomainError):
    """Raised when the publish transaction could not be committed."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.COMMIT_FAILED,
            message="Schedule could not be saved, please retry",
        )
