"""Domain models representing persisted and computed scheduling state.

These are pure domain objects with no API input rules.
Django ORM models are in courses/models.py (persistence layer).
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

from courses.domain.value_objects import Capacity, Money, SeriesId, SessionId


class SeriesStatus(str, Enum):
    PLANNED = "PLANNED"
    PUBLISHED = "PUBLISHED"
    CLOSED = "CLOSED"
    FINISHED = "FINISHED"


class SessionStatus(str, Enum):
    SCHEDULED = "SCHEDULED"
    CANCELED = "CANCELED"
    FINISHED = "FINISHED"


class PublisherType(str, Enum):
    COACH = "COACH"
    MANAGER = "MANAGER"


class VenueType(str, Enum):
    SANDA_GYM = "SANDA_GYM"
    TRACK_FIELD = "TRACK_FIELD"
    CUSTOMER_HOME = "CUSTOMER_HOME"


class ClassMode(str, Enum):
    SMALL_CLASS = "SMALL_CLASS"
    LARGE_CLASS = "LARGE_CLASS"


class Role(str, Enum):
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    COACH = "COACH"


@dataclass(frozen=True)
class CallerIdentity:
    """Resolved identity of the caller, produced by the authentication layer."""

    account_id: int
    roles: frozenset[Role]
    coach_id: int | None = None

    def has_role(self, role: Role) -> bool:
        return role in self.roles

    @property
    def is_staff(self) -> bool:
        return Role.ADMIN in self.roles or Role.MANAGER in self.roles


@dataclass(frozen=True)
class Series:
    """Domain representation of a recurring course Series."""

    id: SeriesId
    catalog_id: int
    publisher_type: PublisherType
    publisher_id: int
    title: str
    description: str | None
    remark: str | None
    venue_type: VenueType
    class_mode: ClassMode
    start_date: date
    end_date: date
    recurrence_rule: str | None
    session_duration_minutes: int
    leave_cutoff_hours: int
    max_learners: Capacity
    price_per_session: Money | None
    teaching_fee_ref: Money | None
    status: SeriesStatus
    published_at: datetime | None
    created_at: datetime
    updated_at: datetime
    created_by: int | None = None
    updated_by: int | None = None


@dataclass(frozen=True)
class Session:
    """Domain representation of a materialized Session."""

    id: SessionId
    series_id: SeriesId
    occurrence_key: str
    starts_at: datetime
    ends_at: datetime
    location_text: str
    lead_coach_id: int | None
    status: SessionStatus
    leave_cutoff_hours_override: int | None
    remark: str | None
    created_at: datetime


@dataclass(frozen=True)
class NewSession:
    """Values for a session that publish wants to materialize."""

    series_id: SeriesId
    occurrence_key: str
    starts_at: datetime
    ends_at: datetime
    location_text: str
    lead_coach_id: int | None
    leave_cutoff_hours_override: int | None
    remark: str | None = None


@dataclass(frozen=True)
class NotChecked:
    """Conflict detection was not run for this occurrence."""


@dataclass(frozen=True)
class Checked:
    """Conflict detection ran and found ``count`` overlapping sessions."""

    count: int

    def __post_init__(self) -> None:
        if self.count < 0:
            raise ValueError("Conflict count cannot be negative")

    @property
    def has_conflict(self) -> bool:
        return self.count > 0


ConflictStatus = NotChecked | Checked

NOT_CHECKED = NotChecked()


@dataclass(frozen=True)
class Occurrence:
    """One computed instance of a series recurrence, not yet persisted."""

    key: str
    starts_at: datetime
    ends_at: datetime
    day: date
    weekday_index: int
    conflict: ConflictStatus = field(default=NOT_CHECKED)


@dataclass(frozen=True)
class CustomSession:
    """Ad-hoc session supplied by the operator at publish time."""

    starts_at: datetime
    ends_at: datetime
    location_text: str | None = None
    remark: str | None = None


@dataclass(frozen=True)
class PreviewResult:
    series: Series
    occurrences: tuple[Occurrence, ...]
    preview_hash: str
    default_lead_coach_id: int | None


@dataclass(frozen=True)
class PublishResult:
    series_id: SeriesId
    status: SeriesStatus
    published_at: datetime | None
    created_sessions: int
    dry_run: bool = False
    conflicting_keys: tuple[str, ...] | None = None
