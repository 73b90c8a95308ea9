from courses.domain.models import (
    CallerIdentity,
    Checked,
    ConflictStatus,
    CustomSession,
    NewSession,
    NOT_CHECKED,
    NotChecked,
    Occurrence,
    PreviewResult,
    PublishResult,
    PublisherType,
    Role,
    Series,
    SeriesStatus,
    Session,
    SessionStatus,
)
from courses.domain.value_objects import Capacity, Money, SeriesId, SessionId

__all__ = [
    "CallerIdentity",
    "Checked",
    "ConflictStatus",
    "CustomSession",
    "NewSession",
    "NOT_CHECKED",
    "NotChecked",
    "Occurrence",
    "PreviewResult",
    "PublishResult",
    "PublisherType",
    "Role",
    "Series",
    "SeriesStatus",
    "Session",
    "SessionStatus",
    "SeriesId",
    "SessionId",
    "Money",
    "Capacity",
]
