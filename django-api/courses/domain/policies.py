"""Caller policies for schedule operations.

Pure functions over the resolved caller identity; persistence never leaks in
here so each rule can be tested on its own.
"""

from courses.domain.errors import AccessDeniedError, LeadCoachRequiredError
from courses.domain.models import CallerIdentity, PublisherType, Role, Series

SCHEDULING_ROLES = frozenset({Role.ADMIN, Role.MANAGER, Role.COACH})


def require_scheduling_role(identity: CallerIdentity) -> None:
    if not identity.roles & SCHEDULING_ROLES:
        raise AccessDeniedError("Missing permission to schedule course series")


def require_series_access(identity: CallerIdentity, series: Series) -> None:
    """Managers and admins may schedule any series, coaches only their own."""
    if identity.is_staff:
        return
    if identity.has_role(Role.COACH):
        if identity.coach_id is None:
            raise AccessDeniedError("Account is not bound to a coach identity")
        owned = (
            series.publisher_type == PublisherType.COACH
            and series.publisher_id == identity.coach_id
        )
        if not owned:
            raise AccessDeniedError("Coach may only schedule their own series")
        return
    raise AccessDeniedError("Missing permission to schedule course series")


def resolve_default_coach(identity: CallerIdentity) -> int | None:
    """A coach defaults to themself; staff callers have no default."""
    if identity.is_staff:
        return None
    if identity.has_role(Role.COACH):
        return identity.coach_id
    return None


def resolve_lead_coach(identity: CallerIdentity, requested: int | None) -> int:
    """Pick the lead coach for published sessions.

    Raises:
        LeadCoachRequiredError: If a staff caller did not name a coach.
    """
    default = resolve_default_coach(identity)
    if default is not None:
        return default
    if requested is None or requested <= 0:
        raise LeadCoachRequiredError()
    return requested


def conflict_scope(
    identity: CallerIdentity, series: Series, candidate_coach_id: int | None = None
) -> int | None:
    """Coach whose bookings the schedule is checked against."""
    default = resolve_default_coach(identity)
    if default is not None:
        return default
    if candidate_coach_id is not None and candidate_coach_id > 0:
        return candidate_coach_id
    if series.publisher_type == PublisherType.COACH:
        return series.publisher_id
    return None
