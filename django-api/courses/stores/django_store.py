"""Django ORM implementation of the series and session stores."""

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal

from django.db import DatabaseError, transaction

from courses import models as orm
from courses.domain import NewSession, SeriesId, Series, Session, SessionId
from courses.domain.errors import CommitFailedError
from courses.domain.models import (
    ClassMode,
    PublisherType,
    SeriesStatus,
    SessionStatus,
    VenueType,
)
from courses.domain.value_objects import Capacity, Money
from courses.stores.interfaces import SeriesStore, SessionStore


def _money(amount: Decimal | None) -> Money | None:
    return Money(amount) if amount is not None else None


def series_to_domain(row: orm.CourseSeries) -> Series:
    return Series(
        id=SeriesId(row.pk),
        catalog_id=row.catalog_id,
        publisher_type=PublisherType(row.publisher_type),
        publisher_id=row.publisher_id,
        title=row.title,
        description=row.description,
        remark=row.remark,
        venue_type=VenueType(row.venue_type),
        class_mode=ClassMode(row.class_mode),
        start_date=row.start_date,
        end_date=row.end_date,
        recurrence_rule=row.recurrence_rule,
        session_duration_minutes=row.session_duration_minutes,
        leave_cutoff_hours=row.leave_cutoff_hours,
        max_learners=Capacity(row.max_learners),
        price_per_session=_money(row.price_per_session),
        teaching_fee_ref=_money(row.teaching_fee_ref),
        status=SeriesStatus(row.status),
        published_at=row.published_at,
        created_at=row.created_at,
        updated_at=row.updated_at,
        created_by=row.created_by,
        updated_by=row.updated_by,
    )


def session_to_domain(row: orm.CourseSession) -> Session:
    return Session(
        id=SessionId(row.pk),
        series_id=SeriesId(row.series_id),
        occurrence_key=row.occurrence_key,
        starts_at=row.starts_at,
        ends_at=row.ends_at,
        location_text=row.location_text,
        lead_coach_id=row.lead_coach_id,
        status=SessionStatus(row.status),
        leave_cutoff_hours_override=row.leave_cutoff_hours_override,
        remark=row.remark,
        created_at=row.created_at,
    )


class DjangoSeriesStore(SeriesStore):
    """Database-backed series store using Django ORM."""

    def get_series(self, series_id: SeriesId) -> Series | None:
        row = orm.CourseSeries.objects.filter(pk=series_id.value).first()
        return series_to_domain(row) if row is not None else None

    def lock_series(self, series_id: SeriesId) -> Series | None:
        row = (
            orm.CourseSeries.objects.select_for_update()
            .filter(pk=series_id.value)
            .first()
        )
        return series_to_domain(row) if row is not None else None

    def mark_published(self, series_id: SeriesId, published_at: datetime) -> None:
        row = orm.CourseSeries.objects.get(pk=series_id.value)
        row.status = orm.CourseSeries.Status.PUBLISHED
        row.published_at = published_at
        row.save(update_fields=["status", "published_at", "updated_at"])

    @contextmanager
    def atomic(self) -> Iterator[None]:
        try:
            with transaction.atomic():
                yield
        except DatabaseError as exc:
            raise CommitFailedError() from exc


class DjangoSessionStore(SessionStore):
    """Database-backed session store using Django ORM."""

    def find_overlapping(
        self, coach_id: int, range_start: datetime, range_end: datetime
    ) -> list[Session]:
        rows = orm.CourseSession.objects.filter(
            lead_coach_id=coach_id,
            status=orm.CourseSession.Status.SCHEDULED,
            starts_at__lt=range_end,
            ends_at__gt=range_start,
        ).order_by("starts_at", "id")
        return [session_to_domain(row) for row in rows]

    def existing_keys(self, series_id: SeriesId) -> set[str]:
        return set(
            orm.CourseSession.objects.filter(series_id=series_id.value).values_list(
                "occurrence_key", flat=True
            )
        )

    def create_if_absent(self, new_session: NewSession) -> tuple[bool, Session]:
        row, created = orm.CourseSession.objects.get_or_create(
            series_id=new_session.series_id.value,
            occurrence_key=new_session.occurrence_key,
            defaults={
                "starts_at": new_session.starts_at,
                "ends_at": new_session.ends_at,
                "location_text": new_session.location_text,
                "lead_coach_id": new_session.lead_coach_id,
                "leave_cutoff_hours_override": new_session.leave_cutoff_hours_override,
                "remark": new_session.remark,
            },
        )
        return created, session_to_domain(row)

    def list_for_series(self, series_id: SeriesId) -> list[Session]:
        rows = orm.CourseSession.objects.filter(series_id=series_id.value).order_by(
            "starts_at", "id"
        )
        return [session_to_domain(row) for row in rows]
