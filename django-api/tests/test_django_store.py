"""Tests for the Django ORM stores.

Run with: pytest tests/test_django_store.py -v
"""

from datetime import datetime
from unittest import mock

import pytest
from django.db import IntegrityError, OperationalError, transaction

from courses.domain import NewSession, SeriesId, SeriesStatus, SessionStatus
from courses.domain.errors import CommitFailedError
from courses.models import CourseSeries, CourseSession
from courses.stores import DjangoSeriesStore, DjangoSessionStore
from factories import FIXED_NOW, UTC, create_series_row, create_session_row


def at(day, hour, minute=0):
    return datetime(2024, 6, day, hour, minute, tzinfo=UTC)


def new_session(series_id, key="2024-06-03T09:00#v1", starts_at=None, **overrides):
    starts_at = starts_at or at(3, 9)
    values = dict(
        series_id=SeriesId(series_id),
        occurrence_key=key,
        starts_at=starts_at,
        ends_at=starts_at.replace(hour=starts_at.hour + 1),
        location_text="On site",
        lead_coach_id=7,
        leave_cutoff_hours_override=12,
    )
    values.update(overrides)
    return NewSession(**values)


@pytest.mark.django_db
class TestDjangoSeriesStore:
    def test_get_series_maps_row(self):
        row = create_series_row(price_per_session="120.00")

        series = DjangoSeriesStore().get_series(SeriesId(row.pk))

        assert series.id == SeriesId(row.pk)
        assert series.status == SeriesStatus.PLANNED
        assert series.recurrence_rule == "BYDAY=MO,WE;BYHOUR=9;BYMINUTE=0"
        assert series.max_learners.value == 8
        assert str(series.price_per_session.amount) == "120.00"

    def test_missing_series_is_none(self):
        assert DjangoSeriesStore().get_series(SeriesId(999)) is None
        assert DjangoSeriesStore().lock_series(SeriesId(999)) is None

    def test_lock_series_inside_transaction(self):
        row = create_series_row()
        store = DjangoSeriesStore()

        with store.atomic():
            locked = store.lock_series(SeriesId(row.pk))

        assert locked.id == SeriesId(row.pk)

    def test_mark_published(self):
        row = create_series_row()

        DjangoSeriesStore().mark_published(SeriesId(row.pk), FIXED_NOW)

        row.refresh_from_db()
        assert row.status == CourseSeries.Status.PUBLISHED
        assert row.published_at == FIXED_NOW

    def test_atomic_rolls_back_and_wraps_database_errors(self):
        row = create_series_row()
        store = DjangoSeriesStore()

        with pytest.raises(CommitFailedError) as exc_info:
            with store.atomic():
                create_session_row(row, "2024-06-03T09:00#v1", at(3, 9))
                raise OperationalError("connection lost")

        assert isinstance(exc_info.value.__cause__, OperationalError)
        assert not CourseSession.objects.filter(series=row).exists()

    def test_atomic_passes_domain_errors_through(self):
        row = create_series_row()
        store = DjangoSeriesStore()

        with pytest.raises(LookupError):
            with store.atomic():
                store.mark_published(SeriesId(row.pk), FIXED_NOW)
                raise LookupError("not a database error")

        row.refresh_from_db()
        assert row.status == CourseSeries.Status.PLANNED


@pytest.mark.django_db
class TestDjangoSessionStore:
    def test_create_if_absent_is_idempotent(self):
        row = create_series_row()
        store = DjangoSessionStore()

        created, first = store.create_if_absent(new_session(row.pk))
        again, second = store.create_if_absent(new_session(row.pk, location_text="Elsewhere"))

        assert created is True
        assert again is False
        assert first.id == second.id
        assert second.location_text == "On site"
        assert CourseSession.objects.filter(series=row).count() == 1

    def test_duplicate_key_violates_unique_constraint(self):
        row = create_series_row()
        create_session_row(row, "2024-06-03T09:00#v1", at(3, 9))

        with pytest.raises(IntegrityError):
            with transaction.atomic():
                create_session_row(row, "2024-06-03T09:00#v1", at(3, 9))

    def test_same_key_allowed_across_series(self):
        first = create_series_row()
        second = create_series_row()
        store = DjangoSessionStore()

        assert store.create_if_absent(new_session(first.pk))[0] is True
        assert store.create_if_absent(new_session(second.pk))[0] is True

    def test_existing_keys(self):
        row = create_series_row()
        create_session_row(row, "a", at(3, 9))
        create_session_row(row, "b", at(5, 9))
        create_session_row(create_series_row(), "c", at(5, 9))

        assert DjangoSessionStore().existing_keys(SeriesId(row.pk)) == {"a", "b"}

    def test_find_overlapping_filters_coach_status_and_range(self):
        row = create_series_row()
        hit = create_session_row(row, "hit", at(3, 9, 30), lead_coach_id=7)
        create_session_row(row, "touching", at(3, 10), lead_coach_id=7)
        create_session_row(row, "other-coach", at(3, 9), lead_coach_id=8)
        create_session_row(
            row, "canceled", at(3, 9), lead_coach_id=7, status=CourseSession.Status.CANCELED
        )

        found = DjangoSessionStore().find_overlapping(7, at(3, 9), at(3, 10))

        assert [s.id.value for s in found] == [hit.pk]
        assert found[0].status == SessionStatus.SCHEDULED

    def test_list_for_series_orders_by_start(self):
        row = create_series_row()
        create_session_row(row, "later", at(10, 9))
        create_session_row(row, "earlier", at(3, 9))

        sessions = DjangoSessionStore().list_for_series(SeriesId(row.pk))

        assert [s.occurrence_key for s in sessions] == ["earlier", "later"]

    def test_create_failure_inside_atomic_becomes_commit_failure(self):
        row = create_series_row()
        series_store = DjangoSeriesStore()
        session_store = DjangoSessionStore()

        with mock.patch.object(
            CourseSession.objects, "get_or_create", side_effect=OperationalError("locked")
        ):
            with pytest.raises(CommitFailedError):
                with series_store.atomic():
                    session_store.create_if_absent(new_session(row.pk))
