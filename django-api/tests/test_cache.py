"""Tests for cache behavior.

Run with: pytest tests/test_cache.py -v
"""

from datetime import datetime

import pytest
from django.core.cache import cache

from courses.cache import series_detail_key, series_sessions_key
from factories import UTC, create_series_row, create_session_row


@pytest.mark.django_db
class TestCacheInvalidation:
    """Tests for cache invalidation on model changes."""

    def test_series_save_invalidates_detail_cache(self):
        series = create_series_row()
        cache.set(series_detail_key(series.pk), {"title": "stale"})

        series.title = "Adult Sanda"
        series.save()

        assert cache.get(series_detail_key(series.pk)) is None

    def test_series_save_invalidates_sessions_cache(self):
        series = create_series_row()
        cache.set(series_sessions_key(series.pk), {"results": []})

        series.status = "PUBLISHED"
        series.save()

        assert cache.get(series_sessions_key(series.pk)) is None

    def test_session_save_invalidates_sessions_cache(self):
        series = create_series_row()
        cache.set(series_detail_key(series.pk), {"title": "kept"})
        cache.set(series_sessions_key(series.pk), {"results": []})

        create_session_row(series, "2024-06-03T09:00#v1", datetime(2024, 6, 3, 9, 0, tzinfo=UTC))

        assert cache.get(series_sessions_key(series.pk)) is None
        assert cache.get(series_detail_key(series.pk)) == {"title": "kept"}

    def test_session_delete_invalidates_sessions_cache(self):
        series = create_series_row()
        session = create_session_row(
            series, "2024-06-03T09:00#v1", datetime(2024, 6, 3, 9, 0, tzinfo=UTC)
        )
        cache.set(series_sessions_key(series.pk), {"results": ["stale"]})

        session.delete()

        assert cache.get(series_sessions_key(series.pk)) is None

    def test_other_series_cache_untouched(self):
        first = create_series_row()
        second = create_series_row(title="Track basics")
        cache.set(series_detail_key(second.pk), {"title": "kept"})

        first.save()

        assert cache.get(series_detail_key(second.pk)) == {"title": "kept"}
