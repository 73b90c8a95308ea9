"""Pytest configuration and shared fixtures."""

import pytest
from rest_framework.test import APIClient

from courses.services import ScheduleService, SeriesService
from factories import (
    FIXED_NOW,
    TEST_CONFIG,
    UTC,
    InMemorySeriesStore,
    InMemorySessionStore,
)


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def session_store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def series_store(session_store: InMemorySessionStore) -> InMemorySeriesStore:
    return InMemorySeriesStore(session_store)


@pytest.fixture
def schedule_service(
    series_store: InMemorySeriesStore, session_store: InMemorySessionStore
) -> ScheduleService:
    return ScheduleService(
        series_store, session_store, config=TEST_CONFIG, tz=UTC, clock=lambda: FIXED_NOW
    )


@pytest.fixture
def series_service(
    series_store: InMemorySeriesStore, session_store: InMemorySessionStore
) -> SeriesService:
    return SeriesService(series_store, session_store)
