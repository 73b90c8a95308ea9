"""Cache keys for series read endpoints."""

from django.core.cache import cache


def series_detail_key(series_id: int) -> str:
    return f"series:{series_id}"


def series_sessions_key(series_id: int) -> str:
    return f"series:{series_id}:sessions"


def invalidate_series(series_id: int) -> None:
    cache.delete_many([series_detail_key(series_id), series_sessions_key(series_id)])


def invalidate_series_sessions(series_id: int) -> None:
    cache.delete(series_sessions_key(series_id))
