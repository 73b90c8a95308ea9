"""Series service - read access to series and their materialized sessions."""

from courses.domain import Series, SeriesId, Session
from courses.domain.errors import InvalidSeriesIdError, SeriesNotFoundError
from courses.stores.interfaces import SeriesStore, SessionStore


class SeriesService:
    """Service for series catalog reads."""

    def __init__(self, series_store: SeriesStore, session_store: SessionStore) -> None:
        self._series_store = series_store
        self._session_store = session_store

    def get_series(self, series_id: str) -> Series:
        """Return a series by ID.

        Raises:
            InvalidSeriesIdError: If the series_id is not a positive integer.
            SeriesNotFoundError: If the series does not exist.
        """
        sid = self._parse_id(series_id)
        series = self._series_store.get_series(sid)
        if series is None:
            raise SeriesNotFoundError(sid.value)
        return series

    def get_sessions_for_series(self, series_id: str) -> list[Session]:
        """Return sessions for a series, earliest first.

        Raises:
            InvalidSeriesIdError: If the series_id is not a positive integer.
            SeriesNotFoundError: If the series does not exist.
        """
        series = self.get_series(series_id)
        return self._session_store.list_for_series(series.id)

    def _parse_id(self, series_id: str) -> SeriesId:
        try:
            return SeriesId.from_string(series_id)
        except ValueError:
            raise InvalidSeriesIdError() from None
