"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import datetime

from courses.domain import NewSession, SeriesId, Series, Session


class SeriesStore(ABC):
    """Interface for series aggregate persistence operations."""

    @abstractmethod
    def get_series(self, series_id: SeriesId) -> Series | None:
        """Return a series by ID, or None if not found."""
        ...

    @abstractmethod
    def lock_series(self, series_id: SeriesId) -> Series | None:
        """Return a series after taking a row lock held until the transaction ends.

        Must be called inside ``atomic()``.
        """
        ...

    @abstractmethod
    def mark_published(self, series_id: SeriesId, published_at: datetime) -> None:
        """Move a series to PUBLISHED and stamp its publish time."""
        ...

    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        """Open a transaction; any exception inside rolls back every write.

        Infrastructure failures surface as CommitFailedError.
        """
        ...


class SessionStore(ABC):
    """Interface for session persistence operations."""

    @abstractmethod
    def find_overlapping(
        self, coach_id: int, range_start: datetime, range_end: datetime
    ) -> list[Session]:
        """Return scheduled sessions of a coach overlapping [range_start, range_end)."""
        ...

    @abstractmethod
    def existing_keys(self, series_id: SeriesId) -> set[str]:
        """Return occurrence keys already materialized for a series."""
        ...

    @abstractmethod
    def create_if_absent(self, new_session: NewSession) -> tuple[bool, Session]:
        """Create a session unless one exists for (series_id, occurrence_key).

        Returns whether a row was inserted together with the stored session.
        """
        ...

    @abstractmethod
    def list_for_series(self, series_id: SeriesId) -> list[Session]:
        """Return all sessions for a series, ordered by starts_at ascending."""
        ...
