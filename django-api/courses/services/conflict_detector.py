"""Advisory conflict detection against already scheduled sessions."""

import logging
from collections.abc import Sequence
from dataclasses import replace

from courses.domain import Checked, Occurrence, SeriesId
from courses.stores.interfaces import SessionStore

logger = logging.getLogger(__name__)


class ConflictDetector:
    """Annotate occurrences with how many existing sessions of a coach overlap them.

    Intervals are half-open: a session ending exactly when a candidate starts
    is not a conflict.
    """

    def __init__(self, store: SessionStore) -> None:
        self._store = store

    def annotate(
        self,
        occurrences: Sequence[Occurrence],
        coach_id: int | None,
        series_id: SeriesId | None = None,
    ) -> tuple[Occurrence, ...]:
        if not occurrences:
            return ()
        if coach_id is None:
            return tuple(replace(occ, conflict=Checked(0)) for occ in occurrences)

        range_start = min(occ.starts_at for occ in occurrences)
        range_end = max(occ.ends_at for occ in occurrences)
        existing = self._store.find_overlapping(coach_id, range_start, range_end)
        logger.debug(
            "Checking %d occurrences against %d sessions of coach %s",
            len(occurrences),
            len(existing),
            coach_id,
        )

        annotated = []
        for occ in occurrences:
            overlapping = {
                session.id
                for session in existing
                if session.starts_at < occ.ends_at
                and session.ends_at > occ.starts_at
                and not (session.series_id == series_id and session.occurrence_key == occ.key)
            }
            annotated.append(replace(occ, conflict=Checked(len(overlapping))))
        return tuple(annotated)
