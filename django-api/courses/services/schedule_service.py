"""Schedule service - preview and publish of a series' recurring sessions.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors

Preview never writes. Publish re-derives the schedule from current series
state, checks it against the preview hash the caller saw, and materializes
the selected occurrences inside one transaction. Session creation is keyed on
(series, occurrence key), so replaying a publish never duplicates sessions.
"""

import logging
from collections.abc import Callable, Iterable, Sequence
from datetime import datetime, time, timedelta, timezone, tzinfo

from courses.conf import SchedulingConfig
from courses.domain import (
    CallerIdentity,
    CustomSession,
    NewSession,
    Occurrence,
    PreviewResult,
    PublishResult,
    SeriesId,
    Series,
    SeriesStatus,
)
from courses.domain.errors import (
    CommitFailedError,
    EmptyScheduleError,
    InvalidCustomSessionError,
    InvalidSeriesIdError,
    PreviewStaleError,
    SeriesAlreadyPublishedError,
    SeriesNotFoundError,
    SeriesNotInPlannedStateError,
    UnknownOccurrenceKeyError,
)
from courses.domain.hashing import compute_preview_hash, hashes_match
from courses.domain.policies import (
    conflict_scope,
    require_scheduling_role,
    require_series_access,
    resolve_default_coach,
    resolve_lead_coach,
)
from courses.domain.recurrence import RuleVersion, expand, occurrence_key
from courses.services.conflict_detector import ConflictDetector
from courses.stores.interfaces import SeriesStore, SessionStore

logger = logging.getLogger(__name__)

CUSTOM_KEY_TAG = "custom"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ScheduleService:
    """Service for previewing and publishing series schedules."""

    def __init__(
        self,
        series_store: SeriesStore,
        session_store: SessionStore,
        config: SchedulingConfig,
        tz: tzinfo,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._series_store = series_store
        self._session_store = session_store
        self._config = config
        self._rule_version = RuleVersion(config.rule_version)
        self._tz = tz
        self._clock = clock
        self._detector = ConflictDetector(session_store)

    def preview_schedule(
        self,
        identity: CallerIdentity,
        series_id: str | int,
        enable_conflict_check: bool = True,
        candidate_lead_coach_id: int | None = None,
    ) -> PreviewResult:
        """Compute the occurrences a publish would create, without writing.

        Raises:
            AccessDeniedError: If the caller may not schedule this series.
            InvalidSeriesIdError: If the series_id is not a positive integer.
            SeriesNotFoundError: If the series does not exist.
            SeriesNotInPlannedStateError: If the series is not PLANNED.
            InvalidRangeError: If the series dates cannot be expanded.
            UnsupportedRecurrenceTokenError: If the recurrence rule is malformed.
        """
        require_scheduling_role(identity)
        series = self._require_series(self._parse_id(series_id))
        require_series_access(identity, series)
        if series.status != SeriesStatus.PLANNED:
            raise SeriesNotInPlannedStateError(series.id.value, series.status.value)

        occurrences = self._expand(series)
        preview_hash = self._hash(series, occurrences)
        if enable_conflict_check:
            scope = conflict_scope(identity, series, candidate_lead_coach_id)
            occurrences = self._detector.annotate(occurrences, scope, series.id)

        logger.debug(
            "Previewed series %s: %d occurrences, hash %s",
            series.id.value,
            len(occurrences),
            preview_hash,
        )
        return PreviewResult(
            series=series,
            occurrences=occurrences,
            preview_hash=preview_hash,
            default_lead_coach_id=resolve_default_coach(identity),
        )

    def publish_schedule(
        self,
        identity: CallerIdentity,
        series_id: str | int,
        preview_hash: str,
        selected_keys: Sequence[str] | None = None,
        dry_run: bool = False,
        lead_coach_id: int | None = None,
        custom_sessions: Sequence[CustomSession] = (),
        enable_conflict_check: bool = False,
    ) -> PublishResult:
        """Materialize the selected occurrences of a previewed schedule.

        ``selected_keys`` of None selects every occurrence, an empty sequence
        selects none. With ``dry_run`` every check runs and the result reports
        how many sessions would be created, but nothing is written; an empty
        dry run reports zero instead of failing. ``enable_conflict_check``
        covers both selected occurrences and custom sessions.

        Raises:
            AccessDeniedError: If the caller may not schedule this series.
            InvalidSeriesIdError: If the series_id is not a positive integer.
            SeriesNotFoundError: If the series does not exist.
            SeriesAlreadyPublishedError: If the series is no longer PLANNED.
            PreviewStaleError: If the schedule changed since the preview.
            UnknownOccurrenceKeyError: If a selected key is not in the schedule.
            InvalidCustomSessionError: If an ad-hoc session is invalid.
            LeadCoachRequiredError: If a staff caller named no lead coach.
            EmptyScheduleError: If a real publish would materialize nothing.
            CommitFailedError: If the transaction could not be committed.
        """
        require_scheduling_role(identity)
        series = self._require_series(self._parse_id(series_id))
        require_series_access(identity, series)
        self._require_publishable(series)

        occurrences = self._verified_occurrences(series, preview_hash)
        selected = self._select(occurrences, selected_keys)
        customs = self._validate_custom_sessions(series, custom_sessions, selected)
        lead_coach = resolve_lead_coach(identity, lead_coach_id)
        if not dry_run and not selected and not customs:
            raise EmptyScheduleError()

        conflicting_keys = None
        if enable_conflict_check:
            scope = conflict_scope(identity, series, lead_coach)
            candidates = [*selected, *(self._as_occurrence(c) for c in customs)]
            annotated = self._detector.annotate(candidates, scope, series.id)
            conflicting_keys = tuple(
                sorted(o.key for o in annotated if o.conflict.has_conflict)
            )

        pending = self._new_sessions(series, selected, customs, lead_coach)

        if dry_run:
            existing = self._session_store.existing_keys(series.id)
            would_create = sum(1 for s in pending if s.occurrence_key not in existing)
            logger.info(
                "Dry run publish of series %s would create %d of %d sessions",
                series.id.value,
                would_create,
                len(pending),
            )
            return PublishResult(
                series_id=series.id,
                status=series.status,
                published_at=None,
                created_sessions=would_create,
                dry_run=True,
                conflicting_keys=conflicting_keys,
            )

        return self._commit(series.id, preview_hash, pending, conflicting_keys)

    def _commit(
        self,
        series_id: SeriesId,
        preview_hash: str,
        pending: Sequence[NewSession],
        conflicting_keys: tuple[str, ...] | None,
    ) -> PublishResult:
        published_at = self._clock()
        created = 0
        try:
            with self._series_store.atomic():
                locked = self._series_store.lock_series(series_id)
                if locked is None:
                    raise SeriesNotFoundError(series_id.value)
                self._require_publishable(locked)
                self._verified_occurrences(locked, preview_hash)

                for new_session in pending:
                    inserted, _ = self._session_store.create_if_absent(new_session)
                    if inserted:
                        created += 1
                self._series_store.mark_published(series_id, published_at)
        except CommitFailedError:
            logger.error("Publish of series %s rolled back", series_id.value)
            raise

        logger.info(
            "Published series %s: created %d of %d sessions",
            series_id.value,
            created,
            len(pending),
        )
        return PublishResult(
            series_id=series_id,
            status=SeriesStatus.PUBLISHED,
            published_at=published_at,
            created_sessions=created,
            conflicting_keys=conflicting_keys,
        )

    def _parse_id(self, series_id: str | int) -> SeriesId:
        try:
            return SeriesId.from_string(str(series_id))
        except ValueError:
            raise InvalidSeriesIdError() from None

    def _require_series(self, series_id: SeriesId) -> Series:
        series = self._series_store.get_series(series_id)
        if series is None:
            raise SeriesNotFoundError(series_id.value)
        return series

    def _require_publishable(self, series: Series) -> None:
        if series.status != SeriesStatus.PLANNED:
            raise SeriesAlreadyPublishedError(series.id.value, series.status.value)

    def _expand(self, series: Series) -> tuple[Occurrence, ...]:
        return expand(
            series.id.value,
            series.start_date,
            series.end_date,
            series.recurrence_rule,
            series.session_duration_minutes,
            self._tz,
            rule_version=self._rule_version,
            max_span_days=self._config.max_span_days,
        )

    def _hash(self, series: Series, occurrences: Iterable[Occurrence]) -> str:
        return compute_preview_hash(series.id.value, self._rule_version.value, occurrences)

    def _verified_occurrences(
        self, series: Series, preview_hash: str
    ) -> tuple[Occurrence, ...]:
        occurrences = self._expand(series)
        current = self._hash(series, occurrences)
        if not hashes_match(current, preview_hash):
            logger.warning(
                "Stale preview for series %s: supplied %s, current %s",
                series.id.value,
                preview_hash,
                current,
            )
            raise PreviewStaleError(expected_hash=current, supplied_hash=preview_hash)
        return occurrences

    def _select(
        self, occurrences: Sequence[Occurrence], selected_keys: Sequence[str] | None
    ) -> tuple[Occurrence, ...]:
        if selected_keys is None:
            return tuple(occurrences)
        by_key = {occ.key: occ for occ in occurrences}
        for key in selected_keys:
            if key not in by_key:
                raise UnknownOccurrenceKeyError(key)
        wanted = set(selected_keys)
        return tuple(occ for occ in occurrences if occ.key in wanted)

    def _localize(self, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=self._tz)
        return value.astimezone(self._tz)

    def _custom_key(self, starts_at: datetime) -> str:
        """Key of a custom session; minute precision, like rule occurrences."""
        return occurrence_key(starts_at.replace(tzinfo=None), CUSTOM_KEY_TAG)

    def _as_occurrence(self, custom: CustomSession) -> Occurrence:
        return Occurrence(
            key=self._custom_key(custom.starts_at),
            starts_at=custom.starts_at,
            ends_at=custom.ends_at,
            day=custom.starts_at.date(),
            weekday_index=custom.starts_at.isoweekday(),
        )

    def _validate_custom_sessions(
        self,
        series: Series,
        custom_sessions: Sequence[CustomSession],
        selected: Sequence[Occurrence],
    ) -> list[CustomSession]:
        range_start = datetime.combine(series.start_date, time(), tzinfo=self._tz)
        range_end = datetime.combine(
            series.end_date + timedelta(days=1), time(), tzinfo=self._tz
        )
        taken = {occ.starts_at for occ in selected}
        seen_keys: set[str] = set()

        validated = []
        for custom in custom_sessions:
            starts_at = self._localize(custom.starts_at)
            ends_at = self._localize(custom.ends_at)
            label = starts_at.isoformat()
            if starts_at >= ends_at:
                raise InvalidCustomSessionError("Session must start before it ends", label)
            if starts_at < range_start or ends_at > range_end:
                raise InvalidCustomSessionError("Session is outside the series dates", label)
            key = self._custom_key(starts_at)
            if starts_at in taken or key in seen_keys:
                raise InvalidCustomSessionError("Another session starts at the same time", label)
            taken.add(starts_at)
            seen_keys.add(key)
            validated.append(
                CustomSession(
                    starts_at=starts_at,
                    ends_at=ends_at,
                    location_text=custom.location_text,
                    remark=custom.remark,
                )
            )
        return validated

    def _new_sessions(
        self,
        series: Series,
        selected: Sequence[Occurrence],
        customs: Sequence[CustomSession],
        lead_coach_id: int,
    ) -> list[NewSession]:
        default_location = self._config.default_location_text
        sessions = [
            NewSession(
                series_id=series.id,
                occurrence_key=occ.key,
                starts_at=occ.starts_at,
                ends_at=occ.ends_at,
                location_text=default_location,
                lead_coach_id=lead_coach_id,
                leave_cutoff_hours_override=series.leave_cutoff_hours,
            )
            for occ in selected
        ]
        for custom in customs:
            location = (custom.location_text or "").strip() or default_location
            sessions.append(
                NewSession(
                    series_id=series.id,
                    occurrence_key=self._custom_key(custom.starts_at),
                    starts_at=custom.starts_at,
                    ends_at=custom.ends_at,
                    location_text=location,
                    lead_coach_id=lead_coach_id,
                    leave_cutoff_hours_override=series.leave_cutoff_hours,
                    remark=custom.remark,
                )
            )
        return sorted(sessions, key=lambda s: s.occurrence_key)
