"""Recurrence rule parsing and occurrence expansion.

Expansion is a pure computation: the same series inputs always produce the
same ordered occurrences with the same keys. Preview hashing depends on that.

Rule grammar (v1)::

    BYDAY=MO,WE,FR;BYHOUR=9;BYMINUTE=30

Pairs are separated by ``;`` or ``&`` and are case insensitive. ``FREQ`` is
accepted only as ``WEEKLY``. ``BYDAY`` may be absent or empty, which yields
no occurrences. A parsed rule is expanded as an RFC 5545 weekly ``rrule``.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from enum import Enum
from typing import Protocol, assert_never

from dateutil.rrule import WEEKLY, rrule

from courses.domain.errors import InvalidRangeError, UnsupportedRecurrenceTokenError
from courses.domain.models import Occurrence

DEFAULT_MAX_SPAN_DAYS = 365

DAY_CODES: dict[str, int] = {
    "MO": 1,
    "MON": 1,
    "TU": 2,
    "TUE": 2,
    "WE": 3,
    "WED": 3,
    "TH": 4,
    "THU": 4,
    "FR": 5,
    "FRI": 5,
    "SA": 6,
    "SAT": 6,
    "SU": 7,
    "SUN": 7,
}


class RuleVersion(str, Enum):
    """Version of the occurrence key algorithm and rule grammar."""

    V1 = "v1"


@dataclass(frozen=True)
class RecurrenceRule:
    """Parsed weekly rule: ISO weekday indexes plus an anchor time of day."""

    weekdays: frozenset[int]
    hour: int
    minute: int

    def to_rrule(self, start_date: date, end_date: date) -> rrule:
        """Weekly RRULE over the inclusive local date range, naive wall-clock times."""
        return rrule(
            WEEKLY,
            byweekday=[day - 1 for day in sorted(self.weekdays)],
            byhour=self.hour,
            byminute=self.minute,
            bysecond=0,
            dtstart=datetime.combine(start_date, time()),
            until=datetime.combine(end_date, time(23, 59, 59)),
        )


class RuleParser(Protocol):
    def parse(self, raw: str) -> RecurrenceRule: ...


class WeeklyRuleParser:
    """Parser for the v1 ``BYDAY``/``BYHOUR``/``BYMINUTE`` grammar."""

    allowed_keys = frozenset({"FREQ", "BYDAY", "BYHOUR", "BYMINUTE"})

    def parse(self, raw: str) -> RecurrenceRule:
        pairs = self._split_pairs(raw)

        if "FREQ" in pairs and pairs["FREQ"] != "WEEKLY":
            raise UnsupportedRecurrenceTokenError(f"FREQ={pairs['FREQ']}")
        if "BYHOUR" not in pairs:
            raise UnsupportedRecurrenceTokenError("BYHOUR")

        weekdays = self._parse_days(pairs.get("BYDAY", ""))
        hour = self._parse_bounded("BYHOUR", pairs["BYHOUR"], 23)
        minute = self._parse_bounded("BYMINUTE", pairs.get("BYMINUTE", "0"), 59)
        return RecurrenceRule(weekdays=weekdays, hour=hour, minute=minute)

    def _split_pairs(self, raw: str) -> dict[str, str]:
        pairs: dict[str, str] = {}
        for chunk in raw.strip().upper().replace("&", ";").split(";"):
            chunk = chunk.strip()
            if not chunk:
                continue
            key, sep, value = chunk.partition("=")
            key = key.strip()
            if not sep or not key:
                raise UnsupportedRecurrenceTokenError(chunk)
            if key not in self.allowed_keys:
                raise UnsupportedRecurrenceTokenError(key)
            pairs[key] = value.strip()
        return pairs

    def _parse_days(self, value: str) -> frozenset[int]:
        days: set[int] = set()
        for code in value.split(","):
            code = code.strip()
            if not code:
                continue
            if code not in DAY_CODES:
                raise UnsupportedRecurrenceTokenError(code)
            days.add(DAY_CODES[code])
        return frozenset(days)

    def _parse_bounded(self, key: str, value: str, upper: int) -> int:
        if not value.isdigit():
            raise UnsupportedRecurrenceTokenError(f"{key}={value}")
        parsed = int(value)
        if parsed > upper:
            raise UnsupportedRecurrenceTokenError(f"{key}={value}")
        return parsed


_WEEKLY_PARSER = WeeklyRuleParser()


def parser_for(version: RuleVersion) -> RuleParser:
    match version:
        case RuleVersion.V1:
            return _WEEKLY_PARSER
        case _:
            assert_never(version)


def occurrence_key(local_start: datetime, version: RuleVersion | str) -> str:
    """Stable key for an occurrence: local start minute plus a version tag."""
    tag = version.value if isinstance(version, RuleVersion) else version
    return f"{local_start:%Y-%m-%dT%H:%M}#{tag}"


def validate_range(
    series_id: int,
    start_date: date,
    end_date: date,
    max_span_days: int = DEFAULT_MAX_SPAN_DAYS,
) -> None:
    if end_date < start_date:
        raise InvalidRangeError(f"Series {series_id} ends before it starts")
    if (end_date - start_date).days > max_span_days:
        raise InvalidRangeError(f"Series {series_id} spans more than {max_span_days} days")


def expand(
    series_id: int,
    start_date: date,
    end_date: date,
    recurrence_rule: str | None,
    session_duration_minutes: int,
    tz: tzinfo,
    *,
    rule_version: RuleVersion = RuleVersion.V1,
    max_span_days: int = DEFAULT_MAX_SPAN_DAYS,
) -> tuple[Occurrence, ...]:
    """Expand a series' recurrence into ordered occurrences.

    Start and end dates are inclusive calendar dates. Times are wall-clock
    times in ``tz``. A missing or blank rule is a valid series without a
    recurring schedule and yields an empty tuple.

    Raises:
        InvalidRangeError: If the dates are reversed, the span is too long,
            or the duration is not positive.
        UnsupportedRecurrenceTokenError: If the rule cannot be parsed.
    """
    validate_range(series_id, start_date, end_date, max_span_days)
    if session_duration_minutes <= 0:
        raise InvalidRangeError("Session duration must be positive")

    if recurrence_rule is None or not recurrence_rule.strip():
        return ()

    rule = parser_for(rule_version).parse(recurrence_rule)
    if not rule.weekdays:
        return ()

    duration = timedelta(minutes=session_duration_minutes)
    occurrences: list[Occurrence] = []
    for local_start in rule.to_rrule(start_date, end_date):
        starts_at = local_start.replace(tzinfo=tz)
        occurrences.append(
            Occurrence(
                key=occurrence_key(local_start, rule_version),
                starts_at=starts_at,
                ends_at=starts_at + duration,
                day=local_start.date(),
                weekday_index=local_start.isoweekday(),
            )
        )
    return tuple(occurrences)
