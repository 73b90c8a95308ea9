"""Unit tests for recurrence rule parsing and expansion.

Run with: pytest tests/test_recurrence.py -v
"""

from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from courses.domain import NotChecked
from courses.domain.errors import InvalidRangeError, UnsupportedRecurrenceTokenError
from courses.domain.recurrence import (
    RecurrenceRule,
    RuleVersion,
    WeeklyRuleParser,
    expand,
    occurrence_key,
    parser_for,
)

UTC = ZoneInfo("UTC")
MON_WED_NINE = "BYDAY=MO,WE;BYHOUR=9;BYMINUTE=0"


def expand_june(rule=MON_WED_NINE, **kwargs):
    return expand(1, date(2024, 6, 3), date(2024, 6, 17), rule, 60, UTC, **kwargs)


class TestWeeklyRuleParser:
    def test_parses_days_hour_and_minute(self):
        rule = WeeklyRuleParser().parse("BYDAY=MO,WE,FR;BYHOUR=18;BYMINUTE=30")
        assert rule == RecurrenceRule(weekdays=frozenset({1, 3, 5}), hour=18, minute=30)

    def test_accepts_long_day_codes_lowercase_and_ampersand(self):
        rule = WeeklyRuleParser().parse("byday=mon,sun&byhour=7")
        assert rule.weekdays == frozenset({1, 7})
        assert (rule.hour, rule.minute) == (7, 0)

    def test_accepts_weekly_frequency(self):
        rule = WeeklyRuleParser().parse("FREQ=WEEKLY;BYDAY=TU;BYHOUR=10")
        assert rule.weekdays == frozenset({2})

    def test_missing_byday_means_no_weekdays(self):
        assert WeeklyRuleParser().parse("BYHOUR=9").weekdays == frozenset()

    @pytest.mark.parametrize(
        "rule, token",
        [
            ("BYDAY=MO;BYHOUR=9;COUNT=4", "COUNT"),
            ("BYDAY=XX;BYHOUR=9", "XX"),
            ("BYDAY=MO", "BYHOUR"),
            ("BYDAY=MO;BYHOUR=24", "BYHOUR=24"),
            ("BYDAY=MO;BYHOUR=9;BYMINUTE=60", "BYMINUTE=60"),
            ("BYDAY=MO;BYHOUR=nine", "BYHOUR=NINE"),
            ("FREQ=DAILY;BYHOUR=9", "FREQ=DAILY"),
            ("BYDAY=MO;BYHOUR=9;garbage", "GARBAGE"),
        ],
    )
    def test_rejects_unsupported_tokens(self, rule, token):
        with pytest.raises(UnsupportedRecurrenceTokenError) as exc_info:
            WeeklyRuleParser().parse(rule)
        assert exc_info.value.token == token

    def test_every_rule_version_has_a_parser(self):
        for version in RuleVersion:
            assert parser_for(version) is not None


class TestOccurrenceKey:
    def test_key_uses_local_start_minute_and_version(self):
        assert occurrence_key(datetime(2024, 6, 3, 9, 0), RuleVersion.V1) == "2024-06-03T09:00#v1"

    def test_key_accepts_plain_tag(self):
        assert occurrence_key(datetime(2024, 6, 3, 9, 5), "custom") == "2024-06-03T09:05#custom"


class TestExpand:
    def test_monday_wednesday_scenario(self):
        occurrences = expand_june()

        assert [o.day for o in occurrences] == [
            date(2024, 6, 3),
            date(2024, 6, 5),
            date(2024, 6, 10),
            date(2024, 6, 12),
            date(2024, 6, 17),
        ]
        assert [o.weekday_index for o in occurrences] == [1, 3, 1, 3, 1]
        first = occurrences[0]
        assert first.key == "2024-06-03T09:00#v1"
        assert first.starts_at == datetime(2024, 6, 3, 9, 0, tzinfo=UTC)
        assert first.ends_at == datetime(2024, 6, 3, 10, 0, tzinfo=UTC)
        assert all(isinstance(o.conflict, NotChecked) for o in occurrences)

    def test_occurrences_strictly_ascending(self):
        occurrences = expand(
            1, date(2024, 1, 1), date(2024, 3, 31), "BYDAY=SU,TU,FR;BYHOUR=6", 45, UTC
        )
        starts = [o.starts_at for o in occurrences]
        assert starts == sorted(starts)
        assert len(set(starts)) == len(starts)

    def test_expansion_is_deterministic(self):
        assert expand_june() == expand_june()

    def test_keys_are_unique(self):
        keys = [o.key for o in expand_june()]
        assert len(keys) == len(set(keys))

    def test_inclusive_single_day_range(self):
        occurrences = expand(1, date(2024, 6, 3), date(2024, 6, 3), MON_WED_NINE, 60, UTC)
        assert len(occurrences) == 1

    @pytest.mark.parametrize("rule", [None, "", "   "])
    def test_missing_rule_yields_nothing(self, rule):
        assert expand_june(rule=rule) == ()

    def test_empty_weekday_set_yields_nothing(self):
        assert expand_june(rule="BYDAY=;BYHOUR=9") == ()

    def test_end_before_start_is_invalid(self):
        with pytest.raises(InvalidRangeError):
            expand(1, date(2024, 6, 17), date(2024, 6, 3), MON_WED_NINE, 60, UTC)

    def test_end_before_start_is_invalid_even_without_rule(self):
        with pytest.raises(InvalidRangeError):
            expand(1, date(2024, 6, 17), date(2024, 6, 3), None, 60, UTC)

    def test_span_longer_than_limit_is_invalid(self):
        start = date(2024, 1, 1)
        with pytest.raises(InvalidRangeError):
            expand(1, start, start + timedelta(days=31), MON_WED_NINE, 60, UTC, max_span_days=30)

    def test_non_positive_duration_is_invalid(self):
        with pytest.raises(InvalidRangeError):
            expand(1, date(2024, 6, 3), date(2024, 6, 17), MON_WED_NINE, 0, UTC)

    def test_malformed_rule_fails(self):
        with pytest.raises(UnsupportedRecurrenceTokenError):
            expand_june(rule="BYDAY=MO;BYHOUR=9;UNTIL=20240630")

    def test_times_are_local_to_time_zone(self):
        shanghai = ZoneInfo("Asia/Shanghai")
        occurrences = expand(1, date(2024, 6, 3), date(2024, 6, 3), MON_WED_NINE, 90, shanghai)

        occ = occurrences[0]
        assert occ.key == "2024-06-03T09:00#v1"
        assert occ.starts_at.utcoffset() == timedelta(hours=8)
        assert occ.ends_at - occ.starts_at == timedelta(minutes=90)

    def test_wall_clock_time_survives_daylight_saving_change(self):
        berlin = ZoneInfo("Europe/Berlin")
        occurrences = expand(
            1, date(2024, 3, 25), date(2024, 4, 1), "BYDAY=MO;BYHOUR=9", 60, berlin
        )

        assert [o.key for o in occurrences] == ["2024-03-25T09:00#v1", "2024-04-01T09:00#v1"]
        assert occurrences[0].starts_at.utcoffset() == timedelta(hours=1)
        assert occurrences[1].starts_at.utcoffset() == timedelta(hours=2)


class TestRecurrenceRuleToRrule:
    def test_rrule_covers_inclusive_date_range(self):
        rule = RecurrenceRule(weekdays=frozenset({1, 3}), hour=9, minute=15)

        starts = list(rule.to_rrule(date(2024, 6, 3), date(2024, 6, 10)))

        assert starts == [
            datetime(2024, 6, 3, 9, 15),
            datetime(2024, 6, 5, 9, 15),
            datetime(2024, 6, 10, 9, 15),
        ]

    def test_rrule_starting_mid_week_skips_earlier_days(self):
        rule = RecurrenceRule(weekdays=frozenset({1, 7}), hour=18, minute=0)

        starts = list(rule.to_rrule(date(2024, 6, 5), date(2024, 6, 10)))

        assert starts == [datetime(2024, 6, 9, 18, 0), datetime(2024, 6, 10, 18, 0)]
