"""Unit tests for the preview hash.

Run with: pytest tests/test_hashing.py -v
"""

from dataclasses import replace
from datetime import date, timedelta
from zoneinfo import ZoneInfo

from courses.domain import Checked
from courses.domain.hashing import compute_preview_hash, hashes_match
from courses.domain.recurrence import expand

UTC = ZoneInfo("UTC")


def june_occurrences(rule="BYDAY=MO,WE;BYHOUR=9", duration=60):
    return expand(1, date(2024, 6, 3), date(2024, 6, 17), rule, duration, UTC)


class TestComputePreviewHash:
    def test_hash_is_64_hex_chars(self):
        digest = compute_preview_hash(1, "v1", june_occurrences())
        assert len(digest) == 64
        assert int(digest, 16) >= 0

    def test_hash_is_deterministic(self):
        assert compute_preview_hash(1, "v1", june_occurrences()) == compute_preview_hash(
            1, "v1", june_occurrences()
        )

    def test_hash_ignores_input_order(self):
        occurrences = june_occurrences()
        assert compute_preview_hash(1, "v1", occurrences) == compute_preview_hash(
            1, "v1", reversed(occurrences)
        )

    def test_hash_ignores_conflict_annotations(self):
        occurrences = june_occurrences()
        annotated = [replace(o, conflict=Checked(3)) for o in occurrences]
        assert compute_preview_hash(1, "v1", occurrences) == compute_preview_hash(
            1, "v1", annotated
        )

    def test_hash_changes_with_schedule(self):
        base = compute_preview_hash(1, "v1", june_occurrences())
        assert compute_preview_hash(1, "v1", june_occurrences(rule="BYDAY=MO;BYHOUR=9")) != base
        assert compute_preview_hash(1, "v1", june_occurrences(rule="BYDAY=MO,WE;BYHOUR=10")) != base
        assert compute_preview_hash(1, "v1", june_occurrences(duration=90)) != base

    def test_hash_changes_with_series_and_version(self):
        base = compute_preview_hash(1, "v1", june_occurrences())
        assert compute_preview_hash(2, "v1", june_occurrences()) != base
        assert compute_preview_hash(1, "v2", june_occurrences()) != base

    def test_empty_schedule_has_stable_hash(self):
        assert compute_preview_hash(1, "v1", []) == compute_preview_hash(1, "v1", ())

    def test_hash_changes_when_end_time_moves(self):
        occurrences = june_occurrences()
        shifted = [replace(occurrences[0], ends_at=occurrences[0].ends_at + timedelta(minutes=5))]
        shifted.extend(occurrences[1:])
        assert compute_preview_hash(1, "v1", occurrences) != compute_preview_hash(1, "v1", shifted)


class TestHashesMatch:
    def test_match_tolerates_case_and_whitespace(self):
        digest = compute_preview_hash(1, "v1", june_occurrences())
        assert hashes_match(digest, f" {digest.upper()} ")

    def test_mismatch(self):
        assert not hashes_match("a" * 64, "b" * 64)
