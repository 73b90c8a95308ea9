"""Preview hash over a series schedule.

The digest covers what publish would commit: occurrence keys and time ranges
for one series under one rule version. Conflict annotations are display data
and are left out, so toggling conflict checks never changes the hash.
"""

import hashlib
from collections.abc import Iterable

from courses.domain.models import Occurrence


def _normalize(series_id: int, rule_version: str, occurrences: Iterable[Occurrence]) -> str:
    lines = [f"series={series_id}", f"version={rule_version}"]
    for occ in sorted(occurrences, key=lambda o: o.key):
        lines.append(f"{occ.key}|{occ.starts_at.isoformat()}|{occ.ends_at.isoformat()}")
    return "\n".join(lines)


def compute_preview_hash(
    series_id: int,
    rule_version: str,
    occurrences: Iterable[Occurrence],
) -> str:
    """Return the lowercase hex SHA-256 digest of the normalized schedule."""
    payload = _normalize(series_id, rule_version, occurrences)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def hashes_match(expected: str, supplied: str) -> bool:
    return expected == supplied.strip().lower()
