"""Scheduling settings with defaults, read from ``settings.COURSE_SCHEDULING``."""

from dataclasses import dataclass
from typing import Any

from django.conf import settings

DEFAULTS: dict[str, Any] = {
    "RULE_VERSION": "v1",
    "MAX_SPAN_DAYS": 365,
    "DEFAULT_LOCATION_TEXT": "On site",
    "CACHE_TIMEOUT": 300,
}


@dataclass(frozen=True)
class SchedulingConfig:
    rule_version: str
    max_span_days: int
    default_location_text: str
    cache_timeout: int


def get_config() -> SchedulingConfig:
    values = {**DEFAULTS, **getattr(settings, "COURSE_SCHEDULING", {})}
    return SchedulingConfig(
        rule_version=values["RULE_VERSION"],
        max_span_days=int(values["MAX_SPAN_DAYS"]),
        default_location_text=values["DEFAULT_LOCATION_TEXT"],
        cache_timeout=int(values["CACHE_TIMEOUT"]),
    )
