"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Self


def _parse_positive_int(value: str) -> int:
    parsed = int(str(value).strip())
    if parsed <= 0:
        raise ValueError("Identifier must be a positive integer")
    return parsed


@dataclass(frozen=True)
class SeriesId:
    """Unique identifier for a course Series."""

    value: int

    def __post_init__(self) -> None:
        if self.value <= 0:
            raise ValueError("SeriesId must be positive")

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=_parse_positive_int(value))


@dataclass(frozen=True)
class SessionId:
    """Unique identifier for a Session."""

    value: int

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=_parse_positive_int(value))


@dataclass(frozen=True)
class Money:
    """Price representation with validation."""

    amount: Decimal

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError("Money amount cannot be negative")

    def __str__(self) -> str:
        return f"{self.amount:.2f}"


@dataclass(frozen=True)
class Capacity:
    """Non-negative integer representing capacity."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("Capacity cannot be negative")
