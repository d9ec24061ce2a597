"""Small value objects produced by the interpreters."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from dwc.vocab import Country


@dataclass(frozen=True)
class CoordinatePoint:
    """A WGS84 point and the country it is attributed to."""

    latitude: float
    longitude: float
    country: Optional[Country] = None


@dataclass(frozen=True)
class DateYMD:
    """A possibly partial calendar date.

    ``date`` is only set when year, month and day all resolved.
    """

    year: Optional[int] = None
    month: Optional[int] = None
    day: Optional[int] = None

    @property
    def date(self) -> Optional[date]:
        if self.year is None or self.month is None or self.day is None:
            return None
        return date(self.year, self.month, self.day)

    @property
    def iso(self) -> Optional[str]:
        """ISO 8601 text at the finest resolved precision."""
        if self.year is None:
            return None
        if self.month is None:
            return f"{self.year:04d}"
        if self.day is None:
            return f"{self.year:04d}-{self.month:02d}"
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"

    @property
    def is_empty(self) -> bool:
        return self.year is None and self.month is None and self.day is None


@dataclass(frozen=True)
class DoubleAccuracy:
    """A measurement and its +/- accuracy in the same unit."""

    value: float
    accuracy: float = 0.0


__all__ = ["CoordinatePoint", "DateYMD", "DoubleAccuracy"]
