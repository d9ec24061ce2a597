"""Elevation and depth from minimum/maximum text fields."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from dwc.issues import IssueCode

from .result import ParseOutcome
from .values import DoubleAccuracy

logger = logging.getLogger(__name__)

FEET_TO_METERS = 0.3048

_NUMBER = r"[+-]?\d+(?:[.,]\d+)?"
_MEASURE_RE = re.compile(
    rf"""^(?:ca\.?|c\.|approx\.?|about|~|±)?\s*
    (?P<low>{_NUMBER})
    (?:\s*(?:-|–|to)\s*(?P<high>{_NUMBER}))?
    \s*(?P<unit>m|mts?|meters?|metres?|km|ft|feet|foot|'|′)?\.?$""",
    re.IGNORECASE | re.VERBOSE,
)

_FEET_UNITS = {"ft", "feet", "foot", "'", "′"}


@dataclass(frozen=True)
class MeasurementRule:
    """Plausible range and issue codes for one kind of measurement."""

    name: str
    lower: float
    upper: float
    unlikely: IssueCode
    swapped: IssueCode
    non_numeric: IssueCode
    not_metric: IssueCode


ELEVATION = MeasurementRule(
    name="elevation",
    lower=-11000,
    upper=9000,
    unlikely=IssueCode.ELEVATION_UNLIKELY,
    swapped=IssueCode.ELEVATION_MIN_MAX_SWAPPED,
    non_numeric=IssueCode.ELEVATION_NON_NUMERIC,
    not_metric=IssueCode.ELEVATION_NOT_METRIC,
)

DEPTH = MeasurementRule(
    name="depth",
    lower=0,
    upper=11000,
    unlikely=IssueCode.DEPTH_UNLIKELY,
    swapped=IssueCode.DEPTH_MIN_MAX_SWAPPED,
    non_numeric=IssueCode.DEPTH_NON_NUMERIC,
    not_metric=IssueCode.DEPTH_NOT_METRIC,
)


@dataclass(frozen=True)
class Measure:
    low: float
    high: float
    feet: bool = False


def _number(text: str) -> float:
    return float(text.replace(",", "."))


def parse_measure(text: Optional[str]) -> Optional[Measure]:
    """Parse ``"120"``, ``"120 m"``, ``"ca. 400 ft"`` or ``"100-200m"`` into meters."""

    if text is None:
        return None
    match = _MEASURE_RE.match(" ".join(text.split()))
    if not match:
        return None
    low = _number(match.group("low"))
    high = _number(match.group("high")) if match.group("high") else low
    unit = (match.group("unit") or "m").lower()
    if unit in _FEET_UNITS:
        return Measure(low * FEET_TO_METERS, high * FEET_TO_METERS, feet=True)
    if unit == "km":
        return Measure(low * 1000, high * 1000)
    return Measure(low, high)


def interpret_meter_range(
    minimum: Optional[str], maximum: Optional[str], rule: MeasurementRule
) -> ParseOutcome[DoubleAccuracy]:
    """Combine a min/max pair into one value with an accuracy of half the range."""

    if all(t is None or not t.strip() for t in (minimum, maximum)):
        return ParseOutcome.fail()

    issues = set()
    bounds: List[Optional[Tuple[float, float]]] = []
    for text in (minimum, maximum):
        if text is None or not text.strip():
            bounds.append(None)
            continue
        measure = parse_measure(text)
        if measure is None:
            logger.debug(f"Non numeric {rule.name} {text!r}")
            issues.add(rule.non_numeric)
            bounds.append(None)
            continue
        if measure.feet:
            issues.add(rule.not_metric)
        bounds.append((measure.low, measure.high))

    low_bound, high_bound = bounds
    if low_bound is None and high_bound is None:
        return ParseOutcome.fail(issues)
    low = low_bound[0] if low_bound is not None else high_bound[0]
    high = high_bound[1] if high_bound is not None else low_bound[1]
    if low > high:
        issues.add(rule.swapped)
        low, high = high, low

    value = round((low + high) / 2, 2)
    accuracy = round((high - low) / 2, 2)
    if not rule.lower <= value <= rule.upper:
        logger.debug(f"Unlikely {rule.name} {value} outside [{rule.lower}, {rule.upper}]")
        issues.add(rule.unlikely)
        return ParseOutcome.fail(issues)
    return ParseOutcome.success(DoubleAccuracy(value, accuracy), issues=issues)


def interpret_elevation(minimum: Optional[str], maximum: Optional[str]) -> ParseOutcome[DoubleAccuracy]:
    return interpret_meter_range(minimum, maximum, ELEVATION)


def interpret_depth(minimum: Optional[str], maximum: Optional[str]) -> ParseOutcome[DoubleAccuracy]:
    return interpret_meter_range(minimum, maximum, DEPTH)


__all__ = [
    "MeasurementRule",
    "Measure",
    "ELEVATION",
    "DEPTH",
    "parse_measure",
    "interpret_meter_range",
    "interpret_elevation",
    "interpret_depth",
]
