"""Latitude/longitude interpretation.

Coordinates are parsed from decimal or degree/minute/second text, range
checked and rounded.  Points that disagree with the country the record
claims are run through a fixed list of sign and axis corrections, each
verified against a reverse geocoder, before the as-given point is kept
and the disagreement is flagged.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from dwc.issues import IssueCode
from dwc.vocab import Country, are_equivalent
from qc.errors import LookupTransportError
from qc.protocols import Geocoder

from .result import ParseOutcome
from .values import CoordinatePoint

logger = logging.getLogger(__name__)

DECIMAL_PLACES = 5

WGS84_ALIASES = frozenset(
    {"WGS84", "WGS1984", "EPSG4326", "4326", "WORLDGEODETICSYSTEM1984", "WGS84EPSG4326"}
)

_DECIMAL_RE = re.compile(
    r"^(?P<pre>[NSEW])?\s*(?P<num>[+-]?\d+(?:\.\d+)?)\s*°?\s*(?P<post>[NSEW])?$",
    re.IGNORECASE,
)
_DMS_RE = re.compile(
    r"""^(?P<pre>[NSEW])?\s*
    (?P<sign>[+-])?(?P<deg>\d{1,3}(?:\.\d+)?)\s*(?:°|º|˚|d|deg|:|\s)\s*
    (?:(?P<min>\d{1,2}(?:\.\d+)?)\s*(?:'|′|’|m|min|:|\s)?\s*)?
    (?:(?P<sec>\d{1,2}(?:\.\d+)?)\s*(?:"|″|''|”|sec|s(?=\s*[NSEW]$))?\s*)?
    (?P<post>[NSEW])?$""",
    re.IGNORECASE | re.VERBOSE,
)
_LEADING_HEMISPHERE_PAIR_RE = re.compile(r"^([NS].+?)[\s,;/]+([EW].+)$", re.IGNORECASE)
_TRAILING_HEMISPHERE_PAIR_RE = re.compile(r"^(.+?[NS])[\s,;/]+(.+?[EW])$", re.IGNORECASE)


def _apply_hemisphere(value: float, *letters: Optional[str]) -> float:
    for letter in letters:
        if letter and letter.upper() in ("S", "W"):
            return -abs(value)
    return value


def parse_coordinate(text: Optional[str]) -> Optional[float]:
    """Parse one coordinate from decimal or degree/minute/second text.

    Returns ``None`` for anything that is not a coordinate.  No range check
    is done here.
    """

    if text is None:
        return None
    value = text.strip()
    if not value:
        return None
    if "," in value and "." not in value and value.count(",") == 1:
        value = value.replace(",", ".")

    match = _DECIMAL_RE.match(value)
    if match:
        return _apply_hemisphere(float(match.group("num")), match.group("pre"), match.group("post"))

    match = _DMS_RE.match(value)
    if match:
        minutes = float(match.group("min") or 0)
        seconds = float(match.group("sec") or 0)
        if minutes >= 60 or seconds >= 60:
            return None
        result = float(match.group("deg")) + minutes / 60 + seconds / 3600
        if match.group("sign") == "-":
            result = -result
        return _apply_hemisphere(result, match.group("pre"), match.group("post"))
    return None


def split_coordinate_pair(text: Optional[str]) -> Optional[Tuple[str, str]]:
    """Split combined verbatim coordinates into latitude and longitude text."""

    if text is None or not text.strip():
        return None
    value = " ".join(text.split())
    for pattern in (_LEADING_HEMISPHERE_PAIR_RE, _TRAILING_HEMISPHERE_PAIR_RE):
        match = pattern.match(value)
        if match:
            return match.group(1).strip(), match.group(2).strip()
    for separator in (";", "/", ","):
        parts = [part.strip() for part in value.split(separator)]
        if len(parts) == 2 and all(parts):
            return parts[0], parts[1]
    parts = value.split(" ")
    if len(parts) == 2:
        return parts[0], parts[1]
    return None


def is_wgs84(datum: Optional[str]) -> bool:
    if not datum:
        return False
    key = re.sub(r"[^A-Z0-9]", "", datum.upper())
    return key in WGS84_ALIASES


def in_range(latitude: float, longitude: float) -> bool:
    return -90 <= latitude <= 90 and -180 <= longitude <= 180


@dataclass(frozen=True)
class _Correction:
    latitude: float
    longitude: float
    issues: Tuple[IssueCode, ...] = ()


def _corrections(latitude: float, longitude: float) -> List[_Correction]:
    """Candidate points in the order they are tried."""
    return [
        _Correction(latitude, longitude),
        _Correction(-latitude, longitude, (IssueCode.PRESUMED_NEGATED_LATITUDE,)),
        _Correction(latitude, -longitude, (IssueCode.PRESUMED_NEGATED_LONGITUDE,)),
        _Correction(
            -latitude,
            -longitude,
            (IssueCode.PRESUMED_NEGATED_LATITUDE, IssueCode.PRESUMED_NEGATED_LONGITUDE),
        ),
        _Correction(longitude, latitude, (IssueCode.PRESUMED_SWAPPED_COORDINATE,)),
    ]


class CoordinateInterpreter:
    """Interpret a latitude/longitude pair against an optional known country."""

    def __init__(self, geocoder: Geocoder):
        self.geocoder = geocoder

    def _country_at(self, latitude: float, longitude: float) -> Optional[Country]:
        try:
            return self.geocoder.country_at(latitude, longitude)
        except LookupTransportError as e:
            logger.warning(f"Reverse geocoding {latitude},{longitude} failed: {e}")
            return None

    def interpret(
        self,
        latitude: Optional[str],
        longitude: Optional[str],
        datum: Optional[str] = None,
        country: Optional[Country] = None,
    ) -> ParseOutcome[CoordinatePoint]:
        if latitude is None or longitude is None or not latitude.strip() or not longitude.strip():
            return ParseOutcome.fail()

        lat = parse_coordinate(latitude)
        lon = parse_coordinate(longitude)
        if lat is None or lon is None:
            logger.debug(f"Unparsable coordinates {latitude!r}, {longitude!r}")
            return ParseOutcome.fail([IssueCode.COORDINATE_INVALID])

        issues = set()
        rounded_lat, rounded_lon = round(lat, DECIMAL_PLACES), round(lon, DECIMAL_PLACES)
        if rounded_lat != lat or rounded_lon != lon:
            issues.add(IssueCode.COORDINATE_ROUNDED)
        if not is_wgs84(datum):
            issues.add(IssueCode.GEODETIC_DATUM_ASSUMED_WGS84)

        candidates = [c for c in _corrections(rounded_lat, rounded_lon) if in_range(c.latitude, c.longitude)]
        if not candidates:
            return ParseOutcome.fail([IssueCode.COORDINATE_OUT_OF_RANGE])

        if country is None:
            chosen = candidates[0]
            resolved = self._country_at(chosen.latitude, chosen.longitude)
            if resolved is not None:
                issues.add(IssueCode.COUNTRY_DERIVED_FROM_COORDINATES)
            return self._success(chosen, resolved, issues)

        fallback: Optional[Tuple[_Correction, Optional[Country]]] = None
        for candidate in candidates:
            resolved = self._country_at(candidate.latitude, candidate.longitude)
            if fallback is None:
                fallback = (candidate, resolved)
            if resolved == country:
                return self._success(candidate, country, issues)
            if are_equivalent(country, resolved):
                logger.debug(f"Coordinates fall in {resolved.iso2}, recorded as {country.iso2}")
                issues.add(IssueCode.COUNTRY_DERIVED_FROM_COORDINATES)
                return self._success(candidate, resolved, issues)

        chosen, resolved = fallback
        if resolved is not None:
            issues.add(IssueCode.COUNTRY_COORDINATE_MISMATCH)
        return self._success(chosen, country, issues)

    @staticmethod
    def _success(
        candidate: _Correction, country: Optional[Country], issues: Iterable[IssueCode]
    ) -> ParseOutcome[CoordinatePoint]:
        point = CoordinatePoint(candidate.latitude, candidate.longitude, country)
        return ParseOutcome.success(point, issues=set(issues) | set(candidate.issues))

    def interpret_text(
        self,
        coordinates: Optional[str],
        datum: Optional[str] = None,
        country: Optional[Country] = None,
    ) -> ParseOutcome[CoordinatePoint]:
        """Interpret a single combined coordinate text such as ``43.65N 79.4W``."""

        if coordinates is None or not coordinates.strip():
            return ParseOutcome.fail()
        pair = split_coordinate_pair(coordinates)
        if pair is None:
            logger.debug(f"Cannot split verbatim coordinates {coordinates!r}")
            return ParseOutcome.fail([IssueCode.COORDINATE_INVALID])
        return self.interpret(pair[0], pair[1], datum, country)


def interpret_coordinates(
    geocoder: Geocoder,
    latitude: Optional[str],
    longitude: Optional[str],
    datum: Optional[str] = None,
    country: Optional[Country] = None,
) -> ParseOutcome[CoordinatePoint]:
    return CoordinateInterpreter(geocoder).interpret(latitude, longitude, datum, country)


def interpret_coordinate_text(
    geocoder: Geocoder,
    coordinates: Optional[str],
    datum: Optional[str] = None,
    country: Optional[Country] = None,
) -> ParseOutcome[CoordinatePoint]:
    return CoordinateInterpreter(geocoder).interpret_text(coordinates, datum, country)


__all__ = [
    "CoordinateInterpreter",
    "interpret_coordinates",
    "interpret_coordinate_text",
    "parse_coordinate",
    "split_coordinate_pair",
    "is_wgs84",
    "in_range",
]
