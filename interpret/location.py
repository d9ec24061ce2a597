"""Location interpretation for one record.

Country text is interpreted first and then used to cross-check the
coordinates.  The coordinates are tried from the decimal fields, the
verbatim latitude/longitude fields and the combined verbatim coordinates,
in that order.  Continent, water body, state/province, elevation, depth,
precision and uncertainty are interpreted independently.
"""

from __future__ import annotations

import logging
import math
import string
from typing import Any, Callable, Dict, List, Optional

from dwc.issues import IssueCode
from dwc.record import InterpretedRecord, VerbatimRecord
from dwc.terms import Term
from dwc.vocab import ContinentParser, Country, CountryParser, preferred

from .coordinates import CoordinateInterpreter
from .measurements import interpret_depth, interpret_elevation, parse_measure
from .result import ParseOutcome
from .values import CoordinatePoint

logger = logging.getLogger(__name__)

DEFAULT_MAX_COORDINATE_PRECISION = 10.0
MAX_COORDINATE_UNCERTAINTY_METERS = 5_000_000

_COUNTRY_PARSER = CountryParser()
_CONTINENT_PARSER = ContinentParser()


def clean_name(value: Optional[str]) -> Optional[str]:
    """Collapse whitespace and capitalise text written all in upper case."""

    if value is None:
        return None
    text = " ".join(value.split())
    if not text:
        return None
    if text.isupper():
        text = string.capwords(text.lower())
    return text


def interpret_country(*values: Optional[str]) -> ParseOutcome[Country]:
    """Interpret the country from several text sources, first success wins.

    A non blank source that does not parse before a country is chosen adds
    ``COUNTRY_INVALID``; unparsable sources after that are ignored.  A
    later source disagreeing with the chosen country adds
    ``COUNTRY_MISMATCH``.
    """

    chosen = None
    issues = set()
    for value in values:
        if value is None or not value.strip():
            continue
        candidate = _COUNTRY_PARSER.parse(value)
        if candidate is None:
            logger.debug(f"Invalid country {value!r}")
            if chosen is None:
                issues.add(IssueCode.COUNTRY_INVALID)
        elif chosen is None:
            chosen = candidate
        elif candidate.value != chosen.value:
            logger.debug(f"Country {value!r} disagrees with {chosen.value.iso2}")
            issues.add(IssueCode.COUNTRY_MISMATCH)

    if chosen is None:
        return ParseOutcome.fail(issues)
    return ParseOutcome.success(chosen.value, chosen.confidence, issues)


class LocationInterpreter:
    """Fill the location block of an interpreted record."""

    def __init__(
        self,
        coordinates: CoordinateInterpreter,
        max_coordinate_precision: float = DEFAULT_MAX_COORDINATE_PRECISION,
    ):
        self.coordinates = coordinates
        self.max_coordinate_precision = max_coordinate_precision

    @classmethod
    def from_config(cls, cfg: Dict[str, Any], coordinates: CoordinateInterpreter) -> "LocationInterpreter":
        section = cfg.get("interpretation", {})
        return cls(
            coordinates,
            max_coordinate_precision=float(
                section.get("max_coordinate_precision", DEFAULT_MAX_COORDINATE_PRECISION)
            ),
        )

    def interpret_location(self, verbatim: VerbatimRecord, record: InterpretedRecord) -> None:
        country_outcome = interpret_country(verbatim.value(Term.countryCode), verbatim.value(Term.country))
        country = preferred(country_outcome.payload)
        record.country = country
        record.add_issues(country_outcome.issues)

        point = self.interpret_coordinates(verbatim, country)
        if point.is_successful:
            record.decimalLatitude = point.payload.latitude
            record.decimalLongitude = point.payload.longitude
            if point.payload.country is not None and point.payload.country != country:
                logger.debug(
                    f"Record {record.key}: country {point.payload.country.iso2} from coordinates "
                    f"replaces {country.iso2 if country else None}"
                )
                record.country = point.payload.country
        record.add_issues(point.issues)

        self.interpret_precision(verbatim, record)
        self.interpret_uncertainty(verbatim, record)

        continent_text = verbatim.value(Term.continent)
        if continent_text is not None:
            continent = _CONTINENT_PARSER.parse(continent_text)
            if continent is None:
                record.add_issues([IssueCode.CONTINENT_INVALID])
            else:
                record.continent = continent.value

        record.waterBody = clean_name(verbatim.value(Term.waterBody))
        record.stateProvince = clean_name(verbatim.value(Term.stateProvince))

        elevation = interpret_elevation(
            verbatim.value(Term.minimumElevationInMeters), verbatim.value(Term.maximumElevationInMeters)
        )
        if elevation.is_successful:
            record.elevation = elevation.payload.value
            record.elevationAccuracy = elevation.payload.accuracy
        record.add_issues(elevation.issues)

        depth = interpret_depth(verbatim.value(Term.minimumDepthInMeters), verbatim.value(Term.maximumDepthInMeters))
        if depth.is_successful:
            record.depth = depth.payload.value
            record.depthAccuracy = depth.payload.accuracy
        record.add_issues(depth.issues)

    def interpret_coordinates(
        self, verbatim: VerbatimRecord, country: Optional[Country]
    ) -> ParseOutcome[CoordinatePoint]:
        """Try each coordinate source in turn, stopping at the first success.

        When every source fails the issues of all attempts are reported.
        """

        datum = verbatim.value(Term.geodeticDatum)
        strategies: List[Callable[[], ParseOutcome[CoordinatePoint]]] = [
            lambda: self.coordinates.interpret(
                verbatim.value(Term.decimalLatitude), verbatim.value(Term.decimalLongitude), datum, country
            ),
            lambda: self.coordinates.interpret(
                verbatim.value(Term.verbatimLatitude), verbatim.value(Term.verbatimLongitude), datum, country
            ),
            lambda: self.coordinates.interpret_text(verbatim.value(Term.verbatimCoordinates), datum, country),
        ]

        issues = set()
        for strategy in strategies:
            outcome = strategy()
            if outcome.is_successful:
                return outcome
            issues.update(outcome.issues)
        return ParseOutcome.fail(issues)

    def interpret_precision(self, verbatim: VerbatimRecord, record: InterpretedRecord) -> None:
        text = verbatim.value(Term.coordinatePrecision)
        if text is None:
            return
        try:
            precision = abs(float(text.strip().replace(",", ".")))
        except ValueError:
            logger.debug(f"Ignoring non numeric coordinate precision {text!r}")
            return
        if precision == 0 or math.isnan(precision):
            return
        if precision > self.max_coordinate_precision:
            logger.debug(f"Ignoring implausible coordinate precision {precision}")
            return
        record.coordinateAccuracy = precision

    def interpret_uncertainty(self, verbatim: VerbatimRecord, record: InterpretedRecord) -> None:
        text = verbatim.value(Term.coordinateUncertaintyInMeters)
        if text is None:
            return
        measure = parse_measure(text)
        if measure is not None and 0 < measure.low <= MAX_COORDINATE_UNCERTAINTY_METERS:
            record.coordinateUncertaintyInMeters = round(measure.low, 2)
        else:
            record.add_issues([IssueCode.COORDINATE_UNCERTAINTY_METERS_INVALID])


__all__ = ["LocationInterpreter", "interpret_country", "clean_name"]
