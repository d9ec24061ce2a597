"""
Tests for location interpretation.

Tests cover:
- Country text interpretation and disagreement between sources
- Coordinate source fallback
- Country derived from coordinates
- Precision, uncertainty, continent and free text place names
"""

import pytest

from dwc.issues import IssueCode
from dwc.record import InterpretedRecord, VerbatimRecord
from dwc.vocab import Continent, country_for_code
from interpret.location import LocationInterpreter, clean_name, interpret_country

WGS84 = IssueCode.GEODETIC_DATUM_ASSUMED_WGS84


def interpret(location_interpreter, **terms):
    record = InterpretedRecord(key="1")
    location_interpreter.interpret_location(VerbatimRecord.from_dict(terms), record)
    return record


class TestInterpretCountry:
    def test_first_source_wins(self):
        outcome = interpret_country("CA", "Canada")

        assert outcome.payload == country_for_code("CA")
        assert outcome.issues == set()

    def test_disagreeing_sources(self):
        outcome = interpret_country("CA", "Germany")

        assert outcome.payload == country_for_code("CA")
        assert outcome.issues == {IssueCode.COUNTRY_MISMATCH}

    def test_invalid_source_is_skipped(self):
        outcome = interpret_country("XX", "Deutschland")

        assert outcome.payload == country_for_code("DE")
        assert outcome.issues == {IssueCode.COUNTRY_INVALID}

    def test_unparsable_later_source_is_ignored(self):
        outcome = interpret_country("CA", "Kanadaa-xx")

        assert outcome.payload == country_for_code("CA")
        assert outcome.issues == set()

    def test_nothing_parses(self):
        outcome = interpret_country("xyzzy", None)

        assert not outcome.is_successful
        assert outcome.issues == {IssueCode.COUNTRY_INVALID}

    def test_blank(self):
        outcome = interpret_country(None, "  ")

        assert not outcome.is_successful
        assert outcome.issues == set()


class TestCleanName:
    @pytest.mark.parametrize(
        "value,expected",
        [("NORTH SEA", "North Sea"), ("  Ontario  ", "Ontario"), ("Lake  of the Woods", "Lake of the Woods"), ("", None)],
    )
    def test_clean_name(self, value, expected):
        assert clean_name(value) == expected


class TestInterpretLocation:
    """Tests for record level location interpretation."""

    def test_country_and_coordinates(self, location_interpreter):
        record = interpret(
            location_interpreter, countryCode="CA", country="Canada", decimalLatitude="43.65", decimalLongitude="-79.40"
        )

        assert record.country == country_for_code("CA")
        assert (record.decimalLatitude, record.decimalLongitude) == (43.65, -79.40)
        assert record.issues == {WGS84}

    def test_historic_code_is_replaced(self, location_interpreter):
        record = interpret(location_interpreter, countryCode="ZR")

        assert record.country == country_for_code("CD")

    def test_invalid_country(self, location_interpreter):
        record = interpret(location_interpreter, country="xyzzy")

        assert record.country is None
        assert record.issues == {IssueCode.COUNTRY_INVALID}

    def test_country_from_coordinates_replaces_equivalent(self, location_interpreter):
        record = interpret(location_interpreter, country="Ireland", decimalLatitude="54.597", decimalLongitude="-5.93")

        assert record.country == country_for_code("GB")
        assert record.issues == {IssueCode.COUNTRY_DERIVED_FROM_COORDINATES, WGS84}

    def test_country_derived_without_country_text(self, location_interpreter):
        record = interpret(location_interpreter, decimalLatitude="52.52", decimalLongitude="13.40", geodeticDatum="WGS84")

        assert record.country == country_for_code("DE")
        assert record.issues == {IssueCode.COUNTRY_DERIVED_FROM_COORDINATES}

    def test_corrected_coordinates(self, location_interpreter):
        record = interpret(location_interpreter, countryCode="CA", decimalLatitude="43.65", decimalLongitude="79.40")

        assert record.decimalLongitude == -79.40
        assert IssueCode.PRESUMED_NEGATED_LONGITUDE in record.issues

    def test_verbatim_latitude_longitude_fallback(self, location_interpreter):
        record = interpret(
            location_interpreter,
            countryCode="CA",
            decimalLatitude="north",
            verbatimLatitude="43°39'N",
            verbatimLongitude="79°24'W",
        )

        assert record.decimalLatitude == pytest.approx(43.65)
        assert record.decimalLongitude == pytest.approx(-79.4)
        assert IssueCode.COORDINATE_INVALID not in record.issues

    def test_verbatim_coordinates_fallback(self, location_interpreter):
        record = interpret(location_interpreter, countryCode="CA", verbatimCoordinates="43.65N 79.40W")

        assert (record.decimalLatitude, record.decimalLongitude) == (43.65, -79.40)

    def test_all_coordinate_sources_fail(self, location_interpreter):
        record = interpret(
            location_interpreter, decimalLatitude="north", decimalLongitude="west", verbatimCoordinates="200 200"
        )

        assert record.decimalLatitude is None
        assert record.issues == {IssueCode.COORDINATE_INVALID, IssueCode.COORDINATE_OUT_OF_RANGE}

    def test_no_coordinates(self, location_interpreter, geocoder):
        record = interpret(location_interpreter, countryCode="CA")

        assert record.decimalLatitude is None
        assert record.issues == set()
        assert geocoder.calls == []

    @pytest.mark.parametrize(
        "text,expected",
        [("0.0001", 0.0001), ("-0.5", 0.5), ("0", None), ("100", None), ("abc", None)],
    )
    def test_coordinate_precision(self, location_interpreter, text, expected):
        record = interpret(location_interpreter, coordinatePrecision=text)

        assert record.coordinateAccuracy == expected
        assert record.issues == set()

    def test_configured_precision_limit(self, coordinate_interpreter):
        interpreter = LocationInterpreter.from_config(
            {"interpretation": {"max_coordinate_precision": 100}}, coordinate_interpreter
        )

        assert interpret(interpreter, coordinatePrecision="50").coordinateAccuracy == 50.0

    @pytest.mark.parametrize("text,expected", [("250", 250.0), ("250 m", 250.0), ("10 km", 10000.0)])
    def test_uncertainty(self, location_interpreter, text, expected):
        record = interpret(location_interpreter, coordinateUncertaintyInMeters=text)

        assert record.coordinateUncertaintyInMeters == expected
        assert record.issues == set()

    @pytest.mark.parametrize("text", ["0", "-5", "abc", "6000000"])
    def test_invalid_uncertainty(self, location_interpreter, text):
        record = interpret(location_interpreter, coordinateUncertaintyInMeters=text)

        assert record.coordinateUncertaintyInMeters is None
        assert record.issues == {IssueCode.COORDINATE_UNCERTAINTY_METERS_INVALID}

    def test_continent(self, location_interpreter):
        assert interpret(location_interpreter, continent="Europe").continent == Continent.EUROPE
        assert interpret(location_interpreter, continent="north america").continent == Continent.NORTH_AMERICA

    def test_invalid_continent(self, location_interpreter):
        record = interpret(location_interpreter, continent="xyzzy")

        assert record.continent is None
        assert record.issues == {IssueCode.CONTINENT_INVALID}

    def test_place_names(self, location_interpreter):
        record = interpret(location_interpreter, waterBody="NORTH SEA", stateProvince="  Ontario ")

        assert record.waterBody == "North Sea"
        assert record.stateProvince == "Ontario"

    def test_elevation_and_depth(self, location_interpreter):
        record = interpret(
            location_interpreter,
            minimumElevationInMeters="100",
            maximumElevationInMeters="200",
            minimumDepthInMeters="abc",
        )

        assert (record.elevation, record.elevationAccuracy) == (150.0, 50.0)
        assert record.depth is None
        assert record.issues == {IssueCode.DEPTH_NON_NUMERIC}
