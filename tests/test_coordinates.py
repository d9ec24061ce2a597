"""
Tests for coordinate interpretation.

Tests cover:
- Parsing decimal, comma decimal, hemisphere and DMS text
- Range checks and rounding
- Sign and axis corrections verified against the geocoder
- Country cross-checks, equivalent countries and mismatches
- Geocoder transport failures
"""

import pytest

from dwc.issues import IssueCode
from dwc.vocab import country_for_code
from interpret.coordinates import (
    CoordinateInterpreter,
    interpret_coordinate_text,
    interpret_coordinates,
    is_wgs84,
    parse_coordinate,
    split_coordinate_pair,
)

WGS84 = IssueCode.GEODETIC_DATUM_ASSUMED_WGS84
CA = country_for_code("CA")


class TestParseCoordinate:
    """Tests for single coordinate parsing."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("43.65", 43.65),
            ("-79.40", -79.40),
            ("+12", 12.0),
            ("43,65", 43.65),
            ("43.65N", 43.65),
            ("79.4 W", -79.4),
            ("S 12.5", -12.5),
        ],
    )
    def test_decimal_text(self, text, expected):
        assert parse_coordinate(text) == pytest.approx(expected)

    def test_degrees_minutes_seconds(self):
        assert parse_coordinate("43°39'10\"N") == pytest.approx(43.652778, abs=1e-6)
        assert parse_coordinate("79°24'W") == pytest.approx(-79.4)
        assert parse_coordinate("43 39 10 S") == pytest.approx(-43.652778, abs=1e-6)

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("43°39'10 S", -43.652778),
            ("43d 39m 10s S", -43.652778),
            ("43 39 10S", -43.652778),
            ("172 38 10 E", 172.636111),
        ],
    )
    def test_trailing_hemisphere_after_seconds(self, text, expected):
        assert parse_coordinate(text) == pytest.approx(expected, abs=1e-6)

    @pytest.mark.parametrize("text", [None, "", "   ", "abc", "12°75'N", "1.2.3"])
    def test_unparsable_text(self, text):
        assert parse_coordinate(text) is None


class TestSplitCoordinatePair:
    """Tests for combined verbatim coordinates."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("43.65N 79.40W", ("43.65N", "79.40W")),
            ("N43.65 W79.40", ("N43.65", "W79.40")),
            ("43.65, -79.40", ("43.65", "-79.40")),
            ("43.65; -79.40", ("43.65", "-79.40")),
            ("43.65 -79.40", ("43.65", "-79.40")),
        ],
    )
    def test_split(self, text, expected):
        assert split_coordinate_pair(text) == expected

    def test_unsplittable(self):
        assert split_coordinate_pair("somewhere near the lake") is None
        assert split_coordinate_pair("") is None


class TestDatum:
    @pytest.mark.parametrize("datum", ["WGS84", "WGS 84", "wgs-84", "EPSG:4326", "4326"])
    def test_wgs84_aliases(self, datum):
        assert is_wgs84(datum)

    @pytest.mark.parametrize("datum", [None, "", "NAD27", "ED50"])
    def test_other_datums(self, datum):
        assert not is_wgs84(datum)


class TestInterpretCoordinates:
    """Tests for latitude/longitude interpretation."""

    def test_valid_point_with_matching_country(self, coordinate_interpreter):
        outcome = coordinate_interpreter.interpret("43.65", "-79.40", None, CA)

        assert outcome.is_successful
        assert outcome.payload.latitude == 43.65
        assert outcome.payload.longitude == -79.40
        assert outcome.payload.country == CA
        assert outcome.issues == {WGS84}

    def test_wgs84_datum_adds_no_issue(self, coordinate_interpreter):
        outcome = coordinate_interpreter.interpret("43.65", "-79.40", "EPSG:4326", CA)

        assert outcome.is_successful
        assert outcome.issues == set()

    def test_blank_input_fails_without_issues(self, coordinate_interpreter, geocoder):
        for lat, lon in [(None, "1"), ("1", None), ("", "1"), ("  ", "  ")]:
            outcome = coordinate_interpreter.interpret(lat, lon)
            assert not outcome.is_successful
            assert outcome.issues == set()
        assert geocoder.calls == []

    def test_unparsable_input(self, coordinate_interpreter):
        outcome = coordinate_interpreter.interpret("north", "-79.40")

        assert not outcome.is_successful
        assert outcome.issues == {IssueCode.COORDINATE_INVALID}

    def test_out_of_range(self, coordinate_interpreter):
        outcome = coordinate_interpreter.interpret("200", "200")

        assert not outcome.is_successful
        assert outcome.payload is None
        assert outcome.issues == {IssueCode.COORDINATE_OUT_OF_RANGE}

    def test_rounding(self, coordinate_interpreter):
        outcome = coordinate_interpreter.interpret("43.6512345", "-79.4012345", None, CA)

        assert outcome.is_successful
        assert outcome.payload.latitude == 43.65123
        assert outcome.payload.longitude == -79.40123
        assert outcome.issues == {IssueCode.COORDINATE_ROUNDED, WGS84}

    def test_presumed_negated_longitude(self, coordinate_interpreter, geocoder):
        outcome = coordinate_interpreter.interpret("43.65", "79.40", None, CA)

        assert outcome.is_successful
        assert outcome.payload.latitude == 43.65
        assert outcome.payload.longitude == -79.40
        assert outcome.payload.country == CA
        assert outcome.issues == {IssueCode.PRESUMED_NEGATED_LONGITUDE, WGS84}
        assert geocoder.calls == [(43.65, 79.40), (-43.65, 79.40), (43.65, -79.40)]

    def test_presumed_negated_latitude(self, coordinate_interpreter):
        outcome = coordinate_interpreter.interpret("33.87", "151.21", None, country_for_code("AU"))

        assert outcome.is_successful
        assert outcome.payload.latitude == -33.87
        assert outcome.payload.longitude == 151.21
        assert outcome.issues == {IssueCode.PRESUMED_NEGATED_LATITUDE, WGS84}

    def test_presumed_both_negated(self, coordinate_interpreter):
        outcome = coordinate_interpreter.interpret("-43.65", "79.40", None, CA)

        assert outcome.is_successful
        assert (outcome.payload.latitude, outcome.payload.longitude) == (43.65, -79.40)
        assert outcome.issues == {
            IssueCode.PRESUMED_NEGATED_LATITUDE,
            IssueCode.PRESUMED_NEGATED_LONGITUDE,
            WGS84,
        }

    def test_presumed_swapped(self, coordinate_interpreter):
        outcome = coordinate_interpreter.interpret("13.4", "52.5", None, country_for_code("DE"))

        assert outcome.is_successful
        assert (outcome.payload.latitude, outcome.payload.longitude) == (52.5, 13.4)
        assert outcome.issues == {IssueCode.PRESUMED_SWAPPED_COORDINATE, WGS84}

    def test_out_of_range_pair_recovered_by_swap(self, coordinate_interpreter):
        outcome = coordinate_interpreter.interpret("105", "35", None, country_for_code("CN"))

        assert outcome.is_successful
        assert (outcome.payload.latitude, outcome.payload.longitude) == (35.0, 105.0)
        assert IssueCode.PRESUMED_SWAPPED_COORDINATE in outcome.issues

    def test_correction_is_idempotent(self, coordinate_interpreter):
        first = coordinate_interpreter.interpret("43.65", "79.40", None, CA)
        again = coordinate_interpreter.interpret(
            str(first.payload.latitude), str(first.payload.longitude), None, first.payload.country
        )

        assert again.payload == first.payload
        assert again.issues == {WGS84}

    def test_country_derived_when_none_given(self, coordinate_interpreter):
        outcome = coordinate_interpreter.interpret("52.52", "13.40")

        assert outcome.is_successful
        assert outcome.payload.country == country_for_code("DE")
        assert outcome.issues == {IssueCode.COUNTRY_DERIVED_FROM_COORDINATES, WGS84}

    def test_southern_dms_point(self, coordinate_interpreter):
        outcome = coordinate_interpreter.interpret("43 39 10 S", "172 38 10 E")

        assert outcome.is_successful
        assert (outcome.payload.latitude, outcome.payload.longitude) == (-43.65278, 172.63611)
        assert outcome.payload.country == country_for_code("NZ")
        assert outcome.issues == {IssueCode.COORDINATE_ROUNDED, IssueCode.COUNTRY_DERIVED_FROM_COORDINATES, WGS84}

    def test_zero_zero_is_a_literal_point(self, coordinate_interpreter):
        outcome = coordinate_interpreter.interpret("0", "0")

        assert outcome.is_successful
        assert (outcome.payload.latitude, outcome.payload.longitude) == (0.0, 0.0)
        assert outcome.payload.country is None
        assert outcome.issues == {WGS84}

    def test_mismatch_keeps_supplied_country(self, coordinate_interpreter):
        france = country_for_code("FR")
        outcome = coordinate_interpreter.interpret("52.52", "13.40", None, france)

        assert outcome.is_successful
        assert (outcome.payload.latitude, outcome.payload.longitude) == (52.52, 13.40)
        assert outcome.payload.country == france
        assert outcome.issues == {IssueCode.COUNTRY_COORDINATE_MISMATCH, WGS84}

    def test_equivalent_country_is_remapped(self, coordinate_interpreter):
        # Belfast recorded as Ireland
        outcome = coordinate_interpreter.interpret("54.597", "-5.93", None, country_for_code("IE"))

        assert outcome.is_successful
        assert outcome.payload.country == country_for_code("GB")
        assert outcome.issues == {IssueCode.COUNTRY_DERIVED_FROM_COORDINATES, WGS84}

    def test_crown_dependency_is_remapped(self, coordinate_interpreter):
        outcome = coordinate_interpreter.interpret("54.2", "-4.5", None, country_for_code("GB"))

        assert outcome.payload.country == country_for_code("IM")
        assert outcome.issues == {IssueCode.COUNTRY_DERIVED_FROM_COORDINATES, WGS84}

    def test_unresolved_point_keeps_country_without_mismatch(self, coordinate_interpreter):
        outcome = coordinate_interpreter.interpret("-60.0", "-30.0", None, CA)

        assert outcome.is_successful
        assert (outcome.payload.latitude, outcome.payload.longitude) == (-60.0, -30.0)
        assert outcome.payload.country == CA
        assert outcome.issues == {WGS84}

    def test_geocoder_failure_treated_as_unresolved(self, failing_geocoder):
        interpreter = CoordinateInterpreter(failing_geocoder)
        outcome = interpreter.interpret("43.65", "79.40", None, CA)

        assert outcome.is_successful
        assert (outcome.payload.latitude, outcome.payload.longitude) == (43.65, 79.40)
        assert outcome.payload.country == CA
        assert outcome.issues == {WGS84}


class TestInterpretCoordinateText:
    """Tests for combined verbatim coordinates."""

    def test_hemisphere_pair(self, coordinate_interpreter):
        outcome = coordinate_interpreter.interpret_text("43.65N 79.40W", None, CA)

        assert outcome.is_successful
        assert (outcome.payload.latitude, outcome.payload.longitude) == (43.65, -79.40)

    def test_comma_separated(self, coordinate_interpreter):
        outcome = coordinate_interpreter.interpret_text("43.65, -79.40", "WGS84", CA)

        assert outcome.is_successful
        assert outcome.issues == set()

    def test_unsplittable_text(self, coordinate_interpreter):
        outcome = coordinate_interpreter.interpret_text("near the old mill")

        assert not outcome.is_successful
        assert outcome.issues == {IssueCode.COORDINATE_INVALID}

    def test_blank_text(self, coordinate_interpreter):
        outcome = coordinate_interpreter.interpret_text("  ")

        assert not outcome.is_successful
        assert outcome.issues == set()

    def test_module_level_functions(self, geocoder):
        pair = interpret_coordinates(geocoder, "43.65", "-79.40", "WGS84", CA)
        text = interpret_coordinate_text(geocoder, "43.65N 79.40W", "WGS84", CA)

        assert pair.payload == text.payload
        assert (text.payload.latitude, text.payload.longitude, text.payload.country) == (43.65, -79.40, CA)
        assert text.issues == set()
