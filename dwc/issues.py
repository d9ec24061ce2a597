"""Data quality flags attached to interpreted records.

Issue codes are persisted by downstream consumers, so members are only
ever added, never renamed or removed.
"""

from __future__ import annotations

from enum import Enum


class IssueCode(str, Enum):
    """Machine readable quality flag raised during interpretation."""

    # Country
    COUNTRY_INVALID = "COUNTRY_INVALID"
    COUNTRY_MISMATCH = "COUNTRY_MISMATCH"
    COUNTRY_COORDINATE_MISMATCH = "COUNTRY_COORDINATE_MISMATCH"
    COUNTRY_DERIVED_FROM_COORDINATES = "COUNTRY_DERIVED_FROM_COORDINATES"
    CONTINENT_INVALID = "CONTINENT_INVALID"

    # Coordinates
    COORDINATE_INVALID = "COORDINATE_INVALID"
    COORDINATE_OUT_OF_RANGE = "COORDINATE_OUT_OF_RANGE"
    COORDINATE_ROUNDED = "COORDINATE_ROUNDED"
    COORDINATE_UNCERTAINTY_METERS_INVALID = "COORDINATE_UNCERTAINTY_METERS_INVALID"
    PRESUMED_NEGATED_LATITUDE = "PRESUMED_NEGATED_LATITUDE"
    PRESUMED_NEGATED_LONGITUDE = "PRESUMED_NEGATED_LONGITUDE"
    PRESUMED_SWAPPED_COORDINATE = "PRESUMED_SWAPPED_COORDINATE"
    GEODETIC_DATUM_ASSUMED_WGS84 = "GEODETIC_DATUM_ASSUMED_WGS84"

    # Elevation and depth
    ELEVATION_UNLIKELY = "ELEVATION_UNLIKELY"
    ELEVATION_MIN_MAX_SWAPPED = "ELEVATION_MIN_MAX_SWAPPED"
    ELEVATION_NON_NUMERIC = "ELEVATION_NON_NUMERIC"
    ELEVATION_NOT_METRIC = "ELEVATION_NOT_METRIC"
    DEPTH_UNLIKELY = "DEPTH_UNLIKELY"
    DEPTH_MIN_MAX_SWAPPED = "DEPTH_MIN_MAX_SWAPPED"
    DEPTH_NON_NUMERIC = "DEPTH_NON_NUMERIC"
    DEPTH_NOT_METRIC = "DEPTH_NOT_METRIC"

    # Dates
    RECORDED_DATE_INVALID = "RECORDED_DATE_INVALID"
    RECORDED_DATE_UNLIKELY = "RECORDED_DATE_UNLIKELY"
    IDENTIFIED_DATE_UNLIKELY = "IDENTIFIED_DATE_UNLIKELY"
    MODIFIED_DATE_UNLIKELY = "MODIFIED_DATE_UNLIKELY"

    # Taxonomy
    TAXON_MATCH_NONE = "TAXON_MATCH_NONE"
    TAXON_MATCH_FUZZY = "TAXON_MATCH_FUZZY"
    TAXON_MATCH_HIGHERRANK = "TAXON_MATCH_HIGHERRANK"
    TAXON_MATCH_LOOKUP_FAILED = "TAXON_MATCH_LOOKUP_FAILED"


__all__ = ["IssueCode"]
