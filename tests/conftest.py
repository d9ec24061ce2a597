"""Shared fixtures: offline stand-ins for the GBIF services."""

from typing import Dict, List, Optional, Tuple

import pytest

from dwc.vocab import Country, Rank, country_for_code
from interpret.coordinates import CoordinateInterpreter
from interpret.location import LocationInterpreter
from interpret.occurrence import OccurrenceInterpreter
from interpret.taxonomy import TaxonomyInterpreter
from interpret.temporal import TemporalInterpreter
from qc.errors import LookupTransportError
from qc.models import MatchQuery, MatchType, TaxonMatch

# (iso2, min_lat, max_lat, min_lon, max_lon); first box containing a point wins
COUNTRY_BOXES: List[Tuple[str, float, float, float, float]] = [
    ("IM", 54.0, 54.45, -4.85, -4.3),
    ("IE", 51.4, 55.4, -10.7, -6.0),
    ("GB", 49.8, 60.9, -8.2, 1.8),
    ("CA", 41.7, 83.1, -141.0, -52.6),
    ("US", 24.5, 49.0, -125.0, -66.9),
    ("CN", 18.0, 53.6, 73.5, 135.0),
    ("DE", 47.2, 55.1, 5.8, 15.1),
    ("FR", 42.3, 51.1, -4.8, 8.2),
    ("AU", -43.7, -10.6, 113.0, 153.7),
    ("NZ", -47.3, -34.4, 166.4, 178.6),
]


class FakeGeocoder:
    """Bounding box geocoder.  Points outside every box are unresolved."""

    def __init__(self, boxes=COUNTRY_BOXES, fail: bool = False):
        self.boxes = boxes
        self.fail = fail
        self.calls: List[Tuple[float, float]] = []

    def country_at(self, latitude: float, longitude: float) -> Optional[Country]:
        self.calls.append((latitude, longitude))
        if self.fail:
            raise LookupTransportError(code="gbif_geocode_unavailable", message="offline")
        for iso2, min_lat, max_lat, min_lon, max_lon in self.boxes:
            if min_lat <= latitude <= max_lat and min_lon <= longitude <= max_lon:
                return country_for_code(iso2)
        return None


class FakeMatcher:
    """Scripted species matcher keyed by query name."""

    def __init__(self, responses: Optional[Dict[str, TaxonMatch]] = None, fail: bool = False):
        self.responses = responses or {}
        self.fail = fail
        self.queries: List[MatchQuery] = []

    def match(self, query: MatchQuery) -> TaxonMatch:
        self.queries.append(query)
        if self.fail:
            raise LookupTransportError(code="gbif_species_match_unavailable", message="offline")
        return self.responses.get(query.name, TaxonMatch.none(note="no match"))


ABIES_ALBA = TaxonMatch(
    match_type=MatchType.EXACT,
    usage_key=2685484,
    scientific_name="Abies alba Mill.",
    canonical_name="Abies alba",
    rank=Rank.SPECIES,
    status="ACCEPTED",
    confidence=98,
    classification={
        Rank.KINGDOM: "Plantae",
        Rank.PHYLUM: "Tracheophyta",
        Rank.CLASS: "Pinopsida",
        Rank.ORDER: "Pinales",
        Rank.FAMILY: "Pinaceae",
        Rank.GENUS: "Abies",
        Rank.SPECIES: "Abies alba",
    },
    classification_keys={
        Rank.KINGDOM: 6,
        Rank.PHYLUM: 7707728,
        Rank.CLASS: 194,
        Rank.ORDER: 640,
        Rank.FAMILY: 3925,
        Rank.GENUS: 2684876,
        Rank.SPECIES: 2685484,
    },
)

PUMA_FUZZY = TaxonMatch(
    match_type=MatchType.FUZZY,
    usage_key=2435099,
    scientific_name="Puma concolor (Linnaeus, 1771)",
    canonical_name="Puma concolor",
    rank=Rank.SPECIES,
    classification={Rank.KINGDOM: "Animalia", Rank.GENUS: "Puma", Rank.SPECIES: "Puma concolor"},
)

ABIES_GENUS = TaxonMatch(
    match_type=MatchType.HIGHERRANK,
    usage_key=2684876,
    scientific_name="Abies Mill.",
    canonical_name="Abies",
    rank=Rank.GENUS,
    classification={Rank.KINGDOM: "Plantae", Rank.GENUS: "Abies"},
)


@pytest.fixture
def geocoder():
    return FakeGeocoder()


@pytest.fixture
def coordinate_interpreter(geocoder):
    return CoordinateInterpreter(geocoder)


@pytest.fixture
def matcher():
    return FakeMatcher(
        {
            "Abies alba": ABIES_ALBA,
            "Abies alba Mill.": ABIES_ALBA,
            "Puma concolr": PUMA_FUZZY,
            "Abies nonexistens": ABIES_GENUS,
        }
    )


@pytest.fixture
def taxonomy_interpreter(matcher):
    return TaxonomyInterpreter(matcher)


@pytest.fixture
def temporal_interpreter():
    return TemporalInterpreter()


@pytest.fixture
def location_interpreter(coordinate_interpreter):
    return LocationInterpreter(coordinate_interpreter)


@pytest.fixture
def occurrence_interpreter(temporal_interpreter, location_interpreter, taxonomy_interpreter):
    return OccurrenceInterpreter(temporal_interpreter, location_interpreter, taxonomy_interpreter, workers=4)


@pytest.fixture
def failing_geocoder():
    return FakeGeocoder(fail=True)


@pytest.fixture
def failing_matcher():
    return FakeMatcher(fail=True)


@pytest.fixture
def make_matcher():
    """Factory for matchers scripted with ``{name: TaxonMatch}``."""
    return FakeMatcher


@pytest.fixture
def abies_alba():
    return ABIES_ALBA
