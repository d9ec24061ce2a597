"""Reference lookups used during interpretation.

``Geocoder``
    Resolve the country containing a coordinate.

``TaxonomyMatcher``
    Match a name and classification against the reference taxonomy.

GBIF backed implementations live in :mod:`qc.gbif`; they retry transient
failures (:mod:`qc.retry`) and share a bounded, time-expiring cache
(:mod:`qc.cache`).
"""

from __future__ import annotations

from .cache import CachedTaxonomyMatcher, LookupCache
from .errors import LookupTransportError
from .gbif import GbifGeocoder, GbifSpeciesMatchClient, build_taxonomy_matcher
from .models import MatchQuery, MatchType, TaxonMatch
from .protocols import Geocoder, NameDecomposer, TaxonomyMatcher
from .retry import RetryingClient, RetryPolicy

__all__ = [
    "CachedTaxonomyMatcher",
    "LookupCache",
    "LookupTransportError",
    "GbifGeocoder",
    "GbifSpeciesMatchClient",
    "build_taxonomy_matcher",
    "MatchQuery",
    "MatchType",
    "TaxonMatch",
    "Geocoder",
    "NameDecomposer",
    "TaxonomyMatcher",
    "RetryingClient",
    "RetryPolicy",
]
