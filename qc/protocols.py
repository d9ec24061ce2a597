"""Protocol definitions for the reference lookups used by the interpreters.

The interpreters only depend on these narrow call signatures.  GBIF backed
implementations live in :mod:`qc.gbif`; tests substitute in-memory fakes.
Implementations may cache and retry internally but must raise
:class:`qc.errors.LookupTransportError` when they cannot answer.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from dwc.vocab import Country, Rank

from .models import MatchQuery, TaxonMatch


@runtime_checkable
class Geocoder(Protocol):
    """Reverse geocoder resolving the country containing a point."""

    def country_at(self, latitude: float, longitude: float) -> Optional[Country]:
        """Return the country at the point, or ``None`` if unresolved."""
        ...


@runtime_checkable
class TaxonomyMatcher(Protocol):
    """Matches a name and classification against the reference taxonomy."""

    def match(self, query: MatchQuery) -> TaxonMatch:
        """Return the best match for ``query``."""
        ...


@runtime_checkable
class NameDecomposer(Protocol):
    """Splits a canonical name into generic, specific and infraspecific parts."""

    def parse(self, name: str, rank: Optional[Rank] = None):
        """Return a parsed name or raise ``UnparsableNameError``."""
        ...


__all__ = ["Geocoder", "TaxonomyMatcher", "NameDecomposer"]
