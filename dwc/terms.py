"""Controlled vocabulary of recognised record terms.

Verbatim records are keyed by :class:`Term` members.  Publishers use bare
Darwin Core names (``decimalLatitude``), prefixed names
(``dwc:decimalLatitude``) or full term URIs, so everything that builds a
record goes through :func:`resolve_term`.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional

NAMESPACES: Dict[str, str] = {
    "dwc": "http://rs.tdwg.org/dwc/terms/",
    "dc": "http://purl.org/dc/terms/",
    "gbif": "http://rs.gbif.org/terms/1.0/",
}


class Term(str, Enum):
    """Qualified terms understood by the interpreters."""

    # Record
    occurrenceID = "dwc:occurrenceID"
    catalogNumber = "dwc:catalogNumber"
    institutionCode = "dwc:institutionCode"
    basisOfRecord = "dwc:basisOfRecord"
    recordedBy = "dwc:recordedBy"
    modified = "dc:modified"

    # Event
    eventDate = "dwc:eventDate"
    year = "dwc:year"
    month = "dwc:month"
    day = "dwc:day"

    # Location
    continent = "dwc:continent"
    waterBody = "dwc:waterBody"
    country = "dwc:country"
    countryCode = "dwc:countryCode"
    stateProvince = "dwc:stateProvince"
    locality = "dwc:locality"
    minimumElevationInMeters = "dwc:minimumElevationInMeters"
    maximumElevationInMeters = "dwc:maximumElevationInMeters"
    minimumDepthInMeters = "dwc:minimumDepthInMeters"
    maximumDepthInMeters = "dwc:maximumDepthInMeters"
    decimalLatitude = "dwc:decimalLatitude"
    decimalLongitude = "dwc:decimalLongitude"
    verbatimLatitude = "dwc:verbatimLatitude"
    verbatimLongitude = "dwc:verbatimLongitude"
    verbatimCoordinates = "dwc:verbatimCoordinates"
    geodeticDatum = "dwc:geodeticDatum"
    coordinatePrecision = "dwc:coordinatePrecision"
    coordinateUncertaintyInMeters = "dwc:coordinateUncertaintyInMeters"

    # Identification
    identifiedBy = "dwc:identifiedBy"
    dateIdentified = "dwc:dateIdentified"

    # Taxon
    scientificName = "dwc:scientificName"
    scientificNameAuthorship = "dwc:scientificNameAuthorship"
    kingdom = "dwc:kingdom"
    phylum = "dwc:phylum"
    class_ = "dwc:class"
    order = "dwc:order"
    family = "dwc:family"
    genus = "dwc:genus"
    genericName = "gbif:genericName"
    specificEpithet = "dwc:specificEpithet"
    infraspecificEpithet = "dwc:infraspecificEpithet"
    taxonRank = "dwc:taxonRank"
    verbatimTaxonRank = "dwc:verbatimTaxonRank"

    @property
    def prefix(self) -> str:
        return self.value.split(":", 1)[0]

    @property
    def simple_name(self) -> str:
        return self.value.split(":", 1)[1]

    @property
    def uri(self) -> str:
        return NAMESPACES[self.prefix] + self.simple_name


class Extension(str, Enum):
    """Repeatable sub-record groups attached to a verbatim record."""

    IDENTIFICATION = "http://rs.tdwg.org/dwc/terms/Identification"
    MEASUREMENT_OR_FACT = "http://rs.tdwg.org/dwc/terms/MeasurementOrFact"

    @property
    def row_type(self) -> str:
        return self.value.rstrip("/").split("/")[-1]


_BY_SIMPLE_NAME: Dict[str, Term] = {t.simple_name.lower(): t for t in Term}
_BY_QUALIFIED_NAME: Dict[str, Term] = {t.value.lower(): t for t in Term}


def resolve_term(term: str) -> Optional[Term]:
    """Return the :class:`Term` for a URI, prefixed name or bare name.

    Unknown names return ``None`` so callers can decide whether to ignore
    or report them.
    """

    if not term:
        return None
    name = term.strip()
    if name.startswith("http://") or name.startswith("https://"):
        name = name.rstrip("/").split("/")[-1]
    lowered = name.lower()
    if lowered in _BY_QUALIFIED_NAME:
        return _BY_QUALIFIED_NAME[lowered]
    if ":" in lowered:
        lowered = lowered.split(":", 1)[1]
    return _BY_SIMPLE_NAME.get(lowered)


def resolve_extension(name: str) -> Optional[Extension]:
    """Return the :class:`Extension` for a row type URI or short name."""

    if not name:
        return None
    lowered = name.strip().rstrip("/").split("/")[-1].lower()
    for extension in Extension:
        if extension.row_type.lower() == lowered or extension.name.lower() == lowered:
            return extension
    return None


__all__ = ["NAMESPACES", "Term", "Extension", "resolve_term", "resolve_extension"]
