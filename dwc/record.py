"""Verbatim input and interpreted output records."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set

from pydantic import BaseModel, ConfigDict, Field

from .issues import IssueCode
from .terms import Extension, Term, resolve_extension, resolve_term
from .vocab import Continent, Country, Rank

logger = logging.getLogger(__name__)


def _resolve_fields(raw: Mapping[str, Any]) -> Dict[Term, str]:
    fields: Dict[Term, str] = {}
    for name, value in raw.items():
        term = name if isinstance(name, Term) else resolve_term(str(name))
        if term is None:
            logger.debug(f"Ignoring unrecognised term {name!r}")
            continue
        if value is None:
            continue
        fields[term] = str(value)
    return fields


class VerbatimRecord(BaseModel):
    """Raw field values exactly as published.

    Read-only: interpreters only ever look values up.  ``extensions`` holds
    repeatable sub-records such as multiple identifications.
    """

    model_config = ConfigDict(frozen=True)

    key: Optional[str] = None
    terms: Dict[Term, str] = Field(default_factory=dict)
    extensions: Dict[Extension, List[Dict[Term, str]]] = Field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any], key: Optional[str] = None) -> "VerbatimRecord":
        """Build a record from a flat term mapping.

        An ``extensions`` entry, when present, maps extension row types to
        lists of term mappings.  Unknown terms are ignored.
        """

        data = dict(raw)
        raw_extensions = data.pop("extensions", None) or {}
        fields = _resolve_fields(data)

        extensions: Dict[Extension, List[Dict[Term, str]]] = {}
        for name, rows in raw_extensions.items():
            extension = name if isinstance(name, Extension) else resolve_extension(str(name))
            if extension is None:
                logger.debug(f"Ignoring unrecognised extension {name!r}")
                continue
            extensions[extension] = [_resolve_fields(row) for row in rows]

        if key is None:
            key = fields.get(Term.occurrenceID)
        return cls(key=key, terms=fields, extensions=extensions)

    def value(self, term: Term) -> Optional[str]:
        """Return the value for ``term`` or ``None`` when missing or blank."""
        value = self.terms.get(term)
        if value is None or not value.strip():
            return None
        return value

    def has(self, term: Term) -> bool:
        return self.value(term) is not None

    def extension_rows(self, extension: Extension) -> List[Dict[Term, str]]:
        return self.extensions.get(extension, [])


class InterpretedRecord(BaseModel):
    """Normalised, typed record built up by the interpreters.

    Each field is owned by exactly one interpreter, except ``country``,
    which the location interpreter may overwrite with the country implied
    by the coordinates.
    """

    model_config = ConfigDict(populate_by_name=True)

    key: Optional[str] = None

    # Location
    country: Optional[Country] = None
    continent: Optional[Continent] = None
    waterBody: Optional[str] = None
    stateProvince: Optional[str] = None
    decimalLatitude: Optional[float] = None
    decimalLongitude: Optional[float] = None
    coordinateAccuracy: Optional[float] = None
    coordinateUncertaintyInMeters: Optional[float] = None
    elevation: Optional[float] = None
    elevationAccuracy: Optional[float] = None
    depth: Optional[float] = None
    depthAccuracy: Optional[float] = None

    # Temporal
    year: Optional[int] = None
    month: Optional[int] = None
    day: Optional[int] = None
    eventDate: Optional[date] = None
    dateIdentified: Optional[datetime] = None
    modified: Optional[datetime] = None

    # Taxonomy
    taxonKey: Optional[int] = None
    acceptedTaxonKey: Optional[int] = None
    scientificName: Optional[str] = None
    taxonRank: Optional[Rank] = None
    genericName: Optional[str] = None
    specificEpithet: Optional[str] = None
    infraspecificEpithet: Optional[str] = None
    kingdom: Optional[str] = None
    phylum: Optional[str] = None
    class_: Optional[str] = Field(default=None, alias="class")
    order: Optional[str] = None
    family: Optional[str] = None
    genus: Optional[str] = None
    species: Optional[str] = None
    kingdomKey: Optional[int] = None
    phylumKey: Optional[int] = None
    classKey: Optional[int] = None
    orderKey: Optional[int] = None
    familyKey: Optional[int] = None
    genusKey: Optional[int] = None
    speciesKey: Optional[int] = None

    issues: Set[IssueCode] = Field(default_factory=set)

    def add_issues(self, issues: Iterable[IssueCode]) -> None:
        self.issues.update(issues)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON friendly dictionary, dropping empty fields."""

        data = self.model_dump(mode="json", by_alias=True, exclude_none=True, exclude={"issues"})
        if self.country is not None:
            data["country"] = self.country.iso2
        data["issues"] = sorted(issue.value for issue in self.issues)
        return data


__all__ = ["VerbatimRecord", "InterpretedRecord"]
