"""Taxonomic interpretation.

A query name is assembled from the scientific name or its atomised parts,
a rank is resolved, and the query is matched against the reference
taxonomy.  Matches are applied to the interpreted record together with the
higher classification and the decomposed name parts.
"""

from __future__ import annotations

import logging
import re
import unicodedata
from typing import Mapping, Optional, Union

from dwc.issues import IssueCode
from dwc.record import InterpretedRecord, VerbatimRecord
from dwc.terms import Extension, Term
from dwc.vocab import DWC_RANKS, Rank, RankParser
from qc.errors import LookupTransportError
from qc.models import MatchQuery, MatchType, TaxonMatch
from qc.protocols import NameDecomposer, TaxonomyMatcher

from .names import NameParser, UnparsableNameError
from .result import ParseOutcome

logger = logging.getLogger(__name__)

PLACEHOLDERS = frozenset(
    {
        "null",
        "none",
        "na",
        "n/a",
        "nil",
        "unknown",
        "unknwon",
        "not known",
        "not assigned",
        "not available",
        "unidentified",
        "indet",
        "indet.",
        "incertae sedis",
        "?",
        "??",
        "-",
        "--",
        "0",
    }
)

# Interpreted record attributes holding each higher rank and its key
CLASSIFICATION_FIELDS = {
    Rank.KINGDOM: ("kingdom", "kingdomKey"),
    Rank.PHYLUM: ("phylum", "phylumKey"),
    Rank.CLASS: ("class_", "classKey"),
    Rank.ORDER: ("order", "orderKey"),
    Rank.FAMILY: ("family", "familyKey"),
    Rank.GENUS: ("genus", "genusKey"),
    Rank.SPECIES: ("species", "speciesKey"),
}

MATCH_ISSUES = {
    MatchType.NONE: IssueCode.TAXON_MATCH_NONE,
    MatchType.FUZZY: IssueCode.TAXON_MATCH_FUZZY,
    MatchType.HIGHERRANK: IssueCode.TAXON_MATCH_HIGHERRANK,
}

_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f-\x9f]")
_QUOTES = "\"'`´‘’“”"

_RANK_PARSER = RankParser()


def clean(value: Optional[str]) -> Optional[str]:
    """Normalise a name part, returning ``None`` for blanks and placeholders."""

    if value is None:
        return None
    text = _CONTROL_RE.sub(" ", unicodedata.normalize("NFC", value))
    text = " ".join(text.split()).strip(_QUOTES).strip()
    if not text or text.lower() in PLACEHOLDERS:
        return None
    return text


def build_scientific_name(
    scientific_name: Optional[str],
    generic_name: Optional[str] = None,
    genus: Optional[str] = None,
    specific_epithet: Optional[str] = None,
    infraspecific_epithet: Optional[str] = None,
) -> Optional[str]:
    """Use the full name as given, else assemble a canonical name from its parts."""

    name = clean(scientific_name)
    if name is None:
        genus_part = clean(generic_name) or clean(genus)
        if genus_part is None:
            return None
        parts = [genus_part]
        for epithet in (clean(specific_epithet), clean(infraspecific_epithet)):
            if epithet:
                parts.append(epithet)
        name = " ".join(parts)
    return name


def resolve_rank(
    taxon_rank: Optional[str] = None,
    verbatim_rank: Optional[str] = None,
    genus: Optional[str] = None,
    specific_epithet: Optional[str] = None,
    infraspecific_epithet: Optional[str] = None,
) -> Optional[Rank]:
    """Explicit rank first, then the verbatim rank, then the atomised fields."""

    for text in (taxon_rank, verbatim_rank):
        candidate = _RANK_PARSER.parse(clean(text))
        if candidate is not None:
            return candidate.value

    if clean(genus) is None:
        return None
    if clean(specific_epithet) is not None:
        if clean(infraspecific_epithet) is not None:
            return Rank.INFRASPECIFIC_NAME
        return Rank.SPECIES
    return Rank.GENUS


def _value(terms: Mapping[Term, str], term: Term) -> Optional[str]:
    value = terms.get(term)
    if value is None or not value.strip():
        return None
    return value


class TaxonomyInterpreter:
    """Match names against the reference taxonomy and apply the result."""

    def __init__(self, matcher: TaxonomyMatcher, name_parser: Optional[NameDecomposer] = None):
        self.matcher = matcher
        self.name_parser = name_parser or NameParser()

    def match(
        self,
        kingdom: Optional[str] = None,
        phylum: Optional[str] = None,
        clazz: Optional[str] = None,
        order: Optional[str] = None,
        family: Optional[str] = None,
        genus: Optional[str] = None,
        scientific_name: Optional[str] = None,
        authorship: Optional[str] = None,
        generic_name: Optional[str] = None,
        specific_epithet: Optional[str] = None,
        infraspecific_epithet: Optional[str] = None,
        rank: Union[Rank, str, None] = None,
    ) -> ParseOutcome[TaxonMatch]:
        if isinstance(rank, str):
            candidate = _RANK_PARSER.parse(rank)
            rank = candidate.value if candidate else None

        query = MatchQuery(
            name=build_scientific_name(
                scientific_name, generic_name, genus, specific_epithet, infraspecific_epithet
            ),
            rank=rank,
            kingdom=clean(kingdom),
            phylum=clean(phylum),
            clazz=clean(clazz),
            order=clean(order),
            family=clean(family),
            genus=clean(genus),
        )
        if query.is_empty:
            return ParseOutcome.success(
                TaxonMatch.none(note="no name or classification given"),
                issues=[IssueCode.TAXON_MATCH_NONE],
            )

        logger.debug(f"Attempt to match name [{query.name}] (authorship {clean(authorship)})")
        try:
            result = self.matcher.match(query)
        except LookupTransportError as e:
            logger.warning(f"Taxonomy lookup for [{query.name}] failed: {e}")
            return ParseOutcome.fail()

        issue = MATCH_ISSUES.get(result.match_type)
        if issue is not None:
            logger.debug(f"Match for [{query.name}] was {result.match_type.value}: {result.note}")
        return ParseOutcome.success(result, issues=[issue] if issue else [])

    def match_terms(self, terms: Mapping[Term, str]) -> ParseOutcome[TaxonMatch]:
        """Match using the taxon terms of a core record or an extension row."""

        rank = resolve_rank(
            _value(terms, Term.taxonRank),
            _value(terms, Term.verbatimTaxonRank),
            _value(terms, Term.genus),
            _value(terms, Term.specificEpithet),
            _value(terms, Term.infraspecificEpithet),
        )
        return self.match(
            kingdom=_value(terms, Term.kingdom),
            phylum=_value(terms, Term.phylum),
            clazz=_value(terms, Term.class_),
            order=_value(terms, Term.order),
            family=_value(terms, Term.family),
            genus=_value(terms, Term.genus),
            scientific_name=_value(terms, Term.scientificName),
            authorship=_value(terms, Term.scientificNameAuthorship),
            generic_name=_value(terms, Term.genericName),
            specific_epithet=_value(terms, Term.specificEpithet),
            infraspecific_epithet=_value(terms, Term.infraspecificEpithet),
            rank=rank,
        )

    def apply_match(self, record: InterpretedRecord, match: TaxonMatch) -> None:
        record.taxonKey = match.usage_key
        record.acceptedTaxonKey = match.accepted_usage_key or match.usage_key
        record.scientificName = match.scientific_name
        record.taxonRank = match.rank

        for rank in DWC_RANKS:
            name_field, key_field = CLASSIFICATION_FIELDS[rank]
            setattr(record, name_field, match.higher_rank(rank))
            setattr(record, key_field, match.higher_rank_key(rank))

        name = match.canonical_name or match.scientific_name
        if match.match_type is MatchType.NONE or not name:
            return
        try:
            parsed = self.name_parser.parse(name, match.rank)
        except UnparsableNameError as e:
            logger.warning(f"Failed to parse backbone name for record {record.key}: {e}")
            return
        record.genericName = parsed.genus
        record.specificEpithet = parsed.specific_epithet
        record.infraspecificEpithet = parsed.infraspecific_epithet

    def interpret_taxonomy(self, verbatim: VerbatimRecord, record: InterpretedRecord) -> None:
        """Match the core taxon terms, falling back to identification rows."""

        outcome = self.match_terms(verbatim.terms)
        if not outcome.is_successful or outcome.payload.match_type is MatchType.NONE:
            for row in verbatim.extension_rows(Extension.IDENTIFICATION):
                candidate = self.match_terms(row)
                if candidate.is_successful and candidate.payload.match_type is not MatchType.NONE:
                    outcome = candidate
                    break
                if candidate.is_successful and not outcome.is_successful:
                    outcome = candidate

        if outcome.is_successful:
            self.apply_match(record, outcome.payload)
            record.add_issues(outcome.issues)
            logger.debug(f"Record {record.key} matched to {record.scientificName} [{record.taxonKey}]")
        else:
            logger.debug(f"No taxonomy lookup result for record {record.key}")
            record.add_issues([IssueCode.TAXON_MATCH_LOOKUP_FAILED])


__all__ = [
    "TaxonomyInterpreter",
    "build_scientific_name",
    "resolve_rank",
    "clean",
    "PLACEHOLDERS",
]
