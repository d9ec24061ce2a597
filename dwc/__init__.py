from .issues import IssueCode
from .record import InterpretedRecord, VerbatimRecord
from .terms import Extension, Term, resolve_extension, resolve_term
from .vocab import (
    Continent,
    ContinentParser,
    Country,
    CountryParser,
    Rank,
    RankParser,
    are_equivalent,
    country_for_code,
    preferred,
)

__all__ = [
    "IssueCode",
    "InterpretedRecord",
    "VerbatimRecord",
    "Extension",
    "Term",
    "resolve_extension",
    "resolve_term",
    "Continent",
    "ContinentParser",
    "Country",
    "CountryParser",
    "Rank",
    "RankParser",
    "are_equivalent",
    "country_for_code",
    "preferred",
]
