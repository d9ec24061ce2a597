"""Controlled vocabularies for countries, continents and taxonomic ranks.

Each parser is total: it never raises for text input and returns an
ordered list of candidates (best first) with a confidence.  Interpreters
only ever use the top candidate via ``parse``.

The country table, its aliases, the preferred-code mapping and the
equivalent-country groups live in ``config/rules/countries.toml``.
"""

from __future__ import annotations

import difflib
import re
import tomllib
import unicodedata
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from importlib import resources
from typing import Dict, FrozenSet, Generic, List, Optional, Tuple, TypeVar

from interpret.result import Confidence

V = TypeVar("V")

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def normalize_key(value: str) -> str:
    """Lower-case ``value``, strip accents and collapse punctuation to spaces."""

    decomposed = unicodedata.normalize("NFKD", value)
    ascii_only = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _NON_ALNUM_RE.sub(" ", ascii_only.lower()).strip()


@dataclass(frozen=True)
class Candidate(Generic[V]):
    value: V
    confidence: Confidence


# ---------------------------------------------------------------------------
# Countries
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Country:
    """An ISO 3166-1 country or territory."""

    iso2: str
    iso3: str
    title: str

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.iso2


@dataclass(frozen=True)
class _CountryRules:
    by_code: Dict[str, Country]
    by_iso3: Dict[str, Country]
    by_name: Dict[str, Country]
    preferred: Dict[str, str]
    equivalent: Dict[str, FrozenSet[str]]


@lru_cache(maxsize=None)
def _country_rules() -> _CountryRules:
    path = resources.files("config").joinpath("rules").joinpath("countries.toml")
    with path.open("rb") as fh:
        rules = tomllib.load(fh)

    by_code: Dict[str, Country] = {}
    by_iso3: Dict[str, Country] = {}
    by_name: Dict[str, Country] = {}
    for code, entry in rules.get("countries", {}).items():
        country = Country(iso2=code.upper(), iso3=entry["iso3"].upper(), title=entry["title"])
        by_code[country.iso2] = country
        by_iso3[country.iso3] = country
        by_name[normalize_key(country.title)] = country

    for alias, code in rules.get("aliases", {}).items():
        by_name[normalize_key(alias)] = by_code[code.upper()]

    equivalent: Dict[str, set] = {}
    for code, others in rules.get("equivalent", {}).items():
        for other in others:
            equivalent.setdefault(code, set()).add(other)
            equivalent.setdefault(other, set()).add(code)

    return _CountryRules(
        by_code=by_code,
        by_iso3=by_iso3,
        by_name=by_name,
        preferred={k.upper(): v.upper() for k, v in rules.get("preferred", {}).items()},
        equivalent={k: frozenset(v) for k, v in equivalent.items()},
    )


def country_for_code(code: str) -> Optional[Country]:
    """Return the country with the ISO alpha-2 ``code`` if it is known."""

    if not code:
        return None
    return _country_rules().by_code.get(code.strip().upper())


class CountryParser:
    """Parse ISO codes, English names and common aliases into a :class:`Country`."""

    def candidates(self, value: Optional[str]) -> List[Candidate[Country]]:
        if not value or not value.strip():
            return []
        rules = _country_rules()
        raw = value.strip()
        upper = raw.upper()

        if len(upper) == 2 and upper in rules.by_code:
            return [Candidate(rules.by_code[upper], Confidence.DEFINITE)]
        if len(upper) == 3 and upper in rules.by_iso3:
            return [Candidate(rules.by_iso3[upper], Confidence.DEFINITE)]

        key = normalize_key(raw)
        if key in rules.by_name:
            return [Candidate(rules.by_name[key], Confidence.DEFINITE)]

        close = difflib.get_close_matches(key, list(rules.by_name), n=3, cutoff=0.85)
        seen: List[Country] = []
        for name in close:
            country = rules.by_name[name]
            if country not in seen:
                seen.append(country)
        return [Candidate(country, Confidence.PROBABLE) for country in seen]

    def parse(self, value: Optional[str]) -> Optional[Candidate[Country]]:
        found = self.candidates(value)
        return found[0] if found else None


def preferred(country: Optional[Country]) -> Optional[Country]:
    """Return the preferred alias for ``country`` (e.g. Zaire -> Congo, DR)."""

    if country is None:
        return None
    rules = _country_rules()
    code = rules.preferred.get(country.iso2)
    return rules.by_code[code] if code else country


def are_equivalent(first: Optional[Country], second: Optional[Country]) -> bool:
    """True when two distinct countries are known to be recorded for each other."""

    if first is None or second is None or first == second:
        return False
    return second.iso2 in _country_rules().equivalent.get(first.iso2, frozenset())


# ---------------------------------------------------------------------------
# Continents
# ---------------------------------------------------------------------------


class Continent(str, Enum):
    AFRICA = "AFRICA"
    ANTARCTICA = "ANTARCTICA"
    ASIA = "ASIA"
    EUROPE = "EUROPE"
    NORTH_AMERICA = "NORTH_AMERICA"
    OCEANIA = "OCEANIA"
    SOUTH_AMERICA = "SOUTH_AMERICA"


CONTINENT_ALIASES: Dict[str, Continent] = {
    "africa": Continent.AFRICA,
    "afrika": Continent.AFRICA,
    "afrique": Continent.AFRICA,
    "antarctica": Continent.ANTARCTICA,
    "antarctic": Continent.ANTARCTICA,
    "antarktis": Continent.ANTARCTICA,
    "asia": Continent.ASIA,
    "asien": Continent.ASIA,
    "asie": Continent.ASIA,
    "europe": Continent.EUROPE,
    "europa": Continent.EUROPE,
    "north america": Continent.NORTH_AMERICA,
    "n america": Continent.NORTH_AMERICA,
    "nordamerika": Continent.NORTH_AMERICA,
    "central america": Continent.NORTH_AMERICA,
    "america del norte": Continent.NORTH_AMERICA,
    "oceania": Continent.OCEANIA,
    "australia": Continent.OCEANIA,
    "australasia": Continent.OCEANIA,
    "ozeanien": Continent.OCEANIA,
    "south america": Continent.SOUTH_AMERICA,
    "s america": Continent.SOUTH_AMERICA,
    "sudamerika": Continent.SOUTH_AMERICA,
    "america del sur": Continent.SOUTH_AMERICA,
    "sudamerica": Continent.SOUTH_AMERICA,
}


class ContinentParser:
    def candidates(self, value: Optional[str]) -> List[Candidate[Continent]]:
        if not value or not value.strip():
            return []
        key = normalize_key(value)
        if key.upper().replace(" ", "_") in Continent.__members__:
            return [Candidate(Continent[key.upper().replace(" ", "_")], Confidence.DEFINITE)]
        if key in CONTINENT_ALIASES:
            return [Candidate(CONTINENT_ALIASES[key], Confidence.DEFINITE)]
        close = difflib.get_close_matches(key, list(CONTINENT_ALIASES), n=1, cutoff=0.8)
        return [Candidate(CONTINENT_ALIASES[name], Confidence.PROBABLE) for name in close]

    def parse(self, value: Optional[str]) -> Optional[Candidate[Continent]]:
        found = self.candidates(value)
        return found[0] if found else None


# ---------------------------------------------------------------------------
# Ranks
# ---------------------------------------------------------------------------


class Rank(str, Enum):
    KINGDOM = "KINGDOM"
    PHYLUM = "PHYLUM"
    CLASS = "CLASS"
    ORDER = "ORDER"
    FAMILY = "FAMILY"
    SUBFAMILY = "SUBFAMILY"
    TRIBE = "TRIBE"
    GENUS = "GENUS"
    SUBGENUS = "SUBGENUS"
    SPECIES = "SPECIES"
    INFRASPECIFIC_NAME = "INFRASPECIFIC_NAME"
    SUBSPECIES = "SUBSPECIES"
    VARIETY = "VARIETY"
    SUBVARIETY = "SUBVARIETY"
    FORM = "FORM"
    SUBFORM = "SUBFORM"
    CULTIVAR = "CULTIVAR"
    UNRANKED = "UNRANKED"

    @property
    def is_infraspecific(self) -> bool:
        return self in _INFRASPECIFIC

    @property
    def is_species_or_below(self) -> bool:
        return self is Rank.SPECIES or self.is_infraspecific


_INFRASPECIFIC = frozenset(
    {
        Rank.INFRASPECIFIC_NAME,
        Rank.SUBSPECIES,
        Rank.VARIETY,
        Rank.SUBVARIETY,
        Rank.FORM,
        Rank.SUBFORM,
        Rank.CULTIVAR,
    }
)

# Ranks carried in a Darwin Core classification, highest first
DWC_RANKS: Tuple[Rank, ...] = (
    Rank.KINGDOM,
    Rank.PHYLUM,
    Rank.CLASS,
    Rank.ORDER,
    Rank.FAMILY,
    Rank.GENUS,
    Rank.SPECIES,
)

RANK_ALIASES: Dict[str, Rank] = {
    "regnum": Rank.KINGDOM,
    "division": Rank.PHYLUM,
    "divisio": Rank.PHYLUM,
    "classis": Rank.CLASS,
    "ordo": Rank.ORDER,
    "familia": Rank.FAMILY,
    "fam": Rank.FAMILY,
    "subfam": Rank.SUBFAMILY,
    "tribus": Rank.TRIBE,
    "gen": Rank.GENUS,
    "subgen": Rank.SUBGENUS,
    "sp": Rank.SPECIES,
    "spp": Rank.SPECIES,
    "spec": Rank.SPECIES,
    "species": Rank.SPECIES,
    "infraspecific": Rank.INFRASPECIFIC_NAME,
    "infraspecies": Rank.INFRASPECIFIC_NAME,
    "subsp": Rank.SUBSPECIES,
    "ssp": Rank.SUBSPECIES,
    "subspecies": Rank.SUBSPECIES,
    "var": Rank.VARIETY,
    "varietas": Rank.VARIETY,
    "variety": Rank.VARIETY,
    "subvar": Rank.SUBVARIETY,
    "f": Rank.FORM,
    "fo": Rank.FORM,
    "forma": Rank.FORM,
    "form": Rank.FORM,
    "subf": Rank.SUBFORM,
    "cv": Rank.CULTIVAR,
    "cultivar": Rank.CULTIVAR,
    "unranked": Rank.UNRANKED,
}


class RankParser:
    def candidates(self, value: Optional[str]) -> List[Candidate[Rank]]:
        if not value or not value.strip():
            return []
        key = normalize_key(value)
        member = key.upper().replace(" ", "_")
        if member in Rank.__members__:
            return [Candidate(Rank[member], Confidence.DEFINITE)]
        if key in RANK_ALIASES:
            return [Candidate(RANK_ALIASES[key], Confidence.DEFINITE)]
        return []

    def parse(self, value: Optional[str]) -> Optional[Candidate[Rank]]:
        found = self.candidates(value)
        return found[0] if found else None


__all__ = [
    "Candidate",
    "Country",
    "CountryParser",
    "country_for_code",
    "preferred",
    "are_equivalent",
    "normalize_key",
    "Continent",
    "CONTINENT_ALIASES",
    "ContinentParser",
    "Rank",
    "DWC_RANKS",
    "RANK_ALIASES",
    "RankParser",
]
