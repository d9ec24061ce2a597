"""Request and response types exchanged with the reference taxonomy."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from dwc.vocab import DWC_RANKS, Rank, RankParser

_RANK_PARSER = RankParser()

# GBIF backbone response keys for each Darwin Core rank
HIGHER_RANK_FIELDS: Dict[Rank, str] = {
    Rank.KINGDOM: "kingdom",
    Rank.PHYLUM: "phylum",
    Rank.CLASS: "class",
    Rank.ORDER: "order",
    Rank.FAMILY: "family",
    Rank.GENUS: "genus",
    Rank.SPECIES: "species",
}


class MatchType(str, Enum):
    EXACT = "EXACT"
    FUZZY = "FUZZY"
    HIGHERRANK = "HIGHERRANK"
    NONE = "NONE"


@dataclass(frozen=True)
class MatchQuery:
    """A name match request.  Hashable so it can key the lookup cache."""

    name: Optional[str] = None
    rank: Optional[Rank] = None
    kingdom: Optional[str] = None
    phylum: Optional[str] = None
    clazz: Optional[str] = None
    order: Optional[str] = None
    family: Optional[str] = None
    genus: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not any(
            (self.name, self.kingdom, self.phylum, self.clazz, self.order, self.family, self.genus)
        )


@dataclass(frozen=True)
class TaxonMatch:
    """Best match of a name against the reference taxonomy."""

    match_type: MatchType
    usage_key: Optional[int] = None
    accepted_usage_key: Optional[int] = None
    scientific_name: Optional[str] = None
    canonical_name: Optional[str] = None
    rank: Optional[Rank] = None
    status: Optional[str] = None
    confidence: Optional[int] = None
    note: Optional[str] = None
    classification: Mapping[Rank, str] = field(default_factory=dict)
    classification_keys: Mapping[Rank, int] = field(default_factory=dict)

    def higher_rank(self, rank: Rank) -> Optional[str]:
        return self.classification.get(rank)

    def higher_rank_key(self, rank: Rank) -> Optional[int]:
        return self.classification_keys.get(rank)

    @classmethod
    def none(cls, note: Optional[str] = None) -> "TaxonMatch":
        return cls(match_type=MatchType.NONE, note=note)

    @classmethod
    def from_gbif(cls, data: Mapping[str, Any]) -> "TaxonMatch":
        """Build a match from a GBIF ``species/match`` response."""

        try:
            match_type = MatchType(str(data.get("matchType", "NONE")).upper())
        except ValueError:
            match_type = MatchType.NONE

        rank_candidate = _RANK_PARSER.parse(data.get("rank"))
        classification: Dict[Rank, str] = {}
        keys: Dict[Rank, int] = {}
        for rank in DWC_RANKS:
            name_field = HIGHER_RANK_FIELDS[rank]
            if data.get(name_field):
                classification[rank] = data[name_field]
            if data.get(f"{name_field}Key") is not None:
                keys[rank] = int(data[f"{name_field}Key"])

        return cls(
            match_type=match_type,
            usage_key=data.get("usageKey"),
            accepted_usage_key=data.get("acceptedUsageKey"),
            scientific_name=data.get("scientificName"),
            canonical_name=data.get("canonicalName"),
            rank=rank_candidate.value if rank_candidate else None,
            status=data.get("status"),
            confidence=data.get("confidence"),
            note=data.get("note"),
            classification=classification,
            classification_keys=keys,
        )


__all__ = ["HIGHER_RANK_FIELDS", "MatchType", "MatchQuery", "TaxonMatch"]
