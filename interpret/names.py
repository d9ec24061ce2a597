"""Decompose scientific names into their parts.

Only regular Linnean names are handled: a genus (uninomial), optionally an
infrageneric name in brackets, a specific epithet and an infraspecific
epithet with or without a rank marker.  Anything else raises
:class:`UnparsableNameError`.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from dwc.vocab import Rank, RankParser

logger = logging.getLogger(__name__)


class UnparsableNameError(ValueError):
    """Raised when a name is not a regular Linnean name."""

    def __init__(self, name: str, reason: str):
        super().__init__(f"{reason}: {name!r}")
        self.name = name
        self.reason = reason


@dataclass(frozen=True)
class ParsedName:
    genus: str
    infrageneric: Optional[str] = None
    specific_epithet: Optional[str] = None
    infraspecific_epithet: Optional[str] = None
    rank_marker: Optional[str] = None
    rank: Optional[Rank] = None
    authorship: Optional[str] = None

    @property
    def canonical_name(self) -> str:
        parts = [self.genus]
        if self.specific_epithet:
            parts.append(self.specific_epithet)
        if self.infraspecific_epithet:
            if self.rank_marker:
                parts.append(self.rank_marker)
            parts.append(self.infraspecific_epithet)
        return " ".join(parts)


_VIRUS_RE = re.compile(r"(virus|viroid|phage|satellite)\b", re.IGNORECASE)
_OTU_RE = re.compile(r"^(BOLD:[A-Z]{3}\d+|SH\d+\.\d+FU|OTU[\s_-]?\d+)", re.IGNORECASE)
_HYBRID_FORMULA_RE = re.compile(r"\s[×xX]\s+[A-Z]")
_PLACEHOLDER_RE = re.compile(
    r"^(unknown|unidentified|indet\.?|incertae sedis|not assigned|none|null|\?+)$", re.IGNORECASE
)

_NAME_RE = re.compile(
    r"""^(?P<genus>×?[A-Z][a-zë-]+)
    (?:\s+\((?P<infrageneric>[A-Z][a-zë-]+)\))?
    (?:\s+(?P<specific>×?\s?[a-zë-]{2,}))?
    (?:\s+(?P<marker>subsp\.|ssp\.|var\.|subvar\.|f\.|fo\.|forma|subf\.|cv\.|nothosubsp\.)?\s*
       (?P<infraspecific>(?!(?:de|del|der|van|von|ex|et|in|da|du|le|la)\b)[a-zë-]{2,}))?
    (?:\s+(?P<authorship>.+))?$""",
    re.VERBOSE,
)

_RANK_PARSER = RankParser()


class NameParser:
    """Regex based splitter for canonical and author-bearing names."""

    def parse(self, name: Optional[str], rank: Optional[Rank] = None) -> ParsedName:
        if name is None:
            raise UnparsableNameError("", "empty name")
        value = " ".join(name.split())
        if not value:
            raise UnparsableNameError(name, "empty name")
        if _PLACEHOLDER_RE.match(value):
            raise UnparsableNameError(name, "placeholder")
        if _VIRUS_RE.search(value):
            raise UnparsableNameError(name, "virus name")
        if _OTU_RE.match(value):
            raise UnparsableNameError(name, "OTU identifier")
        if _HYBRID_FORMULA_RE.search(value):
            raise UnparsableNameError(name, "hybrid formula")

        match = _NAME_RE.match(value)
        if not match:
            raise UnparsableNameError(name, "not a Linnean name")

        specific = match.group("specific")
        if specific:
            specific = specific.lstrip("× ")
        infraspecific = match.group("infraspecific")
        marker = match.group("marker")
        if infraspecific and not specific:
            raise UnparsableNameError(name, "infraspecific name without species")

        parsed_rank = rank
        if marker:
            candidate = _RANK_PARSER.parse(marker.rstrip("."))
            if candidate is not None:
                parsed_rank = candidate.value
        if parsed_rank is None:
            if infraspecific:
                parsed_rank = Rank.INFRASPECIFIC_NAME
            elif specific:
                parsed_rank = Rank.SPECIES

        return ParsedName(
            genus=match.group("genus"),
            infrageneric=match.group("infrageneric"),
            specific_epithet=specific,
            infraspecific_epithet=infraspecific,
            rank_marker=marker,
            rank=parsed_rank,
            authorship=match.group("authorship"),
        )


__all__ = ["NameParser", "ParsedName", "UnparsableNameError"]
