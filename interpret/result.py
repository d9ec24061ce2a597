"""Uniform result type returned by every interpretation step."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, FrozenSet, Generic, Iterable, Optional, TypeVar

if TYPE_CHECKING:
    from dwc.issues import IssueCode

T = TypeVar("T")


class Confidence(str, Enum):
    """How sure an interpretation is.  Informational only."""

    DEFINITE = "definite"
    PROBABLE = "probable"


class OutcomeStatus(str, Enum):
    SUCCESS = "success"
    FAIL = "fail"


@dataclass(frozen=True)
class ParseOutcome(Generic[T]):
    """Either a successful payload with a confidence, or a failure.

    ``issues`` on a success describe corrections applied while still
    producing a usable payload.  ``issues`` on a failure explain why no
    payload was produced; an empty set means nothing was attempted.
    """

    status: OutcomeStatus
    payload: Optional[T] = None
    confidence: Optional[Confidence] = None
    issues: FrozenSet["IssueCode"] = field(default_factory=frozenset)

    @classmethod
    def success(
        cls,
        payload: T,
        confidence: Confidence = Confidence.DEFINITE,
        issues: Iterable["IssueCode"] = (),
    ) -> "ParseOutcome[T]":
        return cls(OutcomeStatus.SUCCESS, payload, confidence, frozenset(issues))

    @classmethod
    def fail(cls, issues: Iterable["IssueCode"] = ()) -> "ParseOutcome[T]":
        return cls(OutcomeStatus.FAIL, None, None, frozenset(issues))

    @property
    def is_successful(self) -> bool:
        return self.status is OutcomeStatus.SUCCESS

    def with_issues(self, *issues: "IssueCode") -> "ParseOutcome[T]":
        """Return a copy of this outcome carrying additional issues."""
        return ParseOutcome(self.status, self.payload, self.confidence, self.issues | set(issues))


__all__ = ["Confidence", "OutcomeStatus", "ParseOutcome"]
