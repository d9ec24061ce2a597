from __future__ import annotations

from dataclasses import dataclass


@dataclass
class LookupTransportError(Exception):
    """Raised when an external lookup could not be completed.

    Distinct from a lookup that completed and found nothing: callers must
    treat this as "no answer", never as "no match".

    Parameters
    ----------
    code:
        Short machine readable error code.
    message:
        Human readable error message.
    """

    code: str
    message: str

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.code}: {self.message}"


__all__ = ["LookupTransportError"]
