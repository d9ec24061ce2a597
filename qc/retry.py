"""Bounded retries with a fixed backoff for external lookups."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Tuple, Type, TypeVar

from .errors import LookupTransportError

R = TypeVar("R")

logger = logging.getLogger(__name__)


@dataclass
class RetryPolicy:
    """How often and how long to wait between attempts.

    ``attempts`` counts the first call, so ``attempts=5`` means at most
    four retries.
    """

    attempts: int = 5
    backoff_seconds: float = 2.0
    retry_on: Tuple[Type[BaseException], ...] = (Exception,)
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)

    def __post_init__(self) -> None:
        if self.attempts < 1:
            raise ValueError("attempts must be at least 1")
        if self.backoff_seconds < 0:
            raise ValueError("backoff_seconds must not be negative")


class RetryingClient:
    """Call a transport function, retrying transient failures.

    Pure transport plus backoff: no memoisation happens here.  After the
    last attempt fails the error is surfaced as a
    :class:`LookupTransportError`.
    """

    def __init__(self, name: str, policy: RetryPolicy | None = None):
        self.name = name
        self.policy = policy or RetryPolicy()

    def call(self, func: Callable[..., R], *args, **kwargs) -> R:
        last_exception: BaseException | None = None
        for attempt in range(self.policy.attempts):
            try:
                result = func(*args, **kwargs)
                logger.debug(f"{self.name} call succeeded (attempt {attempt + 1})")
                return result
            except LookupTransportError:
                raise
            except self.policy.retry_on as e:
                last_exception = e
                logger.warning(f"{self.name} call failed on attempt {attempt + 1}: {e}")
                if attempt < self.policy.attempts - 1:
                    self.policy.sleep(self.policy.backoff_seconds)

        logger.error(f"{self.name} call failed after {self.policy.attempts} attempts: {last_exception}")
        raise LookupTransportError(
            code=f"{self.name}_unavailable",
            message=f"failed after {self.policy.attempts} attempts: {last_exception}",
        ) from last_exception


__all__ = ["RetryPolicy", "RetryingClient"]
