"""Backoff strategies for the master retry loop.

- ConstantBackoff: fixed delay, the master client's default (a short sleep
  between connection attempts while the master comes up)
- LinearBackoff: linear growth with cap, for callers that poll a slow master
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@runtime_checkable
class Backoff(Protocol):
    """Protocol for backoff delay calculation.

    Attempt numbers are 0-indexed (first retry = attempt 0).
    """

    def delay(self, attempt: int) -> float:
        """Delay in seconds before the next attempt."""
        ...


@dataclass(frozen=True, slots=True)
class ConstantBackoff:
    """Fixed delay between attempts.

    Attributes:
        delay_seconds: Fixed delay in seconds (default: 0.05)
    """

    delay_seconds: float = 0.05

    def delay(self, attempt: int) -> float:
        return self.delay_seconds


@dataclass(frozen=True, slots=True)
class LinearBackoff:
    """Linear backoff with cap.

    Delay = min(base + (increment * attempt), max_delay)
    """

    base: float = 0.05
    increment: float = 0.05
    max_delay: float = 1.0

    def delay(self, attempt: int) -> float:
        return min(self.base + (self.increment * attempt), self.max_delay)
