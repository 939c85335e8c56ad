"""Retry policy for waiting master calls.

A RetryPolicy pairs the overall retry timeout with the backoff between
attempts. Frozen: reconfiguring means building a new policy, so a call that
already captured a policy is never affected by a later change.
"""

from __future__ import annotations

import math
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, computed_field

from masterlink.foundation.errors import ConfigurationError, ErrorCode

from .backoff import Backoff, ConstantBackoff

DEFAULT_INTERVAL = 0.05


class RetryPolicy(BaseModel):
    """Retry-until-available configuration.

    Attributes:
        timeout: Seconds to keep retrying, measured from the start of the call.
            0 means retry forever.
        backoff: Delay between attempts

    Example:
        >>> policy = RetryPolicy(timeout=2.0)
        >>> policy.expired(2.5)
        True
        >>> RetryPolicy().expired(3600.0)
        False
    """

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,  # For Backoff protocol
        validate_default=True,
        extra="forbid",
        revalidate_instances="never",
    )

    timeout: Annotated[float, Field(ge=0.0, allow_inf_nan=False)] = 0.0
    backoff: Backoff = Field(default_factory=lambda: ConstantBackoff(DEFAULT_INTERVAL), repr=False)

    @computed_field
    @property
    def waits_forever(self) -> bool:
        return self.timeout == 0.0

    def expired(self, elapsed: float) -> bool:
        """Whether a call that has run for `elapsed` seconds must give up."""
        return not self.waits_forever and elapsed >= self.timeout

    def get_delay(self, attempt: int) -> float:
        return self.backoff.delay(attempt)

    def with_timeout(self, timeout: float) -> RetryPolicy:
        """Return a copy with a new timeout. Negative values are fatal."""
        if not math.isfinite(timeout) or timeout < 0:
            raise ConfigurationError.create(
                "set_retry_timeout", f"retry timeout must be a finite, non-negative number (got {timeout})",
                ErrorCode.CONFIGURATION_INVALID,
            )
        return self.model_copy(update={"timeout": float(timeout)})

    def __hash__(self) -> int:
        return hash((self.timeout, self.backoff))


NO_WAIT_LIMIT = RetryPolicy()
