"""Retry policy and backoff strategies for waiting master calls.

Example:
    >>> from masterlink.runtime.retry import RetryPolicy, ConstantBackoff
    >>> policy = RetryPolicy(timeout=5.0, backoff=ConstantBackoff(0.1))
    >>> policy.with_timeout(0).waits_forever
    True
"""

from .backoff import Backoff, ConstantBackoff, LinearBackoff
from .policy import DEFAULT_INTERVAL, NO_WAIT_LIMIT, RetryPolicy

__all__ = [
    "Backoff",
    "ConstantBackoff",
    "LinearBackoff",
    "RetryPolicy",
    "DEFAULT_INTERVAL",
    "NO_WAIT_LIMIT",
]
