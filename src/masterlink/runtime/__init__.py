"""Runtime - retry, shutdown signaling and observability for master calls."""

from __future__ import annotations

from .observability import BoundLogger, configure_logging, get_logger
from .retry import Backoff, ConstantBackoff, LinearBackoff, RetryPolicy
from .shutdown import ShutdownFlag, ShutdownSignal, get_shutdown

__all__ = [
    # Observability
    "BoundLogger", "configure_logging", "get_logger",
    # Retry
    "Backoff", "ConstantBackoff", "LinearBackoff", "RetryPolicy",
    # Shutdown
    "ShutdownFlag", "ShutdownSignal", "get_shutdown",
]
