"""Retry/connect loop for master calls.

State machine per call:
    Attempting → transport answered → Validating → Succeeded | FailedImmediate
    Attempting → no answer → Aborted (shutdown)
                           | FailedImmediate (caller does not wait)
                           | TimedOut (retry timeout elapsed)
                           | Backoff → Attempting

The master may not be up yet when a client starts, so waiting calls keep
retrying until it answers, the retry timeout elapses or the process shuts
down. Non-waiting calls fail fast after one attempt.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Sequence
from contextlib import AbstractContextManager, nullcontext
from typing import Any

from pydantic import BaseModel, ConfigDict

from masterlink.foundation.errors import (
    CallResult,
    ErrorCode,
    TransportFailure,
    call_failure,
)
from masterlink.runtime.observability import BoundLogger, get_logger
from masterlink.runtime.retry import NO_WAIT_LIMIT, RetryPolicy
from masterlink.runtime.shutdown import ShutdownSignal, get_shutdown

from .endpoint import MasterEndpoint
from .transport import TransportHandle, TransportPool, netloc, validate_response

# Held around transport calls only, when serialize_calls is on
_TRANSPORT_LOCK = threading.Lock()

Validator = Callable[[str, Any], CallResult]


class MasterConfig(BaseModel):
    """Everything a call reads from configuration, captured once per call."""

    model_config = ConfigDict(frozen=True, extra="forbid", revalidate_instances="never")

    endpoint: MasterEndpoint
    retry: RetryPolicy = NO_WAIT_LIMIT
    path: str = "/"

    def with_retry_timeout(self, timeout: float) -> MasterConfig:
        """Copy with a new retry timeout. Raises ConfigurationError when negative."""
        return self.model_copy(update={"retry": self.retry.with_timeout(timeout)})


class CallExecutor:
    """Executes master calls with retry-until-available semantics.

    Args:
        config: Source of the current MasterConfig; read once at the start of
            every call, so reconfiguration never affects calls in flight
        pool: Shared handle pool
        shutdown: Process-wide shutdown signal (default: the global flag)
        validator: Envelope validation (default: validate_response)
        serialize_calls: Serialize transport calls through one process-wide lock
        sleep/clock: Injectable for tests
    """

    def __init__(
        self,
        config: MasterConfig | Callable[[], MasterConfig],
        pool: TransportPool,
        *,
        shutdown: ShutdownSignal | None = None,
        validator: Validator = validate_response,
        serialize_calls: bool = False,
        log: BoundLogger | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config if callable(config) else (lambda: config)
        self.pool = pool
        self.shutdown = shutdown or get_shutdown()
        self._validate = validator
        self._serialize = serialize_calls
        self._log = log or get_logger("masterlink.executor")
        self._sleep = sleep
        self._clock = clock

    @property
    def config(self) -> MasterConfig:
        return self._config()

    def shutting_down(self) -> bool:
        return self.shutdown.is_shutting_down() or self.pool.is_shutting_down()

    def execute(self, method: str, request: Sequence[Any], wait_for_master: bool) -> CallResult:
        """Call `method` on the master with `request` as positional parameters.

        Returns Ok(CallSuccess) with the validated payload, or Err tagged
        UNAVAILABLE, TIMEOUT, SHUTTING_DOWN or INVALID_RESPONSE. The borrowed
        handle is released exactly once whichever way the call ends.
        """
        config = self._config()
        endpoint, policy = config.endpoint, config.retry
        start = self._clock()
        log = self._log.bind_call(method, endpoint.host, endpoint.port)

        handle = self.pool.acquire(endpoint.host, endpoint.port, config.path)
        try:
            return self._run(method, tuple(request), wait_for_master, handle, policy, start, log)
        finally:
            self.pool.release(handle)

    def _run(
        self,
        method: str,
        request: tuple[Any, ...],
        wait_for_master: bool,
        handle: TransportHandle,
        policy: RetryPolicy,
        start: float,
        log: BoundLogger,
    ) -> CallResult:
        printed = slept = False
        attempt = 0

        while True:
            try:
                with self._transport_lock():
                    response = handle.call(method, request)
            except TransportFailure as exc:
                failure = exc
            else:
                result = self._validate(method, response)
                if result.is_ok() and slept:
                    log.info("connected to master", attempts=attempt + 1)
                return result

            attempt += 1
            if self.shutting_down():
                return self._aborted(method, attempt)

            if not wait_for_master:
                return call_failure(
                    method, f"failed to contact master at [{netloc(handle.host, handle.port)}]",
                    ErrorCode.UNAVAILABLE, details=str(failure.cause), attempts=attempt,
                )

            if not printed:
                log.error("failed to contact master, retrying", error=str(failure.cause))
                printed = True

            elapsed = self._clock() - start
            if policy.expired(elapsed):
                log.error("timed out trying to connect to the master", timeout=policy.timeout, elapsed=elapsed)
                return call_failure(
                    method, f"timed out trying to connect to the master after [{policy.timeout}] seconds",
                    ErrorCode.TIMEOUT, details=str(failure.cause), attempts=attempt, elapsed=elapsed,
                )

            self._sleep(policy.get_delay(attempt - 1))
            slept = True
            if self.shutting_down():
                return self._aborted(method, attempt)

    def _aborted(self, method: str, attempts: int) -> CallResult:
        self._log.debug("master call aborted by shutdown", method=method, attempts=attempts)
        return call_failure(method, "shutting down", ErrorCode.SHUTTING_DOWN, attempts=attempts)

    def _transport_lock(self) -> AbstractContextManager[Any]:
        return _TRANSPORT_LOCK if self._serialize else nullcontext()
