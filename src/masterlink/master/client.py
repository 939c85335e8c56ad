"""MasterClient: resolved endpoint, retry policy, handle pool and queries in one object.

Example:
    >>> from masterlink import MasterClient
    >>> client = MasterClient.from_environment({"__master": "http://localhost:11311"})
    >>> client.uri
    'http://localhost:11311'
    >>> client.set_retry_timeout(5.0)  # waiting calls give up after 5s
    >>> client.check()
    False
"""

from __future__ import annotations

import threading
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from masterlink.foundation.config import MasterlinkSettings, get_settings
from masterlink.foundation.errors import CallResult, ErrorTrace, Result
from masterlink.runtime.observability import configure_from_settings
from masterlink.runtime.retry import ConstantBackoff, RetryPolicy
from masterlink.runtime.shutdown import ShutdownSignal

from .endpoint import MasterEndpoint, resolve_endpoint
from .executor import CallExecutor, MasterConfig
from .queries import MasterQueries, TopicInfo
from .transport import TransportPool

if TYPE_CHECKING:
    import httpx


class MasterClient:
    """Client for the master.

    The configuration is an immutable MasterConfig; set_retry_timeout swaps
    in a new one. Calls already running keep the config they started with.
    """

    def __init__(
        self,
        config: MasterConfig,
        *,
        caller_id: str = "/masterlink",
        pool: TransportPool | None = None,
        shutdown: ShutdownSignal | None = None,
        serialize_calls: bool = False,
    ) -> None:
        self._config = config
        self._config_lock = threading.Lock()
        self.pool = pool or TransportPool()
        self.executor = CallExecutor(
            lambda: self._config, self.pool, shutdown=shutdown, serialize_calls=serialize_calls,
        )
        self.queries = MasterQueries(self.executor, caller_id)

    @classmethod
    def from_environment(
        cls,
        overrides: Mapping[str, str] | None = None,
        *,
        settings: MasterlinkSettings | None = None,
        environ: Mapping[str, str] | None = None,
        shutdown: ShutdownSignal | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> MasterClient:
        """Resolve the master and build a client from settings.

        Also applies the logging settings (MASTERLINK_LOG_FORMAT, MASTERLINK_LOG_LEVEL)
        to the process-wide logger.

        Raises:
            ConfigurationError: no master URI, or one that cannot be parsed. Fatal.
        """
        settings = settings or get_settings()
        configure_from_settings(settings.logging)
        endpoint = resolve_endpoint(overrides, environ)
        policy = RetryPolicy(timeout=settings.retry.timeout, backoff=ConstantBackoff(settings.retry.interval))
        return cls(
            MasterConfig(endpoint=endpoint, retry=policy, path=settings.transport.path),
            caller_id=settings.caller_id,
            pool=TransportPool(timeout=settings.transport.request_timeout, transport=transport),
            shutdown=shutdown,
            serialize_calls=settings.transport.serialize_calls,
        )

    # ─── Configuration ─────────────────────────────────────────────────

    @property
    def config(self) -> MasterConfig:
        return self._config

    @property
    def endpoint(self) -> MasterEndpoint:
        return self._config.endpoint

    @property
    def host(self) -> str:
        return self._config.endpoint.host

    @property
    def port(self) -> int:
        return self._config.endpoint.port

    @property
    def uri(self) -> str:
        return self._config.endpoint.uri

    @property
    def retry_timeout(self) -> float:
        return self._config.retry.timeout

    def set_retry_timeout(self, timeout: float) -> None:
        """Bound how long waiting calls retry; 0 retries forever.

        Raises ConfigurationError for a negative timeout and keeps the
        previous value.
        """
        with self._config_lock:
            self._config = self._config.with_retry_timeout(timeout)

    # ─── Calls ─────────────────────────────────────────────────────────

    def execute(self, method: str, request: Sequence[Any], wait_for_master: bool = True) -> CallResult:
        return self.executor.execute(method, request, wait_for_master)

    def check(self) -> bool:
        return self.queries.check()

    def get_topics(self, subgraph: str = "") -> Result[list[TopicInfo], ErrorTrace]:
        return self.queries.get_topics(subgraph)

    def get_nodes(self) -> Result[set[str], ErrorTrace]:
        return self.queries.get_nodes()

    # ─── Lifecycle ─────────────────────────────────────────────────────

    def close(self) -> None:
        """Shut the handle pool down; waiting calls abort with SHUTTING_DOWN."""
        self.pool.shutdown()

    def __enter__(self) -> MasterClient:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"MasterClient({self.uri!r}, retry_timeout={self.retry_timeout})"
