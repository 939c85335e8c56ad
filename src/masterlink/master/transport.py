"""XML-RPC transport handles, the shared handle pool and envelope validation.

A TransportHandle is one XML-RPC client bound to (host, port, path), posting
over a keep-alive httpx.Client. The TransportPool hands out idle handles by
key and creates new ones when every matching handle is busy; a handle is
never shared between two calls at once.

Every master response is an envelope [code, status_message, payload]. Code 1
means success; anything else, or any other shape, is an invalid response.
"""

from __future__ import annotations

import threading
import xmlrpc.client
from collections.abc import Callable, Sequence
from typing import Any, TypeAlias
from xml.parsers.expat import ExpatError

import httpx

from masterlink.foundation.errors import (
    CallResult,
    ErrorCode,
    TransportFailure,
    call_failure,
    call_ok,
)
from masterlink.runtime.observability import get_logger

HandleKey: TypeAlias = tuple[str, int, str]

STATUS_SUCCESS = 1
DEFAULT_REQUEST_TIMEOUT = 10.0
_USER_AGENT = "masterlink-xmlrpc/1.0"

log = get_logger("masterlink.transport")


def netloc(host: str, port: int) -> str:
    """host:port, with IPv6 literals in brackets."""
    return f"[{host}]:{port}" if ":" in host else f"{host}:{port}"


class TransportHandle:
    """XML-RPC client for one (host, port, path).

    call() returns the decoded response value (or the xmlrpc Fault the server
    answered with) and raises TransportFailure when no response was obtained.
    """

    __slots__ = ("host", "port", "path", "in_use", "_client", "_closed")

    def __init__(
        self,
        host: str,
        port: int,
        path: str = "/",
        *,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.host, self.port, self.path = host, port, path
        self.in_use = False
        self._closed = False
        self._client = httpx.Client(
            base_url=f"http://{netloc(host, port)}",
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "text/xml", "User-Agent": _USER_AGENT},
        )

    @property
    def key(self) -> HandleKey:
        return (self.host, self.port, self.path)

    @property
    def closed(self) -> bool:
        return self._closed

    def call(self, method: str, params: Sequence[Any]) -> Any:
        body = xmlrpc.client.dumps(tuple(params), methodname=method, allow_none=True)
        try:
            response = self._client.post(self.path, content=body.encode("utf-8"))
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise TransportFailure(method, exc) from exc
        try:
            values, _ = xmlrpc.client.loads(response.content, use_builtin_types=True)
        except xmlrpc.client.Fault as fault:
            return fault
        except (xmlrpc.client.ResponseError, ExpatError, ValueError) as exc:
            raise TransportFailure(method, exc) from exc
        return values[0] if values else None

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._client.close()

    def __repr__(self) -> str:
        return f"TransportHandle({self.host}:{self.port}{self.path}, in_use={self.in_use})"


HandleFactory: TypeAlias = Callable[[str, int, str], TransportHandle]


class TransportPool:
    """Keyed pool of reusable TransportHandles, shared by every caller in the process.

    Bookkeeping is guarded by the pool's own lock; the transport calls made
    through a handle are not.

    Example:
        >>> pool = TransportPool()
        >>> handle = pool.acquire("localhost", 11311, "/")
        >>> try:
        ...     raw = handle.call("getPid", ["/me"])
        ... finally:
        ...     pool.release(handle)
    """

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
        handle_factory: HandleFactory | None = None,
    ) -> None:
        self._lock = threading.Lock()
        self._handles: dict[HandleKey, list[TransportHandle]] = {}
        self._shutting_down = False
        self._factory: HandleFactory = handle_factory or (
            lambda host, port, path: TransportHandle(host, port, path, timeout=timeout, transport=transport)
        )

    def acquire(self, host: str, port: int, path: str = "/") -> TransportHandle:
        """Borrow an idle handle for (host, port, path), creating one if none is free."""
        key = (host, port, path)
        with self._lock:
            for handle in self._handles.get(key, ()):
                if not handle.in_use and not handle.closed:
                    handle.in_use = True
                    return handle
            handle = self._factory(host, port, path)
            handle.in_use = True
            self._handles.setdefault(key, []).append(handle)
        log.debug("handle created", host=host, port=port, path=path)
        return handle

    def release(self, handle: TransportHandle) -> None:
        """Return a borrowed handle. Releasing a handle that is not borrowed is an error."""
        with self._lock:
            if not handle.in_use:
                raise RuntimeError(f"{handle!r} released while not in use")
            handle.in_use = False
            if self._shutting_down:
                self._discard(handle)

    def is_shutting_down(self) -> bool:
        return self._shutting_down

    def shutdown(self) -> None:
        """Stop handing out handles for reuse and close every idle one.

        Handles still borrowed are closed when they are released.
        """
        with self._lock:
            self._shutting_down = True
            for handles in list(self._handles.values()):
                for handle in [h for h in handles if not h.in_use]:
                    self._discard(handle)

    def _discard(self, handle: TransportHandle) -> None:
        handle.close()
        handles = self._handles.get(handle.key, [])
        if handle in handles:
            handles.remove(handle)
        if not handles:
            self._handles.pop(handle.key, None)

    @property
    def size(self) -> int:
        with self._lock:
            return sum(len(h) for h in self._handles.values())

    @property
    def in_use(self) -> int:
        with self._lock:
            return sum(1 for hs in self._handles.values() for h in hs if h.in_use)

    def __enter__(self) -> TransportPool:
        return self

    def __exit__(self, *_: object) -> None:
        self.shutdown()


def validate_response(method: str, response: Any) -> CallResult:
    """Check a master envelope and extract its payload.

    Accepts [code, status] or [code, status, payload]; a missing payload is
    an empty list. Anything else, including an XML-RPC fault, is
    INVALID_RESPONSE.
    """
    if isinstance(response, xmlrpc.client.Fault):
        return _invalid(method, f"fault {response.faultCode}: {response.faultString}")
    if not isinstance(response, (list, tuple)):
        return _invalid(method, f"didn't return an array (got {type(response).__name__})")
    if len(response) not in (2, 3):
        return _invalid(method, f"returned an array of size {len(response)}, expected 2 or 3")

    code, status = response[0], response[1]
    if not isinstance(code, int) or isinstance(code, bool):
        return _invalid(method, "didn't return an int as its first element")
    if not isinstance(status, str):
        return _invalid(method, "didn't return a string as its second element")
    if code != STATUS_SUCCESS:
        return _invalid(method, f"returned an error ({code}): [{status}]", status_code=code)

    payload = response[2] if len(response) > 2 else []
    return call_ok(payload, status_code=code, status_message=status, envelope=response)


def _invalid(method: str, reason: str, **metadata: Any) -> CallResult:
    log.debug("invalid master response", method=method, reason=reason)
    return call_failure(method, f"XML-RPC call [{method}] {reason}", ErrorCode.INVALID_RESPONSE, **metadata)
