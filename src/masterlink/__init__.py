"""masterlink - Client-side resolver and transport for the master registry.

Finds the master from configuration (the "__master" override, else the
REAL_MASTER_URI environment variable) and calls it over XML-RPC, retrying
until it is available, bounded by an optional timeout and cut short by
process shutdown.

Quick Start:
    >>> from masterlink import MasterClient
    >>>
    >>> client = MasterClient.from_environment()   # reads REAL_MASTER_URI
    >>> client.check()                             # fast probe, never waits
    True
    >>> client.get_topics().unwrap()
    [TopicInfo(name='/chatter', datatype='std_msgs/String')]
    >>> sorted(client.get_nodes().unwrap())
    ['/listener', '/talker']

Bounded waiting:
    >>> client.set_retry_timeout(2.0)
    >>> result = client.execute("lookupNode", ["/me", "/talker"])
    >>> result.is_err() and failure_code(result) == ErrorCode.TIMEOUT
    True

Configuration errors are fatal by contract:
    >>> try:
    ...     MasterClient.from_environment(environ={})
    ... except ConfigurationError as e:
    ...     raise SystemExit(str(e.error))
"""

from __future__ import annotations

__version__ = "0.1.0"

# Errors
from .foundation.errors import (
    CallResult,
    CallSuccess,
    ConfigurationError,
    Err,
    ErrorCode,
    ErrorTrace,
    MasterError,
    MasterException,
    Ok,
    Result,
    failure_code,
)

# Config
from .foundation.config import MasterlinkSettings, clear_settings_cache, get_settings

# Master
from .master import (
    CallExecutor,
    MasterClient,
    MasterConfig,
    MasterEndpoint,
    MasterQueries,
    TopicInfo,
    TransportHandle,
    TransportPool,
    resolve_endpoint,
    validate_response,
)

# Runtime
from .runtime import (
    ConstantBackoff,
    RetryPolicy,
    ShutdownFlag,
    configure_logging,
    get_logger,
    get_shutdown,
)

__all__ = [
    "__version__",
    # Errors
    "ErrorCode", "MasterError", "MasterException", "ConfigurationError",
    "Result", "Ok", "Err", "ErrorTrace", "CallResult", "CallSuccess", "failure_code",
    # Config
    "MasterlinkSettings", "get_settings", "clear_settings_cache",
    # Master
    "MasterClient", "MasterConfig", "MasterEndpoint", "resolve_endpoint",
    "CallExecutor", "TransportHandle", "TransportPool", "validate_response",
    "MasterQueries", "TopicInfo",
    # Runtime
    "RetryPolicy", "ConstantBackoff", "ShutdownFlag", "get_shutdown",
    "configure_logging", "get_logger",
]
