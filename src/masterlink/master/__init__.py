"""Master client: address resolution, handle pool, retry loop and queries."""

from .client import MasterClient
from .endpoint import MASTER_OVERRIDE_KEY, MASTER_URI_ENV, MasterEndpoint, resolve_endpoint, split_uri
from .executor import CallExecutor, MasterConfig
from .queries import MasterQueries, TopicInfo
from .transport import TransportHandle, TransportPool, validate_response

__all__ = [
    "MasterClient",
    # Resolution
    "MasterEndpoint", "resolve_endpoint", "split_uri", "MASTER_URI_ENV", "MASTER_OVERRIDE_KEY",
    # Execution
    "CallExecutor", "MasterConfig",
    # Transport
    "TransportHandle", "TransportPool", "validate_response",
    # Queries
    "MasterQueries", "TopicInfo",
]
