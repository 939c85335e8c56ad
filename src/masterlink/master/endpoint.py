"""Master address resolution.

The master URI comes from the override map (key "__master") or, failing
that, from the REAL_MASTER_URI environment variable. A process that cannot
find its master must not continue half-configured: both a missing and a
malformed URI raise ConfigurationError, which callers treat as fatal.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Annotated
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field

from masterlink.foundation.errors import ConfigurationError, ErrorCode
from masterlink.runtime.observability import get_logger

MASTER_URI_ENV = "REAL_MASTER_URI"
MASTER_OVERRIDE_KEY = "__master"

_MISSING_HINT = (
    f"{MASTER_URI_ENV} is not defined in the environment. Either type the following or "
    f"(preferably) add this to your ~/.bashrc file in order to set up your local machine "
    f"as a master:\n\nexport {MASTER_URI_ENV}=http://localhost:12345\n\n"
    f"then launch the master program in another shell."
)

log = get_logger("masterlink.endpoint")


class MasterEndpoint(BaseModel):
    """Validated master address. Immutable once resolved."""

    model_config = ConfigDict(frozen=True, extra="forbid", revalidate_instances="never")

    host: Annotated[str, Field(min_length=1)]
    port: Annotated[int, Field(ge=1, le=65535)]
    uri: Annotated[str, Field(min_length=1)]

    @property
    def address(self) -> str:
        return f"[{self.host}]:{self.port}" if ":" in self.host else f"{self.host}:{self.port}"

    def __str__(self) -> str:
        return self.uri


def split_uri(uri: str) -> tuple[str, int]:
    """Split "scheme://host:port[/path]" into (host, port).

    A bare "host:port" is accepted as well. Raises ConfigurationError
    (CONFIGURATION_INVALID) when no host or a bad port is found.
    """
    candidate = uri.strip()
    parts = urlsplit(candidate if "://" in candidate else f"http://{candidate}")
    try:
        port = parts.port
    except ValueError as exc:
        raise _invalid(uri, str(exc)) from exc
    if not parts.hostname:
        raise _invalid(uri, "missing host")
    if port is None:
        raise _invalid(uri, "missing port")
    if not 1 <= port <= 65535:
        raise _invalid(uri, f"port {port} out of range")
    return parts.hostname, port


def resolve_endpoint(overrides: Mapping[str, str] | None = None, environ: Mapping[str, str] | None = None) -> MasterEndpoint:
    """Resolve the master endpoint: override map first, then environment.

    Args:
        overrides: Name-to-value remappings; "__master" selects the URI
        environ: Environment to read REAL_MASTER_URI from (default os.environ)

    Raises:
        ConfigurationError: CONFIGURATION_MISSING when neither source names a
            master, CONFIGURATION_INVALID when the URI cannot be split.
    """
    uri = (overrides or {}).get(MASTER_OVERRIDE_KEY) or ""
    if not uri:
        uri = (os.environ if environ is None else environ).get(MASTER_URI_ENV) or ""
    if not uri:
        log.critical("master uri missing", env=MASTER_URI_ENV)
        raise ConfigurationError.create("resolve", _MISSING_HINT, ErrorCode.CONFIGURATION_MISSING)

    host, port = split_uri(uri)
    return MasterEndpoint(host=host, port=port, uri=uri)


def _invalid(uri: str, reason: str) -> ConfigurationError:
    log.critical("master uri invalid", uri=uri, reason=reason)
    return ConfigurationError.create(
        "resolve", f"Couldn't parse the master URI [{uri}] into a host:port pair ({reason})",
        ErrorCode.CONFIGURATION_INVALID,
    )
