"""Integration between Result and master call outcomes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypeAlias

from .errors import ErrorCode, is_recoverable
from .result import Err, Ok, Result
from .types import ErrorTrace, JsonValue, trace


@dataclass(frozen=True, slots=True)
class CallSuccess:
    """Payload of a validated envelope plus the envelope's own metadata."""

    payload: Any
    status_code: int = 1
    status_message: str = ""
    envelope: Any = None


CallResult: TypeAlias = Result[CallSuccess, ErrorTrace]


def call_ok(payload: Any, *, status_code: int = 1, status_message: str = "", envelope: Any = None) -> CallResult:
    return Ok(CallSuccess(payload, status_code, status_message, envelope))


def call_failure(method: str, message: str, code: ErrorCode, *, details: str | None = None, **metadata: JsonValue) -> Result[Any, ErrorTrace]:
    """Create an Err tagged with code, with the master method as its first context."""
    return Err(
        trace(message, code=code.value, recoverable=is_recoverable(code), details=details)
        .with_operation(f"master:{method}", **metadata)
    )


def failure_code(result: Result[Any, ErrorTrace]) -> ErrorCode | None:
    """ErrorCode of an Err result, None for Ok."""
    if result.is_ok():
        return None
    code = result.unwrap_err().error_code
    return ErrorCode(code) if code else None
