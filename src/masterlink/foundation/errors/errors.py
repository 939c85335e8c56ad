"""Standardized error codes and exceptions for master calls.

Every failure a master call can produce is tagged with an ErrorCode.
Configuration failures are raised (fatal by contract); call failures are
returned as Err values carrying an ErrorTrace.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
)


class ErrorCode(StrEnum):
    """Failure tags for master resolution and remote calls."""
    CONFIGURATION_MISSING = "CONFIGURATION_MISSING"
    CONFIGURATION_INVALID = "CONFIGURATION_INVALID"
    UNAVAILABLE = "UNAVAILABLE"
    TIMEOUT = "TIMEOUT"
    SHUTTING_DOWN = "SHUTTING_DOWN"
    INVALID_RESPONSE = "INVALID_RESPONSE"


# Codes a caller may reasonably retry later by re-invoking the call
_RECOVERABLE_CODES: frozenset[ErrorCode] = frozenset({
    ErrorCode.UNAVAILABLE,
    ErrorCode.TIMEOUT,
})

_FATAL_CODES: frozenset[ErrorCode] = frozenset({
    ErrorCode.CONFIGURATION_MISSING,
    ErrorCode.CONFIGURATION_INVALID,
})


def is_recoverable(code: ErrorCode | str) -> bool:
    """Whether a failure with this code may succeed when re-invoked."""
    return ErrorCode(code) in _RECOVERABLE_CODES


class MasterError(BaseModel):
    """Structured description of a master failure.

    Attributes:
        operation: What was being attempted (e.g. "resolve", "master:getPid")
        message: Human-readable error message
        code: Machine-readable failure tag
        details: Optional extra information
    """

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        validate_default=True,
        json_schema_extra={
            "title": "Master Error",
            "examples": [{
                "operation": "resolve",
                "message": "REAL_MASTER_URI is not defined in the environment",
                "code": "CONFIGURATION_MISSING",
            }],
        },
    )

    operation: Annotated[str, Field(min_length=1)]
    message: Annotated[str, Field(min_length=1)]
    code: ErrorCode
    details: str | None = Field(default=None, repr=False)

    @field_validator("message", mode="before")
    @classmethod
    def _ensure_message(cls, v: str | Exception) -> str:
        """Accept Exception objects and extract message."""
        return str(v) if isinstance(v, Exception) else v

    @computed_field
    @property
    def recoverable(self) -> bool:
        return self.code in _RECOVERABLE_CODES

    @computed_field
    @property
    def fatal(self) -> bool:
        """Configuration errors must stop the process."""
        return self.code in _FATAL_CODES

    def render(self) -> str:
        parts = [f"[{self.code}] {self.operation}: {self.message}"]
        if self.details:
            parts.append(f"\n{self.details}")
        return "".join(parts)

    __str__ = render


class MasterException(Exception):
    """Exception wrapping a MasterError for raising."""

    __slots__ = ("error",)

    def __init__(self, error: MasterError) -> None:
        self.error = error
        super().__init__(error.message)

    @property
    def code(self) -> ErrorCode:
        return self.error.code

    @classmethod
    def create(cls, operation: str, message: str, code: ErrorCode, *, details: str | None = None) -> Self:
        return cls(MasterError(operation=operation, message=message, code=code, details=details))


class ConfigurationError(MasterException):
    """The master endpoint or retry settings are missing or malformed.

    Never retried. The top-level caller is expected to terminate.
    """


class TransportFailure(Exception):
    """A call attempt produced no usable response (connection, HTTP or decode failure).

    Raised by transport handles and consumed by the executor's retry loop.
    """

    __slots__ = ("method", "cause")

    def __init__(self, method: str, cause: BaseException | str) -> None:
        self.method = method
        self.cause = cause
        super().__init__(f"{method}: {cause}")
