"""Unified error handling for masterlink.

- ErrorCode: failure tags for resolution and remote calls
- MasterError/MasterException/ConfigurationError: structured errors and exceptions
- Result/Ok/Err: outcome type returned by every master call
- ErrorTrace/ErrorContext: error context stacking
- CallResult/CallSuccess: the concrete outcome of a master call
"""

from .call import CallResult, CallSuccess, call_failure, call_ok, failure_code
from .errors import (
    ConfigurationError,
    ErrorCode,
    MasterError,
    MasterException,
    TransportFailure,
    is_recoverable,
)
from .result import Err, Ok, Result
from .types import ErrorContext, ErrorTrace, JsonDict, JsonValue, trace

__all__ = [
    # Core errors
    "ErrorCode", "MasterError", "MasterException", "ConfigurationError", "TransportFailure", "is_recoverable",
    # Result
    "Result", "Ok", "Err",
    # Call outcomes
    "CallResult", "CallSuccess", "call_ok", "call_failure", "failure_code",
    # Error context
    "ErrorContext", "ErrorTrace", "trace", "JsonDict", "JsonValue",
]
