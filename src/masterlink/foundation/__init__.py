"""Foundation - Core building blocks for masterlink.

Contains: error handling, config, testing.
"""

from __future__ import annotations

__all__ = [
    # Errors
    "ErrorCode", "MasterError", "MasterException", "ConfigurationError", "TransportFailure",
    "Result", "Ok", "Err", "ErrorContext", "ErrorTrace", "trace",
    "CallResult", "CallSuccess", "call_ok", "call_failure", "failure_code",
    # Testing
    "MockMaster", "Invocation", "mock_master",
    # Config
    "MasterlinkSettings", "get_settings", "clear_settings_cache",
    "LoggingSettings", "RetrySettings", "TransportSettings",
]


def __getattr__(name: str):
    """Lazy imports to avoid circular dependencies."""
    if name in ("ErrorCode", "MasterError", "MasterException", "ConfigurationError", "TransportFailure",
                "Result", "Ok", "Err", "ErrorContext", "ErrorTrace", "trace",
                "CallResult", "CallSuccess", "call_ok", "call_failure", "failure_code"):
        from . import errors
        return getattr(errors, name)

    if name in ("MockMaster", "Invocation", "mock_master"):
        from . import testing
        return getattr(testing, name)

    if name in ("MasterlinkSettings", "get_settings", "clear_settings_cache",
                "LoggingSettings", "RetrySettings", "TransportSettings"):
        from . import config
        return getattr(config, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
