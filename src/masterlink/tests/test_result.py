"""Tests for Result and the call outcome helpers.

Validates:
- Functor and monad laws on Result
- Value extraction on both variants
- Failure tagging of call outcomes
"""

from __future__ import annotations

from typing import Callable

import pytest

from masterlink.foundation.errors import (
    CallSuccess,
    ErrorCode,
    Err,
    MasterError,
    Ok,
    Result,
    call_failure,
    call_ok,
    failure_code,
    is_recoverable,
    trace,
)


# ═════════════════════════════════════════════════════════════════════════════
# Property Tests - Functor and Monad Laws
# ═════════════════════════════════════════════════════════════════════════════


def test_functor_identity() -> None:
    """Functor law: fmap id = id"""
    assert Ok(42).map(lambda x: x) == Ok(42)
    assert Err("fail").map(lambda x: x) == Err("fail")


def test_functor_composition() -> None:
    """Functor law: fmap (f . g) = fmap f . fmap g"""
    f: Callable[[int], int] = lambda x: x + 1
    g: Callable[[int], int] = lambda x: x * 2

    result: Result[int, str] = Ok(5)
    assert result.map(lambda x: f(g(x))) == result.map(g).map(f)


def test_monad_left_identity() -> None:
    """Monad law: return a >>= f = f a"""
    f: Callable[[int], Result[int, str]] = lambda x: Ok(x * 2)
    assert Ok(21).flat_map(f) == f(21)


def test_monad_right_identity() -> None:
    """Monad law: m >>= return = m"""
    m: Result[int, str] = Ok(42)
    assert m.flat_map(Ok) == m


def test_flat_map_short_circuits_on_err() -> None:
    called: list[int] = []

    def step(x: int) -> Result[int, str]:
        called.append(x)
        return Ok(x)

    assert Err("down").and_then(step) == Err("down")
    assert called == []


# ═════════════════════════════════════════════════════════════════════════════
# Unit Tests - Extraction
# ═════════════════════════════════════════════════════════════════════════════


def test_extraction_on_ok() -> None:
    result: Result[list[str], str] = Ok(["/chatter"])

    assert result.is_ok() and not result.is_err()
    assert result.unwrap() == ["/chatter"]
    assert result.ok() == ["/chatter"]
    assert result.err() is None
    assert list(result) == [["/chatter"]]
    assert bool(result)


def test_extraction_on_err() -> None:
    result: Result[int, str] = Err("down")

    assert result.unwrap_or(0) == 0
    assert result.unwrap_err() == "down"
    assert list(result) == []
    assert not result
    with pytest.raises(RuntimeError, match="unwrap"):
        result.unwrap()
    with pytest.raises(RuntimeError, match="master required"):
        result.expect("master required")


def test_match_forces_both_branches() -> None:
    describe = lambda r: r.match(ok=lambda v: f"ok:{v}", err=lambda e: f"err:{e}")  # noqa: E731
    assert describe(Ok(1)) == "ok:1"
    assert describe(Err("x")) == "err:x"


def test_map_err_leaves_ok_untouched() -> None:
    assert Ok(1).map_err(str.upper) == Ok(1)
    assert Err("down").map_err(str.upper) == Err("DOWN")


# ═════════════════════════════════════════════════════════════════════════════
# Unit Tests - Call Outcomes
# ═════════════════════════════════════════════════════════════════════════════


def test_call_ok_wraps_payload() -> None:
    result = call_ok(7, status_message="pid", envelope=[1, "pid", 7])
    assert result.unwrap() == CallSuccess(7, 1, "pid", [1, "pid", 7])
    assert failure_code(result) is None


@pytest.mark.parametrize(("code", "recoverable"), [
    (ErrorCode.UNAVAILABLE, True),
    (ErrorCode.TIMEOUT, True),
    (ErrorCode.SHUTTING_DOWN, False),
    (ErrorCode.INVALID_RESPONSE, False),
])
def test_call_failure_tags_trace(code: ErrorCode, recoverable: bool) -> None:
    result = call_failure("getPid", "no master", code, attempts=3)
    error = result.unwrap_err()

    assert failure_code(result) == code
    assert error.recoverable is recoverable
    assert is_recoverable(code) is recoverable
    assert error.root_operation == "master:getPid"
    assert error.contexts[0].metadata == {"attempts": 3}


def test_trace_format_lists_contexts() -> None:
    error = trace("no master", code=ErrorCode.TIMEOUT.value).with_operation("master:getPid").with_operation("queries")
    text = error.format()

    assert text.startswith("no master [TIMEOUT]")
    assert "  - master:getPid" in text
    assert "  - queries" in text


def test_master_error_flags() -> None:
    missing = MasterError(operation="resolve", message="unset", code=ErrorCode.CONFIGURATION_MISSING)
    timeout = MasterError(operation="master:getPid", message=ValueError("slow"), code=ErrorCode.TIMEOUT)  # type: ignore[arg-type]

    assert missing.fatal and not missing.recoverable
    assert timeout.recoverable and not timeout.fatal
    assert timeout.message == "slow"
    assert str(missing) == "[CONFIGURATION_MISSING] resolve: unset"
