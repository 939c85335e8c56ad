"""Read-only convenience queries against the master."""

from __future__ import annotations

from typing import Any, NamedTuple

from masterlink.foundation.errors import (
    ErrorCode,
    ErrorTrace,
    Ok,
    Result,
    call_failure,
)

from .executor import CallExecutor


class TopicInfo(NamedTuple):
    """A published topic and its message type."""

    name: str
    datatype: str


class MasterQueries:
    """Shapes requests and payloads for the master's query methods.

    `check` is a fast liveness probe and never waits for the master;
    `get_topics` and `get_nodes` wait according to the retry policy.
    """

    def __init__(self, executor: CallExecutor, caller_id: str) -> None:
        self.executor = executor
        self.caller_id = caller_id

    def check(self) -> bool:
        """Whether the master answered a getPid probe right now."""
        return self.executor.execute("getPid", (self.caller_id,), False).is_ok()

    def get_topics(self, subgraph: str = "") -> Result[list[TopicInfo], ErrorTrace]:
        """Published topics as (name, type) pairs. No topics yet is an empty list."""
        return self.executor.execute("getPublishedTopics", (self.caller_id, subgraph), True).flat_map(
            lambda success: _parse_topics(success.payload)
        )

    def get_nodes(self) -> Result[set[str], ErrorTrace]:
        """Names of every node publishing, subscribing or providing a service."""
        return self.executor.execute("getSystemState", (self.caller_id,), True).flat_map(
            lambda success: _parse_nodes(success.payload)
        )


def _is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _is_str_pair(value: Any) -> bool:
    return _is_array(value) and len(value) == 2 and all(isinstance(v, str) for v in value)


def _parse_topics(payload: Any) -> Result[list[TopicInfo], ErrorTrace]:
    # [[name, type], ...]
    if not _is_array(payload):
        return _malformed("getPublishedTopics", f"topic list is a {type(payload).__name__}")
    for entry in payload:
        if not _is_str_pair(entry):
            return _malformed("getPublishedTopics", f"topic entry {entry!r} is not a [name, type] pair")
    return Ok([TopicInfo(name, datatype) for name, datatype in payload])


def _parse_nodes(payload: Any) -> Result[set[str], ErrorTrace]:
    # [publishers, subscribers, services], each a list of [name, [node, ...]]
    if not _is_array(payload):
        return _malformed("getSystemState", f"system state is a {type(payload).__name__}")
    nodes: set[str] = set()
    for section in payload:
        if not _is_array(section):
            return _malformed("getSystemState", f"section {section!r} is not a list")
        for entry in section:
            if not (_is_array(entry) and len(entry) == 2 and isinstance(entry[0], str) and _is_array(entry[1])):
                return _malformed("getSystemState", f"entry {entry!r} is not a [name, [node, ...]] pair")
            if not all(isinstance(node, str) for node in entry[1]):
                return _malformed("getSystemState", f"participants of {entry[0]} are not all strings")
            nodes.update(entry[1])
    return Ok(nodes)


def _malformed(method: str, reason: str) -> Result[Any, ErrorTrace]:
    return call_failure(method, f"unexpected payload: {reason}", ErrorCode.INVALID_RESPONSE)
