"""Tests for the master query helpers, end to end through the mock master."""

from __future__ import annotations

import pytest

from masterlink.foundation.errors import ErrorCode, failure_code
from masterlink.foundation.testing import mock_master
from masterlink.master.queries import TopicInfo


# ═════════════════════════════════════════════════════════════════════════════
# check
# ═════════════════════════════════════════════════════════════════════════════


def test_check_live_master() -> None:
    with mock_master(caller_id="/probe") as master:
        master.respond("getPid", 4242)
        assert master.client.check()
        master.assert_called_with("getPid", "/probe")


def test_check_never_waits() -> None:
    """A down master fails the probe after exactly one attempt."""
    with mock_master(always_down=True) as master:
        assert not master.client.check()
        assert master.attempts == 1


def test_check_fails_on_error_status() -> None:
    with mock_master() as master:
        master.respond("getPid", 0, code=-1, status="nope")
        assert not master.client.check()


# ═════════════════════════════════════════════════════════════════════════════
# get_topics
# ═════════════════════════════════════════════════════════════════════════════


def test_get_topics_pairs() -> None:
    with mock_master() as master:
        master.respond("getPublishedTopics", [["/chatter", "std_msgs/String"], ["/rosout", "rosgraph_msgs/Log"]])
        topics = master.client.get_topics().unwrap()

    assert topics == [TopicInfo("/chatter", "std_msgs/String"), TopicInfo("/rosout", "rosgraph_msgs/Log")]
    assert topics[0].datatype == "std_msgs/String"


def test_get_topics_empty_is_not_an_error() -> None:
    with mock_master() as master:
        master.respond("getPublishedTopics", [])
        assert master.client.get_topics().unwrap() == []


def test_get_topics_sends_caller_and_subgraph() -> None:
    with mock_master(caller_id="/lister") as master:
        master.respond("getPublishedTopics", [])
        master.client.get_topics("/ns")
        master.assert_called_with("getPublishedTopics", "/lister", "/ns")


def test_get_topics_waits_for_master() -> None:
    with mock_master(down_for=3) as master:
        master.respond("getPublishedTopics", [["/chatter", "std_msgs/String"]])
        assert len(master.client.get_topics().unwrap()) == 1
        assert master.attempts == 4


def test_get_topics_malformed_payload() -> None:
    with mock_master() as master:
        master.respond("getPublishedTopics", [["/only_name"]])
        assert failure_code(master.client.get_topics()) == ErrorCode.INVALID_RESPONSE


@pytest.mark.parametrize("payload", [
    ["ab"],
    [{"name": "/chatter", "type": "std_msgs/String"}],
    [["/chatter", 3]],
    [["/chatter", "std_msgs/String", "extra"]],
    "/chatter",
])
def test_get_topics_rejects_wrong_shapes(payload: object) -> None:
    """Strings and structs are iterable but are not [name, type] pairs."""
    with mock_master() as master:
        master.respond("getPublishedTopics", payload)
        assert failure_code(master.client.get_topics()) == ErrorCode.INVALID_RESPONSE


def test_get_topics_times_out() -> None:
    with mock_master(always_down=True, timeout=0.02) as master:
        assert failure_code(master.client.get_topics()) == ErrorCode.TIMEOUT


# ═════════════════════════════════════════════════════════════════════════════
# get_nodes
# ═════════════════════════════════════════════════════════════════════════════


def test_get_nodes_flattens_and_deduplicates() -> None:
    state = [
        [["A", ["n1", "n2"]]],
        [["A", ["n2", "n3"]]],
        [],
    ]
    with mock_master() as master:
        master.respond("getSystemState", state)
        assert master.client.get_nodes().unwrap() == {"n1", "n2", "n3"}


def test_get_nodes_ignores_ordering() -> None:
    state = [
        [["/b", ["n3"]], ["/a", ["n1", "n3"]]],
        [["/a", ["n2"]]],
        [["/srv", ["n1"]]],
    ]
    with mock_master() as master:
        master.respond("getSystemState", state)
        assert sorted(master.client.get_nodes().unwrap()) == ["n1", "n2", "n3"]


def test_get_nodes_empty_system() -> None:
    with mock_master() as master:
        master.respond("getSystemState", [[], [], []])
        assert master.client.get_nodes().unwrap() == set()


def test_get_nodes_malformed_payload() -> None:
    with mock_master() as master:
        master.respond("getSystemState", [[["A"]], [], []])
        assert failure_code(master.client.get_nodes()) == ErrorCode.INVALID_RESPONSE


@pytest.mark.parametrize("state", [
    [[["A", "n1"]], [], []],
    [[["A", [1, 2]]], [], []],
    [[[3, ["n1"]]], [], []],
    [{"A": ["n1"]}, [], []],
    {"publishers": []},
])
def test_get_nodes_rejects_wrong_shapes(state: object) -> None:
    """Participants sent as a bare string are not split into characters."""
    with mock_master() as master:
        master.respond("getSystemState", state)
        assert failure_code(master.client.get_nodes()) == ErrorCode.INVALID_RESPONSE


def test_unknown_method_is_invalid_response() -> None:
    with mock_master() as master:
        result = master.client.execute("noSuchMethod", ["/me"])
        assert failure_code(result) == ErrorCode.INVALID_RESPONSE
        assert master.attempts == 1


# ═════════════════════════════════════════════════════════════════════════════
# MockMaster scripting
# ═════════════════════════════════════════════════════════════════════════════


def test_master_going_down_and_coming_up() -> None:
    with mock_master() as master:
        master.respond("getPid", 1)
        master.go_down()
        assert not master.client.check()

        master.come_up()
        assert master.client.check()
        assert master.call_count("getPid") == 1
        master.assert_called("getPid")


def test_raw_reply_computed_from_params() -> None:
    with mock_master() as master:
        master.respond_raw("lookupNode", lambda params: [1, "node api", f"http://{params[1].strip('/')}:4000"])
        result = master.client.execute("lookupNode", ["/me", "/talker"])

    assert result.unwrap().payload == "http://talker:4000"
