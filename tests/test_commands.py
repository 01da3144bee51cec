"""
Tests for the typed command layer.

Each command is checked for the request it builds and how it decodes
the reply frame.

Run with: python -m pytest tests/test_commands.py -v
"""

import pytest

from shardkv.client import Client
from shardkv.commands.base import CommandMixin
from shardkv.exceptions import BadResponse, NotEnoughParams, ServerError
from shardkv.protocol.frame import Frame
from tests.helpers import FakeConnection


def scripted(*replies):
    """A Client whose connection answers with the given reply field lists in order."""
    queue = list(replies)
    conn = FakeConnection(handler=lambda command, args: queue.pop(0))
    return Client(conn), conn


class TestStringCommands:

    def test_set_ok_without_value(self):
        client, conn = scripted(["ok"])

        assert client.set("a", "1") is True
        assert conn.calls == [("set", "a", "1")]

    def test_setx_sends_ttl(self):
        client, conn = scripted(["ok", "1"])

        assert client.setx("a", "1", 60) is True
        assert conn.calls == [("setx", "a", "1", 60)]

    def test_setnx(self):
        client, _ = scripted(["ok", "1"], ["ok", "0"])
        assert client.setnx("a", "1") is True
        assert client.setnx("a", "2") is False

    def test_get_found_and_missing(self):
        client, _ = scripted(["ok", "hello"], ["not_found"])

        assert client.get("a") == "hello"
        assert client.get("b") is None

    def test_get_with_extra_fields_is_bad_response(self):
        client, _ = scripted(["ok", "x", "y"])
        with pytest.raises(BadResponse):
            client.get("a")

    def test_get_server_error(self):
        client, _ = scripted(["error", "wrong type"])

        with pytest.raises(ServerError) as exc_info:
            client.get("a")

        assert exc_info.value.status == "error"
        assert exc_info.value.message == "wrong type"

    def test_empty_frame_is_bad_response(self):
        client, _ = scripted([])
        with pytest.raises(BadResponse):
            client.set("a", "1")

    def test_getset(self):
        client, conn = scripted(["ok", "old"])
        assert client.getset("a", "new") == "old"
        assert conn.calls == [("getset", "a", "new")]

    def test_delete(self):
        client, conn = scripted(["ok", "1"])
        assert client.delete("a") is True
        assert conn.calls == [("del", "a")]

    def test_exists(self):
        client, _ = scripted(["ok", "1"], ["ok", "0"])
        assert client.exists("a") is True
        assert client.exists("b") is False

    def test_incr_decr(self):
        client, conn = scripted(["ok", "5"], ["ok", "3"])

        assert client.incr("n", 5) == 5
        assert client.decr("n", 2) == 3
        assert conn.calls == [("incr", "n", 5), ("decr", "n", 2)]

    def test_incr_non_integer_reply(self):
        client, _ = scripted(["ok", "five"])
        with pytest.raises(BadResponse):
            client.incr("n")

    def test_scan(self):
        client, conn = scripted(["ok", "a", "1", "b", "2"])

        assert client.scan("", "", 10) == [("a", "1"), ("b", "2")]
        assert conn.calls == [("scan", "", "", 10)]

    def test_scan_odd_fields(self):
        client, _ = scripted(["ok", "a"])
        with pytest.raises(BadResponse):
            client.scan("", "", 10)


class TestBulkCommands:

    def test_multi_set_from_mapping(self):
        client, conn = scripted(["ok", "2"])

        assert client.multi_set({"a": "1", "b": 2}) is True
        assert conn.calls == [("multi_set", "a", "1", "b", 2)]

    def test_multi_get(self):
        client, conn = scripted(["ok", "a", "1"])

        assert client.multi_get(["a", "b"]) == [("a", "1")]
        assert conn.calls == [("multi_get", ["a", "b"])]

    def test_multi_get_not_found(self):
        client, _ = scripted(["not_found"])
        assert client.multi_get(["a"]) == []

    def test_multi_del(self):
        client, _ = scripted(["ok", "2"])
        assert client.multi_del(["a", "b"]) is True


class TestHashCommands:

    def test_hset_hget(self):
        client, conn = scripted(["ok", "1"], ["ok", "v"], ["not_found"])

        assert client.hset("h", "f", "v") is True
        assert client.hget("h", "f") == "v"
        assert client.hget("h", "g") is None
        assert conn.calls[0] == ("hset", "h", "f", "v")

    def test_hexists(self):
        client, _ = scripted(["ok", "1"], ["ok", "0"])
        assert client.hexists("h", "f") is True
        assert client.hexists("h", "g") is False

    def test_hincr_hsize(self):
        client, _ = scripted(["ok", "7"], ["ok", "3"])
        assert client.hincr("h", "f", 2) == 7
        assert client.hsize("h") == 3

    def test_hkeys_and_hlist(self):
        client, _ = scripted(["ok", "f1", "f2"], ["ok", "h1"])
        assert client.hkeys("h", "", "", 10) == ["f1", "f2"]
        assert client.hlist("", "", 10) == ["h1"]

    def test_hscan(self):
        client, _ = scripted(["ok", "f1", "v1"])
        assert client.hscan("h", "", "", 10) == [("f1", "v1")]

    def test_multi_hset(self):
        client, conn = scripted(["ok", "2"])

        assert client.multi_hset("h", [("f1", "v1"), ("f2", "v2")]) is True
        assert conn.calls == [("multi_hset", "h", "f1", "v1", "f2", "v2")]

    def test_multi_hget(self):
        client, conn = scripted(["ok", "f1", "v1", "f2", "v2"])

        assert client.multi_hget("h", ["f1", "f2"]) == {"f1": "v1", "f2": "v2"}
        assert conn.calls == [("multi_hget", "h", ["f1", "f2"])]

    def test_multi_hdel_uses_hash_command(self):
        client, conn = scripted(["ok", "1"])
        client.multi_hdel("h", ["f1"])
        assert conn.calls == [("multi_hdel", "h", ["f1"])]

    @pytest.mark.parametrize("method, arg", [
        ("multi_hset", {}),
        ("multi_hget", []),
        ("multi_hdel", []),
    ])
    def test_empty_fields_rejected_locally(self, method, arg):
        client, conn = scripted()

        with pytest.raises(NotEnoughParams):
            getattr(client, method)("h", arg)

        assert conn.calls == []


class TestZSetCommands:

    def test_zset_zget(self):
        client, conn = scripted(["ok", "1"], ["ok", "42"], ["not_found"])

        assert client.zset("z", "m", 42) is True
        assert client.zget("z", "m") == 42
        assert client.zget("z", "n") is None
        assert conn.calls[0] == ("zset", "z", "m", 42)

    def test_zrange_scores_are_ints(self):
        client, _ = scripted(["ok", "a", "1", "b", "2"])
        assert client.zrange("z", 0, 10) == [("a", 1), ("b", 2)]

    def test_zscan_map(self):
        client, _ = scripted(["ok", "a", "1", "b", "-3"])
        assert client.zscan("z", "", "", "", 10) == {"a": 1, "b": -3}

    def test_zscan_bad_score(self):
        client, _ = scripted(["ok", "a", "x"])
        with pytest.raises(BadResponse):
            client.zscan("z", "", "", "", 10)

    def test_zexists_and_rank(self):
        client, _ = scripted(["ok", "1"], ["ok", "4"])
        assert client.zexists("z", "a") is True
        assert client.zrank("z", "a") == 4

    def test_multi_zset(self):
        client, conn = scripted(["ok", "2"])
        assert client.multi_zset("z", {"a": 1, "b": 2}) is True
        assert conn.calls == [("multi_zset", "z", "a", 1, "b", 2)]

    def test_multi_zget(self):
        client, _ = scripted(["ok", "a", "1"])
        assert client.multi_zget("z", ["a"]) == {"a": 1}

    def test_zlist(self):
        client, _ = scripted(["ok", "z1", "z2"])
        assert client.zlist("", "", 10) == ["z1", "z2"]


class TestQueueCommands:

    def test_push_and_pop(self):
        client, conn = scripted(["ok"], ["ok"], ["ok", "item"], ["not_found"])

        assert client.qpush("q", "item") is True
        assert client.qpush_front("q", "first") is True
        assert client.qpop("q") == "item"
        assert client.qpop_back("q") is None
        assert [call[0] for call in conn.calls] == [
            "qpush_back", "qpush_front", "qpop_front", "qpop_back",
        ]

    def test_qsize_qslice_qget(self):
        client, _ = scripted(["ok", "2"], ["ok", "a", "b"], ["ok", "b"])

        assert client.qsize("q") == 2
        assert client.qslice("q", 0, -1) == ["a", "b"]
        assert client.qget("q", 1) == "b"

    def test_qfront_qback(self):
        client, _ = scripted(["ok", "a"], ["ok", "z"])
        assert client.qfront("q") == "a"
        assert client.qback("q") == "z"


def test_execute_passthrough():
    client, conn = scripted(["ok", "pong"])

    frame = client.execute("ping")

    assert isinstance(frame, Frame)
    assert frame.status == "ok"
    assert frame.payload == ["pong"]
    assert conn.calls == [("ping",)]


def test_command_mixin_requires_routing():
    with pytest.raises(NotImplementedError):
        CommandMixin()._execute_key("a", "get", "a")
