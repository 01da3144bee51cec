"""
Test doubles shared by the test modules.

- StubServer: an asyncio server speaking the store's wire protocol
- FakeSocket / SocketFactory: scripted sockets for driving Connection
- FakeConnection: a scripted stand-in for Connection in router tests
"""

import asyncio
import socket
import threading
from contextlib import closing
from typing import Dict, List

from shardkv.protocol.decoder import FrameDecoder
from shardkv.protocol.encoder import encode_request
from shardkv.protocol.frame import Frame


def find_free_port() -> int:
    """Find an available port for testing."""
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind(('', 0))
        s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        return s.getsockname()[1]


class StubServer:
    """
    Minimal in-memory store speaking the length-prefixed protocol.

    Supports the string commands plus a few hash and queue commands,
    enough to exercise the client end to end. Every received request is
    appended to `requests`.
    """

    def __init__(self, host: str = '127.0.0.1', port: int = 0):
        self.host = host
        self.port = port
        self.data: Dict[str, str] = {}
        self.hashes: Dict[str, Dict[str, str]] = {}
        self.queues: Dict[str, List[str]] = {}
        self.requests: List[List[str]] = []
        self._server = None
        self._writers = set()

    async def handle_client(self, reader, writer) -> None:
        self._writers.add(writer)
        decoder = FrameDecoder()
        try:
            while True:
                data = await reader.read(4096)
                if not data:
                    break
                result = decoder.feed(data)
                while result.is_frame:
                    self.requests.append(result.frame.fields)
                    writer.write(encode_request(*self.dispatch(result.frame.fields)))
                    result = decoder.feed()
                if result.is_malformed:
                    break
                await writer.drain()
        except ConnectionResetError:
            pass
        finally:
            self._writers.discard(writer)
            writer.close()

    def dispatch(self, fields: List[str]) -> List[str]:
        command, args = fields[0], fields[1:]
        data = self.data

        if command in ("set", "setx"):
            data[args[0]] = args[1]
            return ["ok", "1"]
        if command == "setnx":
            if args[0] in data:
                return ["ok", "0"]
            data[args[0]] = args[1]
            return ["ok", "1"]
        if command == "get":
            if args[0] in data:
                return ["ok", data[args[0]]]
            return ["not_found"]
        if command == "del":
            data.pop(args[0], None)
            return ["ok", "1"]
        if command == "exists":
            return ["ok", "1" if args[0] in data else "0"]
        if command in ("incr", "decr"):
            delta = int(args[1]) if len(args) > 1 else 1
            value = int(data.get(args[0], "0")) + (delta if command == "incr" else -delta)
            data[args[0]] = str(value)
            return ["ok", str(value)]
        if command == "multi_set":
            for i in range(0, len(args), 2):
                data[args[i]] = args[i + 1]
            return ["ok", str(len(args) // 2)]
        if command == "multi_get":
            reply = ["ok"]
            for key in args:
                if key in data:
                    reply += [key, data[key]]
            return reply
        if command == "multi_del":
            for key in args:
                data.pop(key, None)
            return ["ok", str(len(args))]
        if command == "hset":
            self.hashes.setdefault(args[0], {})[args[1]] = args[2]
            return ["ok", "1"]
        if command == "hget":
            value = self.hashes.get(args[0], {}).get(args[1])
            return ["not_found"] if value is None else ["ok", value]
        if command == "hsize":
            return ["ok", str(len(self.hashes.get(args[0], {})))]
        if command == "qpush_back":
            self.queues.setdefault(args[0], []).append(args[1])
            return ["ok"]
        if command == "qpop_front":
            queue = self.queues.get(args[0])
            if not queue:
                return ["not_found"]
            return ["ok", queue.pop(0)]
        if command == "qsize":
            return ["ok", str(len(self.queues.get(args[0], [])))]
        if command == "echo":
            return ["ok"] + args
        return ["client_error", f"Unknown Command: {command}"]

    async def start(self) -> None:
        self._server = await asyncio.start_server(self.handle_client, self.host, self.port)
        self.port = self._server.sockets[0].getsockname()[1]

    async def stop(self) -> None:
        """Stop listening and drop every open client connection."""
        if self._server is None:
            return
        self._server.close()
        for writer in list(self._writers):
            writer.close()
        self._server = None
        await asyncio.sleep(0)


class FakeSocket:
    """
    Scripted socket.

    `replies` is a list of recv() results; an exception instance in the
    list is raised instead of returned. Once exhausted, recv() returns b''
    (peer closed).
    """

    def __init__(self, replies=None, send_error: BaseException = None):
        self.replies = list(replies or [])
        self.send_error = send_error
        self.sent = bytearray()
        self.timeouts: List[float] = []
        self.closed = False

    def settimeout(self, timeout: float) -> None:
        self.timeouts.append(timeout)

    def sendall(self, data: bytes) -> None:
        if self.send_error is not None:
            raise self.send_error
        self.sent.extend(data)

    def recv(self, size: int) -> bytes:
        if not self.replies:
            return b""
        reply = self.replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        return reply

    def close(self) -> None:
        self.closed = True


class SocketFactory:
    """
    Replacement for socket.create_connection handing out FakeSockets.

    An exception instance in `sockets` is raised as a connect failure.
    """

    def __init__(self, sockets):
        self.sockets = list(sockets)
        self.opened = []
        self.addresses = []

    def __call__(self, address, timeout=None):
        self.addresses.append(address)
        sock = self.sockets.pop(0)
        if isinstance(sock, BaseException):
            raise sock
        self.opened.append(sock)
        return sock


class FakeConnection:
    """
    Stand-in for Connection that records requests.

    `handler(command, args)` returns the reply fields or raises.
    """

    def __init__(self, name: str = "fake", handler=None):
        self.name = name
        self.handler = handler or (lambda command, args: ["ok"])
        self.calls: List[tuple] = []
        self.threads: List[str] = []
        self.closed = False
        self.address = ('127.0.0.1', 0)
        self._lock = threading.Lock()

    def execute(self, command: str, *args) -> Frame:
        with self._lock:
            self.calls.append((command,) + args)
            self.threads.append(threading.current_thread().name)
        return Frame(list(self.handler(command, args)))

    def close(self) -> None:
        self.closed = True
