"""
Connection Engine Module

Owns one TCP connection to one store instance.

A request is encoded up front, then sent and answered while holding the
connection lock, so concurrent callers never interleave bytes on the wire.
Transient failures drop the socket and the receive buffer; the next attempt
opens a fresh socket to the address resolved at construction and resends
the whole request.

State machine:
    CONNECTED      a live socket is open
    RECONNECTING   no socket; the next attempt opens one
    CLOSED         closed by the owner; every call raises ConnectionClosed
"""

import logging
import socket
import threading
from enum import Enum
from typing import Optional, Tuple

from ..config.settings import settings
from ..exceptions import (
    ConnectionClosed,
    ConnectionFailed,
    ConnectionLost,
    ProtocolDesync,
    TransientError,
)
from ..protocol.decoder import FrameDecoder
from ..protocol.encoder import encode_request
from ..protocol.frame import Frame

logger = logging.getLogger(__name__)

# Failures worth a reconnect and a resend
TRANSIENT_ERRORS = (OSError, TransientError)


class ConnectionState(Enum):
    CONNECTED = "connected"
    RECONNECTING = "reconnecting"
    CLOSED = "closed"


def resolve_address(host: str, port: int) -> Tuple[str, int]:
    """Resolve host:port once to the (ip, port) every reconnect reuses."""
    infos = socket.getaddrinfo(host, port, type=socket.SOCK_STREAM)
    if not infos:
        raise OSError(f"cannot resolve {host}:{port}")
    sockaddr = infos[0][4]
    return sockaddr[0], sockaddr[1]


class Connection:
    """
    Blocking, thread-safe connection to a single store.

    Usage:
        conn = Connection('127.0.0.1', 8888)
        conn.connect()
        frame = conn.execute('get', 'mykey')
        conn.close()

    Attributes:
        host: Host name as given by the caller
        port: Port number
        address: Resolved (ip, port) used for every (re)connect
        timeout: Seconds allowed for the write and for each read
        max_attempts: Total attempts per request, including the first
    """

    def __init__(
            self,
            host: str,
            port: int,
            timeout: float = None,
            max_attempts: int = None,
    ):
        self.host = host
        self.port = port
        self.timeout = timeout if timeout is not None else settings.TIMEOUT
        self.max_attempts = max_attempts if max_attempts is not None else settings.MAX_ATTEMPTS
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")

        self.address = resolve_address(host, port)

        self._sock: Optional[socket.socket] = None
        self._decoder = FrameDecoder()
        self._state = ConnectionState.RECONNECTING
        self._lock = threading.Lock()

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._state == ConnectionState.CLOSED

    def connect(self) -> "Connection":
        """
        Open the socket.

        Raises:
            OSError: if the store cannot be reached
            ConnectionClosed: if the connection was closed
        """
        with self._lock:
            self._check_open()
            if self._state != ConnectionState.CONNECTED:
                self._open()
        return self

    def reconnect(self) -> None:
        """Replace the socket with a new one and forget any buffered bytes."""
        with self._lock:
            self._check_open()
            self._drop()
            self._open()

    def close(self) -> None:
        """Close the socket. Further requests raise ConnectionClosed."""
        with self._lock:
            if self._state == ConnectionState.CLOSED:
                return
            self._drop()
            self._state = ConnectionState.CLOSED
            logger.debug(f"Closed connection to {self.host}:{self.port}")

    def execute(self, command: str, *args) -> Frame:
        """
        Send one request and wait for its reply.

        Args:
            command: Command name, e.g. 'get'
            *args: Command arguments (see protocol.encoder for accepted types)

        Returns:
            The decoded reply Frame

        Raises:
            InvalidArgument: an argument cannot be encoded (never retried)
            ConnectionClosed: the connection was closed
            ConnectionFailed: every attempt hit a transient failure
        """
        request = encode_request(command, *args)

        with self._lock:
            last_error: Optional[BaseException] = None
            for attempt in range(1, self.max_attempts + 1):
                self._check_open()
                try:
                    if self._state == ConnectionState.RECONNECTING:
                        self._open()
                    self._send(request)
                    return self._recv()
                except TRANSIENT_ERRORS as exc:
                    last_error = exc
                    logger.warning(
                        f"{command} to {self.host}:{self.port} failed "
                        f"(attempt {attempt}/{self.max_attempts}): {exc!r}"
                    )
                    self._drop()

            logger.error(
                f"Giving up on {command} to {self.host}:{self.port} "
                f"after {self.max_attempts} attempts"
            )
            raise ConnectionFailed(self.address, self.max_attempts, last_error) from last_error

    def _check_open(self) -> None:
        if self._state == ConnectionState.CLOSED:
            raise ConnectionClosed(f"connection to {self.host}:{self.port} is closed")

    def _open(self) -> None:
        self._sock = socket.create_connection(self.address, timeout=self.timeout)
        self._decoder.reset()
        self._state = ConnectionState.CONNECTED
        logger.debug(f"Connected to {self.host}:{self.port} ({self.address[0]})")

    def _drop(self) -> None:
        sock, self._sock = self._sock, None
        self._decoder.reset()
        if self._state != ConnectionState.CLOSED:
            self._state = ConnectionState.RECONNECTING
        if sock is not None:
            try:
                sock.close()
            except OSError as exc:
                logger.debug(f"Error closing socket to {self.host}:{self.port}: {exc}")

    def _send(self, request: bytes) -> None:
        self._sock.settimeout(self.timeout)
        self._sock.sendall(request)

    def _recv(self) -> Frame:
        result = self._decoder.feed()
        while True:
            if result.is_frame:
                return result.frame
            if result.is_malformed:
                raise ProtocolDesync(result.error)

            chunk = self._sock.recv(settings.READ_BUFFER_SIZE)
            if not chunk:
                raise ConnectionLost(f"connection closed by {self.host}:{self.port}")
            result = self._decoder.feed(chunk)

    def __enter__(self):
        return self.connect()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self) -> str:
        return f"Connection({self.host!r}, {self.port}, state={self._state.value})"
