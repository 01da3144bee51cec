"""
Single-store client.

Wraps one Connection with the typed command groups.
"""

from .commands import (
    HashCommands,
    HashRangeCommands,
    QueueCommands,
    StringBulkCommands,
    StringCommands,
    StringRangeCommands,
    ZSetCommands,
    ZSetRangeCommands,
)
from .network.connection import Connection
from .protocol.frame import Frame


class Client(
        StringCommands,
        StringRangeCommands,
        StringBulkCommands,
        HashCommands,
        HashRangeCommands,
        ZSetCommands,
        ZSetRangeCommands,
        QueueCommands,
):
    """
    Typed client for one store instance.

    Usage:
        with connect('127.0.0.1', 8888) as client:
            client.set('greeting', 'hello')
            client.get('greeting')   # 'hello'
            client.get('missing')    # None

    Attributes:
        connection: The underlying Connection
    """

    def __init__(self, connection: Connection):
        self.connection = connection

    def execute(self, command: str, *args) -> Frame:
        """Send a raw command and return the reply frame."""
        return self.connection.execute(command, *args)

    def _execute_key(self, key: str, command: str, *args) -> Frame:
        return self.connection.execute(command, *args)

    def reconnect(self) -> None:
        self.connection.reconnect()

    def close(self) -> None:
        self.connection.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self) -> str:
        return f"Client({self.connection!r})"


def connect(host: str, port: int, timeout: float = None, max_attempts: int = None) -> Client:
    """
    Open a connection to one store and return a typed client.

    Raises:
        OSError: if the store cannot be reached
    """
    connection = Connection(host, port, timeout=timeout, max_attempts=max_attempts)
    connection.connect()
    return Client(connection)
