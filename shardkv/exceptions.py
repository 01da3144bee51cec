"""
shardkv Exceptions Module

Defines the exception hierarchy raised by the client driver.

Hierarchy:
    ShardKVError
    ├── InvalidArgument        unencodable argument, never retried
    ├── TransientError         retried with a reconnect
    │   ├── ConnectionLost
    │   └── ProtocolDesync
    ├── ConnectionFailed       retries exhausted
    ├── ConnectionClosed       engine was closed by its owner
    ├── BadResponse            reply does not match the operation
    │   └── ServerError
    ├── NotEnoughParams
    └── PartialFailure         some shards of a bulk call failed
"""

from typing import List, Optional


class ShardKVError(Exception):
    """Base exception for all shardkv errors."""


class InvalidArgument(ShardKVError, TypeError):
    """
    Raised when an argument value has no wire encoding.

    Attributes:
        value: The offending value
    """

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"bad request: cannot encode {type(value).__name__} {value!r}")


class TransientError(ShardKVError):
    """A failure that is expected to go away after a reconnect."""


class ConnectionLost(TransientError):
    """The peer closed the connection before a full reply arrived."""


class ProtocolDesync(TransientError):
    """The receive stream no longer lines up with the framing."""


class ConnectionFailed(ShardKVError):
    """
    Raised when every attempt of a request failed.

    Attributes:
        address: (host, port) of the store
        attempts: Number of attempts made
        last_error: The error of the final attempt
    """

    def __init__(self, address, attempts: int, last_error: Optional[BaseException]):
        self.address = address
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"request to {address[0]}:{address[1]} failed after "
            f"{attempts} attempts: {last_error}"
        )


class ConnectionClosed(ShardKVError):
    """Raised when an operation is attempted on a closed connection."""


class BadResponse(ShardKVError):
    """
    Raised when a reply does not have the shape the operation expects.

    Attributes:
        fields: The decoded reply fields
    """

    def __init__(self, message: str = "bad response", fields: Optional[List[str]] = None):
        self.fields = list(fields) if fields is not None else []
        super().__init__(message)


class ServerError(BadResponse):
    """
    Raised when the store answers with a status other than ok/not_found.

    Attributes:
        status: Status token of the reply (e.g. 'error', 'client_error')
        message: Server supplied message, if any
    """

    def __init__(self, status: str, message: str = "", fields: Optional[List[str]] = None):
        self.status = status
        self.message = message
        text = f"{status}: {message}" if message else status
        super().__init__(text, fields)


class NotEnoughParams(ShardKVError, ValueError):
    """Raised when a multi-field operation is given nothing to work on."""


class PartialFailure(ShardKVError):
    """
    Raised by BulkResult.raise_for_errors() when some shards failed.

    Attributes:
        result: The BulkResult holding both the merged items and the errors
    """

    def __init__(self, result):
        self.result = result
        shards = ", ".join(str(shard) for shard in result.failed_shards)
        super().__init__(f"bulk operation failed on shard(s) {shards}")
