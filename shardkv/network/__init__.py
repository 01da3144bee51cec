"""Network module for shardkv."""

from .connection import Connection, ConnectionState, resolve_address

__all__ = ["Connection", "ConnectionState", "resolve_address"]
