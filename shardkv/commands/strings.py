"""Key-value (string) commands."""

from typing import List, Optional, Tuple

from ..protocol.encoder import flatten_pairs
from .base import (
    CommandMixin,
    as_pairs,
    parse_flag,
    parse_int,
    parse_ok,
    parse_pairs,
    parse_value,
)


class StringCommands(CommandMixin):
    """Single-key string commands, routable by key."""

    def set(self, key: str, value) -> bool:
        """Store value under key."""
        return parse_ok(self._execute_key(key, "set", key, value))

    def setx(self, key: str, value, ttl: int) -> bool:
        """Store value under key, expiring after ttl seconds."""
        return parse_ok(self._execute_key(key, "setx", key, value, ttl))

    def setnx(self, key: str, value) -> bool:
        """Store value only if key is absent. Returns whether it was stored."""
        return parse_flag(self._execute_key(key, "setnx", key, value))

    def get(self, key: str) -> Optional[str]:
        """Return the value of key, or None if it does not exist."""
        return parse_value(self._execute_key(key, "get", key))

    def getset(self, key: str, value) -> Optional[str]:
        """Store value and return the previous value, or None."""
        return parse_value(self._execute_key(key, "getset", key, value))

    def delete(self, key: str) -> bool:
        return parse_ok(self._execute_key(key, "del", key))

    def exists(self, key: str) -> bool:
        return parse_flag(self._execute_key(key, "exists", key))

    def incr(self, key: str, num: int = 1) -> int:
        """Add num to the integer at key and return the new value."""
        return parse_int(self._execute_key(key, "incr", key, num))

    def decr(self, key: str, num: int = 1) -> int:
        return parse_int(self._execute_key(key, "decr", key, num))


class StringRangeCommands:
    """Commands spanning the key space of one store."""

    def scan(self, start_key: str, end_key: str, limit: int) -> List[Tuple[str, str]]:
        """List (key, value) pairs with start_key < key <= end_key."""
        return parse_pairs(self.execute("scan", start_key, end_key, limit))


class StringBulkCommands:
    """Multi-key commands sent to one store in a single request."""

    def multi_set(self, pairs) -> bool:
        """Store several key/value pairs; accepts a mapping or (key, value) pairs."""
        args = flatten_pairs(as_pairs(pairs))
        return parse_ok(self.execute("multi_set", *args))

    def multi_get(self, keys: List[str]) -> List[Tuple[str, str]]:
        """Return (key, value) pairs for the keys that exist."""
        return parse_pairs(self.execute("multi_get", list(keys)), allow_not_found=True)

    def multi_del(self, keys: List[str]) -> bool:
        return parse_ok(self.execute("multi_del", list(keys)))
