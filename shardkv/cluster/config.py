"""
Cluster Configuration Module

Shard placement and shard address parsing.

The shard table is a fixed, ordered list of store addresses; a shard's
index in that list is its id. Placement depends only on the key bytes and
the number of shards, so every process configured with the same list puts
a key on the same store. The table is never resized while in use.
"""

import hashlib
from typing import Iterable, List, Tuple, Union

from ..protocol.encoder import encode_scalar

Address = Tuple[str, int]


def key_bytes(key) -> bytes:
    """The bytes a key is sent as; placement hashes exactly these."""
    return encode_scalar(key)


def get_shard_for_key(key: Union[str, bytes], num_shards: int) -> int:
    """
    Calculate which shard owns a given key.

    Args:
        key: The key, hashed in its wire form (text as UTF-8, ints as
            decimal text)
        num_shards: Size of the shard table

    Returns:
        Shard index in [0, num_shards)

    Raises:
        InvalidArgument: if the key has no wire encoding

    Implementation:
        - SHA-1 digest of the key bytes
        - First two digest bytes as a little-endian 16-bit integer
        - Modulo the shard count
    """
    if num_shards < 1:
        raise ValueError(f"num_shards must be positive, got {num_shards}")
    digest = hashlib.sha1(key_bytes(key)).digest()
    return int.from_bytes(digest[:2], byteorder="little") % num_shards


def parse_address(address: Union[str, Address]) -> Address:
    """
    Parse 'host:port' (or pass a (host, port) tuple through).

    Raises:
        ValueError: if the port is missing or not a number
    """
    if isinstance(address, tuple):
        host, port = address
        return host, int(port)

    host, sep, port = address.strip().rpartition(":")
    if not sep or not host:
        raise ValueError(f"Invalid shard address {address!r}, expected host:port")
    try:
        return host.strip("[]"), int(port)
    except ValueError:
        raise ValueError(f"Invalid port in shard address {address!r}")


def parse_addresses(addresses: Iterable[Union[str, Address]]) -> List[Address]:
    parsed = [parse_address(address) for address in addresses]
    if not parsed:
        raise ValueError("At least one shard address is required")
    return parsed
