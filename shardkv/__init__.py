"""
shardkv: client driver for a sharded key-value store

A blocking, thread-safe client for stores speaking the length-prefixed
line protocol, plus a router that spreads keys over a fixed list of
stores and fans multi-key operations out to them concurrently.
"""

from .client import Client, connect
from .cluster import BulkResult, Cluster
from .network import Connection
from .protocol import Frame

__version__ = "1.0.0"

__all__ = ["BulkResult", "Client", "Cluster", "Connection", "Frame", "connect"]
