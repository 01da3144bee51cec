"""
Cluster module for shardkv.

This module provides sharding support including:
- Shard calculation for keys
- Shard address parsing
- Request routing and concurrent multi-key fan-out
"""

from .config import get_shard_for_key, parse_address, parse_addresses
from .router import BulkResult, Cluster

__all__ = ['BulkResult', 'Cluster', 'get_shard_for_key', 'parse_address', 'parse_addresses']
