"""
Cluster Router Module

Routes requests to the shard that owns each key and fans multi-key
requests out to several shards at once.

Responsibilities:
- Send single-key commands to the owning shard's connection
- Partition multi-key input by shard, keeping per-shard input order
- Run one sub-request per participating shard concurrently and merge
  the outcomes into a BulkResult that records which shards failed
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Sequence, Tuple, Union

from ..commands import HashCommands, QueueCommands, StringCommands, ZSetCommands
from ..commands.base import as_pairs, parse_ok, parse_pairs
from ..exceptions import InvalidArgument, PartialFailure, ShardKVError
from ..network.connection import Connection
from ..protocol.encoder import encode_request, flatten_pairs
from ..protocol.frame import Frame
from .config import Address, get_shard_for_key, parse_addresses

logger = logging.getLogger(__name__)


@dataclass
class BulkResult:
    """
    Merged outcome of a fan-out across shards.

    Attributes:
        items: Successful shard results concatenated in shard-index order
        errors: shard index -> exception for every shard that failed
        succeeded: Indexes of the shards that answered successfully
        by_shard: shard index -> that shard's own results

    Ordering of items across shards does not follow the input order;
    within one shard it does.
    """
    items: List = field(default_factory=list)
    errors: Dict[int, BaseException] = field(default_factory=dict)
    succeeded: List[int] = field(default_factory=list)
    by_shard: Dict[int, List] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """True when no shard failed."""
        return not self.errors

    @property
    def partial(self) -> bool:
        """True when some shards failed and others succeeded."""
        return bool(self.errors) and bool(self.succeeded)

    @property
    def failed_shards(self) -> List[int]:
        return sorted(self.errors)

    def raise_for_errors(self) -> "BulkResult":
        """Raise PartialFailure if any shard failed, else return self."""
        if self.errors:
            raise PartialFailure(self)
        return self

    def __iter__(self):
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


def _pairs_request(pairs: List[Tuple[str, object]]) -> tuple:
    return tuple(flatten_pairs(pairs))


def _keys_request(keys: List[str]) -> tuple:
    return (keys,)


def _get_result(frame: Frame, keys: List[str]) -> List[Tuple[str, str]]:
    return parse_pairs(frame, allow_not_found=True)


def _set_result(frame: Frame, pairs: List[Tuple[str, object]]) -> List[str]:
    parse_ok(frame)
    return [key for key, _ in pairs]


def _del_result(frame: Frame, keys: List[str]) -> List[str]:
    parse_ok(frame)
    return list(keys)


class Cluster(StringCommands, HashCommands, ZSetCommands, QueueCommands):
    """
    A fixed set of stores with keys spread across them.

    Single-key commands (including hash, sorted set and queue commands,
    which route by their name) go to the owning shard. multi_get,
    multi_set and multi_del fan out concurrently and return a BulkResult.

    Usage:
        cluster = Cluster.connect(['10.0.0.1:8888', '10.0.0.2:8888'])
        cluster.set('a', '1')
        result = cluster.multi_get(['a', 'b', 'c'])
        if not result.ok:
            log(result.failed_shards)
        cluster.close()

    Attributes:
        shards: Tuple of connections; a shard's index is its id
    """

    def __init__(self, shards: Sequence[Connection]):
        """
        Wrap already created connections.

        Args:
            shards: Connections in shard order; must not be empty
        """
        if not shards:
            raise ValueError("A cluster needs at least one shard")
        self.shards: Tuple[Connection, ...] = tuple(shards)

    @classmethod
    def connect(
            cls,
            addresses: Iterable[Union[str, Address]],
            timeout: float = None,
            max_attempts: int = None,
    ) -> "Cluster":
        """
        Connect to every shard in order.

        If any shard cannot be reached, the shards opened so far are closed
        and the error is raised.
        """
        shards = []
        try:
            for host, port in parse_addresses(addresses):
                connection = Connection(host, port, timeout=timeout, max_attempts=max_attempts)
                connection.connect()
                shards.append(connection)
        except Exception:
            for connection in shards:
                connection.close()
            raise

        logger.debug(f"Connected to {len(shards)} shards")
        return cls(shards)

    @property
    def num_shards(self) -> int:
        return len(self.shards)

    def shard_of(self, key) -> int:
        """Index of the shard that owns key."""
        return get_shard_for_key(key, len(self.shards))

    def shard_for(self, key) -> Connection:
        return self.shards[self.shard_of(key)]

    def execute(self, key, command: str, *args) -> Frame:
        """Send a raw command to the shard owning key."""
        return self.shard_for(key).execute(command, *args)

    def _execute_key(self, key, command: str, *args) -> Frame:
        return self.execute(key, command, *args)

    def locate_keys(self, keys: Iterable) -> Dict[int, List]:
        """
        Partition keys by owning shard.

        Returns:
            shard index -> keys, one entry per non-empty shard, in shard
            order; each list keeps the input order of its keys
        """
        parts: Dict[int, List] = {}
        for key in keys:
            parts.setdefault(self.shard_of(key), []).append(key)
        return dict(sorted(parts.items()))

    def locate_pairs(self, pairs) -> Dict[int, List[Tuple[str, object]]]:
        """Partition (key, value) pairs (or a mapping) by the shard owning each key."""
        parts: Dict[int, List[Tuple[str, object]]] = {}
        for key, value in as_pairs(pairs):
            parts.setdefault(self.shard_of(key), []).append((key, value))
        return dict(sorted(parts.items()))

    def execute_multi(self, keys: Iterable, command: str) -> BulkResult:
        """
        Send command to every shard owning one of keys, with that shard's keys.

        Returns:
            BulkResult whose by_shard maps each answering shard to [Frame]
        """
        return self._fan_out(
            command, self.locate_keys(keys), _keys_request, lambda frame, keys: [frame],
        )

    def multi_get(self, keys: Iterable[str]) -> BulkResult:
        """
        Fetch many keys across shards.

        Returns:
            BulkResult of (key, value) pairs for the keys that exist
        """
        return self._fan_out("multi_get", self.locate_keys(keys), _keys_request, _get_result)

    def multi_set(self, pairs) -> BulkResult:
        """
        Store many pairs across shards.

        Args:
            pairs: Mapping or (key, value) pairs

        Returns:
            BulkResult of the keys whose shard acknowledged the write

        Raises:
            InvalidArgument: if any key or value has no wire encoding;
                nothing is sent to any shard
        """
        return self._fan_out("multi_set", self.locate_pairs(pairs), _pairs_request, _set_result)

    def multi_del(self, keys: Iterable[str]) -> BulkResult:
        """
        Delete many keys across shards.

        Returns:
            BulkResult of the keys whose shard acknowledged the delete
        """
        return self._fan_out("multi_del", self.locate_keys(keys), _keys_request, _del_result)

    def _fan_out(
            self,
            command: str,
            parts: Dict[int, List],
            build: Callable[[List], tuple],
            decode: Callable[[Frame, List], List],
    ) -> BulkResult:
        """
        Run one sub-request per shard in parallel and merge the outcomes.

        Every shard's request is encoded on the calling thread first, so an
        unencodable argument raises InvalidArgument before any shard is
        contacted. Each worker reports only through its own Future; merging
        happens here, after every worker has finished.
        """
        result = BulkResult()
        if not parts:
            return result

        requests = {shard: build(group) for shard, group in parts.items()}
        for args in requests.values():
            encode_request(command, *args)

        logger.debug(
            f"{command} across shards "
            + ", ".join(f"{shard}({len(group)})" for shard, group in parts.items())
        )

        def task(shard: int) -> List:
            frame = self.shards[shard].execute(command, *requests[shard])
            return decode(frame, parts[shard])

        with ThreadPoolExecutor(
                max_workers=len(parts),
                thread_name_prefix="shardkv-fanout",
        ) as pool:
            futures = {shard: pool.submit(task, shard) for shard in parts}

        for shard in sorted(futures):
            try:
                items = futures[shard].result()
            except InvalidArgument:
                raise
            except ShardKVError as exc:
                logger.error(f"{command} failed on shard {shard}: {exc}")
                result.errors[shard] = exc
            else:
                result.items.extend(items)
                result.succeeded.append(shard)
                result.by_shard[shard] = items

        return result

    def close(self) -> None:
        """Close every shard; the first error is raised after all were tried."""
        first_error = None
        for connection in self.shards:
            try:
                connection.close()
            except Exception as exc:
                logger.error(f"Error closing {connection!r}: {exc}")
                if first_error is None:
                    first_error = exc
        if first_error is not None:
            raise first_error

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self) -> str:
        return f"Cluster(shards={len(self.shards)})"
