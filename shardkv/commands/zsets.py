"""Sorted set commands. Every command routes by the set name."""

from typing import Dict, List, Optional, Tuple

from ..exceptions import NotEnoughParams
from ..protocol.encoder import flatten_pairs
from .base import (
    CommandMixin,
    as_pairs,
    parse_bool,
    parse_int,
    parse_int_map,
    parse_int_pairs,
    parse_list,
    parse_ok,
    parse_optional_int,
)


class ZSetCommands(CommandMixin):

    def zset(self, name: str, member: str, score: int) -> bool:
        return parse_ok(self._execute_key(name, "zset", name, member, score))

    def zget(self, name: str, member: str) -> Optional[int]:
        """Score of member, or None if it is not in the set."""
        return parse_optional_int(self._execute_key(name, "zget", name, member))

    def zdel(self, name: str, member: str) -> bool:
        return parse_ok(self._execute_key(name, "zdel", name, member))

    def zincr(self, name: str, member: str, num: int = 1) -> int:
        return parse_int(self._execute_key(name, "zincr", name, member, num))

    def zsize(self, name: str) -> int:
        return parse_int(self._execute_key(name, "zsize", name))

    def zexists(self, name: str, member: str) -> bool:
        return parse_bool(self._execute_key(name, "zexists", name, member))

    def zkeys(self, name: str, start_member: str, score_start, score_end, limit: int) -> List[str]:
        """Members in the score range, ascending. Pass '' for an open bound."""
        return parse_list(self._execute_key(
            name, "zkeys", name, start_member, score_start, score_end, limit))

    def zscan(self, name: str, start_member: str, score_start, score_end, limit: int) -> Dict[str, int]:
        return parse_int_map(self._execute_key(
            name, "zscan", name, start_member, score_start, score_end, limit))

    def zrscan(self, name: str, start_member: str, score_start, score_end, limit: int) -> Dict[str, int]:
        return parse_int_map(self._execute_key(
            name, "zrscan", name, start_member, score_start, score_end, limit))

    def zrank(self, name: str, member: str) -> int:
        return parse_int(self._execute_key(name, "zrank", name, member))

    def zrrank(self, name: str, member: str) -> int:
        return parse_int(self._execute_key(name, "zrrank", name, member))

    def zrange(self, name: str, offset: int, limit: int) -> List[Tuple[str, int]]:
        """(member, score) pairs by ascending score, starting at offset."""
        return parse_int_pairs(self._execute_key(name, "zrange", name, offset, limit))

    def zrrange(self, name: str, offset: int, limit: int) -> List[Tuple[str, int]]:
        return parse_int_pairs(self._execute_key(name, "zrrange", name, offset, limit))

    def zclear(self, name: str) -> bool:
        return parse_ok(self._execute_key(name, "zclear", name))

    def multi_zset(self, name: str, scores) -> bool:
        """Set several member scores; accepts a mapping or (member, score) pairs."""
        pairs = as_pairs(scores)
        if not pairs:
            raise NotEnoughParams("multi_zset needs at least one member")
        return parse_ok(self._execute_key(name, "multi_zset", name, *flatten_pairs(pairs)))

    def multi_zget(self, name: str, members: List[str]) -> Dict[str, int]:
        if not members:
            raise NotEnoughParams("multi_zget needs at least one member")
        return parse_int_map(self._execute_key(name, "multi_zget", name, list(members)))

    def multi_zdel(self, name: str, members: List[str]) -> bool:
        if not members:
            raise NotEnoughParams("multi_zdel needs at least one member")
        return parse_ok(self._execute_key(name, "multi_zdel", name, list(members)))


class ZSetRangeCommands:

    def zlist(self, start_name: str, end_name: str, limit: int) -> List[str]:
        return parse_list(self.execute("zlist", start_name, end_name, limit))
