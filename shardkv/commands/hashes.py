"""Hash (key -> field map) commands. Every command routes by the hash name."""

from typing import Dict, List, Optional, Tuple

from ..exceptions import NotEnoughParams
from ..protocol.encoder import flatten_pairs
from .base import (
    CommandMixin,
    as_pairs,
    parse_bool,
    parse_int,
    parse_list,
    parse_ok,
    parse_pairs,
    parse_value,
)


class HashCommands(CommandMixin):

    def hset(self, name: str, field: str, value) -> bool:
        return parse_ok(self._execute_key(name, "hset", name, field, value))

    def hget(self, name: str, field: str) -> Optional[str]:
        """Return the field's value, or None if the field does not exist."""
        return parse_value(self._execute_key(name, "hget", name, field))

    def hdel(self, name: str, field: str) -> bool:
        return parse_ok(self._execute_key(name, "hdel", name, field))

    def hincr(self, name: str, field: str, num: int = 1) -> int:
        return parse_int(self._execute_key(name, "hincr", name, field, num))

    def hdecr(self, name: str, field: str, num: int = 1) -> int:
        return parse_int(self._execute_key(name, "hdecr", name, field, num))

    def hexists(self, name: str, field: str) -> bool:
        return parse_bool(self._execute_key(name, "hexists", name, field))

    def hsize(self, name: str) -> int:
        """Number of fields in the hash."""
        return parse_int(self._execute_key(name, "hsize", name))

    def hkeys(self, name: str, start_field: str, end_field: str, limit: int) -> List[str]:
        return parse_list(self._execute_key(name, "hkeys", name, start_field, end_field, limit))

    def hscan(self, name: str, start_field: str, end_field: str, limit: int) -> List[Tuple[str, str]]:
        """(field, value) pairs with start_field < field <= end_field, ascending."""
        return parse_pairs(self._execute_key(name, "hscan", name, start_field, end_field, limit))

    def hrscan(self, name: str, start_field: str, end_field: str, limit: int) -> List[Tuple[str, str]]:
        """Like hscan, descending."""
        return parse_pairs(self._execute_key(name, "hrscan", name, start_field, end_field, limit))

    def hclear(self, name: str) -> bool:
        """Delete every field of the hash."""
        return parse_ok(self._execute_key(name, "hclear", name))

    def multi_hset(self, name: str, fields) -> bool:
        """
        Set several fields at once.

        Args:
            name: Hash name
            fields: Mapping or (field, value) pairs; must not be empty

        Raises:
            NotEnoughParams: if fields is empty
        """
        pairs = as_pairs(fields)
        if not pairs:
            raise NotEnoughParams("multi_hset needs at least one field")
        return parse_ok(self._execute_key(name, "multi_hset", name, *flatten_pairs(pairs)))

    def multi_hget(self, name: str, fields: List[str]) -> Dict[str, str]:
        """Return a field -> value mapping for the fields that exist."""
        if not fields:
            raise NotEnoughParams("multi_hget needs at least one field")
        return dict(parse_pairs(self._execute_key(name, "multi_hget", name, list(fields))))

    def multi_hdel(self, name: str, fields: List[str]) -> bool:
        if not fields:
            raise NotEnoughParams("multi_hdel needs at least one field")
        return parse_ok(self._execute_key(name, "multi_hdel", name, list(fields)))


class HashRangeCommands:

    def hlist(self, start_name: str, end_name: str, limit: int) -> List[str]:
        """Names of the hashes with start_name < name <= end_name."""
        return parse_list(self.execute("hlist", start_name, end_name, limit))
