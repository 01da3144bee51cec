"""List/queue commands. Every command routes by the queue name."""

from typing import List, Optional

from .base import CommandMixin, parse_int, parse_list, parse_ok, parse_value


class QueueCommands(CommandMixin):

    def qsize(self, name: str) -> int:
        return parse_int(self._execute_key(name, "qsize", name))

    def qclear(self, name: str) -> bool:
        return parse_ok(self._execute_key(name, "qclear", name))

    def qfront(self, name: str) -> Optional[str]:
        return parse_value(self._execute_key(name, "qfront", name))

    def qback(self, name: str) -> Optional[str]:
        return parse_value(self._execute_key(name, "qback", name))

    def qget(self, name: str, index: int) -> Optional[str]:
        """Item at index, or None if the index is out of range."""
        return parse_value(self._execute_key(name, "qget", name, index))

    def qslice(self, name: str, begin: int, end: int) -> List[str]:
        """Items from begin to end inclusive; negative indexes count from the back."""
        return parse_list(self._execute_key(name, "qslice", name, begin, end))

    def qpush_front(self, name: str, item) -> bool:
        return parse_ok(self._execute_key(name, "qpush_front", name, item))

    def qpush_back(self, name: str, item) -> bool:
        return parse_ok(self._execute_key(name, "qpush_back", name, item))

    def qpush(self, name: str, item) -> bool:
        return self.qpush_back(name, item)

    def qpop_front(self, name: str) -> Optional[str]:
        """Remove and return the first item, or None if the queue is empty."""
        return parse_value(self._execute_key(name, "qpop_front", name))

    def qpop_back(self, name: str) -> Optional[str]:
        return parse_value(self._execute_key(name, "qpop_back", name))

    def qpop(self, name: str) -> Optional[str]:
        return self.qpop_front(name)
