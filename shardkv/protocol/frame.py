"""
Protocol Frame and Status Definitions

This module defines the decoded reply unit of the wire protocol and the
status tokens the store puts in its first field.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Tuple


class ResponseStatus(Enum):
    """Status tokens sent as the first field of a reply."""
    OK = "ok"
    NOT_FOUND = "not_found"
    ERROR = "error"
    FAIL = "fail"
    CLIENT_ERROR = "client_error"


@dataclass
class Frame:
    """
    One complete decoded reply.

    Attributes:
        fields: Ordered text fields; fields[0] is the status token

    Fields are decoded with the 'surrogateescape' handler, so
    field.encode('utf-8', 'surrogateescape') restores the wire bytes.
    """
    fields: List[str] = field(default_factory=list)

    @property
    def status(self) -> str:
        """The status token, or an empty string for an empty frame."""
        return self.fields[0] if self.fields else ""

    @property
    def payload(self) -> List[str]:
        """All fields after the status token."""
        return self.fields[1:]

    def is_status(self, status: ResponseStatus) -> bool:
        return self.status == status.value

    def pairs(self) -> Iterator[Tuple[str, str]]:
        """Iterate the payload two fields at a time."""
        payload = self.payload
        for i in range(0, len(payload) - 1, 2):
            yield payload[i], payload[i + 1]

    def message(self) -> Optional[str]:
        """First payload field, commonly an error description."""
        return self.fields[1] if len(self.fields) > 1 else None

    def __len__(self) -> int:
        return len(self.fields)

    def __iter__(self) -> Iterator[str]:
        return iter(self.fields)

    def __getitem__(self, index):
        return self.fields[index]
