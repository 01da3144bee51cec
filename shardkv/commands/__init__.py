"""
Typed command groups.

Each group turns a method call into (command, args), sends it through the
owner's routing hook, and decodes the reply frame.
"""

from .hashes import HashCommands, HashRangeCommands
from .queues import QueueCommands
from .strings import StringBulkCommands, StringCommands, StringRangeCommands
from .zsets import ZSetCommands, ZSetRangeCommands

__all__ = [
    "HashCommands",
    "HashRangeCommands",
    "QueueCommands",
    "StringBulkCommands",
    "StringCommands",
    "StringRangeCommands",
    "ZSetCommands",
    "ZSetRangeCommands",
]
