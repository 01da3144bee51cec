"""
Reply decoding rules shared by the typed commands.

Every typed command sends (command, args) and applies one of these rules to
the reply frame:

    ok + expected payload  -> decoded value
    not_found              -> None, where the command allows absence
    any other status       -> ServerError
    wrong payload shape    -> BadResponse
"""

from typing import Dict, List, Optional, Tuple

from ..exceptions import BadResponse, ServerError
from ..protocol.frame import Frame, ResponseStatus


class CommandMixin:
    """Base for the typed command groups.

    Subclasses route each request by the key it touches.
    """

    def _execute_key(self, key: str, command: str, *args) -> Frame:
        """Send command to the store owning key. Every subclass overrides this."""
        raise NotImplementedError


def _check_ok(frame: Frame, allow_not_found: bool = False) -> bool:
    """Return True on ok, False on an allowed not_found, raise otherwise."""
    if frame.is_status(ResponseStatus.OK):
        return True
    if allow_not_found and frame.is_status(ResponseStatus.NOT_FOUND):
        return False
    if not frame.fields:
        raise BadResponse("empty response", frame.fields)
    raise ServerError(frame.status, frame.message() or "", frame.fields)


def parse_ok(frame: Frame) -> bool:
    """ok with any payload -> True."""
    _check_ok(frame)
    return True


def parse_value(frame: Frame, allow_not_found: bool = True) -> Optional[str]:
    """ok + exactly one field -> that field; not_found -> None."""
    if not _check_ok(frame, allow_not_found):
        return None
    if len(frame) != 2:
        raise BadResponse(f"expected 1 value, got {len(frame) - 1}", frame.fields)
    return frame[1]


def parse_int(frame: Frame) -> int:
    value = parse_value(frame, allow_not_found=False)
    try:
        return int(value)
    except ValueError:
        raise BadResponse(f"expected an integer, got {value!r}", frame.fields)


def parse_optional_int(frame: Frame) -> Optional[int]:
    value = parse_value(frame)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        raise BadResponse(f"expected an integer, got {value!r}", frame.fields)


def parse_bool(frame: Frame) -> bool:
    """ok + one numeric field -> field > 0."""
    return parse_int(frame) > 0


def parse_list(frame: Frame) -> List[str]:
    _check_ok(frame)
    return frame.payload


def parse_pairs(frame: Frame, allow_not_found: bool = False) -> List[Tuple[str, str]]:
    """ok + an even number of fields -> [(k, v), ...]; not_found -> []."""
    if not _check_ok(frame, allow_not_found):
        return []
    if len(frame) % 2 != 1:
        raise BadResponse("odd number of key/value fields", frame.fields)
    return list(frame.pairs())


def parse_int_pairs(frame: Frame) -> List[Tuple[str, int]]:
    pairs = []
    for key, value in parse_pairs(frame):
        try:
            pairs.append((key, int(value)))
        except ValueError:
            raise BadResponse(f"expected an integer score, got {value!r}", frame.fields)
    return pairs


def parse_int_map(frame: Frame) -> Dict[str, int]:
    return dict(parse_int_pairs(frame))


def parse_flag(frame: Frame) -> bool:
    """ok -> True unless the first payload field is '0'."""
    _check_ok(frame)
    payload = frame.payload
    if not payload:
        return True
    try:
        return int(payload[0]) > 0
    except ValueError:
        raise BadResponse(f"expected 0 or 1, got {payload[0]!r}", frame.fields)


def as_pairs(items) -> List[Tuple[str, object]]:
    """Accept a mapping or an iterable of (key, value) pairs."""
    if hasattr(items, "items"):
        return list(items.items())
    return [(key, value) for key, value in items]
