"""
Protocol Encoder Module

Turns request arguments into the length-prefixed wire format.

Wire format:
    <length>\\n<bytes>\\n   one block per argument
    \\n                     end of request

Accepted argument types:
    str                      UTF-8 bytes
    bytes/bytearray/memoryview  as-is
    bool                     "1" / "0"
    int                      decimal text
    float                    fixed six-decimal text
    None                     zero-length block
    list/tuple of str        one block per element
"""

from typing import Iterable, List

from ..exceptions import InvalidArgument


def _block(raw: bytes) -> bytes:
    return b"%d\n%s\n" % (len(raw), raw)


def encode_scalar(value) -> bytes:
    """
    Convert a single non-sequence argument to its raw bytes.

    Raises:
        InvalidArgument: if the value has no encoding
    """
    if value is None:
        return b""
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    # bool first: it is an int subclass
    if isinstance(value, bool):
        return b"1" if value else b"0"
    if isinstance(value, int):
        return str(value).encode("ascii")
    if isinstance(value, float):
        return ("%f" % value).encode("ascii")
    raise InvalidArgument(value)


def encode_argument(value) -> bytes:
    """
    Encode one argument into one or more framed blocks.

    A list or tuple of text expands to one block per element; its elements
    must all be str.

    Examples:
        >>> encode_argument("set")
        b'3\\nset\\n'
        >>> encode_argument(["a", "bc"])
        b'1\\na\\n2\\nbc\\n'
    """
    if isinstance(value, (list, tuple)):
        blocks = []
        for item in value:
            if not isinstance(item, str):
                raise InvalidArgument(item)
            blocks.append(_block(item.encode("utf-8")))
        return b"".join(blocks)
    return _block(encode_scalar(value))


def encode_request(*args) -> bytes:
    """
    Encode a full request: every argument followed by the terminating empty line.

    The whole request is built before returning, so a bad argument anywhere
    in the list raises InvalidArgument without producing partial output.

    Examples:
        >>> encode_request("set", "a", "1")
        b'3\\nset\\n1\\na\\n1\\n1\\n\\n'
    """
    parts: List[bytes] = [encode_argument(arg) for arg in args]
    parts.append(b"\n")
    return b"".join(parts)


def flatten_pairs(pairs: Iterable) -> list:
    """Flatten (key, value) pairs into [key, value, key, value, ...]."""
    args = []
    for key, value in pairs:
        args.append(key)
        args.append(value)
    return args
