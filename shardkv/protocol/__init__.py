"""Protocol module for shardkv."""

from .decoder import DecodeResult, DecodeStatus, FrameDecoder
from .encoder import encode_argument, encode_request
from .frame import Frame, ResponseStatus

__all__ = [
    "DecodeResult",
    "DecodeStatus",
    "FrameDecoder",
    "Frame",
    "ResponseStatus",
    "encode_argument",
    "encode_request",
]
