"""
Protocol Decoder Module

Incremental parser for replies arriving over a byte stream.

Bytes are fed in whatever chunks the socket returns. The decoder keeps
everything it has not yet turned into a frame and rescans from the start of
that buffer on the next feed, so a read may split a length line or a
payload anywhere.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from .frame import Frame


class DecodeStatus(Enum):
    """Outcome of one decode attempt."""
    INCOMPLETE = auto()
    FRAME = auto()
    MALFORMED = auto()


@dataclass
class DecodeResult:
    """
    Result of FrameDecoder.feed().

    Attributes:
        status: INCOMPLETE, FRAME or MALFORMED
        frame: The decoded frame when status is FRAME
        error: Description of the problem when status is MALFORMED
    """
    status: DecodeStatus
    frame: Optional[Frame] = None
    error: str = ""

    @classmethod
    def incomplete(cls) -> "DecodeResult":
        return cls(status=DecodeStatus.INCOMPLETE)

    @classmethod
    def complete(cls, frame: Frame) -> "DecodeResult":
        return cls(status=DecodeStatus.FRAME, frame=frame)

    @classmethod
    def malformed(cls, error: str) -> "DecodeResult":
        return cls(status=DecodeStatus.MALFORMED, error=error)

    @property
    def is_frame(self) -> bool:
        return self.status == DecodeStatus.FRAME

    @property
    def is_malformed(self) -> bool:
        return self.status == DecodeStatus.MALFORMED


class FrameDecoder:
    """
    Stateful decoder for the length-prefixed reply format.

    Reply Format:
        <length>\\n<bytes>\\n   one block per field
        \\n                     end of frame

    An empty line seen before any field is a keep-alive and is skipped.

    Usage:
        decoder = FrameDecoder()
        result = decoder.feed(chunk)
        if result.is_frame:
            handle(result.frame.fields)
    """

    def __init__(self):
        self._buffer = bytearray()

    @property
    def pending(self) -> int:
        """Number of buffered bytes not yet consumed by a frame."""
        return len(self._buffer)

    def reset(self) -> None:
        """Discard all buffered bytes."""
        self._buffer.clear()

    def feed(self, data: bytes = b"") -> DecodeResult:
        """
        Append data and try to extract the next complete frame.

        Args:
            data: Newly received bytes; may be empty to drain frames that
                  are already buffered

        Returns:
            DecodeResult. On FRAME the frame's bytes are removed from the
            buffer; on INCOMPLETE and MALFORMED nothing is removed.
        """
        if data:
            self._buffer.extend(data)
        return self._scan()

    def _scan(self) -> DecodeResult:
        buf = self._buffer
        fields = []
        offset = 0

        while True:
            idx = buf.find(b"\n", offset)
            if idx == -1:
                return DecodeResult.incomplete()

            line = bytes(buf[offset:idx])
            offset = idx + 1

            if not line or line == b"\r":
                if not fields:
                    continue
                del buf[:offset]
                return DecodeResult.complete(Frame(fields))

            if not line.isdigit():
                return DecodeResult.malformed(f"bad length line {line[:32]!r}")
            size = int(line)

            # Payload plus its trailing newline
            if offset + size + 1 > len(buf):
                return DecodeResult.incomplete()
            if buf[offset + size] != 0x0A:
                return DecodeResult.malformed(f"missing newline after {size}-byte field")

            value = bytes(buf[offset:offset + size])
            fields.append(value.decode("utf-8", "surrogateescape"))
            offset += size + 1
