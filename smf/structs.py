"""Low-level readers: byte cursor, big-endian fields and VLQ integers."""

from __future__ import annotations

import io
from collections import deque
from typing import BinaryIO

from .errors import EndOfData, MalformedStream

VLQ_MAX_BYTES = 4  # 28 significant bits


def u16_be(data: bytes) -> int:
    """Return the unsigned big-endian value of a 2-byte field."""

    return (data[0] << 8) | data[1]


def u32_be(data: bytes) -> int:
    """Return the unsigned big-endian value of a 4-byte field."""

    return (data[0] << 24) | (data[1] << 16) | (data[2] << 8) | data[3]


def u24_be(data: bytes) -> int:
    return (data[0] << 16) | (data[1] << 8) | data[2]


class ByteCursor:
    """Forward-only reader over a binary stream with a small push-back window.

    The stream is never seeked.  The last ``lookbehind`` bytes read are
    remembered so a speculative read (the running-status check) can be
    undone with :meth:`push_back`.
    """

    def __init__(self, stream: BinaryIO, *, lookbehind: int = 1) -> None:
        self._stream = stream
        self._recent: deque[int] = deque(maxlen=lookbehind)
        self._pending: list[int] = []  # pushed-back bytes, last element is next
        self.position = 0

    @classmethod
    def from_bytes(cls, data: bytes, **kwargs) -> "ByteCursor":
        return cls(io.BytesIO(data), **kwargs)

    def __repr__(self) -> str:
        return f"ByteCursor(position=0x{self.position:X})"

    def read_byte(self) -> int:
        if self._pending:
            value = self._pending.pop()
        else:
            raw = self._stream.read(1)
            if not raw:
                raise EndOfData("byte source exhausted", position=self.position)
            value = raw[0]
        self._recent.append(value)
        self.position += 1
        return value

    def read_bytes(self, count: int) -> bytes:
        return bytes(self.read_byte() for _ in range(count))

    def push_back(self, count: int = 1) -> None:
        """Rewind by exactly ``count`` of the bytes most recently read."""

        if count < 0 or count > len(self._recent):
            raise ValueError(
                f"cannot push back {count} bytes; only {len(self._recent)} available"
            )
        for _ in range(count):
            self._pending.append(self._recent.pop())
        self.position -= count

    def at_end(self) -> bool:
        """Peek whether the source is exhausted without consuming anything."""

        if self._pending:
            return False
        raw = self._stream.read(1)
        if not raw:
            return True
        self._pending.append(raw[0])
        return False


def read_vlq(cursor: ByteCursor) -> int:
    """Decode one variable-length quantity (7 bits per byte, MSB = more).

    Raises ``MalformedStream`` when more than ``VLQ_MAX_BYTES`` bytes carry
    the continuation bit.
    """
    start = cursor.position
    current = cursor.read_byte()
    value = current & 0x7F
    count = 1
    while current & 0x80:
        if count >= VLQ_MAX_BYTES:
            raise MalformedStream(
                f"variable-length value longer than {VLQ_MAX_BYTES} bytes",
                position=start,
            )
        current = cursor.read_byte()
        value = (value << 7) | (current & 0x7F)
        count += 1
    return value
