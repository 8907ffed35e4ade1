from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, replace

from .errors import EndOfData, MalformedStream
from .structs import ByteCursor, u16_be, u32_be

log = logging.getLogger(__name__)

HEADER_TAG = b"MThd"
TRACK_TAG = b"MTrk"
HEADER_SIZE = 14
HEADER_LENGTH = 6  # expected value of the header's length field
TRACK_HEADER_SIZE = 8


class SMFFormat(enum.IntEnum):
    SINGLE_TRACK = 0
    SIMULTANEOUS = 1
    INDEPENDENT = 2


@dataclass(frozen=True)
class Header:
    """The ``MThd`` chunk: file format, declared track count and time division."""

    format: int
    track_count: int
    division: int
    chunk_type: bytes = HEADER_TAG
    chunk_length: int = HEADER_LENGTH

    @classmethod
    def from_bytes(cls, data: bytes) -> "Header":
        if len(data) < HEADER_SIZE:
            raise MalformedStream(
                f"header too short ({len(data)} bytes, need {HEADER_SIZE})"
            )
        tag = bytes(data[0:4])
        if tag != HEADER_TAG:
            raise MalformedStream(f"bad header tag {tag!r}, expected {HEADER_TAG!r}", position=0)
        length = u32_be(data[4:8])
        if length != HEADER_LENGTH:
            log.warning("header length is %d, expected %d", length, HEADER_LENGTH)
        return cls(
            format=u16_be(data[8:10]),
            track_count=u16_be(data[10:12]),
            division=u16_be(data[12:14]),
            chunk_type=tag,
            chunk_length=length,
        )

    @property
    def format_name(self) -> str:
        try:
            return SMFFormat(self.format).name.lower()
        except ValueError:
            return f"unknown({self.format})"

    @property
    def uses_smpte(self) -> bool:
        return bool(self.division & 0x8000)

    @property
    def ticks_per_quarter(self) -> int | None:
        """Ticks per quarter note, or None for SMPTE-based division."""
        if self.uses_smpte:
            return None
        return self.division

    @property
    def smpte(self) -> tuple[int, int] | None:
        """(frames per second, ticks per frame) for SMPTE-based division."""
        if not self.uses_smpte:
            return None
        # high byte is a negative two's-complement frame rate (-24, -25, -29, -30)
        frames = 256 - (self.division >> 8)
        return frames, self.division & 0xFF


@dataclass(frozen=True)
class TrackChunk:
    """An ``MTrk`` chunk header plus its body bytes.

    ``body`` may be shorter than ``declared_length`` when the source ended
    early; ``truncated`` reports that case.
    """

    index: int  # 0-based track index in file order
    declared_length: int
    body: bytes
    chunk_type: bytes = TRACK_TAG

    @property
    def truncated(self) -> bool:
        return len(self.body) < self.declared_length

    def cursor(self) -> ByteCursor:
        """A fresh cursor scoped to this chunk's body."""
        return ByteCursor.from_bytes(self.body)


def read_header(cursor: ByteCursor) -> Header:
    try:
        data = cursor.read_bytes(HEADER_SIZE)
        header = Header.from_bytes(data)
        # extra header bytes beyond format/ntrks/division are skipped
        if header.chunk_length > HEADER_LENGTH:
            cursor.read_bytes(header.chunk_length - HEADER_LENGTH)
    except EndOfData as err:
        raise MalformedStream("file too short for MThd header", position=err.position) from err
    return header


def read_track_header(cursor: ByteCursor, index: int = 0) -> TrackChunk:
    """Read the 8-byte ``MTrk`` preamble.

    The returned chunk has an empty body; ``read_track`` fills it in.
    """
    start = cursor.position
    data = cursor.read_bytes(TRACK_HEADER_SIZE)
    tag = data[0:4]
    if tag != TRACK_TAG:
        raise MalformedStream(
            f"bad track tag {tag!r}, expected {TRACK_TAG!r}", position=start
        )
    return TrackChunk(index=index, declared_length=u32_be(data[4:8]), body=b"", chunk_type=tag)


def read_track(cursor: ByteCursor, index: int) -> TrackChunk:
    """Read one track chunk, header and body.

    A body cut short by the end of the source is returned as-is with
    ``truncated`` set; the caller decides how to report it.
    """
    chunk = read_track_header(cursor, index)
    body = bytearray()
    for _ in range(chunk.declared_length):
        try:
            body.append(cursor.read_byte())
        except EndOfData:
            break
    return replace(chunk, body=bytes(body))
