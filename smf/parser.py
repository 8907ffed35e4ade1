"""Top-level Standard MIDI File parse.

Fault policy:
  - header errors and ``MalformedStream`` anywhere are fatal;
  - ``EndOfData`` / ``UnknownStatusByte`` inside a track end that track
    only, and decoding resumes at the next chunk boundary given by the
    faulty track's declared length;
  - ``strict=True`` makes every track fault fatal.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Callable, List, Optional, Union

from .chunks import Header, read_header, read_track
from .collector import NoteCollector
from .decoder import TrackDecoder
from .describe import describe_event, track_banner
from .errors import EndOfData, MalformedStream, SMFError
from .events import Note
from .structs import ByteCursor

log = logging.getLogger(__name__)

Sink = Callable[[str], None]
Source = Union[bytes, bytearray, memoryview, BinaryIO, ByteCursor]


class ParseStatus(enum.Enum):
    COMPLETE = "complete"
    PARTIAL = "partial"
    FATAL = "fatal"


@dataclass(frozen=True)
class TrackFault:
    track_index: int
    error: SMFError

    def __str__(self) -> str:
        return f"track {self.track_index}: {type(self.error).__name__}: {self.error}"


@dataclass
class ParseResult:
    header: Optional[Header]
    tracks: List[List[Note]] = field(default_factory=list)
    faults: List[TrackFault] = field(default_factory=list)
    fatal: Optional[SMFError] = None

    @property
    def status(self) -> ParseStatus:
        if self.fatal is not None:
            return ParseStatus.FATAL
        if self.faults:
            return ParseStatus.PARTIAL
        return ParseStatus.COMPLETE

    @property
    def ok(self) -> bool:
        return self.status is ParseStatus.COMPLETE

    def raise_for_status(self) -> None:
        if self.fatal is not None:
            raise self.fatal
        if self.faults:
            raise self.faults[0].error


def _as_cursor(source: Source) -> ByteCursor:
    if isinstance(source, ByteCursor):
        return source
    if isinstance(source, (bytes, bytearray, memoryview)):
        return ByteCursor.from_bytes(bytes(source))
    return ByteCursor(source)


def parse(source: Source, sink: Sink | None = None, *, strict: bool = False) -> ParseResult:
    """Decode a Standard MIDI File.

    Parameters
    ----------
    source : bytes or binary stream
        The whole file.  Streams are read forward only, never seeked.
    sink : callable, optional
        Receives one human-readable line per decoded event, plus a
        banner line at the start of each track.
    strict : bool
        Treat per-track faults as fatal.

    Returns
    -------
    ParseResult
        Header, per-track note sequences in file order, and the faults
        met along the way.  Nothing is raised for malformed input; use
        ``ParseResult.raise_for_status()`` for exception-style handling.
    """
    cursor = _as_cursor(source)
    try:
        header = read_header(cursor)
    except SMFError as err:
        log.error("cannot read header: %s", err)
        return ParseResult(header=None, fatal=err)

    log.debug(
        "header: format %d, %d tracks, division 0x%04X",
        header.format,
        header.track_count,
        header.division,
    )
    result = ParseResult(header=header)
    collector = NoteCollector()

    for index in range(header.track_count):
        try:
            chunk = read_track(cursor, index)
        except EndOfData as err:
            _record_fault(result, index, err, strict)
            break
        except MalformedStream as err:
            result.fatal = err
            break

        collector.start_track()
        if sink is not None:
            sink(track_banner(index))

        decoder = TrackDecoder(chunk.cursor(), collector=collector, track_index=index)
        try:
            for track_event in decoder:
                if sink is not None:
                    sink(describe_event(track_event))
        except MalformedStream as err:
            result.fatal = err
            break
        except SMFError as err:
            _record_fault(result, index, err, strict)
            if result.fatal is not None or chunk.truncated:
                break
            continue

        if chunk.truncated:
            err = EndOfData(
                f"track body has {len(chunk.body)} of {chunk.declared_length} declared bytes",
                position=cursor.position,
            )
            _record_fault(result, index, err, strict)
            break

        trailing = len(chunk.body) - decoder.cursor.position
        if trailing > 0:
            log.warning("track %d: %d bytes after end-of-track skipped", index, trailing)

    result.tracks = collector.tracks()
    return result


def _record_fault(result: ParseResult, index: int, err: SMFError, strict: bool) -> None:
    if strict:
        result.fatal = err
        return
    fault = TrackFault(track_index=index, error=err)
    log.warning("%s", fault)
    result.faults.append(fault)


def parse_file(path: Union[str, Path], sink: Sink | None = None, *, strict: bool = False) -> ParseResult:
    with open(path, "rb") as fh:
        return parse(fh, sink, strict=strict)
