"""Track event decoder.

Walks one ``MTrk`` body as a sequence of ``<delta-time> <event>`` pairs:

  AWAITING_DELTA_TIME -> AWAITING_STATUS -> AWAITING_PAYLOAD -> (loop)

and stops in TRACK_COMPLETE on the end-of-track meta event (FF 2F 00) or
when the body runs out exactly on an event boundary.

Running status: a byte < 0x80 where a status is expected is the first
data byte of an event that reuses the previous status.  The byte is
pushed back onto the cursor and the stored status is used instead.
"""

from __future__ import annotations

import enum
import logging
from typing import Iterator, Optional

from .collector import NoteCollector
from .errors import MissingRunningStatus, SMFError, UnknownStatusByte
from .events import (
    META_PAYLOAD_SIZES,
    META_STATUS,
    SYSEX_CONTINUATION,
    SYSEX_START,
    ChannelEvent,
    ChannelEventType,
    Event,
    MetaEvent,
    MetaType,
    SysExEvent,
    TrackEvent,
    decode_meta_value,
)
from .structs import ByteCursor, read_vlq

log = logging.getLogger(__name__)


class DecoderState(enum.Enum):
    AWAITING_DELTA_TIME = "awaiting-delta-time"
    AWAITING_STATUS = "awaiting-status"
    AWAITING_PAYLOAD = "awaiting-payload"
    TRACK_COMPLETE = "track-complete"


class TrackDecoder:
    """Iterator of ``TrackEvent`` over a single track body.

    Note-on and note-off events are also appended to ``collector`` when
    one is given.  Running status lives on the instance, so each track
    needs its own decoder.
    """

    def __init__(
        self,
        cursor: ByteCursor,
        *,
        collector: NoteCollector | None = None,
        track_index: int = 0,
    ) -> None:
        self.cursor = cursor
        self.collector = collector
        self.track_index = track_index
        self.state = DecoderState.AWAITING_DELTA_TIME
        self.running_status: Optional[int] = None
        self.tick = 0
        self.implicit_end = False

    def __repr__(self) -> str:
        return (
            f"TrackDecoder(track={self.track_index}, state={self.state.value}, "
            f"pos=0x{self.cursor.position:X}, tick={self.tick})"
        )

    def __iter__(self) -> Iterator[TrackEvent]:
        return self

    def __next__(self) -> TrackEvent:
        if self.state is DecoderState.TRACK_COMPLETE:
            raise StopIteration
        try:
            track_event = self._read_event()
        except SMFError:
            self.state = DecoderState.TRACK_COMPLETE
            raise
        if track_event is None:
            raise StopIteration
        return track_event

    def _read_event(self) -> TrackEvent | None:
        if self.cursor.at_end():
            log.warning(
                "track %d: body ended without end-of-track at byte 0x%X",
                self.track_index,
                self.cursor.position,
            )
            self.implicit_end = True
            self.state = DecoderState.TRACK_COMPLETE
            return None

        delta_time = read_vlq(self.cursor)
        self.tick += delta_time

        self.state = DecoderState.AWAITING_STATUS
        status = self._read_status()

        self.state = DecoderState.AWAITING_PAYLOAD
        event = self._read_payload(status)

        if isinstance(event, MetaEvent) and event.is_end_of_track:
            self.state = DecoderState.TRACK_COMPLETE
        else:
            self.state = DecoderState.AWAITING_DELTA_TIME

        track_event = TrackEvent(delta_time=delta_time, event=event, tick=self.tick)
        log.debug("track %d tick %d: %r", self.track_index, self.tick, event)
        return track_event

    def _read_status(self) -> int:
        candidate = self.cursor.read_byte()
        if candidate & 0x80:
            self.running_status = candidate
            return candidate

        if self.running_status is None:
            raise MissingRunningStatus(
                f"data byte 0x{candidate:02X} with no running status",
                position=self.cursor.position - 1,
            )
        self.cursor.push_back(1)
        return self.running_status

    def _read_payload(self, status: int) -> Event:
        kind = status >> 4
        if kind != 0xF:
            return self._read_channel_event(ChannelEventType(kind), status & 0x0F)
        if status == META_STATUS:
            return self._read_meta_event()
        if status in (SYSEX_START, SYSEX_CONTINUATION):
            return self._read_sysex_event(status)
        raise UnknownStatusByte(status, position=self.cursor.position - 1)

    def _read_channel_event(self, kind: ChannelEventType, channel: int) -> ChannelEvent:
        data1 = self.cursor.read_byte()
        data2 = self.cursor.read_byte() if kind.data_length == 2 else None
        event = ChannelEvent(kind=kind, channel=channel, data1=data1, data2=data2)

        note = event.note
        if note is not None and self.collector is not None:
            self.collector.append(note)
        return event

    def _read_meta_event(self) -> MetaEvent:
        type_byte = self.cursor.read_byte()
        length = read_vlq(self.cursor)
        payload = self.cursor.read_bytes(length)

        try:
            meta_type = MetaType(type_byte)
        except ValueError:
            log.debug(
                "track %d: skipping unknown meta type 0x%02X (%d bytes)",
                self.track_index,
                type_byte,
                length,
            )
            return MetaEvent(type_byte=type_byte, payload=payload)

        expected = META_PAYLOAD_SIZES.get(meta_type)
        if expected is not None and length != expected:
            log.warning(
                "track %d: meta %s has length %d, expected %d",
                self.track_index,
                meta_type.name,
                length,
                expected,
            )
            return MetaEvent(type_byte=type_byte, payload=payload)

        return MetaEvent(
            type_byte=type_byte,
            payload=payload,
            value=decode_meta_value(meta_type, payload),
        )

    def _read_sysex_event(self, status: int) -> SysExEvent:
        lead = self.cursor.read_byte()
        length = read_vlq(self.cursor)
        payload = self.cursor.read_bytes(length)
        return SysExEvent(status=status, lead=lead, payload=payload)


def iter_track_events(body: bytes, *, track_index: int = 0) -> Iterator[TrackEvent]:
    """Decode the events of one track body without collecting notes."""

    return TrackDecoder(ByteCursor.from_bytes(body), track_index=track_index)
