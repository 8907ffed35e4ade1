"""Decoded event types.

Status byte layout (channel voice): ``kkkk cccc`` with kind ``k`` in
0x8-0xE and channel ``c`` in 0-15.  Status bytes 0xF0, 0xF7 and 0xFF
are dispatched on the whole byte.

Meta-event table (type : payload length : meaning):
  0x00 : 2   : sequence number
  0x01-0x07  : var : text (text, copyright, track name, instrument,
               lyric, marker, cue point)
  0x20 : 1   : MIDI channel prefix
  0x2F : 0   : end of track
  0x51 : 3   : set tempo, microseconds per quarter note (24-bit BE)
  0x54 : 5   : SMPTE offset hr mn se fr ff
  0x58 : 4   : time signature nn dd cc bb
  0x59 : 2   : key signature sf mi
  0x7F : var : sequencer specific
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Union

from .structs import u16_be, u24_be

META_STATUS = 0xFF
SYSEX_START = 0xF0
SYSEX_CONTINUATION = 0xF7


class ChannelEventType(enum.IntEnum):
    NOTE_OFF = 0x8  # key, velocity
    NOTE_ON = 0x9  # key, velocity
    POLY_AFTERTOUCH = 0xA  # key, pressure
    CONTROLLER = 0xB  # controller, value
    PROGRAM_CHANGE = 0xC  # program
    CHANNEL_AFTERTOUCH = 0xD  # pressure
    PITCH_BEND = 0xE  # lsb, msb

    @property
    def data_length(self) -> int:
        if self in (ChannelEventType.PROGRAM_CHANGE, ChannelEventType.CHANNEL_AFTERTOUCH):
            return 1
        return 2


class MetaType(enum.IntEnum):
    SEQUENCE_NUMBER = 0x00
    TEXT = 0x01
    COPYRIGHT = 0x02
    TRACK_NAME = 0x03
    INSTRUMENT_NAME = 0x04
    LYRIC = 0x05
    MARKER = 0x06
    CUE_POINT = 0x07
    CHANNEL_PREFIX = 0x20
    END_OF_TRACK = 0x2F
    SET_TEMPO = 0x51
    SMPTE_OFFSET = 0x54
    TIME_SIGNATURE = 0x58
    KEY_SIGNATURE = 0x59
    SEQUENCER_SPECIFIC = 0x7F

    @property
    def is_text(self) -> bool:
        return MetaType.TEXT <= self <= MetaType.CUE_POINT


@dataclass(frozen=True)
class Note:
    """A note-on or note-off, pitch only."""

    note: int  # MIDI note number 0-127
    on: bool


@dataclass(frozen=True)
class SequenceNumber:
    number: int


@dataclass(frozen=True)
class ChannelPrefix:
    channel: int


@dataclass(frozen=True)
class Tempo:
    microseconds_per_quarter: int

    @property
    def bpm(self) -> float:
        if self.microseconds_per_quarter == 0:
            return 0.0
        return 60_000_000 / self.microseconds_per_quarter


@dataclass(frozen=True)
class SMPTEOffset:
    hour: int
    minute: int
    second: int
    frame: int
    subframe: int


@dataclass(frozen=True)
class TimeSignature:
    numerator: int
    denominator_power: int  # denominator = 2 ** denominator_power
    clocks_per_click: int
    thirty_seconds_per_quarter: int

    @property
    def denominator(self) -> int:
        return 2 ** self.denominator_power


_MAJOR_KEYS = ["Cb", "Gb", "Db", "Ab", "Eb", "Bb", "F", "C", "G", "D", "A", "E", "B", "F#", "C#"]
_MINOR_KEYS = ["Ab", "Eb", "Bb", "F", "C", "G", "D", "A", "E", "B", "F#", "C#", "G#", "D#", "A#"]


@dataclass(frozen=True)
class KeySignature:
    sharps_flats: int  # -7 (7 flats) .. +7 (7 sharps)
    minor: bool

    @property
    def name(self) -> str:
        idx = self.sharps_flats + 7
        if not 0 <= idx < len(_MAJOR_KEYS):
            return f"{self.sharps_flats:+d} {'minor' if self.minor else 'major'}"
        if self.minor:
            return f"{_MINOR_KEYS[idx]} minor"
        return f"{_MAJOR_KEYS[idx]} major"


MetaValue = Union[bytes, SequenceNumber, ChannelPrefix, Tempo, SMPTEOffset, TimeSignature, KeySignature, None]


# Fixed payload sizes; variable-length types are absent.
META_PAYLOAD_SIZES = {
    MetaType.SEQUENCE_NUMBER: 2,
    MetaType.CHANNEL_PREFIX: 1,
    MetaType.END_OF_TRACK: 0,
    MetaType.SET_TEMPO: 3,
    MetaType.SMPTE_OFFSET: 5,
    MetaType.TIME_SIGNATURE: 4,
    MetaType.KEY_SIGNATURE: 2,
}


def decode_meta_value(meta_type: MetaType, payload: bytes) -> MetaValue:
    """Interpret a meta payload whose length already matches its type.

    Text and sequencer-specific payloads are returned as raw bytes;
    character decoding is left to the presentation layer.
    """
    if meta_type == MetaType.SEQUENCE_NUMBER:
        return SequenceNumber(u16_be(payload))
    if meta_type == MetaType.CHANNEL_PREFIX:
        return ChannelPrefix(payload[0])
    if meta_type == MetaType.END_OF_TRACK:
        return None
    if meta_type == MetaType.SET_TEMPO:
        return Tempo(u24_be(payload))
    if meta_type == MetaType.SMPTE_OFFSET:
        return SMPTEOffset(*payload[:5])
    if meta_type == MetaType.TIME_SIGNATURE:
        return TimeSignature(*payload[:4])
    if meta_type == MetaType.KEY_SIGNATURE:
        sf = payload[0] - 256 if payload[0] & 0x80 else payload[0]
        return KeySignature(sharps_flats=sf, minor=payload[1] == 1)
    return bytes(payload)


@dataclass(frozen=True)
class ChannelEvent:
    kind: ChannelEventType
    channel: int
    data1: int
    data2: Optional[int] = None  # None for 1-byte kinds

    @property
    def status(self) -> int:
        return (int(self.kind) << 4) | self.channel

    @property
    def note(self) -> Optional[Note]:
        """The collected ``Note`` for note-on/note-off events."""
        if self.kind == ChannelEventType.NOTE_ON:
            return Note(self.data1, True)
        if self.kind == ChannelEventType.NOTE_OFF:
            return Note(self.data1, False)
        return None

    @property
    def pitch_bend(self) -> Optional[int]:
        """Signed 14-bit bend, 0 = centre."""
        if self.kind != ChannelEventType.PITCH_BEND:
            return None
        return ((self.data2 or 0) << 7 | self.data1) - 0x2000


@dataclass(frozen=True)
class MetaEvent:
    type_byte: int
    payload: bytes
    value: MetaValue = None

    @property
    def meta_type(self) -> Optional[MetaType]:
        try:
            return MetaType(self.type_byte)
        except ValueError:
            return None

    @property
    def is_end_of_track(self) -> bool:
        return self.type_byte == MetaType.END_OF_TRACK


@dataclass(frozen=True)
class SysExEvent:
    status: int  # 0xF0 or 0xF7
    lead: int  # single byte between the status and the length
    payload: bytes


Event = Union[ChannelEvent, MetaEvent, SysExEvent]


@dataclass(frozen=True)
class TrackEvent:
    delta_time: int
    event: Event
    tick: int = 0  # cumulative ticks since the start of the track
