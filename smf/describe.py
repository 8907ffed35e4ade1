"""Human-readable one-line descriptions of decoded events."""

from __future__ import annotations

from .events import (
    SYSEX_START,
    ChannelEvent,
    ChannelEventType,
    MetaEvent,
    MetaType,
    SysExEvent,
    TrackEvent,
)

TEXT_ENCODING = "latin-1"

_CHANNEL_NAMES = {
    ChannelEventType.NOTE_OFF: "noteOff",
    ChannelEventType.NOTE_ON: "noteOn",
    ChannelEventType.POLY_AFTERTOUCH: "noteAftertouch",
    ChannelEventType.CONTROLLER: "controller",
    ChannelEventType.PROGRAM_CHANGE: "programChange",
    ChannelEventType.CHANNEL_AFTERTOUCH: "channelAftertouch",
    ChannelEventType.PITCH_BEND: "pitchBend",
}

_META_NAMES = {
    MetaType.SEQUENCE_NUMBER: "Sequence Number",
    MetaType.TEXT: "Text Event",
    MetaType.COPYRIGHT: "Copyright",
    MetaType.TRACK_NAME: "Track Name",
    MetaType.INSTRUMENT_NAME: "Instrument Name",
    MetaType.LYRIC: "Lyric",
    MetaType.MARKER: "Marker",
    MetaType.CUE_POINT: "Cue Point",
    MetaType.CHANNEL_PREFIX: "MIDI Channel Prefix",
    MetaType.END_OF_TRACK: "End of Track",
    MetaType.SET_TEMPO: "SetTempo",
    MetaType.SMPTE_OFFSET: "SMPTE Offset",
    MetaType.TIME_SIGNATURE: "TimeSignature",
    MetaType.KEY_SIGNATURE: "KeySignature",
    MetaType.SEQUENCER_SPECIFIC: "Sequencer Specific",
}


def decode_text(payload: bytes) -> str:
    return payload.decode(TEXT_ENCODING)


def describe_channel(event: ChannelEvent, delta_time: int) -> str:
    name = _CHANNEL_NAMES[event.kind]
    kind = event.kind
    if kind in (ChannelEventType.NOTE_ON, ChannelEventType.NOTE_OFF):
        fields = f"note: {event.data1} velocity: {event.data2}"
    elif kind == ChannelEventType.POLY_AFTERTOUCH:
        fields = f"note: {event.data1} amount: {event.data2}"
    elif kind == ChannelEventType.CONTROLLER:
        fields = f"controller: {event.data1} value: {event.data2}"
    elif kind == ChannelEventType.PROGRAM_CHANGE:
        fields = f"program: {event.data1}"
    elif kind == ChannelEventType.CHANNEL_AFTERTOUCH:
        fields = f"amount: {event.data1}"
    else:
        fields = f"lsb: {event.data1} msb: {event.data2} bend: {event.pitch_bend:+d}"
    return f"{name} -> {fields} channel: {event.channel} delta: {delta_time}"


def describe_meta(event: MetaEvent) -> str:
    meta_type = event.meta_type
    if meta_type is None:
        return f"Unknown Meta 0x{event.type_byte:02X} ({len(event.payload)} bytes)"

    name = _META_NAMES[meta_type]
    value = event.value
    if meta_type.is_text:
        return f"{name} text: {decode_text(event.payload)!r}"
    if meta_type in (MetaType.END_OF_TRACK, MetaType.SEQUENCER_SPECIFIC) or value is None:
        return f"{name} ({len(event.payload)} bytes)" if event.payload else name
    if meta_type == MetaType.SEQUENCE_NUMBER:
        return f"{name} number: {value.number}"
    if meta_type == MetaType.CHANNEL_PREFIX:
        return f"{name} channel: {value.channel}"
    if meta_type == MetaType.SET_TEMPO:
        return f"{name} mpq: {value.microseconds_per_quarter} bpm: {value.bpm:.2f}"
    if meta_type == MetaType.SMPTE_OFFSET:
        return (
            f"{name} {value.hour:02d}:{value.minute:02d}:{value.second:02d}"
            f" frame: {value.frame}.{value.subframe:02d}"
        )
    if meta_type == MetaType.TIME_SIGNATURE:
        return (
            f"{name} {value.numerator}/{value.denominator}"
            f" clocks: {value.clocks_per_click} 32nds: {value.thirty_seconds_per_quarter}"
        )
    return f"{name} {value.name}"


def describe_sysex(event: SysExEvent) -> str:
    which = "begin" if event.status == SYSEX_START else "continuation"
    return f"Sysex {which} ({len(event.payload)} bytes)"


def describe_event(track_event: TrackEvent) -> str:
    event = track_event.event
    if isinstance(event, ChannelEvent):
        return describe_channel(event, track_event.delta_time)
    if isinstance(event, MetaEvent):
        return describe_meta(event)
    return describe_sysex(event)


def track_banner(index: int) -> str:
    return f"--- track {index} ---"
