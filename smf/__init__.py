"""Standard MIDI File decoding: header, typed track events and note sequences."""

from .chunks import (  # noqa: F401
    HEADER_SIZE,
    HEADER_TAG,
    TRACK_TAG,
    Header,
    SMFFormat,
    TrackChunk,
    read_header,
    read_track,
    read_track_header,
)
from .collector import NoteCollector  # noqa: F401
from .decoder import DecoderState, TrackDecoder, iter_track_events  # noqa: F401
from .describe import describe_event  # noqa: F401
from .errors import (  # noqa: F401
    EndOfData,
    MalformedStream,
    MissingRunningStatus,
    SMFError,
    UnknownStatusByte,
)
from .events import (  # noqa: F401
    ChannelEvent,
    ChannelEventType,
    ChannelPrefix,
    KeySignature,
    MetaEvent,
    MetaType,
    Note,
    SequenceNumber,
    SMPTEOffset,
    SysExEvent,
    Tempo,
    TimeSignature,
    TrackEvent,
)
from .parser import ParseResult, ParseStatus, TrackFault, parse, parse_file  # noqa: F401
from .structs import VLQ_MAX_BYTES, ByteCursor, read_vlq, u16_be, u32_be  # noqa: F401
