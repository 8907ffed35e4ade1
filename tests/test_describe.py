from pathlib import Path
import sys

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from smf.decoder import iter_track_events  # noqa: E402
from smf.describe import describe_event  # noqa: E402

EOT = b"\x00\xFF\x2F\x00"


def _line(raw: bytes) -> str:
    return describe_event(next(iter(iter_track_events(raw + EOT))))


@pytest.mark.parametrize(
    "raw, expected",
    [
        (b"\x05\x91\x3C\x64", "noteOn -> note: 60 velocity: 100 channel: 1 delta: 5"),
        (b"\x00\xA0\x3C\x10", "noteAftertouch -> note: 60 amount: 16 channel: 0 delta: 0"),
        (b"\x00\xB0\x07\x64", "controller -> controller: 7 value: 100 channel: 0 delta: 0"),
        (b"\x00\xC9\x19", "programChange -> program: 25 channel: 9 delta: 0"),
        (b"\x00\xD0\x30", "channelAftertouch -> amount: 48 channel: 0 delta: 0"),
        (b"\x00\xE0\x00\x40", "pitchBend -> lsb: 0 msb: 64 bend: +0 channel: 0 delta: 0"),
        (b"\x00\xFF\x03\x05Piano", "Track Name text: 'Piano'"),
        (b"\x00\xFF\x00\x02\x00\x01", "Sequence Number number: 1"),
        (b"\x00\xFF\x20\x01\x03", "MIDI Channel Prefix channel: 3"),
        (b"\x00\xFF\x54\x05\x01\x02\x03\x18\x05", "SMPTE Offset 01:02:03 frame: 24.05"),
        (b"\x00\xFF\x58\x04\x04\x02\x18\x08", "TimeSignature 4/4 clocks: 24 32nds: 8"),
        (b"\x00\xFF\x59\x02\x00\x01", "KeySignature A minor"),
        (b"\x00\xFF\x7F\x02\x00\x41", "Sequencer Specific (2 bytes)"),
        (b"\x00\xFF\x60\x01\x00", "Unknown Meta 0x60 (1 bytes)"),
        (b"\x00\xF0\x00\x02\x7E\x7F", "Sysex begin (2 bytes)"),
        (b"\x00\xF7\x00\x01\xF7", "Sysex continuation (1 bytes)"),
    ],
)
def test_describe_event(raw: bytes, expected: str) -> None:
    assert _line(raw) == expected


def test_text_is_decoded_as_latin1() -> None:
    assert _line(b"\x00\xFF\x05\x04caf\xE9") == "Lyric text: 'café'"
