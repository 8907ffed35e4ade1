from pathlib import Path
import io
import sys

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from smf.errors import EndOfData, MalformedStream  # noqa: E402
from smf.structs import ByteCursor, read_vlq, u16_be, u24_be, u32_be  # noqa: E402


# ── big-endian fields ───────────────────────────────────────────────


def test_big_endian_fields() -> None:
    assert u16_be(b"\x01\xE0") == 480
    assert u24_be(b"\x07\xA1\x20") == 500000
    assert u32_be(b"\x00\x00\x00\x06") == 6
    assert u32_be(b"\xFF\xFF\xFF\xFF") == 0xFFFFFFFF


# ── variable-length quantities ──────────────────────────────────────


@pytest.mark.parametrize("value", range(0x80))
def test_single_byte_vlq_is_identity(value: int) -> None:
    cursor = ByteCursor.from_bytes(bytes([value, 0x55]))
    assert read_vlq(cursor) == value
    assert cursor.position == 1


@pytest.mark.parametrize(
    "data, expected",
    [
        (b"\x81\x00", 128),
        (b"\xFF\x7F", 16383),
        (b"\x81\x80\x00", 16384),
        (b"\xFF\xFF\xFF\x7F", 0x0FFFFFFF),
    ],
)
def test_multi_byte_vlq(data: bytes, expected: int) -> None:
    cursor = ByteCursor.from_bytes(data + b"\x00")
    assert read_vlq(cursor) == expected
    assert cursor.position == len(data)


def test_vlq_longer_than_four_bytes_is_malformed() -> None:
    cursor = ByteCursor.from_bytes(b"\xFF\xFF\xFF\xFF\x7F")
    with pytest.raises(MalformedStream):
        read_vlq(cursor)


def test_vlq_cut_short_is_end_of_data() -> None:
    cursor = ByteCursor.from_bytes(b"\x81")
    with pytest.raises(EndOfData):
        read_vlq(cursor)


# ── cursor ──────────────────────────────────────────────────────────


class TestByteCursor:
    def test_reads_in_order_and_counts_position(self) -> None:
        cursor = ByteCursor.from_bytes(b"\x01\x02\x03")
        assert cursor.read_byte() == 1
        assert cursor.read_bytes(2) == b"\x02\x03"
        assert cursor.position == 3

    def test_exhausted_source_raises_with_position(self) -> None:
        cursor = ByteCursor.from_bytes(b"\x01")
        cursor.read_byte()
        with pytest.raises(EndOfData) as excinfo:
            cursor.read_byte()
        assert excinfo.value.position == 1

    def test_push_back_replays_last_byte(self) -> None:
        cursor = ByteCursor.from_bytes(b"\x3C\x40")
        assert cursor.read_byte() == 0x3C
        cursor.push_back(1)
        assert cursor.position == 0
        assert cursor.read_bytes(2) == b"\x3C\x40"

    def test_push_back_beyond_window_is_rejected(self) -> None:
        cursor = ByteCursor.from_bytes(b"\x01\x02")
        cursor.read_bytes(2)
        with pytest.raises(ValueError):
            cursor.push_back(2)

    def test_wider_lookbehind(self) -> None:
        cursor = ByteCursor.from_bytes(b"\x01\x02\x03", lookbehind=2)
        cursor.read_bytes(2)
        cursor.push_back(2)
        assert cursor.read_bytes(3) == b"\x01\x02\x03"

    def test_at_end_does_not_consume(self) -> None:
        cursor = ByteCursor.from_bytes(b"\x09")
        assert not cursor.at_end()
        assert cursor.position == 0
        assert cursor.read_byte() == 0x09
        assert cursor.at_end()

    def test_push_back_after_peek_keeps_order(self) -> None:
        cursor = ByteCursor.from_bytes(b"\x01\x02")
        cursor.read_byte()
        assert not cursor.at_end()
        cursor.push_back(1)
        assert cursor.read_bytes(2) == b"\x01\x02"

    def test_works_over_unseekable_stream(self) -> None:
        class OneWay(io.RawIOBase):
            def __init__(self, data: bytes) -> None:
                self._data = data

            def readable(self) -> bool:
                return True

            def seekable(self) -> bool:
                return False

            def read(self, size: int = -1) -> bytes:
                chunk, self._data = self._data[:size], self._data[size:]
                return chunk

        cursor = ByteCursor(OneWay(b"\x90\x3C"))
        assert cursor.read_byte() == 0x90
        cursor.push_back(1)
        assert cursor.read_bytes(2) == b"\x90\x3C"
