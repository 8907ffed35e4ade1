"""Error hierarchy for Standard MIDI File decoding.

Every error is a ``ValueError`` so callers can keep a single
``except ValueError`` around a parse, the same way the container
readers report bad input.
"""

from __future__ import annotations


class SMFError(ValueError):
    """Base class for all decode failures."""

    def __init__(self, message: str, *, position: int | None = None) -> None:
        if position is not None:
            message = f"{message} (at byte 0x{position:X})"
        super().__init__(message)
        self.position = position


class EndOfData(SMFError):
    """The byte source ran out in the middle of a read."""


class MalformedStream(SMFError):
    """Structural trust in the stream is lost; the whole parse is abandoned."""


class MissingRunningStatus(MalformedStream):
    """A data byte appeared where a track's first status byte was expected."""


class UnknownStatusByte(SMFError):
    """A status byte with no known event layout."""

    def __init__(self, status: int, *, position: int | None = None) -> None:
        super().__init__(f"unknown status byte 0x{status:02X}", position=position)
        self.status = status
