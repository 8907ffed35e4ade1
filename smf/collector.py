from __future__ import annotations

from typing import List

from .events import Note


class NoteCollector:
    """Per-track note sequences in file order.

    The decoder appends to the current track only; readers look at a
    track once its decode loop has finished.
    """

    def __init__(self) -> None:
        self._tracks: List[List[Note]] = []

    def __len__(self) -> int:
        return len(self._tracks)

    def __repr__(self) -> str:
        return f"NoteCollector(tracks={len(self._tracks)})"

    def start_track(self) -> List[Note]:
        notes: List[Note] = []
        self._tracks.append(notes)
        return notes

    def append(self, note: Note) -> None:
        if not self._tracks:
            raise RuntimeError("append before start_track")
        self._tracks[-1].append(note)

    def track(self, index: int) -> List[Note]:
        return list(self._tracks[index])

    def tracks(self) -> List[List[Note]]:
        return [list(notes) for notes in self._tracks]
