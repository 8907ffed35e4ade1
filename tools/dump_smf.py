#!/usr/bin/env python3
"""Print the decoded event log and note summary of Standard MIDI Files.

Usage:
  python tools/dump_smf.py song.mid
  python tools/dump_smf.py "corpus/**/*.mid" --quiet
  python tools/dump_smf.py song.mid --notes --crosscheck
"""

from __future__ import annotations

import argparse
import glob
import logging
from pathlib import Path
import sys
from typing import Iterable, List

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from smf.events import Note  # noqa: E402
from smf.parser import ParseResult, ParseStatus, parse_file  # noqa: E402


def collect_paths(patterns: Iterable[str]) -> List[Path]:
    paths: List[Path] = []
    for pattern in patterns:
        matches = sorted(Path(p) for p in glob.glob(pattern, recursive=True))
        if matches:
            paths.extend(matches)
        else:
            candidate = Path(pattern)
            if candidate.exists():
                paths.append(candidate)
    seen: set[Path] = set()
    unique_paths: List[Path] = []
    for path in paths:
        resolved = path.resolve()
        if resolved not in seen:
            seen.add(resolved)
            unique_paths.append(path)
    return unique_paths


def mido_track_notes(path: Path) -> List[List[Note]]:
    """Note sequences per track as read by mido, for comparison."""
    import mido

    mid = mido.MidiFile(str(path))
    tracks: List[List[Note]] = []
    for track in mid.tracks:
        notes: List[Note] = []
        for msg in track:
            if msg.type == "note_on":
                notes.append(Note(msg.note, True))
            elif msg.type == "note_off":
                notes.append(Note(msg.note, False))
        tracks.append(notes)
    return tracks


def format_notes(notes: List[Note]) -> str:
    return " ".join(f"{n.note}{'+' if n.on else '-'}" for n in notes) or "(none)"


def summarize(path: Path, result: ParseResult) -> List[str]:
    lines = [f"{path}: {result.status.value}"]
    header = result.header
    if header is not None:
        if header.ticks_per_quarter is not None:
            division = f"{header.ticks_per_quarter} tpq"
        else:
            fps, tpf = header.smpte
            division = f"{fps} fps x {tpf}"
        lines.append(
            f"  format {header.format} ({header.format_name}), "
            f"{header.track_count} tracks declared, division {division}"
        )
    for idx, notes in enumerate(result.tracks):
        on = sum(1 for n in notes if n.on)
        lines.append(f"  track {idx}: {len(notes)} note events ({on} on, {len(notes) - on} off)")
    for fault in result.faults:
        lines.append(f"  fault {fault}")
    if result.fatal is not None:
        lines.append(f"  fatal {type(result.fatal).__name__}: {result.fatal}")
    return lines


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Decode Standard MIDI Files and print their events."
    )
    parser.add_argument(
        "paths",
        nargs="+",
        help="File paths or glob patterns (quotes recommended for wildcards).",
    )
    parser.add_argument("--quiet", action="store_true", help="Print only the summary.")
    parser.add_argument("--notes", action="store_true", help="Print the collected note sequences.")
    parser.add_argument("--strict", action="store_true", help="Treat track faults as fatal.")
    parser.add_argument(
        "--crosscheck",
        action="store_true",
        help="Compare note sequences with mido's reader.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_arg_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    targets = collect_paths(args.paths)
    if not targets:
        parser.error("No files matched the provided paths/patterns.")

    exit_code = 0
    for path in targets:
        sink = None if args.quiet else print
        result = parse_file(path, sink, strict=args.strict)
        for line in summarize(path, result):
            print(line)
        if result.status is not ParseStatus.COMPLETE:
            exit_code = 1

        if args.notes:
            for idx, notes in enumerate(result.tracks):
                print(f"  notes[{idx}]: {format_notes(notes)}")

        if args.crosscheck:
            try:
                expected = mido_track_notes(path)
            except (OSError, EOFError, ValueError) as err:
                print(f"  crosscheck: mido failed: {err}")
                exit_code = 1
                continue
            if expected == result.tracks:
                print("  crosscheck: match")
            else:
                print("  crosscheck: MISMATCH")
                exit_code = 1

    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
