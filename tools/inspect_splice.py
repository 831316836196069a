#!/usr/bin/env python3
"""Print SPLICE drum patterns in the classic step-grid layout."""

from __future__ import annotations

import argparse
import glob
import logging
import sys
from pathlib import Path
from typing import Iterable, List

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from splice.decoder import SpliceError, decode_file  # noqa: E402
from splice.pattern import Pattern, Track  # noqa: E402


STEPS_PER_GROUP = 4


def collect_paths(patterns: Iterable[str]) -> List[Path]:
    paths: List[Path] = []
    for pattern in patterns:
        matches = sorted(Path(p) for p in glob.glob(pattern, recursive=True))
        if matches:
            paths.extend(matches)
        else:
            # Treat literal path when glob finds nothing.
            paths.append(Path(pattern))
    # Deduplicate while preserving order.
    seen: set[Path] = set()
    unique_paths: List[Path] = []
    for path in paths:
        resolved = path.resolve()
        if resolved not in seen:
            seen.add(resolved)
            unique_paths.append(path)
    return unique_paths


def display_text(text: str) -> str:
    """Show undecodable name bytes as backslash escapes instead of failing."""

    return text.encode("utf-8", "surrogateescape").decode("utf-8", "backslashreplace")


def format_steps(track: Track) -> str:
    cells = ["x" if on else "-" for on in track.steps]
    groups = [
        "".join(cells[i : i + STEPS_PER_GROUP])
        for i in range(0, len(cells), STEPS_PER_GROUP)
    ]
    return "|" + "|".join(groups) + "|"


def format_pattern(pattern: Pattern) -> str:
    lines = [
        f"Saved with HW Version: {display_text(pattern.version)}",
        f"Tempo: {pattern.tempo:g}",
    ]
    for track in pattern.tracks:
        lines.append(f"({track.id}) {display_text(track.name)}\t{format_steps(track)}")
    return "\n".join(lines) + "\n"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Show version, tempo and step grid for SPLICE pattern files."
    )
    parser.add_argument(
        "paths",
        nargs="+",
        help="File paths or glob patterns (quotes recommended for wildcards).",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log decoder progress to stderr."
    )
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(errors="backslashreplace")

    targets = collect_paths(args.paths)

    status = 0
    for idx, path in enumerate(targets):
        try:
            pattern = decode_file(path)
        except (SpliceError, OSError) as err:
            print(f"{path}: {err}", file=sys.stderr)
            status = 1
            continue
        if len(targets) > 1:
            if idx:
                print()
            print(f"== {path}")
        sys.stdout.write(format_pattern(pattern))

    return status


if __name__ == "__main__":
    raise SystemExit(main())
