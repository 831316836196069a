#!/usr/bin/env python3
"""Convert a SPLICE drum pattern into a Standard MIDI File.

Examples
--------
    python tools/splice_to_midi.py pattern_1.splice
    python tools/splice_to_midi.py pattern_1.splice -o out/beat.mid --bars 4
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from splice.decoder import SpliceError, decode_file  # noqa: E402
from splice.midi import pattern_to_midi  # noqa: E402


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Render a SPLICE pattern to MIDI.")
    parser.add_argument("input", type=Path, help="SPLICE pattern file")
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Output .mid path (default: input path with .mid suffix)",
    )
    parser.add_argument("--bars", type=int, default=1, help="Bars to repeat (default 1)")
    parser.add_argument("--velocity", type=int, default=100, help="Note velocity 1-127")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    output = args.output or args.input.with_suffix(".mid")

    try:
        pattern = decode_file(args.input)
        mid = pattern_to_midi(pattern, bars=args.bars, velocity=args.velocity)
        output.parent.mkdir(parents=True, exist_ok=True)
        mid.save(str(output))
    except (SpliceError, OSError, ValueError) as err:
        print(f"error: {err}", file=sys.stderr)
        return 1

    print(f"Wrote {output} ({len(pattern.tracks)} tracks, {args.bars} bar(s))")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
