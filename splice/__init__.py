"""Decoder for SPLICE drum-machine pattern files."""

from .decoder import (  # noqa: F401
    HEADER_SIZE,
    SIGNATURE,
    TRACK_FIXED_SIZE,
    FormatError,
    ShortReadError,
    SpliceError,
    decode,
    decode_bytes,
    decode_file,
    decode_stream,
    read_track,
    read_tracks,
)
from .pattern import (  # noqa: F401
    STEP_COUNT,
    Pattern,
    Track,
)
