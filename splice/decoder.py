"""Decode SPLICE drum-machine pattern files.

File layout (offsets from the start of a well-formed file)::

    0   6   signature, the literal ``SPLICE``
    6   8   payload size, int64 big-endian; counts everything after this field
    14  32  version text, zero padded
    46  4   tempo, float32 little-endian
    50  ..  track records until the payload size is used up

Track record layout::

    0       4   track ID, int32 little-endian
    4       1   name length, int8
    5       n   name bytes
    5 + n   16  steps, one byte each; a value > 0 (as int8) is active

The stream is read strictly forward.  The payload size is the only signal
that ends the track loop: a record is always read to completion, so the
last one may run past the declared size without complaint, and bytes left
after the declared size are never read.
"""

from __future__ import annotations

import io
import logging
import os
import struct
from typing import BinaryIO, List, Tuple, Union

from .pattern import STEP_COUNT, Pattern, Track

LOGGER = logging.getLogger(__name__)

SIGNATURE = b"SPLICE"
SIGNATURE_SIZE = len(SIGNATURE)
PAYLOAD_SIZE_SIZE = 8
VERSION_SIZE = 32
TEMPO_SIZE = 4
HEADER_SIZE = SIGNATURE_SIZE + PAYLOAD_SIZE_SIZE + VERSION_SIZE + TEMPO_SIZE  # 50
TRACK_FIXED_SIZE = 4 + 1 + STEP_COUNT  # 21, excluding the name bytes

TEXT_ENCODING = "utf-8"
TEXT_ERRORS = "surrogateescape"

_PAYLOAD_SIZE = struct.Struct(">q")
_TEMPO = struct.Struct("<f")
_TRACK_ID = struct.Struct("<i")
_NAME_LENGTH = struct.Struct("<b")
_STEPS = struct.Struct(f"<{STEP_COUNT}b")

Source = Union[str, bytes, "os.PathLike[str]", BinaryIO]


class SpliceError(Exception):
    """Base class for errors raised while decoding a SPLICE file."""


class FormatError(SpliceError, ValueError):
    """Raised when the bytes read do not follow the SPLICE layout."""

    def __init__(self, message: str, found: bytes = b"") -> None:
        super().__init__(message)
        self.found = found


class ShortReadError(SpliceError, OSError):
    """Raised when the stream ends before a field has been read in full."""

    def __init__(self, field: str, expected: int, received: int) -> None:
        super().__init__(
            f"unexpected end of stream reading {field}: "
            f"wanted {expected} bytes, got {received}"
        )
        self.field = field
        self.expected = expected
        self.received = received


def _read_exact(stream: BinaryIO, size: int, field: str) -> bytes:
    """Read exactly *size* bytes or raise :class:`ShortReadError`.

    ``read`` may legitimately return fewer bytes than asked for (pipes,
    sockets), so keep reading until the stream reports EOF.
    """
    chunks: List[bytes] = []
    received = 0
    while received < size:
        chunk = stream.read(size - received)
        if not chunk:
            break
        chunks.append(chunk)
        received += len(chunk)
    if received < size:
        raise ShortReadError(field, size, received)
    return b"".join(chunks)


def _decode_text(raw: bytes) -> str:
    return raw.decode(TEXT_ENCODING, TEXT_ERRORS)


def read_signature(stream: BinaryIO) -> bytes:
    """Consume the 6-byte signature and check it against ``SPLICE``."""

    found = _read_exact(stream, SIGNATURE_SIZE, "signature")
    if found != SIGNATURE:
        raise FormatError(
            f"invalid file signature: expected {SIGNATURE!r}, got {found!r}",
            found=found,
        )
    return found


def read_payload_size(stream: BinaryIO) -> int:
    """Return the declared byte count of version + tempo + track records."""

    return _PAYLOAD_SIZE.unpack(_read_exact(stream, PAYLOAD_SIZE_SIZE, "payload size"))[0]


def read_version(stream: BinaryIO) -> str:
    """Read the 32-byte version block, dropping trailing zero padding only."""

    raw = _read_exact(stream, VERSION_SIZE, "version")
    return _decode_text(raw.rstrip(b"\x00"))


def read_tempo(stream: BinaryIO) -> float:
    return _TEMPO.unpack(_read_exact(stream, TEMPO_SIZE, "tempo"))[0]


def read_track(stream: BinaryIO, remaining: int) -> Tuple[Track, int]:
    """Parse one track record.

    Returns the track together with *remaining* reduced by the number of
    bytes the record occupied.
    """
    track_id = _TRACK_ID.unpack(_read_exact(stream, _TRACK_ID.size, "track id"))[0]
    remaining -= _TRACK_ID.size

    name_length = _NAME_LENGTH.unpack(
        _read_exact(stream, _NAME_LENGTH.size, f"name length of track {track_id}")
    )[0]
    remaining -= _NAME_LENGTH.size
    if name_length < 0:
        raise FormatError(
            f"track {track_id} declares a negative name length ({name_length})",
            found=struct.pack("<b", name_length),
        )

    name = _decode_text(_read_exact(stream, name_length, f"name of track {track_id}"))
    remaining -= name_length

    raw_steps = _STEPS.unpack(_read_exact(stream, _STEPS.size, f"steps of track {track_id}"))
    remaining -= _STEPS.size

    track = Track(id=track_id, name=name, steps=tuple(value > 0 for value in raw_steps))
    return track, remaining


def read_tracks(stream: BinaryIO, remaining: int) -> Tuple[Track, ...]:
    """Read track records until *remaining* drops to zero or below."""

    tracks: List[Track] = []
    while remaining > 0:
        track, remaining = read_track(stream, remaining)
        LOGGER.debug(
            "track %d %r: %d active steps, %d payload bytes left",
            track.id,
            track.name,
            len(track.active_steps()),
            remaining,
        )
        tracks.append(track)
    if remaining < 0:
        LOGGER.debug("last track overran the declared payload by %d bytes", -remaining)
    return tuple(tracks)


def decode_stream(stream: BinaryIO) -> Pattern:
    """Decode a pattern from an open binary stream positioned at the signature.

    The stream is left open; the caller owns it.
    """
    read_signature(stream)
    payload_size = read_payload_size(stream)
    LOGGER.debug("declared payload size: %d bytes", payload_size)
    version = read_version(stream)
    tempo = read_tempo(stream)
    tracks = read_tracks(stream, payload_size - VERSION_SIZE - TEMPO_SIZE)
    return Pattern(version=version, tempo=tempo, tracks=tracks)


def decode_file(path: Union[str, bytes, "os.PathLike[str]"]) -> Pattern:
    """Open *path*, decode it and close it again on every exit path."""

    with open(path, "rb") as handle:
        return decode_stream(handle)


def decode_bytes(data: bytes) -> Pattern:
    return decode_stream(io.BytesIO(data))


def decode(source: Source) -> Pattern:
    """Decode a pattern from a filesystem path or a readable binary stream."""

    if isinstance(source, (str, bytes, os.PathLike)):
        return decode_file(source)
    return decode_stream(source)
