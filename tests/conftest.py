"""Helpers for building synthetic SPLICE files in tests."""

from pathlib import Path
import struct
import sys
from typing import Iterable, Optional, Sequence, Tuple

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

KICK_STEPS = bytes([1, 0, 0, 0] * 4)

TrackSpec = Tuple[int, bytes, bytes]  # (id, raw name, 16 raw step bytes)


def encode_track(track_id: int, name: bytes, steps: bytes, name_length: Optional[int] = None) -> bytes:
    length = len(name) if name_length is None else name_length
    return struct.pack("<i", track_id) + bytes([length & 0xFF]) + name + steps


def encode_pattern(
    version: bytes = b"0.808-alpha",
    tempo: float = 120.0,
    tracks: Iterable[TrackSpec] = (),
    *,
    payload_size: Optional[int] = None,
    signature: bytes = b"SPLICE",
    trailing: bytes = b"",
) -> bytes:
    body = version.ljust(32, b"\x00") + struct.pack("<f", tempo)
    body += b"".join(encode_track(*track) for track in tracks)
    size = len(body) if payload_size is None else payload_size
    return signature + struct.pack(">q", size) + body + trailing


class TrickleStream:
    """Binary stream that hands out at most ``chunk`` bytes per read."""

    def __init__(self, data: bytes, chunk: int = 1) -> None:
        self._data = data
        self._pos = 0
        self._chunk = chunk
        self.closed = False

    def read(self, size: int = -1) -> bytes:
        if size < 0:
            size = len(self._data) - self._pos
        size = min(size, self._chunk)
        out = self._data[self._pos : self._pos + size]
        self._pos += len(out)
        return out

    def tell(self) -> int:
        return self._pos

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def make_splice():
    return encode_pattern


@pytest.fixture
def kick_pattern_bytes() -> bytes:
    return encode_pattern(tracks=[(0, b"kick", KICK_STEPS)])


def steps_from(values: Sequence[int]) -> bytes:
    return bytes(v & 0xFF for v in values)
