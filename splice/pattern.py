"""In-memory representation of a decoded SPLICE drum pattern."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Tuple

STEP_COUNT = 16


@dataclass(frozen=True)
class Track:
    """One instrument lane: an ID, a name, and 16 on/off steps."""

    id: int  # signed 32-bit, duplicates and negatives allowed
    name: str
    steps: Tuple[bool, ...]

    def __post_init__(self) -> None:
        if len(self.steps) != STEP_COUNT:
            raise ValueError(
                f"track {self.id} has {len(self.steps)} steps, expected {STEP_COUNT}"
            )
        # Accept lists from callers but always store a tuple.
        object.__setattr__(self, "steps", tuple(bool(s) for s in self.steps))

    def active_steps(self) -> List[int]:
        """Return the 0-based indices of the active steps."""

        return [idx for idx, on in enumerate(self.steps) if on]

    @property
    def is_silent(self) -> bool:
        return not any(self.steps)


@dataclass(frozen=True)
class Pattern:
    """Decoded pattern: hardware version tag, tempo and tracks in file order."""

    version: str
    tempo: float
    tracks: Tuple[Track, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "tracks", tuple(self.tracks))

    def __iter__(self) -> Iterator[Track]:
        return iter(self.tracks)

    def __len__(self) -> int:
        return len(self.tracks)
