import dataclasses

import pytest

from splice.pattern import STEP_COUNT, Pattern, Track


def _track(steps=(False,) * STEP_COUNT, **kwargs) -> Track:
    fields = {"id": 1, "name": "kick"}
    fields.update(kwargs)
    return Track(steps=steps, **fields)


@pytest.mark.parametrize("count", [0, 15, 17, 32])
def test_track_requires_sixteen_steps(count: int) -> None:
    with pytest.raises(ValueError, match="expected 16"):
        _track(steps=(True,) * count)


def test_track_stores_steps_as_bool_tuple() -> None:
    track = _track(steps=[1, 0] * 8)
    assert track.steps == (True, False) * 8
    assert isinstance(track.steps, tuple)


def test_active_steps_and_silence() -> None:
    track = _track(steps=[i in (0, 6, 15) for i in range(16)])
    assert track.active_steps() == [0, 6, 15]
    assert not track.is_silent
    assert _track().is_silent


def test_pattern_is_immutable() -> None:
    pattern = Pattern(version="0.909", tempo=240.0, tracks=[_track()])
    assert isinstance(pattern.tracks, tuple)
    with pytest.raises(dataclasses.FrozenInstanceError):
        pattern.tempo = 100.0  # type: ignore[misc]
    with pytest.raises(dataclasses.FrozenInstanceError):
        pattern.tracks[0].name = "snare"  # type: ignore[misc]


def test_pattern_iterates_tracks_in_order() -> None:
    tracks = [_track(id=i, name=f"t{i}") for i in (3, 1, 2)]
    pattern = Pattern(version="", tempo=1.0, tracks=tracks)
    assert len(pattern) == 3
    assert [t.id for t in pattern] == [3, 1, 2]


def test_empty_pattern_defaults() -> None:
    pattern = Pattern(version="v", tempo=0.0)
    assert pattern.tracks == ()
    assert len(pattern) == 0
