"""Render decoded patterns as Standard MIDI Files."""

from __future__ import annotations

import logging
import math
from typing import Mapping, Optional

import mido

from .pattern import STEP_COUNT, Pattern, Track

LOGGER = logging.getLogger(__name__)

DRUM_CHANNEL = 9  # GM percussion, channel 10 1-based
DEFAULT_NOTE = 75  # Claves
STEPS_PER_BEAT = 4  # one step is a 16th note

# GM percussion key map, keyed by normalised track name.
GM_DRUM_NOTES = {
    "kick": 36,
    "bass drum": 36,
    "rim": 37,
    "rimshot": 37,
    "snare": 38,
    "clap": 39,
    "hh-close": 42,
    "hh-closed": 42,
    "closed hat": 42,
    "hh-pedal": 44,
    "hh-open": 46,
    "open hat": 46,
    "low-tom": 45,
    "mid-tom": 47,
    "hi-tom": 50,
    "high-tom": 50,
    "crash": 49,
    "ride": 51,
    "tambourine": 54,
    "cowbell": 56,
    "maracas": 70,
    "clave": 75,
    "claves": 75,
}


def _normalise_name(name: str) -> str:
    return " ".join(name.strip().lower().replace("_", " ").split())


def _meta_text(text: str) -> str:
    """Fold *text* into latin-1, the charset mido writes meta text in."""

    return text.encode("latin-1", "replace").decode("latin-1")


def note_for_track(
    track: Track,
    note_map: Optional[Mapping[str, int]] = None,
    default_note: int = DEFAULT_NOTE,
) -> int:
    """Return the MIDI key for *track*, looked up by its name."""

    mapping = GM_DRUM_NOTES if note_map is None else note_map
    return mapping.get(_normalise_name(track.name), default_note)


def pattern_to_midi(
    pattern: Pattern,
    *,
    ticks_per_beat: int = 480,
    bars: int = 1,
    velocity: int = 100,
    channel: int = DRUM_CHANNEL,
    note_map: Optional[Mapping[str, int]] = None,
) -> mido.MidiFile:
    """Build a type-1 MIDI file playing *pattern* for *bars* bars.

    Track 0 carries the tempo; each pattern track becomes one MIDI track
    named after it, in file order.  Each active step is a note one 16th
    long.
    """
    if not math.isfinite(pattern.tempo) or pattern.tempo <= 0:
        raise ValueError(f"cannot export tempo {pattern.tempo!r}; must be finite and > 0")
    if bars < 1:
        raise ValueError(f"bars must be >= 1, got {bars}")
    if ticks_per_beat % STEPS_PER_BEAT:
        raise ValueError(f"ticks_per_beat must be a multiple of {STEPS_PER_BEAT}")

    step_ticks = ticks_per_beat // STEPS_PER_BEAT
    mid = mido.MidiFile(type=1, ticks_per_beat=ticks_per_beat)

    tempo_track = mido.MidiTrack()
    tempo_track.append(
        mido.MetaMessage("track_name", name=_meta_text(pattern.version), time=0)
    )
    tempo_track.append(
        mido.MetaMessage("set_tempo", tempo=mido.bpm2tempo(pattern.tempo), time=0)
    )
    tempo_track.append(
        mido.MetaMessage("time_signature", numerator=4, denominator=4, time=0)
    )
    tempo_track.append(mido.MetaMessage("end_of_track", time=0))
    mid.tracks.append(tempo_track)

    for track in pattern.tracks:
        key = note_for_track(track, note_map)
        midi_track = mido.MidiTrack()
        midi_track.append(
            mido.MetaMessage("track_name", name=_meta_text(track.name), time=0)
        )

        last_tick = 0
        for bar in range(bars):
            for step in track.active_steps():
                onset = (bar * STEP_COUNT + step) * step_ticks
                midi_track.append(
                    mido.Message(
                        "note_on",
                        channel=channel,
                        note=key,
                        velocity=velocity,
                        time=onset - last_tick,
                    )
                )
                midi_track.append(
                    mido.Message(
                        "note_off", channel=channel, note=key, velocity=0, time=step_ticks
                    )
                )
                last_tick = onset + step_ticks

        end_tick = bars * STEP_COUNT * step_ticks
        midi_track.append(mido.MetaMessage("end_of_track", time=end_tick - last_tick))
        mid.tracks.append(midi_track)
        LOGGER.debug("track %d %r -> note %d", track.id, track.name, key)

    return mid
