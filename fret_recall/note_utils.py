"""Utility functions for working with musical notes and frequencies.

All conversions assume twelve-tone equal temperament with A4 = 440Hz (MIDI 69).
Note names are always produced with sharps; flat spellings are normalized
with :func:`normalize_note_name` before any comparison.
"""

import math
import re
from typing import Iterable, List, Tuple

import numpy as np

from .note_types import EMPTY_NOTE, GuitarString, NoteInfo

PITCH_CLASSES: Tuple[str, ...] = (
    "C",
    "C#",
    "D",
    "D#",
    "E",
    "F",
    "F#",
    "G",
    "G#",
    "A",
    "A#",
    "B",
)

A4_FREQUENCY = 440.0
A4_MIDI = 69

# Returned by note_to_midi for names outside PITCH_CLASSES
INVALID_MIDI = 0

MIN_FRET = 0
MAX_FRET = 24

# Applied once when a note set authored with flats is built
FLAT_TO_SHARP = {
    "Db": "C#",
    "Eb": "D#",
    "Gb": "F#",
    "Ab": "G#",
    "Bb": "A#",
    "E#": "F",
}

# Note name with an optional octave suffix, e.g. 'F#2' or 'Bb'
NOTE_PATTERN = re.compile(r"^([A-Ga-g][#b]?)(-?[0-9]*)$")


def frequency_to_midi(frequency: float) -> float:
    """Convert a frequency in Hz to a continuous MIDI note number.

    Raises:
        ValueError: If frequency is not a positive finite number
    """
    if not np.isfinite(frequency) or frequency <= 0:
        raise ValueError(f"Frequency must be positive, got {frequency}")
    return A4_MIDI + 12 * math.log2(frequency / A4_FREQUENCY)


def midi_to_frequency(midi: float) -> float:
    return A4_FREQUENCY * 2 ** ((midi - A4_MIDI) / 12)


def note_from_frequency(frequency: float) -> NoteInfo:
    """Convert a frequency to the nearest note, with its cents deviation.

    Args:
        frequency: Frequency in Hz

    Returns:
        NoteInfo for the nearest semitone, or EMPTY_NOTE for a missing or
        non-positive frequency

    Note:
        - Middle C is C4 (261.63 Hz)
        - Octave numbers change between B and C (e.g., B3 -> C4)
        - cents_off is floored, so a reading a hair flat of a note reports -1
    """
    if frequency is None or not np.isfinite(frequency) or frequency <= 0:
        return EMPTY_NOTE

    midi_float = frequency_to_midi(frequency)
    # Round half up, matching the nearest-note convention used for display
    midi = int(math.floor(midi_float + 0.5))
    cents_off = int(math.floor((midi_float - midi) * 100))

    return NoteInfo(
        note=PITCH_CLASSES[midi % 12],
        octave=midi // 12 - 1,
        cents_off=cents_off,
        frequency=float(frequency),
    )


def note_to_midi(note: str, octave: int) -> int:
    """Get the MIDI number of a sharp-spelled note name.

    Returns:
        The MIDI number, or INVALID_MIDI (0) if the name is not one of
        PITCH_CLASSES. Callers must not treat the sentinel as a real pitch.
    """
    if note not in PITCH_CLASSES:
        return INVALID_MIDI
    return (octave + 1) * 12 + PITCH_CLASSES.index(note)


def _build_guitar_strings() -> Tuple[GuitarString, ...]:
    # Standard tuning, thinnest string first: E4 B3 G3 D3 A2 E2
    tuning = [("E", 4), ("B", 3), ("G", 3), ("D", 3), ("A", 2), ("E", 2)]
    return tuple(
        GuitarString(
            index=i,
            name=f"String {i + 1} ({note})",
            open_note=note,
            open_midi=note_to_midi(note, octave),
        )
        for i, (note, octave) in enumerate(tuning)
    )


GUITAR_STRINGS: Tuple[GuitarString, ...] = _build_guitar_strings()


def fret_from_midi(midi: int, string_index: int) -> int:
    """Semitone offset of ``midi`` from the open string. Not clamped."""
    return midi - GUITAR_STRINGS[string_index].open_midi


def midi_from_string_and_fret(string_index: int, fret: int) -> int:
    return GUITAR_STRINGS[string_index].open_midi + fret


def is_playable_fret(fret: int) -> bool:
    return MIN_FRET <= fret <= MAX_FRET


def normalize_note_name(note: str) -> str:
    """Convert a flat (or E#) spelling to the sharp name used by PITCH_CLASSES.

    Examples:
        >>> normalize_note_name('Bb')
        'A#'
        >>> normalize_note_name('E#')
        'F'
    """
    return FLAT_TO_SHARP.get(note, note)


def normalize_note_set(notes: Iterable[str]) -> Tuple[str, ...]:
    """Normalize every name once, dropping duplicates but keeping order."""
    normalized: List[str] = []
    for note in notes:
        name = normalize_note_name(note)
        if name not in normalized:
            normalized.append(name)
    return tuple(normalized)


def pitch_class(note_name: str) -> str:
    """Strip any octave from a note name and normalize it to sharps.

    'F#2' -> 'F#', 'Gb' -> 'F#', 'a4' -> 'A'. Names that do not parse are
    returned unchanged so they simply fail to match anything.
    """
    if not note_name:
        return ""
    match = NOTE_PATTERN.match(note_name.strip())
    if not match:
        return note_name
    name = match.group(1)
    name = name[0].upper() + name[1:]
    return normalize_note_name(name)
