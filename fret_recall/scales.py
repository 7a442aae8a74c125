"""Scale tables used as note-set filters for practice questions."""

from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

from .note_utils import PITCH_CLASSES, normalize_note_set


@dataclass(frozen=True)
class Scale:
    """A named set of pitch classes, always sharp spelled."""

    name: str
    notes: Tuple[str, ...]
    category: Optional[str] = None  # 'major', 'minor' or None

    def __contains__(self, note: str) -> bool:
        return note in self.notes


def make_scale(name: str, notes: Sequence[str], category: Optional[str] = None) -> Scale:
    """Build a Scale, normalizing flat spellings (and E#) to sharps."""
    return Scale(name=name, notes=normalize_note_set(notes), category=category)


# Major keys, circle of fifths order
MAJOR_SCALES: Tuple[Scale, ...] = (
    make_scale("C major", ["C", "D", "E", "F", "G", "A", "B"], "major"),
    make_scale("G major", ["G", "A", "B", "C", "D", "E", "F#"], "major"),
    make_scale("D major", ["D", "E", "F#", "G", "A", "B", "C#"], "major"),
    make_scale("A major", ["A", "B", "C#", "D", "E", "F#", "G#"], "major"),
    make_scale("E major", ["E", "F#", "G#", "A", "B", "C#", "D#"], "major"),
    make_scale("B major", ["B", "C#", "D#", "E", "F#", "G#", "A#"], "major"),
    make_scale("F# major", ["F#", "G#", "A#", "B", "C#", "D#", "E#"], "major"),
    make_scale("Db major", ["Db", "Eb", "F", "Gb", "Ab", "Bb", "C"], "major"),
    make_scale("Ab major", ["Ab", "Bb", "C", "Db", "Eb", "F", "G"], "major"),
    make_scale("Eb major", ["Eb", "F", "G", "Ab", "Bb", "C", "D"], "major"),
    make_scale("Bb major", ["Bb", "C", "D", "Eb", "F", "G", "A"], "major"),
    make_scale("F major", ["F", "G", "A", "Bb", "C", "D", "E"], "major"),
)

# Natural minor keys, circle of fifths order
MINOR_SCALES: Tuple[Scale, ...] = (
    make_scale("A minor", ["A", "B", "C", "D", "E", "F", "G"], "minor"),
    make_scale("E minor", ["E", "F#", "G", "A", "B", "C", "D"], "minor"),
    make_scale("B minor", ["B", "C#", "D", "E", "F#", "G", "A"], "minor"),
    make_scale("F# minor", ["F#", "G#", "A", "B", "C#", "D", "E"], "minor"),
    make_scale("C# minor", ["C#", "D#", "E", "F#", "G#", "A", "B"], "minor"),
    make_scale("G# minor", ["G#", "A#", "B", "C#", "D#", "E", "F#"], "minor"),
    make_scale("D# minor", ["D#", "E#", "F#", "G#", "A#", "B", "C#"], "minor"),
    make_scale("Bb minor", ["Bb", "C", "Db", "Eb", "F", "Gb", "Ab"], "minor"),
    make_scale("F minor", ["F", "G", "Ab", "Bb", "C", "Db", "Eb"], "minor"),
    make_scale("C minor", ["C", "D", "Eb", "F", "G", "Ab", "Bb"], "minor"),
    make_scale("G minor", ["G", "A", "Bb", "C", "D", "Eb", "F"], "minor"),
    make_scale("D minor", ["D", "E", "F", "G", "A", "Bb", "C"], "minor"),
)

ALL_NOTES = Scale(name="All notes", notes=PITCH_CLASSES)

ALL_SCALES: Tuple[Scale, ...] = (ALL_NOTES,) + MAJOR_SCALES + MINOR_SCALES

_SCALES_BY_NAME: Dict[str, Scale] = {s.name.lower(): s for s in ALL_SCALES}


def get_scale(name: str) -> Scale:
    """Look up a scale by name, case-insensitively.

    Raises:
        ValueError: If no scale has that name
    """
    scale = _SCALES_BY_NAME.get(name.strip().lower())
    if scale is None:
        raise ValueError(
            f"Unknown scale: {name!r}. Available: {', '.join(s.name for s in ALL_SCALES)}"
        )
    return scale
