"""Type definitions for the Fret Recall project."""

from dataclasses import dataclass

NO_NOTE = "-"


@dataclass(frozen=True)
class NoteInfo:
    """A single frame's pitch reading.

    ``note == "-"`` together with ``frequency == 0`` means no pitch was detected.
    """

    note: str  # Pitch class, sharp spelled (e.g. 'C#'), or '-'
    octave: int  # Scientific pitch notation octave, A4 = 440Hz
    cents_off: int  # Deviation from the nearest semitone
    frequency: float  # Frequency in Hz

    @property
    def is_empty(self) -> bool:
        return self.note == NO_NOTE

    @property
    def midi(self) -> int:
        """MIDI number of the note, 0 when empty."""
        if self.is_empty:
            return 0
        # note_utils builds NoteInfo values, import here to avoid the cycle
        from .note_utils import note_to_midi

        return note_to_midi(self.note, self.octave)

    def __str__(self):
        if self.is_empty:
            return NO_NOTE
        return f"{self.note}{self.octave}"


EMPTY_NOTE = NoteInfo(note=NO_NOTE, octave=0, cents_off=0, frequency=0.0)


@dataclass(frozen=True)
class GuitarString:
    """One string of a guitar in a fixed tuning."""

    index: int  # 0 is the thinnest (high E) string
    name: str
    open_note: str
    open_midi: int

    def __str__(self):
        return self.name
