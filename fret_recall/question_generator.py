"""Random practice questions: a target pitch class on a target string."""

import random
from dataclasses import dataclass
from typing import ClassVar, Iterable, Optional, Tuple

from .logger import get_logger
from .note_types import GuitarString
from .note_utils import GUITAR_STRINGS, PITCH_CLASSES, normalize_note_set

logger = get_logger(__name__)


@dataclass(frozen=True)
class Question:
    """Play ``target_note_name`` on string ``target_string_index``."""

    target_string_index: int
    target_note_name: str

    @property
    def string(self) -> GuitarString:
        return GUITAR_STRINGS[self.target_string_index]

    def fret_position(self) -> int:
        """Lowest fret (0-11) on the target string that sounds the target note."""
        open_index = PITCH_CLASSES.index(self.string.open_note)
        target_index = PITCH_CLASSES.index(self.target_note_name)
        return (target_index - open_index) % 12

    def __str__(self):
        return f"{self.target_note_name} on {self.string}"


class QuestionGenerator:
    """Picks targets under an optional note-set filter and optional fixed string.

    Changing the filters never touches the current question; the new filters
    apply from the next generate() call.
    """

    # Used only when the note set is empty, which is a configuration mistake
    DEFAULT_NOTE: ClassVar[str] = "C"

    def __init__(
        self,
        available_notes: Optional[Iterable[str]] = None,
        available_string: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        """Initialize the generator.

        Args:
            available_notes: Pitch classes to draw from (flats allowed), or
                None for the full chromatic set
            available_string: Fixed string index 0-5, or None for a random string
            rng: Random source, injectable for deterministic tests
        """
        self._rng = rng or random.Random()
        self._available_notes: Tuple[str, ...] = PITCH_CLASSES
        self._available_string: Optional[int] = None
        self._current: Optional[Question] = None

        self.available_notes = available_notes
        self.available_string = available_string

    @property
    def available_notes(self) -> Tuple[str, ...]:
        return self._available_notes

    @available_notes.setter
    def available_notes(self, notes: Optional[Iterable[str]]) -> None:
        if notes is None:
            self._available_notes = PITCH_CLASSES
        else:
            self._available_notes = normalize_note_set(notes)
        if not self._available_notes:
            logger.warning(
                f"Empty note set configured, questions will fall back to {self.DEFAULT_NOTE}"
            )

    @property
    def available_string(self) -> Optional[int]:
        return self._available_string

    @available_string.setter
    def available_string(self, index: Optional[int]) -> None:
        if index is not None and not 0 <= index < len(GUITAR_STRINGS):
            raise ValueError(
                f"String index must be between 0 and {len(GUITAR_STRINGS) - 1}, got {index}"
            )
        self._available_string = index

    @property
    def current(self) -> Optional[Question]:
        """The active question, None before the first generate()."""
        return self._current

    def generate(self) -> Question:
        """Draw a new question and make it the current one."""
        old = self._current

        if self._available_string is not None:
            string_index = self._available_string
        else:
            string_index = self._rng.randrange(len(GUITAR_STRINGS))

        if self._available_notes:
            note_name = self._rng.choice(self._available_notes)
        else:
            note_name = self.DEFAULT_NOTE

        self._current = Question(
            target_string_index=string_index, target_note_name=note_name
        )
        logger.debug("New question: %s (was: %s)", self._current, old)
        return self._current
