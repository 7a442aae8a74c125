from enum import Enum, auto
from typing import ClassVar, Optional

from .logger import get_logger
from .note_types import NoteInfo
from .note_utils import (
    INVALID_MIDI,
    fret_from_midi,
    is_playable_fret,
    pitch_class,
)

# Get logger for this module
logger = get_logger(__name__)


class MatchState(Enum):
    PENDING = auto()
    HOLDING = auto()
    CONFIRMED = auto()


class AnswerMatcher:
    """
    Debounced check of played notes against the current question.

    A note only counts once the target pitch class has been heard
    continuously for ``required_hold`` seconds. Any empty or wrong frame
    before that restarts the wait. Once confirmed the result stays True
    until reset(), so the UI does not flicker while it reacts.
    """

    DEFAULT_REQUIRED_HOLD: ClassVar[float] = 0.1  # seconds

    def __init__(self, required_hold: float = DEFAULT_REQUIRED_HOLD) -> None:
        self._required_hold = float(required_hold)
        self._state = MatchState.PENDING
        self._correct_since: Optional[float] = None

    @classmethod
    def from_config(cls, config) -> "AnswerMatcher":
        return cls(required_hold=config.required_hold)

    @staticmethod
    def matches(target: str, played: str) -> bool:
        """
        Check if the played note matches the target note, ignoring octave.

        Args:
            target: The target note (e.g., 'A', 'A#', 'Bb')
            played: The played note (e.g., 'A4', 'A#3', 'Bb2')
        Returns:
            bool: True if both name the same pitch class
        """
        target_class = pitch_class(target)
        played_class = pitch_class(played)
        if not target_class or not played_class:
            return False
        return target_class == played_class

    def reset(self) -> None:
        """Start over for a new question."""
        self._state = MatchState.PENDING
        self._correct_since = None

    def check(self, note: NoteInfo, question, now: float) -> bool:
        """Feed one frame's note and return whether the answer is confirmed.

        Args:
            note: The note tracked for this frame
            question: The active Question
            now: Frame timestamp in seconds
        """
        if self._state is MatchState.CONFIRMED:
            return True

        if note.is_empty or not self.matches(question.target_note_name, note.note):
            if self._state is MatchState.HOLDING:
                logger.debug(
                    f"Hold broken by {note} (target {question.target_note_name})"
                )
            self._state = MatchState.PENDING
            self._correct_since = None
            return False

        if self._correct_since is None:
            self._correct_since = now
            self._state = MatchState.HOLDING
            return False

        if now - self._correct_since >= self._required_hold:
            self._state = MatchState.CONFIRMED
            logger.info(
                f"Answer confirmed: {note} matches {question.target_note_name} "
                f"after {now - self._correct_since:.3f}s"
            )
            return True

        return False

    def detected_fret(self, note: NoteInfo, target_string_index: int) -> int:
        """Fret on the target string that would sound ``note``, or -1.

        Purely informational, it plays no part in matching.
        """
        midi = note.midi
        if midi == INVALID_MIDI:
            return -1
        fret = fret_from_midi(midi, target_string_index)
        if not is_playable_fret(fret):
            return -1
        return fret

    @property
    def state(self) -> MatchState:
        return self._state

    @property
    def is_correct(self) -> bool:
        return self._state is MatchState.CONFIRMED

    @property
    def correct_since(self) -> Optional[float]:
        return self._correct_since

    @property
    def required_hold(self) -> float:
        return self._required_hold
