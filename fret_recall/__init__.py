"""Fret Recall: guitar ear training with real-time pitch tracking."""

from .core.config import TunerConfig
from .detection.pitch_tracker import PitchTracker
from .note_game_core import FrameResult, NoteGame
from .note_matcher import AnswerMatcher, MatchState
from .note_types import EMPTY_NOTE, GuitarString, NoteInfo
from .question_generator import Question, QuestionGenerator

__version__ = "0.1.0"

__all__ = [
    "AnswerMatcher",
    "EMPTY_NOTE",
    "FrameResult",
    "GuitarString",
    "MatchState",
    "NoteGame",
    "NoteInfo",
    "PitchTracker",
    "Question",
    "QuestionGenerator",
    "TunerConfig",
]
