import queue
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import numpy as np

from .detection.pitch_tracker import PitchTracker
from .logger import get_logger
from .note_matcher import AnswerMatcher
from .note_types import EMPTY_NOTE, NoteInfo
from .question_generator import Question, QuestionGenerator

# Get logger for this module
logger = get_logger(__name__)


@dataclass(frozen=True)
class FrameResult:
    """What the UI needs after one processed frame."""

    note: NoteInfo
    question: Optional[Question]
    is_correct: bool
    newly_confirmed: bool
    detected_fret: int


class NoteGame:
    """A practice session: find the target note on the target string.

    Frames may arrive on an audio thread through frame_received_callback();
    they are queued and only processed when the main loop calls
    process_events(), so the tracker and matcher are used from one thread.
    """

    def __init__(
        self,
        tracker: PitchTracker,
        generator: Optional[QuestionGenerator] = None,
        matcher: Optional[AnswerMatcher] = None,
    ) -> None:
        """Initialize the game.

        Args:
            tracker: Pitch tracker fed with every frame
            generator: Question source, or None for all notes on random strings
            matcher: Answer matcher, or None to build one from the tracker's config
        """
        self.config = tracker.config
        self.tracker = tracker
        self.generator = generator or QuestionGenerator()
        self.matcher = matcher or AnswerMatcher.from_config(self.config)

        self.running = False
        self.question_start_time = 0.0
        self.event_queue: "queue.Queue[tuple]" = queue.Queue()
        self.stats = self._empty_stats()

    @staticmethod
    def _empty_stats() -> Dict[str, Any]:
        return {
            "total_notes": 0,
            "correct_notes": 0,
            "times": [],
            "notes_played": {},
        }

    @property
    def current_question(self) -> Optional[Question]:
        return self.generator.current

    def start(self, now: float) -> Question:
        """Reset stats and present the first question."""
        self.stats = self._empty_stats()
        self.tracker.stop()
        self.running = True
        logger.info("Game started")
        return self.next_question(now)

    def next_question(self, now: float) -> Question:
        question = self.generator.generate()
        self.matcher.reset()
        self.question_start_time = now
        self.stats["total_notes"] += 1
        logger.info("New target: %s", question)
        return question

    def process_frame(
        self, samples: np.ndarray, sample_rate: int, now: float
    ) -> FrameResult:
        """Track one frame and check it against the current question."""
        question = self.current_question
        if not self.running or question is None:
            return FrameResult(EMPTY_NOTE, question, False, False, -1)

        was_correct = self.matcher.is_correct
        note = self.tracker.process_frame(samples, sample_rate, now)
        is_correct = self.matcher.check(note, question, now)
        newly_confirmed = is_correct and not was_correct

        if newly_confirmed:
            elapsed = now - self.question_start_time
            self.stats["times"].append(elapsed)
            self.stats["correct_notes"] += 1
            self.stats["notes_played"][note.note] = (
                self.stats["notes_played"].get(note.note, 0) + 1
            )
            logger.info(
                "NOTE MATCHED! '%s' matches target '%s' in %.2f seconds",
                note,
                question.target_note_name,
                elapsed,
            )

        return FrameResult(
            note=note,
            question=question,
            is_correct=is_correct,
            newly_confirmed=newly_confirmed,
            detected_fret=self.matcher.detected_fret(
                note, question.target_string_index
            ),
        )

    def frame_received_callback(self, samples: np.ndarray, timestamp: float) -> None:
        """Queue a captured frame. Safe to call from the audio thread."""
        if not self.running:
            return
        self.event_queue.put((samples, timestamp))

    def process_events(self, sample_rate: int) -> List[FrameResult]:
        """Process queued frames. Should be called from the main game loop."""
        results = []
        while True:
            try:
                samples, timestamp = self.event_queue.get_nowait()
            except queue.Empty:
                break
            results.append(self.process_frame(samples, sample_rate, timestamp))
        return results

    def stop(self) -> None:
        """Stop the game. Safe to call more than once."""
        if self.running:
            logger.info(
                "Game stopped. Final score: %d/%d",
                self.stats["correct_notes"],
                self.stats["total_notes"],
            )
        self.running = False
        self.tracker.stop()
        while not self.event_queue.empty():
            try:
                self.event_queue.get_nowait()
            except queue.Empty:
                break

    def summary(self) -> Dict[str, Any]:
        times = self.stats["times"]
        return {
            "total_notes": self.stats["total_notes"],
            "correct_notes": self.stats["correct_notes"],
            "average_time": sum(times) / len(times) if times else None,
            "fastest_time": min(times) if times else None,
            "slowest_time": max(times) if times else None,
            "notes_played": dict(self.stats["notes_played"]),
        }
