import random
import unittest

import numpy as np

from fret_recall.core.config import TunerConfig
from fret_recall.detection.pitch_tracker import PitchTracker
from fret_recall.note_game_core import NoteGame
from fret_recall.note_matcher import MatchState
from fret_recall.question_generator import QuestionGenerator

FRAME = 16 / 1000  # seconds
SAMPLE_RATE = 44100
LOUD = np.full(512, 0.3, dtype=np.float32)
SILENT = np.zeros(512, dtype=np.float32)


class MockEstimator:
    """Estimator whose output is set by the test."""

    def __init__(self, frequency=None):
        self.frequency = frequency

    def estimate(self, samples, sample_rate):
        return self.frequency


class TestNoteGame(unittest.TestCase):
    def setUp(self):
        self.estimator = MockEstimator()
        self.config = TunerConfig(required_hold=0.1)
        self.generator = QuestionGenerator(
            available_notes=["E"], available_string=5, rng=random.Random(0)
        )
        self.game = NoteGame(
            PitchTracker(self.estimator, self.config),
            generator=self.generator,
        )

    def test_matcher_follows_tracker_config(self):
        game = NoteGame(PitchTracker(self.estimator, TunerConfig(required_hold=0.3)))
        self.assertIs(game.config, game.tracker.config)
        self.assertEqual(game.matcher.required_hold, 0.3)

    def test_low_e_scenario(self):
        question = self.game.start(0.0)
        self.assertEqual(
            (question.target_string_index, question.target_note_name), (5, "E")
        )

        self.estimator.frequency = 82.41
        results = [
            self.game.process_frame(LOUD, SAMPLE_RATE, i * FRAME) for i in range(10)
        ]

        confirmed = [r.is_correct for r in results]
        self.assertEqual(confirmed.index(True), 7)
        self.assertEqual(sum(r.newly_confirmed for r in results), 1)
        self.assertTrue(results[7].newly_confirmed)
        self.assertEqual(results[-1].detected_fret, 0)
        self.assertEqual(str(results[-1].note), "E2")

        self.assertEqual(self.game.stats["correct_notes"], 1)
        self.assertEqual(self.game.stats["notes_played"], {"E": 1})
        self.assertAlmostEqual(self.game.stats["times"][0], 7 * FRAME)

    def test_wrong_note_is_not_confirmed(self):
        self.game.start(0.0)
        self.estimator.frequency = 110.0  # A2
        results = [
            self.game.process_frame(LOUD, SAMPLE_RATE, i * FRAME) for i in range(20)
        ]
        self.assertFalse(any(r.is_correct for r in results))
        self.assertEqual(results[-1].detected_fret, 5)
        self.assertEqual(self.game.stats["correct_notes"], 0)

    def test_next_question_resets_matcher(self):
        self.game.start(0.0)
        self.estimator.frequency = 82.41
        for i in range(10):
            self.game.process_frame(LOUD, SAMPLE_RATE, i * FRAME)
        self.assertTrue(self.game.matcher.is_correct)

        self.game.next_question(1.0)
        self.assertIs(self.game.matcher.state, MatchState.PENDING)
        self.assertEqual(self.game.stats["total_notes"], 2)
        self.assertFalse(self.game.process_frame(LOUD, SAMPLE_RATE, 1.0).is_correct)

    def test_not_running(self):
        self.estimator.frequency = 82.41
        result = self.game.process_frame(LOUD, SAMPLE_RATE, 0.0)
        self.assertTrue(result.note.is_empty)
        self.assertFalse(result.is_correct)
        self.assertEqual(result.detected_fret, -1)

    def test_silence(self):
        self.game.start(0.0)
        self.estimator.frequency = 82.41
        result = self.game.process_frame(SILENT, SAMPLE_RATE, 0.0)
        self.assertTrue(result.note.is_empty)
        self.assertEqual(result.detected_fret, -1)

    def test_queued_frames(self):
        self.game.start(0.0)
        self.estimator.frequency = 82.41
        for i in range(10):
            self.game.frame_received_callback(LOUD, i * FRAME)
        results = self.game.process_events(SAMPLE_RATE)
        self.assertEqual(len(results), 10)
        self.assertTrue(results[-1].is_correct)
        self.assertEqual(self.game.process_events(SAMPLE_RATE), [])

    def test_no_queueing_when_stopped(self):
        self.game.frame_received_callback(LOUD, 0.0)
        self.assertTrue(self.game.event_queue.empty())

    def test_stop_is_idempotent(self):
        self.game.start(0.0)
        self.game.frame_received_callback(LOUD, 0.0)
        self.game.stop()
        self.game.stop()
        self.assertFalse(self.game.running)
        self.assertTrue(self.game.event_queue.empty())
        self.assertTrue(self.game.tracker.current_note.is_empty)

    def test_summary(self):
        self.game.start(0.0)
        self.estimator.frequency = 82.41
        for i in range(10):
            self.game.process_frame(LOUD, SAMPLE_RATE, i * FRAME)
        self.game.next_question(1.0)

        summary = self.game.summary()
        self.assertEqual(summary["total_notes"], 2)
        self.assertEqual(summary["correct_notes"], 1)
        self.assertAlmostEqual(summary["fastest_time"], 7 * FRAME)
        self.assertEqual(summary["notes_played"], {"E": 1})

    def test_empty_summary(self):
        summary = self.game.summary()
        self.assertIsNone(summary["average_time"])
        self.assertEqual(summary["correct_notes"], 0)


if __name__ == "__main__":
    unittest.main()
