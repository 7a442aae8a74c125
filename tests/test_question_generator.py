import random
import unittest
from collections import Counter

from fret_recall.note_utils import PITCH_CLASSES
from fret_recall.question_generator import Question, QuestionGenerator


class TestQuestion(unittest.TestCase):
    def test_string(self):
        self.assertEqual(Question(5, "E").string.open_midi, 40)
        self.assertEqual(Question(0, "E").string.open_midi, 64)

    def test_fret_position(self):
        self.assertEqual(Question(5, "E").fret_position(), 0)
        self.assertEqual(Question(5, "A").fret_position(), 5)
        self.assertEqual(Question(5, "D#").fret_position(), 11)
        self.assertEqual(Question(1, "C").fret_position(), 1)

    def test_str(self):
        self.assertEqual(str(Question(5, "G")), "G on String 6 (E)")


class TestQuestionGenerator(unittest.TestCase):
    def test_defaults_cover_everything(self):
        generator = QuestionGenerator(rng=random.Random(1))
        questions = [generator.generate() for _ in range(600)]
        self.assertEqual({q.target_string_index for q in questions}, set(range(6)))
        self.assertEqual({q.target_note_name for q in questions}, set(PITCH_CLASSES))

    def test_current(self):
        generator = QuestionGenerator(rng=random.Random(2))
        self.assertIsNone(generator.current)
        question = generator.generate()
        self.assertEqual(generator.current, question)

    def test_fixed_string(self):
        generator = QuestionGenerator(available_string=3, rng=random.Random(3))
        self.assertTrue(all(generator.generate().target_string_index == 3 for _ in range(50)))

    def test_note_filter(self):
        generator = QuestionGenerator(
            available_notes=["C", "D", "E"], rng=random.Random(4)
        )
        counts = Counter(generator.generate().target_note_name for _ in range(300))
        self.assertEqual(set(counts), {"C", "D", "E"})

    def test_flats_are_normalized(self):
        generator = QuestionGenerator(available_notes=["Bb", "Eb", "E#"])
        self.assertEqual(generator.available_notes, ("A#", "D#", "F"))

    def test_empty_note_set_falls_back(self):
        with self.assertLogs("fret_recall.question_generator", level="WARNING"):
            generator = QuestionGenerator(available_notes=[], rng=random.Random(5))
        question = generator.generate()
        self.assertEqual(question.target_note_name, QuestionGenerator.DEFAULT_NOTE)

    def test_invalid_string(self):
        with self.assertRaises(ValueError):
            QuestionGenerator(available_string=6)
        generator = QuestionGenerator()
        with self.assertRaises(ValueError):
            generator.available_string = -1

    def test_filters_apply_on_next_generate(self):
        generator = QuestionGenerator(available_notes=["G"], available_string=2)
        question = generator.generate()

        generator.available_notes = ["A"]
        generator.available_string = 4
        self.assertEqual(generator.current, question)

        self.assertEqual(generator.generate(), Question(4, "A"))

    def test_clear_string_filter(self):
        generator = QuestionGenerator(available_string=1, rng=random.Random(6))
        generator.available_string = None
        strings = {generator.generate().target_string_index for _ in range(200)}
        self.assertEqual(strings, set(range(6)))


if __name__ == "__main__":
    unittest.main()
