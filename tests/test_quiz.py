import unittest

from wordsheet.normalizer import WordEntry
from wordsheet.quiz import EMPTY_DATASET_MESSAGE, QuizSession, answer_matches


class FakeClock:
    def __init__(self, *ticks: int) -> None:
        self.ticks = list(ticks)

    def __call__(self) -> int:
        return self.ticks.pop(0)


ENTRIES = [
    WordEntry("ciao", "hello"),
    WordEntry("привет", "hello", "privet"),
    WordEntry("gatto", "cat"),
]


class AnswerMatchTests(unittest.TestCase):
    def test_case_and_surrounding_whitespace_are_ignored(self):
        self.assertTrue(answer_matches("  Hello ", "hello"))
        self.assertFalse(answer_matches("helo", "hello"))


class QuizSessionTests(unittest.TestCase):
    def test_empty_dataset_is_rejected(self):
        with self.assertRaisesRegex(ValueError, EMPTY_DATASET_MESSAGE):
            QuizSession([])

    def test_full_run_records_accuracy_mistakes_and_duration(self):
        session = QuizSession(ENTRIES, clock=FakeClock(1_000, 96_000))

        session.answer("Hello")
        self.assertFalse(session.advance())
        session.answer("hi")
        self.assertFalse(session.advance())
        response = session.answer("cat ")

        self.assertTrue(response.is_correct)
        self.assertTrue(session.advance())
        self.assertTrue(session.finished)
        self.assertIsNone(session.current)
        self.assertEqual(session.accuracy, 67)
        self.assertEqual([mistake.word.unknown for mistake in session.mistakes], ["привет"])
        self.assertEqual(session.duration_ms, 95_000)

    def test_second_answer_is_ignored(self):
        session = QuizSession(ENTRIES, clock=FakeClock(0, 0))
        session.answer("hello")
        self.assertIsNone(session.answer("wrong"))
        self.assertEqual(len(session.responses), 1)

    def test_cannot_advance_before_answering(self):
        session = QuizSession(ENTRIES, clock=FakeClock(0))
        self.assertFalse(session.advance())
        self.assertEqual(session.current_index, 0)

    def test_transliteration_reveal_and_guess(self):
        session = QuizSession(ENTRIES, clock=FakeClock(0, 0))
        session.answer("hello")
        session.advance()

        self.assertTrue(session.requires_transliteration())
        self.assertEqual(session.reveal_transliteration(), "privet")
        response = session.answer("hello", transliteration_guess="privyet")

        self.assertTrue(response.revealed_transliteration)
        self.assertIsNone(response.user_transliteration)

        session.advance()
        self.assertFalse(session.revealed_transliteration)
        self.assertFalse(session.requires_transliteration())
        self.assertTrue(session.requires_transliteration(["ja"]))

    def test_transliteration_guess_is_kept_when_not_revealed(self):
        session = QuizSession([WordEntry("кот", "cat", "kot")], clock=FakeClock(0, 10))
        response = session.answer("cat", transliteration_guess="kot")
        self.assertEqual(response.user_transliteration, "kot")

    def test_accuracy_rounds_halves_up(self):
        entries = [WordEntry(str(idx), "x") for idx in range(8)]
        session = QuizSession(entries, clock=FakeClock(0, 0))
        for idx in range(8):
            session.answer("x" if idx < 5 else "y")
            session.advance()
        self.assertEqual(session.accuracy, 63)

    def test_accuracy_before_any_answer(self):
        self.assertEqual(QuizSession(ENTRIES, clock=FakeClock(0)).accuracy, 0)
        self.assertEqual(QuizSession(ENTRIES, clock=FakeClock(0)).duration_ms, 0)


if __name__ == "__main__":
    unittest.main()
