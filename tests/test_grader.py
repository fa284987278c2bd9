"""Tests for GeminiGrader response parsing and grading decisions."""

import unittest
from unittest.mock import patch

from core.models import WordEntry
from server.gemini_grader import GeminiGrader


def make_grader(pass_score: int = 70) -> GeminiGrader:
    # Skip __init__ so no API client is configured
    grader = GeminiGrader.__new__(GeminiGrader)
    grader.pass_score = pass_score
    grader.model_name = 'test'
    return grader


class TestGeminiGraderSanitize(unittest.TestCase):
    """Tests for response sanitization and error handling."""

    def test_sanitize_judgement_strips_surrounding_text(self):
        grader = make_grader()
        raw = "Here you go:\n{'score': 85, 'evaluation': 'Good'}\nThanks"
        self.assertEqual(grader._sanitize_judgement(raw), "{'score': 85, 'evaluation': 'Good'}")

    def test_sanitize_judgement_with_booleans(self):
        grader = make_grader()
        result = grader._sanitize_judgement("{'a': true, 'b': false}")
        self.assertIn("True", result)
        self.assertIn("False", result)

    def test_judge_definition_valid_response(self):
        grader = make_grader()
        with patch.object(grader, '_execute_prompt', return_value=("{'score': 90, 'evaluation': 'Right'}", 40)):
            judgement, ms = grader.judge_definition('lucid', 'clear', 'easy to understand')
        self.assertEqual(judgement['score'], 90)
        self.assertEqual(ms, 40)

    def test_judge_definition_malformed_response(self):
        grader = make_grader()
        with patch.object(grader, '_execute_prompt', return_value=("no dictionary here", 40)):
            judgement, ms = grader.judge_definition('lucid', 'clear', 'something')
        self.assertEqual(judgement['score'], 0)
        self.assertIn('Error', judgement['evaluation'])

    def test_judge_definition_invalid_score(self):
        grader = make_grader()
        with patch.object(grader, '_execute_prompt', return_value=("{'score': 'high'}", 40)):
            judgement, ms = grader.judge_definition('lucid', 'clear', 'something')
        self.assertEqual(judgement['score'], 0)
        self.assertEqual(judgement['evaluation'], 'Evaluation unavailable')


class TestGeminiGraderGrade(unittest.TestCase):
    """Tests for the pass/fail decision."""

    def setUp(self):
        self.entry = WordEntry('lucid', 'expressed clearly; easy to understand', 27)

    def test_no_answer_counts_as_known(self):
        grader = make_grader()
        with patch.object(grader, '_execute_prompt') as execute:
            self.assertTrue(grader.grade(self.entry))
            self.assertTrue(grader.grade(self.entry, '   '))
        execute.assert_not_called()

    def test_passing_score(self):
        grader = make_grader(pass_score=70)
        with patch.object(grader, '_execute_prompt', return_value=("{'score': 70, 'evaluation': 'ok'}", 10)):
            self.assertTrue(grader.grade(self.entry, 'clear'))

    def test_failing_score(self):
        grader = make_grader(pass_score=70)
        with patch.object(grader, '_execute_prompt', return_value=("{'score': 30, 'evaluation': 'no'}", 10)):
            self.assertFalse(grader.grade(self.entry, 'muddy'))


if __name__ == '__main__':
    unittest.main()
