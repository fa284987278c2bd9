"""Gemini-backed grader for typed definitions."""

import ast
import logging
import time
import google.generativeai as genai

from core.interfaces import Grader
from core.models import WordEntry
from core.config import GRADE_PASS_SCORE

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class GeminiGrader(Grader):
    """Asks Gemini whether a typed definition matches the reference one.

    Flashcards moved past without a typed answer count as known.
    """

    def __init__(self, api_key: str, model_name: str = 'gemini-2.0-flash',
                 pass_score: int = GRADE_PASS_SCORE):
        genai.configure(api_key=api_key)
        self.model = genai.GenerativeModel(model_name)
        self.model_name = model_name
        self.pass_score = pass_score

    def _execute_prompt(self, prompt: str) -> tuple[str, int]:
        start_time = time.time()
        response = self.model.generate_content(prompt)
        end_time = time.time()
        ms = int((end_time - start_time) * 1000)
        return (response.text, ms)

    def _sanitize_judgement(self, judgement: str) -> str:
        s = judgement[judgement.find('{'):judgement.rfind('}')+1]
        s = s.replace('false', 'False')
        s = s.replace('true', 'True')
        return s

    def judge_definition(self, word: str, definition: str, answer: str) -> tuple[dict, int]:
        """Score a learner's definition. Returns (judgement_dict, judge_time_ms)."""
        prompt = f"""
            You are grading an English vocabulary flashcard.

            Word: "{word}"
            Reference definition: "{definition}"
            Student's definition: "{answer}"

            Judge whether the student's definition captures the meaning of the word.
            Do NOT penalize for:
              - Wording that differs from the reference but means the same thing
              - Spelling, capitalization or punctuation mistakes
              - Giving a synonym instead of a full definition

            Respond with ONLY a Python dictionary:
            'score': Integer 0-100, how well the meaning was captured.
            'evaluation': One short sentence explaining the score.

            Return ONLY the dictionary, no other text, no markdown formatting.
        """
        response, ms = self._execute_prompt(prompt)
        sanitized = self._sanitize_judgement(response)

        try:
            judgement = ast.literal_eval(sanitized)
            if not isinstance(judgement, dict):
                raise ValueError(f"expected dict, got {type(judgement).__name__}")
            if not isinstance(judgement.get('score'), (int, float)):
                logger.warning(f"Invalid score type: {type(judgement.get('score'))} = {judgement.get('score')}")
                judgement['score'] = 0
            if 'evaluation' not in judgement:
                judgement['evaluation'] = 'Evaluation unavailable'
        except (SyntaxError, ValueError) as e:
            logger.error(f"Failed to parse judgement: {e}")
            logger.error(f"Raw response:\n{response}")
            judgement = {
                'score': 0,
                'evaluation': 'Error parsing AI response.'
            }
        return (judgement, ms)

    def grade(self, entry: WordEntry, answer: str | None = None) -> bool:
        if not answer or not answer.strip():
            return True
        judgement, ms = self.judge_definition(entry.word, entry.definition, answer.strip())
        logger.info(f"Graded '{entry.word}': score {judgement['score']} in {ms}ms")
        return judgement['score'] >= self.pass_score
