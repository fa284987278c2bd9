"""Calibration quiz that converges on a starting difficulty from self-ratings."""

import random

from .config import (
    MIN_DIFFICULTY, MAX_DIFFICULTY, DEFAULT_DIFFICULTY,
    ASSESSMENT_LENGTH, ASSESSMENT_BATCH_SIZE, MIN_RATING, MAX_RATING,
    DEFAULT_ASSESSMENT_BAND
)
from .models import WordEntry, Settings
from .sampler import sample_words, remap_difficulty
from .utils import clamp, round_half_up


def level_delta(average: float) -> int:
    """Step applied to the level for the average of the last batch of ratings."""
    if average > 3.2:
        return 15
    if average > 2.5:
        return 7
    if average < 1.8:
        return -15
    if average < 2.5:
        return -7
    return 0


class Assessment:
    """A fixed-length adaptive quiz.

    Every ASSESSMENT_BATCH_SIZE ratings the level moves toward where the
    learner reports confidence, and a fresh batch sampled at the new level is
    inserted just ahead of the cursor.
    """

    def __init__(self, lexicon: list[WordEntry], settings: Settings,
                 band: tuple = DEFAULT_ASSESSMENT_BAND, rng=random,
                 length: int = ASSESSMENT_LENGTH):
        self.lexicon = lexicon
        self.settings = settings
        self.band = band
        self.rng = rng
        self.length = length
        self.level = settings.difficulty if settings.manual_difficulty else DEFAULT_DIFFICULTY
        self.cursor = 0
        self.responses = []
        self.word_list = self._sample(length)
        self.finished = False
        if not self.word_list:
            self.finished = True

    def _sample(self, count: int) -> list[WordEntry]:
        base, span = self.band
        return sample_words(self.lexicon, remap_difficulty(self.level, base, span), count, self.rng)

    @property
    def current_word(self) -> WordEntry | None:
        if self.finished or self.cursor >= len(self.word_list):
            return None
        return self.word_list[self.cursor]

    def rate(self, score: int) -> bool:
        """Record a 1-4 confidence rating. Returns True once the quiz is finished."""
        if self.finished:
            return True
        try:
            score = int(score)
        except (TypeError, ValueError):
            score = MIN_RATING
        score = int(clamp(score, MIN_RATING, MAX_RATING))

        self.responses.append(score)
        self.cursor += 1

        if self.cursor > 0 and self.cursor % ASSESSMENT_BATCH_SIZE == 0:
            self._adjust_level()

        if self.cursor >= self.length or self.cursor >= len(self.word_list):
            self.finished = True
        return self.finished

    def _adjust_level(self) -> None:
        recent = self.responses[-ASSESSMENT_BATCH_SIZE:]
        average = sum(recent) / len(recent)
        self.level = clamp(self.level + level_delta(average), MIN_DIFFICULTY, MAX_DIFFICULTY)
        fresh = self._sample(ASSESSMENT_BATCH_SIZE)
        self.word_list[self.cursor:self.cursor] = fresh

    def skip(self) -> None:
        """End the quiz now, keeping the current level and the answered prefix."""
        self.finished = True

    @property
    def final_difficulty(self) -> int:
        return round_half_up(self.level)

    @property
    def seed_words(self) -> list[WordEntry]:
        """Words already rated, carried into the training round."""
        return list(self.word_list[:self.cursor])

    def finish(self) -> list[WordEntry]:
        """Write the converged level back into settings and hand over the seed words."""
        self.finished = True
        self.settings.difficulty = self.final_difficulty
        return self.seed_words

    def to_dict(self) -> dict:
        return {
            'level': self.level,
            'cursor': self.cursor,
            'length': self.length,
            'responses': list(self.responses),
            'finished': self.finished,
            'current_word': self.current_word.word if self.current_word else None
        }
