"""Training round state machine with reveal-rate difficulty control."""

import random

from .config import (
    MIN_DIFFICULTY, MAX_DIFFICULTY,
    BATCH_SIZE, REVEAL_HIGH_THRESHOLD, REVEAL_LOW_THRESHOLD,
    DIFFICULTY_STEP_DOWN, DIFFICULTY_STEP_UP
)
from .interfaces import Grader
from .models import WordEntry, Settings, RoundResult, Learner
from .sampler import sample_words
from .utils import clamp


class AlwaysCorrectGrader(Grader):
    """Counts every word the learner moves past as known."""

    def grade(self, entry: WordEntry, answer: str | None = None) -> bool:
        return True


def adjusted_difficulty(difficulty: float, reveal_count: int) -> float:
    """Difficulty after a batch: back off fast when most definitions were revealed,
    ramp up slowly when few were."""
    if reveal_count >= REVEAL_HIGH_THRESHOLD:
        return max(MIN_DIFFICULTY, difficulty - DIFFICULTY_STEP_DOWN)
    if reveal_count <= REVEAL_LOW_THRESHOLD:
        return min(MAX_DIFFICULTY, difficulty + DIFFICULTY_STEP_UP)
    return difficulty


class TrainingSession:
    """A single flashcard round.

    The learner moves a cursor through `word_list`, revealing definitions as
    needed. Every BATCH_SIZE words the reveal count decides whether the rest
    of the round is resampled easier or harder. Nothing at or before the
    cursor is ever replaced.
    """

    def __init__(self, lexicon: list[WordEntry], word_list: list[WordEntry],
                 difficulty: float, round_length: int, grader: Grader = None,
                 rng=random, calibrating: bool = False):
        self.lexicon = lexicon
        self.word_list = list(word_list)
        self.difficulty = clamp(difficulty, MIN_DIFFICULTY, MAX_DIFFICULTY)
        self.round_length = round_length
        self.grader = grader or AlwaysCorrectGrader()
        self.rng = rng
        self.calibrating = calibrating
        self.cursor = 0
        self.history = {}  # {index: {word, definition, correct}}
        self.reveal_count = 0
        self.revealed = False
        self.revealed_indices = set()
        self.adjusted_through = 0  # highest batch boundary already adjusted
        self.finished = False
        self.result = None
        if not self.word_list:
            self.complete()

    @classmethod
    def start(cls, lexicon: list[WordEntry], settings: Settings, correct_counts: dict = None,
              seed_words: list[WordEntry] = (), grader: Grader = None, rng=random,
              calibrating: bool = False) -> 'TrainingSession':
        """Build a round from optional calibration seed words topped up from the sampler.

        Words already answered correctly `auto_remove_count` times are dropped.
        """
        seed = list(seed_words)
        sampled = sample_words(lexicon, settings.difficulty, settings.round_length - len(seed), rng)
        word_list = seed + sampled
        correct_counts = correct_counts or {}
        if settings.auto_remove_count > 0:
            word_list = [
                w for w in word_list
                if correct_counts.get(w.word, 0) < settings.auto_remove_count
            ]
        return cls(lexicon, word_list, settings.difficulty, settings.round_length,
                   grader=grader, rng=rng, calibrating=calibrating)

    @property
    def current_word(self) -> WordEntry | None:
        if self.finished or self.cursor >= len(self.word_list):
            return None
        return self.word_list[self.cursor]

    @property
    def is_last_word(self) -> bool:
        return self.cursor >= len(self.word_list) - 1

    def reveal_definition(self) -> None:
        """Show the current definition. Only the first reveal per word is counted."""
        if self.current_word is None:
            return
        self.revealed = True
        if self.cursor not in self.revealed_indices:
            self.revealed_indices.add(self.cursor)
            self.reveal_count += 1

    def advance(self, answer: str | None = None) -> bool:
        """Record the current word and move to the next one.

        Returns False without touching state at the last word; the caller
        should call complete() instead.
        """
        if self.finished or self.is_last_word:
            return False

        entry = self.word_list[self.cursor]
        self.history[self.cursor] = {
            'word': entry.word,
            'definition': entry.definition,
            'correct': bool(self.grader.grade(entry, answer))
        }

        boundary = self.cursor + 1
        if boundary % BATCH_SIZE == 0 and boundary > self.adjusted_through and not self.calibrating:
            self.adjusted_through = boundary
            self.auto_adjust()

        self.cursor += 1
        self.revealed = False
        if self.cursor == len(self.word_list):
            self.complete()
        return True

    def retreat(self) -> bool:
        """Step back one word. History is left as it is."""
        if self.finished or self.cursor <= 0:
            return False
        self.cursor -= 1
        self.revealed = False
        return True

    def step(self, answer: str | None = None) -> str:
        """Single-key flashcard action: reveal, then advance, then finish the round."""
        if self.finished:
            return 'complete'
        if not self.revealed:
            self.reveal_definition()
            return 'revealed'
        if self.advance(answer):
            return 'advanced'
        self.complete()
        return 'complete'

    def auto_adjust(self) -> bool:
        """Apply the batch reveal-rate policy. Returns True if difficulty changed."""
        new_difficulty = adjusted_difficulty(self.difficulty, self.reveal_count)
        self.reveal_count = 0
        if new_difficulty != self.difficulty:
            self.set_difficulty(new_difficulty)
            return True
        return False

    def set_difficulty(self, new_difficulty: float) -> None:
        """Change difficulty mid-round, resampling only the words after the cursor."""
        self.difficulty = clamp(new_difficulty, MIN_DIFFICULTY, MAX_DIFFICULTY)
        if self.finished:
            return
        seen = self.cursor + 1
        remaining = self.round_length - seen
        if remaining > 0:
            self.word_list = self.word_list[:seen] + sample_words(
                self.lexicon, self.difficulty, remaining, self.rng
            )
            self.revealed_indices = {i for i in self.revealed_indices if i < seen}

    def toggle_star(self, learner: Learner) -> bool | None:
        """Star or unstar the current word. Returns the new starred state."""
        entry = self.current_word
        if entry is None:
            return None
        return learner.toggle_star(entry)

    def complete(self) -> RoundResult:
        """Finish the round. Words never advanced past count as incorrect."""
        if self.result is not None:
            return self.result
        items = []
        for index, entry in enumerate(self.word_list):
            record = self.history.get(index)
            if record is None:
                record = {'word': entry.word, 'definition': entry.definition, 'correct': False}
            items.append(dict(record))
        self.finished = True
        self.result = RoundResult(items, self.difficulty)
        return self.result

    def to_dict(self) -> dict:
        entry = self.current_word
        return {
            'cursor': self.cursor,
            'total': len(self.word_list),
            'word': entry.word if entry else None,
            'definition': entry.definition if entry and self.revealed else None,
            'revealed': self.revealed,
            'difficulty': self.difficulty,
            'reveal_count': self.reveal_count,
            'finished': self.finished
        }
