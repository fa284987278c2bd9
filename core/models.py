"""Domain models for lexiclimb application."""

from dataclasses import dataclass

from .config import (
    MIN_DIFFICULTY, MAX_DIFFICULTY, DEFAULT_DIFFICULTY,
    DEFAULT_ROUND_LENGTH, DEFAULT_AUTO_REMOVE_COUNT
)
from .utils import clamp


@dataclass(frozen=True)
class WordEntry:
    """A single ranked lexicon entry. Lower rank means more common."""

    word: str
    definition: str
    rank: int

    def to_dict(self) -> dict:
        return {
            'word': self.word,
            'definition': self.definition,
            'rank': self.rank
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'WordEntry':
        return cls(str(data['word']), str(data.get('definition', '')), int(data.get('rank', 0)))


def _to_int(value, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _to_float(value, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


class Settings:
    """Learner-facing configuration consumed by the trainer.

    Malformed values degrade to the nearest valid value instead of raising.
    """

    def __init__(self, difficulty: float = DEFAULT_DIFFICULTY,
                 auto_remove_count: int = DEFAULT_AUTO_REMOVE_COUNT,
                 round_length: int = DEFAULT_ROUND_LENGTH,
                 manual_difficulty: bool = False,
                 do_assessment: bool = False,
                 use_general: bool = True,
                 use_academic: bool = False,
                 remember_session: bool = False):
        self.difficulty = clamp(_to_float(difficulty, DEFAULT_DIFFICULTY), MIN_DIFFICULTY, MAX_DIFFICULTY)
        self.auto_remove_count = max(0, _to_int(auto_remove_count, DEFAULT_AUTO_REMOVE_COUNT))
        self.round_length = max(1, _to_int(round_length, DEFAULT_ROUND_LENGTH))
        self.manual_difficulty = bool(manual_difficulty)
        self.do_assessment = bool(do_assessment)
        self.use_general = bool(use_general)
        self.use_academic = bool(use_academic)
        self.remember_session = bool(remember_session)

    def to_dict(self) -> dict:
        return {
            'difficulty': self.difficulty,
            'auto_remove_count': self.auto_remove_count,
            'round_length': self.round_length,
            'manual_difficulty': self.manual_difficulty,
            'do_assessment': self.do_assessment,
            'use_general': self.use_general,
            'use_academic': self.use_academic,
            'remember_session': self.remember_session
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Settings':
        defaults = cls()
        merged = defaults.to_dict()
        merged.update({k: v for k, v in (data or {}).items() if k in merged})
        return cls(**merged)

    def update(self, changes: dict) -> None:
        """Apply a partial update, clamping every value."""
        data = self.to_dict()
        data.update({k: v for k, v in changes.items() if k in data and v is not None})
        self.__dict__.update(Settings.from_dict(data).__dict__)


class RoundResult:
    """Outcome of a finished training round."""

    def __init__(self, items: list[dict], difficulty: float):
        self.items = items  # [{word, definition, correct}] in round order
        self.difficulty = difficulty

    @property
    def total(self) -> int:
        return len(self.items)

    @property
    def correct(self) -> int:
        return sum(1 for item in self.items if item['correct'])

    def wrong_words(self) -> list[dict]:
        return [item for item in self.items if not item['correct']]

    def wrong_words_text(self) -> str:
        """Newline-separated incorrect words, ready to paste back as a custom list."""
        return '\n'.join(item['word'] for item in self.wrong_words())

    def summary(self) -> str:
        return f"You got {self.correct} out of {self.total} words correct."

    def to_dict(self) -> dict:
        return {
            'items': self.items,
            'difficulty': self.difficulty,
            'total': self.total,
            'correct': self.correct,
            'summary': self.summary()
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'RoundResult':
        return cls(data.get('items', []), data.get('difficulty', DEFAULT_DIFFICULTY))


class Learner:
    """Persistent learner state: settings plus the per-word collections that survive restarts."""

    def __init__(self):
        self.settings = Settings()
        self.correct_counts = {}  # {word: times answered correctly}
        self.practice = {}        # {word: definition} missed in a round
        self.starred = {}         # {word: definition} bookmarked by the learner
        self.rounds_completed = 0
        self.last_result = None

    def correct_count(self, word: str) -> int:
        return self.correct_counts.get(word, 0)

    def toggle_star(self, entry: WordEntry) -> bool:
        """Star or unstar a word. Returns True if the word is now starred."""
        if entry.word in self.starred:
            del self.starred[entry.word]
            return False
        self.starred[entry.word] = entry.definition
        return True

    def is_starred(self, word: str) -> bool:
        return word in self.starred

    def record_round(self, result: RoundResult) -> None:
        """Fold a finished round into the learner's counts and practice set."""
        for item in result.items:
            word = item['word']
            if item['correct']:
                self.correct_counts[word] = self.correct_counts.get(word, 0) + 1
            else:
                self.practice[word] = item['definition']
        self.settings.difficulty = clamp(result.difficulty, MIN_DIFFICULTY, MAX_DIFFICULTY)
        self.rounds_completed += 1
        self.last_result = result

    def remove_practice_word(self, word: str) -> bool:
        if word in self.practice:
            del self.practice[word]
            return True
        return False

    def to_dict(self) -> dict:
        return {
            'settings': self.settings.to_dict(),
            'correct_counts': self.correct_counts,
            'practice': self.practice,
            'starred': self.starred,
            'rounds_completed': self.rounds_completed,
            'last_result': self.last_result.to_dict() if self.last_result else None
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Learner':
        learner = cls()
        settings = Settings.from_dict(data.get('settings', {}))
        # Settings only come back when the learner asked to remember the session
        if settings.remember_session:
            learner.settings = settings
        learner.correct_counts = dict(data.get('correct_counts', {}))
        learner.practice = dict(data.get('practice', {}))
        learner.starred = dict(data.get('starred', {}))
        learner.rounds_completed = data.get('rounds_completed', 0)
        last = data.get('last_result')
        learner.last_result = RoundResult.from_dict(last) if last else None
        return learner
