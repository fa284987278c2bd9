from .models import WordEntry, Settings, Learner, RoundResult
from .interfaces import Grader, Storage
from .lexicon import load_lexicon_file, combine_lexicons, filter_custom, build_lexicon
from .sampler import sample_words, remap_difficulty, percentile_window
from .assessment import Assessment
from .session import TrainingSession, AlwaysCorrectGrader
from .scheduling import Debouncer
from .config import (
    MIN_DIFFICULTY, MAX_DIFFICULTY, DEFAULT_DIFFICULTY,
    ASSESSMENT_LENGTH, BATCH_SIZE, ACADEMIC_RANK_OFFSET
)

__all__ = [
    'WordEntry', 'Settings', 'Learner', 'RoundResult',
    'Grader', 'Storage',
    'load_lexicon_file', 'combine_lexicons', 'filter_custom', 'build_lexicon',
    'sample_words', 'remap_difficulty', 'percentile_window',
    'Assessment', 'TrainingSession', 'AlwaysCorrectGrader', 'Debouncer',
    'MIN_DIFFICULTY', 'MAX_DIFFICULTY', 'DEFAULT_DIFFICULTY',
    'ASSESSMENT_LENGTH', 'BATCH_SIZE', 'ACADEMIC_RANK_OFFSET'
]
