"""Percentile-window word sampling."""

import math
import random

from .config import MIN_DIFFICULTY, MAX_DIFFICULTY
from .models import WordEntry
from .utils import clamp


def remap_difficulty(difficulty: float, base: float = 0.0, span: float = 100.0) -> float:
    """Map a 0-100 control value onto the band [base, base + span]."""
    return base + (difficulty / 100) * span


def percentile_window(length: int, difficulty_percent: float, count: int) -> tuple[int, int]:
    """Return the [start, end) slice of `count` entries centred on the percentile."""
    if length <= 0 or count <= 0:
        return (0, 0)
    pct = clamp(difficulty_percent, MIN_DIFFICULTY, MAX_DIFFICULTY)
    center = math.floor(pct / 100 * length)
    start = max(0, center - count // 2)
    end = min(length, start + count)
    return (start, end)


def shuffle_in_place(items: list, rng=random) -> list:
    """Fisher-Yates, last to first."""
    for i in range(len(items) - 1, 0, -1):
        j = rng.randint(0, i)
        items[i], items[j] = items[j], items[i]
    return items


def sample_words(lexicon: list[WordEntry], difficulty_percent: float, count: int,
                 rng=random) -> list[WordEntry]:
    """Pick a shuffled contiguous window of the lexicon around a difficulty percentile.

    Near the top of the range the window is clipped and the result can be
    shorter than `count`.
    """
    try:
        count = int(count)
    except (TypeError, ValueError):
        return []
    if count <= 0 or not lexicon:
        return []
    try:
        pct = float(difficulty_percent)
    except (TypeError, ValueError):
        pct = MIN_DIFFICULTY
    start, end = percentile_window(len(lexicon), pct, count)
    return shuffle_in_place(list(lexicon[start:end]), rng)
