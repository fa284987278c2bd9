"""Lexicon loading and combination.

A lexicon is a plain list of WordEntry sorted ascending by rank. It is built
once per session setup and treated as read-only afterwards.
"""

import json

from .config import ACADEMIC_RANK_OFFSET
from .models import WordEntry, Settings
from .utils import parse_custom_words


def parse_lexicon(items: list[dict]) -> list[WordEntry]:
    """Build entries from raw {word, definition, rank} dicts, skipping malformed ones."""
    entries = []
    for item in items or []:
        if not isinstance(item, dict) or not item.get('word'):
            continue
        try:
            entries.append(WordEntry.from_dict(item))
        except (TypeError, ValueError):
            continue
    return sorted(entries, key=lambda e: e.rank)


def load_lexicon_file(path: str) -> list[WordEntry]:
    """Load a lexicon JSON file (an array of word objects)."""
    with open(path, 'r', encoding='utf-8') as f:
        return parse_lexicon(json.load(f))


def combine_lexicons(general: list[WordEntry], academic: list[WordEntry],
                     use_general: bool = True, use_academic: bool = False,
                     academic_offset: int = ACADEMIC_RANK_OFFSET) -> list[WordEntry]:
    """Concatenate the selected sources into one rank-ordered lexicon.

    Academic ranks are shifted past the general list when both are selected.
    """
    combined = []
    if use_general:
        combined.extend(general)
    if use_academic:
        offset = academic_offset if use_general else 0
        combined.extend(
            WordEntry(e.word, e.definition, e.rank + offset) for e in academic
        )
    return sorted(combined, key=lambda e: e.rank)


def filter_custom(lexicon: list[WordEntry], custom_text: str) -> list[WordEntry]:
    """Keep only entries whose lowercased word appears in the pasted list."""
    wanted = set(parse_custom_words(custom_text))
    return [e for e in lexicon if e.word.lower() in wanted]


def build_lexicon(general: list[WordEntry], academic: list[WordEntry],
                  settings: Settings, custom_text: str = None) -> list[WordEntry]:
    """Build the session lexicon from the loaded sources and the learner's settings."""
    combined = combine_lexicons(general, academic, settings.use_general, settings.use_academic)
    if custom_text and custom_text.strip():
        combined = filter_custom(combined, custom_text)
    return combined
