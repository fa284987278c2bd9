"""Utility functions for lexiclimb application."""

import math


def parse_custom_words(text: str) -> list[str]:
    """Split a pasted word list into trimmed, lowercased words."""
    if not text:
        return []
    words = []
    for line in text.strip().split('\n'):
        line = line.strip().lower()
        if line:
            words.append(line)
    return words


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up."""
    return int(math.floor(value + 0.5))


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
