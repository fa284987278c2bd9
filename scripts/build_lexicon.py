#!/usr/bin/env python3
"""Build a ranked lexicon JSON file from a frequency-ordered word list.

Input is a text file with one `word<TAB>definition` pair per line, most
common word first. Line order becomes the rank.
"""

import argparse
import json
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.lexicon import parse_lexicon


def read_word_list(path: Path, start_rank: int = 1) -> list[dict]:
    """Parse `word<TAB>definition` lines into ranked word dicts, skipping duplicates."""
    items = []
    seen = set()
    rank = start_rank
    with open(path, 'r', encoding='utf-8') as f:
        for line in f:
            line = line.rstrip('\n')
            if not line.strip() or line.startswith('#'):
                continue
            word, _, definition = line.partition('\t')
            word = word.strip().lower()
            if not word or word in seen:
                continue
            seen.add(word)
            items.append({'word': word, 'definition': definition.strip(), 'rank': rank})
            rank += 1
    return items


def main():
    parser = argparse.ArgumentParser(description='Build a lexiclimb lexicon file')
    parser.add_argument('source', help='Tab-separated word list, most common first')
    parser.add_argument('output', help='Output JSON path, e.g. data/vocab_data.json')
    parser.add_argument('--start-rank', type=int, default=1, help='Rank of the first word (default: 1)')
    args = parser.parse_args()

    items = read_word_list(Path(args.source), args.start_rank)
    entries = parse_lexicon(items)
    with open(args.output, 'w', encoding='utf-8') as f:
        json.dump([e.to_dict() for e in entries], f, indent=2, ensure_ascii=False)

    missing = sum(1 for e in entries if not e.definition)
    print(f"Wrote {len(entries)} words to {args.output}")
    if missing:
        print(f"Warning: {missing} words have no definition")
    return 0


if __name__ == '__main__':
    sys.exit(main())
