#!/usr/bin/env python3
"""
District Key Lookup Tool

Shows the join key a district name normalizes to and whether a dataset has
it. When a lookup misses, lists keys that look like near misses so an alias
can be added to config/consolidation.yaml.

Usage:
    # Check names against the budgets file
    python district_lookup.py "Bristol Warren Regional School District" --map data/processed/budgets.json

    # Check every name in a file (one per line)
    python district_lookup.py --file districts.txt --map data/processed/lea_enrollment.json
"""

import argparse
import json
import sys
from difflib import get_close_matches
from pathlib import Path
from typing import Dict, List, Optional

from district_mergers.config import load_settings
from district_mergers.normalize import KeyNormalizer, candidate_keys


def load_keys(map_path: Path) -> Dict[str, object]:
    """Load a district map; only its keys are used."""
    if not map_path.exists():
        print(f"Error: Map file not found at {map_path}", file=sys.stderr)
        sys.exit(1)

    with open(map_path, 'r', encoding='utf-8') as f:
        try:
            document = json.load(f)
        except json.JSONDecodeError as e:
            print(f"Error: {map_path} is not valid JSON: {e}", file=sys.stderr)
            sys.exit(1)

    if not isinstance(document, dict):
        print(f"Error: {map_path} is not a JSON object keyed by district key", file=sys.stderr)
        sys.exit(1)

    return document


def lookup_name(name: str, mapping: Dict[str, object], normalizer: KeyNormalizer) -> Dict[str, object]:
    """
    Resolve one name against a district map.

    Returns:
        Dict with the name, its key, whether the key is present and, when it
        is not, the near-miss and fuzzy-match candidate keys
    """
    key = normalizer.district_key(name)
    found = key in mapping
    result = {'name': name, 'key': key, 'found': found, 'candidates': [], 'close_matches': []}
    if not found and key:
        result['candidates'] = candidate_keys(mapping, key)
        result['close_matches'] = get_close_matches(key, list(mapping), n=3, cutoff=0.6)
    return result


def format_output(result: Dict[str, object]):
    print(f"Name: {result['name']}")
    print(f"Key: {result['key']!r}")
    print(f"Found: {'yes' if result['found'] else 'no'}")
    if result['candidates']:
        print(f"Candidates: {', '.join(result['candidates'])}")
    if result['close_matches']:
        print(f"Close matches: {', '.join(result['close_matches'])}")
    print()


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description='Look up district join keys in a district map',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument('names', nargs='*', help='District names to look up')
    parser.add_argument('--map', dest='map_path', type=Path, required=True, help='District map JSON')
    parser.add_argument('--file', dest='input_file', type=Path, help='File with district names (one per line)')
    parser.add_argument('--config', type=Path, help='Settings YAML (default: config/consolidation.yaml)')

    args = parser.parse_args(argv)

    names = list(args.names)
    if args.input_file:
        with open(args.input_file, 'r') as f:
            names.extend(line.strip() for line in f if line.strip() and not line.startswith('#'))

    if not names:
        parser.print_help()
        return 1

    normalizer = load_settings(args.config).normalizer()
    mapping = load_keys(args.map_path)

    missing = 0
    for name in names:
        result = lookup_name(name, mapping, normalizer)
        format_output(result)
        if not result['found']:
            missing += 1

    if missing:
        print(f"{missing} of {len(names)} names not found", file=sys.stderr)
    return 0 if missing == 0 else 2


if __name__ == '__main__':
    sys.exit(main())
