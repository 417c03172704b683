#!/usr/bin/env python3
"""
Resync the challenge search index from a JSON export of the record store.

The export is a JSON array of challenge objects (or an object with a
"challenges" array). Indexed ids missing from the export are removed,
every exported challenge is re-indexed.

Usage:
    # From project root, with venv active:
    PYTHONPATH=src python scripts/reconcile_search_index.py challenges.json

    # Only report which indexed ids are stale:
    PYTHONPATH=src python scripts/reconcile_search_index.py challenges.json --dry-run
"""

import argparse
import json
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from dotenv import load_dotenv
load_dotenv()

from challenge_search import Challenge, get_challenge_search_index
from config.settings import get_settings
from core.logging import configure_logging_from_settings, get_logger

logger = get_logger("reconcile_search_index")


def load_challenges(path: Path) -> list:
    """Parse the export into Challenge models."""
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("challenges", [])
    return [Challenge.model_validate(item) for item in data]


def main():
    parser = argparse.ArgumentParser(description="Resync the challenge search index")
    parser.add_argument("export", type=Path, help="JSON export of all challenges")
    parser.add_argument("--dry-run", action="store_true", help="Only list stale ids")
    args = parser.parse_args()

    configure_logging_from_settings(get_settings())

    challenges = load_challenges(args.export)
    index = get_challenge_search_index()

    if args.dry_run:
        stale = index.reconciler.stale_ids(challenges)
        print(f"{len(challenges)} challenges in export, {len(stale)} stale ids in index")
        for record_id in stale:
            print(f"  {record_id}")
        return

    result = index.reconcile(challenges)
    stats = index.get_stats()
    print(f"Removed {len(result.removed_ids)} stale, upserted {result.upserted}")
    print(f"Index now holds {stats.indexed} challenges ({stats.open} open, {stats.closed} closed)")


if __name__ == "__main__":
    main()
