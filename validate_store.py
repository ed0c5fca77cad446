#!/usr/bin/env python3
"""
Check a reminder store for schema errors and dangling notifications.

The schema covers the shape of every collection. The outbox check covers
what the schema cannot: each scheduledId on a pending reminder must name a
notification that is still in the outbox, and no two reminders may share one.
"""
import argparse
import sys
from collections import Counter
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from jsonschema import Draft7Validator

from upkeep.config import Config

REMINDERS_SUFFIX = "/reminders"


def load_schema() -> dict:
    """Load the JSON schema from schema.yaml."""
    schema_path = Path(__file__).parent / "schema.yaml"
    with open(schema_path) as f:
        return yaml.safe_load(f)


def load_yaml(filepath: Path) -> dict:
    with open(filepath) as f:
        return yaml.safe_load(f) or {}


def schema_errors(data: dict, schema: dict) -> List[str]:
    """Every schema violation in a store, ordered by location."""
    errors = []
    validator = Draft7Validator(schema)
    for error in sorted(validator.iter_errors(data), key=lambda e: list(map(str, e.path))):
        errors.append(f"Schema validation error: {error.message}")
        if error.path:
            errors.append(f"  at path: {'.'.join(str(p) for p in error.path)}")
    return errors


def outbox_errors(data: dict, outbox: Dict[str, dict]) -> List[str]:
    """Scheduled ids on pending reminders that are missing or shared."""
    errors = []
    owners: Counter = Counter()
    for collection, docs in data.items():
        if not collection.endswith(REMINDERS_SUFFIX) or not isinstance(docs, dict):
            continue
        for doc_id, fields in docs.items():
            scheduled_id = (fields or {}).get("scheduledId")
            if scheduled_id is None:
                continue
            owners[scheduled_id] += 1
            if scheduled_id not in outbox:
                errors.append(
                    f"{collection}/{doc_id}: notification {scheduled_id} is not scheduled"
                )
    for scheduled_id, count in owners.items():
        if count > 1:
            errors.append(f"notification {scheduled_id} is shared by {count} reminders")
    return errors


def validate_store_file(
    filepath: Path, schema: dict, outbox_path: Optional[Path] = None
) -> List[str]:
    """Validate a single store file. Returns list of errors."""
    try:
        data = load_yaml(filepath)
    except yaml.YAMLError as e:
        return [f"YAML parse error: {e}"]
    except OSError as e:
        return [f"Error: {e}"]

    errors = schema_errors(data, schema)
    if errors or outbox_path is None:
        return errors

    try:
        outbox = load_yaml(outbox_path) if outbox_path.exists() else {}
    except (OSError, yaml.YAMLError) as e:
        return [f"Outbox error: {e}"]
    return outbox_errors(data, outbox)


def summarize(data: dict) -> List[str]:
    """One line per collection with its document count."""
    return [f"{collection}: {len(docs or {})}" for collection, docs in sorted(data.items())]


def main(argv=None):
    """Validate the given store files, or the configured store."""
    parser = argparse.ArgumentParser(description="Validate reminder store files")
    parser.add_argument(
        "files",
        nargs="*",
        type=Path,
        help=f"Store files to check (default: {Config.store_path()})",
    )
    parser.add_argument(
        "--outbox",
        type=Path,
        help="Notification outbox to cross-check scheduled ids against",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Print document counts per collection"
    )
    args = parser.parse_args(argv)

    paths = args.files or [Config.store_path()]
    schema = load_schema()

    all_valid = True
    for filepath in paths:
        if not filepath.exists():
            print(f"Error: File not found: {filepath}")
            all_valid = False
            continue
        errors = validate_store_file(filepath, schema, args.outbox)
        if errors:
            print(f"FAIL: {filepath}")
            for error in errors:
                print(f"  {error}")
            all_valid = False
            continue
        print(f"OK: {filepath}")
        if args.verbose:
            for line in summarize(load_yaml(filepath)):
                print(f"  {line}")

    return 0 if all_valid else 1


if __name__ == "__main__":
    sys.exit(main())
