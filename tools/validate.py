#!/usr/bin/env python3
"""Validate a Mad Libs story catalog for common authoring mistakes."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, Sequence

REPO_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_CATALOG = REPO_ROOT / "assets" / "stories.json"

if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from madlibs.catalog_schema import validate_catalog


def load_json(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Validate a Mad Libs story catalog.")
    parser.add_argument(
        "catalog_path",
        nargs="?",
        default=str(DEFAULT_CATALOG),
        help="Path to the story catalog JSON file.",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str]) -> None:
    args = parse_args(argv[1:])
    catalog_path = Path(args.catalog_path).resolve()
    try:
        catalog = load_json(catalog_path)
    except (OSError, json.JSONDecodeError) as exc:
        print(f"Failed to read JSON from {catalog_path}: {exc}")
        sys.exit(1)

    errors = validate_catalog(catalog)
    if errors:
        print("Validation failed (path: message):")
        for err in errors:
            print(f" - {err}")
        sys.exit(1)

    print(f"Validation passed for {catalog_path}.")


if __name__ == "__main__":
    main(sys.argv)
