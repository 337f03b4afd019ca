#!/usr/bin/env python3
"""Summarize the themes and stories in a Mad Libs catalog."""

from __future__ import annotations

import argparse
import json
import sys
from collections import Counter
from pathlib import Path
from typing import Any, Dict, List

REPO_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_CATALOG_PATH = REPO_ROOT / "assets" / "stories.json"

if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from madlibs.catalog import Catalog, DataError, load_catalog


def build_report(catalog: Catalog) -> Dict[str, Any]:
    themes: List[Dict[str, Any]] = []
    warnings: List[str] = []
    for theme in catalog:
        stories = [
            {"title": story.title, "blanks": story.blank_count} for story in theme.stories
        ]
        themes.append({"name": theme.name, "story_count": len(stories), "stories": stories})
        titles = Counter(story.title for story in theme.stories)
        for title, count in sorted(titles.items()):
            if count > 1:
                warnings.append(f"Theme '{theme.name}' has {count} stories titled '{title}'.")
    return {
        "theme_count": len(themes),
        "story_count": sum(entry["story_count"] for entry in themes),
        "themes": themes,
        "warnings": warnings,
    }


def print_report(report: Dict[str, Any]) -> None:
    print(f"Themes: {report['theme_count']}")
    print(f"Stories: {report['story_count']}")
    for theme in report["themes"]:
        print(f"\n{theme['name']} ({theme['story_count']} stories)")
        for story in theme["stories"]:
            print(f"  - {story['title']} [{story['blanks']} blanks]")
    if report["warnings"]:
        print("\nWarnings:")
        for warning in report["warnings"]:
            print(f"  - {warning}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Report on a Mad Libs story catalog.")
    parser.add_argument("catalog", nargs="?", default=str(DEFAULT_CATALOG_PATH))
    parser.add_argument("--json", action="store_true", help="Emit the report as JSON.")
    args = parser.parse_args()

    try:
        catalog = load_catalog(args.catalog)
    except DataError as exc:
        print(f"[!] {exc}")
        sys.exit(1)

    report = build_report(catalog)
    if args.json:
        print(json.dumps(report, indent=2))
    else:
        print_report(report)


if __name__ == "__main__":
    main()
