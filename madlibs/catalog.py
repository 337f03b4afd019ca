"""Story catalog loading for the Mad Libs game."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Tuple

from .catalog_schema import BLANK_MARKER, count_blanks, validate_catalog

_BASE_DIR = Path(__file__).resolve().parent.parent
DEFAULT_CATALOG_PATH = _BASE_DIR / "assets" / "stories.json"


class DataError(ValueError):
    """Raised when the story catalog is missing, unreadable or malformed."""


@dataclass(frozen=True)
class Placeholder:
    prompt: str


@dataclass(frozen=True)
class Story:
    title: str
    segments: Tuple[str, ...]
    placeholders: Tuple[Placeholder, ...]

    @property
    def template(self) -> str:
        return " ".join(self.segments)

    @property
    def blank_count(self) -> int:
        return count_blanks(self.segments)


@dataclass(frozen=True)
class Theme:
    name: str
    stories: Tuple[Story, ...]


class Catalog:
    """Read-only, ordered collection of themes."""

    def __init__(self, themes: List[Theme]):
        self._themes: Dict[str, Theme] = {theme.name: theme for theme in themes}

    def __len__(self) -> int:
        return len(self._themes)

    def __iter__(self):
        return iter(self._themes.values())

    def __getitem__(self, name: str) -> Theme:
        return self._themes[name]

    @property
    def theme_names(self) -> List[str]:
        return list(self._themes)

    def theme_at(self, number: int) -> Theme:
        """Return the theme shown as ``number`` (1-based) in the menu."""
        return list(self._themes.values())[number - 1]


def _raise_catalog_validation(errors):
    raise DataError("Invalid story catalog:\n- " + "\n- ".join(errors))


def _build_story(payload: Mapping[str, Any]) -> Story:
    return Story(
        title=payload["title"].strip(),
        segments=tuple(payload["story"]),
        placeholders=tuple(
            Placeholder(prompt=entry["prompt"].strip()) for entry in payload["placeholders"]
        ),
    )


def parse_catalog(data: Any) -> Catalog:
    errors = validate_catalog(data)
    if errors:
        _raise_catalog_validation(errors)

    themes = []
    for name, payload in data["themes"].items():
        stories = tuple(_build_story(story) for story in payload["stories"])
        themes.append(Theme(name=name, stories=stories))
    return Catalog(themes)


def load_catalog(path: Path | str = DEFAULT_CATALOG_PATH) -> Catalog:
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except FileNotFoundError as exc:
        raise DataError(f"Could not read story catalog: {path} does not exist.") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise DataError(f"Could not read story catalog {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        _raise_catalog_validation([f"{path}: not valid JSON ({exc})."])
    return parse_catalog(data)
