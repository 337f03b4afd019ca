"""Display settings for the Mad Libs game."""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

_BASE_DIR = Path(__file__).resolve().parent.parent
SETTINGS_PATH = _BASE_DIR / "settings.json"

DEFAULT_WIDTH = 75
MIN_WIDTH = 20
MAX_WIDTH = 200


def _clamp(value: int, minimum: int, maximum: int) -> int:
    return max(minimum, min(maximum, value))


@dataclass
class Settings:
    """Presentation toggles read once at startup."""

    line_width: int = DEFAULT_WIDTH
    title_width: int = DEFAULT_WIDTH
    use_color: bool = True

    def clamp(self) -> "Settings":
        self.line_width = _clamp(int(self.line_width), MIN_WIDTH, MAX_WIDTH)
        self.title_width = _clamp(int(self.title_width), MIN_WIDTH, MAX_WIDTH)
        self.use_color = bool(self.use_color)
        return self

    @classmethod
    def from_dict(cls, data: Dict[str, Any] | None) -> "Settings":
        if not isinstance(data, dict):
            return cls()

        def _as_int(key: str, default: int) -> int:
            try:
                return int(data.get(key, default))
            except (TypeError, ValueError):
                return default

        def _as_bool(key: str, default: bool) -> bool:
            value = data.get(key, default)
            if isinstance(value, bool):
                return value
            if isinstance(value, str):
                lowered = value.strip().lower()
                if lowered in {"true", "1", "yes", "on"}:
                    return True
                if lowered in {"false", "0", "no", "off"}:
                    return False
            return bool(value) if value is not None else default

        settings = cls(
            line_width=_as_int("line_width", DEFAULT_WIDTH),
            title_width=_as_int("title_width", DEFAULT_WIDTH),
            use_color=_as_bool("use_color", True),
        )
        return settings.clamp()


def load_settings(path: Path | str = SETTINGS_PATH) -> Settings:
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except FileNotFoundError:
        return Settings()
    except (OSError, json.JSONDecodeError, TypeError) as exc:
        print(f"[Settings] Ignoring unreadable {path.name}: {exc}", file=sys.stderr)
        return Settings()
    return Settings.from_dict(data)
