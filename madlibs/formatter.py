"""Text layout helpers: word wrapping, title boxes and ANSI colors."""

from __future__ import annotations

from typing import List

DISPLAY_WIDTH = 75
BOX_CHAR = "═"

ANSI_RESET = "\033[0m"
COLOR_MAP = {
    "title": "\033[1;36m",
    "heading": "\033[33m",
    "prompt": "\033[32m",
    "error": "\033[31m",
}


def wrap_text(text: str, width: int = DISPLAY_WIDTH) -> str:
    """Greedily wrap ``text`` so no line exceeds ``width`` characters.

    Words are never split: a word longer than ``width`` is placed alone on
    its own line.
    """
    lines: List[str] = []
    current = ""
    for word in text.split():
        if current and len(current + word) > width:
            lines.append(current.rstrip())
            current = ""
        current += word + " "
    if current:
        lines.append(current.rstrip())
    return "\n".join(lines)


def render_title_box(title: str, width: int = DISPLAY_WIDTH) -> str:
    border = BOX_CHAR * width
    padding = max(width - len(title), 0)
    left = padding // 2
    right = padding - left
    return "\n".join([border, f"{' ' * left}{title}{' ' * right}", border])


def colorize(text: str, color: str, *, enabled: bool = True) -> str:
    if not enabled or not text:
        return text
    code = COLOR_MAP.get(color)
    if not code:
        return text
    return f"{code}{text}{ANSI_RESET}"
