"""Shape validation for Mad Libs story catalogs."""

from __future__ import annotations

import json
from typing import Any, Iterable, List, Mapping, Sequence

BLANK_MARKER = "___"


def path(*parts: object) -> str:
    path_str = ""
    for part in parts:
        if isinstance(part, int):
            path_str = f"{path_str}[{part}]"
            continue
        if not isinstance(part, str):
            part = str(part)
        if part.isidentifier():
            path_str = f"{path_str}.{part}" if path_str else part
        else:
            path_str = f"{path_str}[{json.dumps(part)}]"
    return path_str


def format_validation_message(path_str: str, context: str, message: str) -> str:
    if context:
        return f"{path_str}: {context}: {message}"
    return f"{path_str}: {message}"


def is_non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def is_list(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def count_blanks(segments: Iterable[str]) -> int:
    return " ".join(segments).count(BLANK_MARKER)


class ValidationContext:
    """Accumulates catalog errors so every problem is reported at once."""

    def __init__(self) -> None:
        self.errors: List[str] = []

    def add(self, context: str, path_str: str, message: str) -> None:
        self.errors.append(format_validation_message(path_str, context, message))


def validate_placeholders(
    placeholders: Any, context: str, path_parts: Sequence[object], ctx: ValidationContext
) -> int | None:
    if not is_list(placeholders):
        ctx.add(context, path(*path_parts), "'placeholders' must be a list of prompt objects.")
        return None
    for idx, placeholder in enumerate(placeholders):
        entry_path = (*path_parts, idx)
        if not isinstance(placeholder, Mapping):
            ctx.add(context, path(*entry_path), f"placeholder {idx + 1} must be an object.")
            continue
        if not is_non_empty_str(placeholder.get("prompt")):
            ctx.add(
                context,
                path(*entry_path, "prompt"),
                f"placeholder {idx + 1} requires a non-empty 'prompt'.",
            )
    return len(placeholders)


def validate_story(
    story: Any, context: str, path_parts: Sequence[object], ctx: ValidationContext
) -> None:
    if not isinstance(story, Mapping):
        ctx.add(context, path(*path_parts), "must be an object.")
        return

    if not is_non_empty_str(story.get("title")):
        ctx.add(context, path(*path_parts, "title"), "requires a non-empty 'title'.")

    segments = story.get("story")
    blanks = None
    if not is_list(segments) or not segments:
        ctx.add(
            context,
            path(*path_parts, "story"),
            "'story' must be a non-empty list of text segments.",
        )
    elif not all(isinstance(segment, str) for segment in segments):
        ctx.add(context, path(*path_parts, "story"), "text segments must be strings.")
    else:
        blanks = count_blanks(segments)

    prompts = validate_placeholders(
        story.get("placeholders"), context, (*path_parts, "placeholders"), ctx
    )
    if blanks is not None and prompts is not None and blanks != prompts:
        ctx.add(
            context,
            path(*path_parts),
            f"has {blanks} blank(s) but {prompts} placeholder(s).",
        )


def validate_catalog(data: Any) -> List[str]:
    ctx = ValidationContext()

    if not isinstance(data, Mapping):
        ctx.add("Catalog", "$", "must be a JSON object.")
        return ctx.errors

    themes = data.get("themes")
    if not isinstance(themes, Mapping):
        ctx.add("Catalog", path("themes"), "must include a 'themes' object.")
        return ctx.errors
    if not themes:
        ctx.add("Catalog", path("themes"), "must define at least one theme.")

    for theme_name, theme in themes.items():
        if not is_non_empty_str(theme_name):
            ctx.add("Themes", path("themes"), "theme names must be non-empty strings.")
            continue
        context = f"Theme '{theme_name}'"
        if not isinstance(theme, Mapping):
            ctx.add(context, path("themes", theme_name), "must be an object.")
            continue
        stories = theme.get("stories")
        if not is_list(stories) or not stories:
            ctx.add(
                context,
                path("themes", theme_name, "stories"),
                "'stories' must be a non-empty list.",
            )
            continue
        for idx, story in enumerate(stories):
            validate_story(
                story,
                f"Story {idx + 1} in theme '{theme_name}'",
                ("themes", theme_name, "stories", idx),
                ctx,
            )

    return ctx.errors
