#!/usr/bin/env python3
"""
Mad Libs: terminal edition
- Pick a theme, get a random story from it, fill in the blanks.
- Answers are substituted strictly in order: first blank, first answer.
- Nothing is saved between runs.
Usage: python3 -m madlibs [stories.json] [--seed N]
"""

from __future__ import annotations

import argparse
import asyncio
import inspect
import random
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Awaitable, Callable, List, Optional, Sequence

if __package__ in (None, ""):
    sys.path.insert(0, str(Path(__file__).resolve().parent.parent))
    from madlibs.catalog import (
        BLANK_MARKER,
        DEFAULT_CATALOG_PATH,
        Catalog,
        DataError,
        Story,
        Theme,
        load_catalog,
    )
    from madlibs.formatter import colorize, render_title_box, wrap_text
    from madlibs.settings import SETTINGS_PATH, Settings, load_settings
else:
    from .catalog import (
        BLANK_MARKER,
        DEFAULT_CATALOG_PATH,
        Catalog,
        DataError,
        Story,
        Theme,
        load_catalog,
    )
    from .formatter import colorize, render_title_box, wrap_text
    from .settings import SETTINGS_PATH, Settings, load_settings

InputFunc = Callable[[str], str | Awaitable[str]]
PrintFunc = Callable[[str], None]

WELCOME_TEXT = "Welcome to the Mad Libs Game!"
THEME_PROMPT = "Please select a theme by entering the corresponding number: "
INVALID_THEME_TEXT = "Invalid selection. Please try again."
EMPTY_ANSWER_TEXT = "Please enter a value."


class ValidationError(ValueError):
    """Raised for a user answer that must be asked for again."""


class Console:
    """The interactive channel for one run; closed when the run ends."""

    def __init__(self, input_func: Optional[InputFunc] = None, print_func: PrintFunc = print):
        self._input = input_func or input
        self._print = print_func
        self.closed = False

    async def ask(self, prompt: str) -> str:
        if self.closed:
            raise RuntimeError("Console is closed.")
        result = self._input(prompt)
        if inspect.isawaitable(result):
            result = await result
        return "" if result is None else str(result)

    def emit(self, text: str = "") -> None:
        self._print(text)

    def close(self) -> None:
        """Stop taking answers. stdin itself belongs to the process and stays open."""
        self.closed = True

    def __enter__(self) -> "Console":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


@dataclass
class Session:
    theme: Theme
    story: Story
    answers: List[str] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return len(self.answers) == len(self.story.placeholders)


def parse_theme_choice(raw: str, theme_count: int) -> int:
    """Return the 1-based theme number typed by the user."""
    text = raw.strip()
    try:
        number = int(text)
    except ValueError:
        raise ValidationError(f"'{text}' is not a number.") from None
    if not 1 <= number <= theme_count:
        raise ValidationError(f"{number} is not between 1 and {theme_count}.")
    return number


def clean_answer(raw: str) -> str:
    answer = raw.strip()
    if not answer:
        raise ValidationError("Answer must not be empty.")
    return answer


def fill_template(template: str, answers: Sequence[str]) -> str:
    pieces = template.split(BLANK_MARKER)
    blanks = len(pieces) - 1
    if blanks != len(answers):
        raise ValueError(f"Template has {blanks} blank(s) but {len(answers)} answer(s) were given.")
    filled = [pieces[0]]
    for answer, piece in zip(answers, pieces[1:]):
        filled.append(answer)
        filled.append(piece)
    return "".join(filled)


def fill_story(story: Story, answers: Sequence[str]) -> str:
    return fill_template(story.template, answers)


def pick_story(theme: Theme, rng: random.Random) -> Story:
    return theme.stories[rng.randrange(len(theme.stories))]


def show_themes(catalog: Catalog, console: Console, settings: Settings) -> None:
    console.emit(colorize("Available Themes:", "heading", enabled=settings.use_color))
    for index, name in enumerate(catalog.theme_names, start=1):
        console.emit(f"{index}. {name}")


async def select_theme(catalog: Catalog, console: Console, settings: Settings) -> Theme:
    while True:
        show_themes(catalog, console, settings)
        raw = await console.ask(THEME_PROMPT)
        try:
            number = parse_theme_choice(raw, len(catalog))
        except ValidationError:
            console.emit(colorize(INVALID_THEME_TEXT, "error", enabled=settings.use_color))
            continue
        return catalog.theme_at(number)


async def collect_answers(session: Session, console: Console, settings: Settings) -> List[str]:
    for placeholder in session.story.placeholders:
        while True:
            raw = await console.ask(f"{placeholder.prompt}: ")
            try:
                answer = clean_answer(raw)
            except ValidationError:
                console.emit(colorize(EMPTY_ANSWER_TEXT, "error", enabled=settings.use_color))
                continue
            session.answers.append(answer)
            break
    return session.answers


def render_story(story: Story, answers: Sequence[str], settings: Settings) -> str:
    title_box = render_title_box(story.title, settings.title_width)
    body = wrap_text(fill_story(story, answers), settings.line_width)
    return "\n".join(
        [
            colorize("Here is your completed story:", "heading", enabled=settings.use_color),
            "",
            colorize(title_box, "title", enabled=settings.use_color),
            "",
            body,
        ]
    )


async def play(
    catalog: Catalog,
    console: Console,
    settings: Settings,
    rng: Optional[random.Random] = None,
) -> Session:
    rng = rng or random.Random()
    console.emit(colorize(WELCOME_TEXT, "heading", enabled=settings.use_color))
    theme = await select_theme(catalog, console, settings)
    session = Session(theme=theme, story=pick_story(theme, rng))
    await collect_answers(session, console, settings)
    console.emit("")
    console.emit(render_story(session.story, session.answers, settings))
    return session


def parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play a round of Mad Libs in the terminal.")
    parser.add_argument("catalog", nargs="?", default=DEFAULT_CATALOG_PATH)
    parser.add_argument("--seed", type=int, default=None, help="Seed the story picker.")
    parser.add_argument(
        "--settings",
        default=str(SETTINGS_PATH),
        help="Path to a settings JSON file.",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI colors.")
    return parser.parse_args(argv)


async def main(
    argv: Optional[Sequence[str]] = None,
    *,
    input_func: Optional[InputFunc] = None,
    print_func: PrintFunc = print,
) -> int:
    args = parse_args(argv)
    settings = load_settings(args.settings)
    if args.no_color:
        settings.use_color = False

    try:
        catalog = load_catalog(args.catalog)
    except DataError as exc:
        print(f"[!] {exc}", file=sys.stderr)
        return 1

    with Console(input_func, print_func) as console:
        try:
            await play(catalog, console, settings, random.Random(args.seed))
        except EOFError:
            print("\n[!] Input closed before the story was finished.", file=sys.stderr)
            return 1
        except KeyboardInterrupt:
            print("\n[Interrupted] Bye.")
            return 0
    return 0


def cli() -> None:
    # No SIGINT handler here: Ctrl-C must raise out of a blocking input().
    loop = asyncio.new_event_loop()
    try:
        code = loop.run_until_complete(main())
    except KeyboardInterrupt:
        print("\n[Interrupted] Bye.")
        code = 0
    finally:
        loop.close()
    sys.exit(code)


if __name__ == "__main__":
    cli()
