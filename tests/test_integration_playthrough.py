import asyncio
import json
import os
import random
import select
import signal
import subprocess
import sys
import time
from pathlib import Path

import pytest

from madlibs.catalog import parse_catalog
from madlibs.game import (
    EMPTY_ANSWER_TEXT,
    INVALID_THEME_TEXT,
    THEME_PROMPT,
    Console,
    Session,
    ValidationError,
    collect_answers,
    fill_template,
    main,
    parse_theme_choice,
    pick_story,
    play,
    select_theme,
)
from madlibs.settings import Settings


REPO_ROOT = Path(__file__).resolve().parents[1]


def scripted_input(answers):
    queue = list(answers)
    prompts = []

    def fake_input(prompt: str) -> str:
        prompts.append(prompt)
        if not queue:
            raise EOFError
        return queue.pop(0)

    return fake_input, prompts


def animals_catalog() -> dict:
    return {
        "themes": {
            "Animals": {
                "stories": [
                    {
                        "title": "Over the Moon",
                        "story": ["The ___ jumped", "over the ___"],
                        "placeholders": [{"prompt": "Animal"}, {"prompt": "Noun"}],
                    }
                ]
            },
            "Food": {
                "stories": [
                    {
                        "title": "Lunch",
                        "story": ["I ate a ___."],
                        "placeholders": [{"prompt": "Food"}],
                    }
                ]
            },
        }
    }


def plain_settings() -> Settings:
    return Settings(use_color=False)


def test_fill_template_substitutes_in_order() -> None:
    assert fill_template("I have a ___ and a ___", ["cat", "dog"]) == "I have a cat and a dog"


def test_fill_template_rejects_wrong_answer_count() -> None:
    with pytest.raises(ValueError, match="2 blank"):
        fill_template("I have a ___ and a ___", ["cat"])


@pytest.mark.parametrize("raw", ["0", "-1", "abc", "3", "", "1.5"])
def test_parse_theme_choice_rejects_out_of_range(raw: str) -> None:
    with pytest.raises(ValidationError):
        parse_theme_choice(raw, 2)


def test_parse_theme_choice_accepts_padded_index() -> None:
    assert parse_theme_choice(" 2 ", 2) == 2


@pytest.mark.parametrize("bad", ["0", "-1", "abc", "3"])
def test_select_theme_reprompts_until_valid(bad: str) -> None:
    catalog = parse_catalog(animals_catalog())
    fake_input, prompts = scripted_input([bad, "2"])
    lines = []
    console = Console(fake_input, lines.append)

    theme = asyncio.run(select_theme(catalog, console, plain_settings()))

    assert theme.name == "Food"
    assert prompts == [THEME_PROMPT, THEME_PROMPT]
    assert lines.count(INVALID_THEME_TEXT) == 1
    assert lines.count("1. Animals") == 2


def test_collect_answers_reprompts_same_placeholder_on_blank_input() -> None:
    catalog = parse_catalog(animals_catalog())
    theme = catalog["Animals"]
    session = Session(theme=theme, story=theme.stories[0])
    fake_input, prompts = scripted_input(["", "   ", " cow ", "moon"])
    lines = []

    answers = asyncio.run(collect_answers(session, Console(fake_input, lines.append), plain_settings()))

    assert answers == ["cow", "moon"]
    assert prompts == ["Animal: ", "Animal: ", "Animal: ", "Noun: "]
    assert lines.count(EMPTY_ANSWER_TEXT) == 2
    assert session.complete


def test_pick_story_draws_every_story_eventually() -> None:
    catalog = parse_catalog(
        {
            "themes": {
                "Pets": {
                    "stories": [
                        {"title": f"Story {idx}", "story": ["A ___."], "placeholders": [{"prompt": "Pet"}]}
                        for idx in range(3)
                    ]
                }
            }
        }
    )
    rng = random.Random(0)
    seen = {pick_story(catalog["Pets"], rng).title for _ in range(200)}
    assert seen == {"Story 0", "Story 1", "Story 2"}


def test_play_prints_completed_story() -> None:
    catalog = parse_catalog(animals_catalog())
    fake_input, _ = scripted_input(["1", "cow", "moon"])
    lines = []

    session = asyncio.run(
        play(catalog, Console(fake_input, lines.append), plain_settings(), random.Random(0))
    )

    output = "\n".join(lines).splitlines()
    assert session.answers == ["cow", "moon"]
    assert "The cow jumped over the moon" in output
    assert any(line.strip() == "Over the Moon" for line in output)
    assert output.index("Welcome to the Mad Libs Game!") == 0


def test_console_refuses_input_after_close() -> None:
    fake_input, prompts = scripted_input(["x"])
    with Console(fake_input, print) as console:
        pass
    assert console.closed
    with pytest.raises(RuntimeError):
        asyncio.run(console.ask("Anything: "))
    assert prompts == []


def test_main_runs_full_game(tmp_path: Path) -> None:
    path = tmp_path / "stories.json"
    path.write_text(json.dumps(animals_catalog()))
    fake_input, _ = scripted_input(["abc", "1", "", "cow", "moon"])
    lines = []

    code = asyncio.run(
        main(
            [str(path), "--seed", "1", "--no-color", "--settings", str(tmp_path / "settings.json")],
            input_func=fake_input,
            print_func=lines.append,
        )
    )

    assert code == 0
    assert "The cow jumped over the moon" in "\n".join(lines).splitlines()


def test_main_exits_with_error_on_malformed_catalog(tmp_path: Path, capsys) -> None:
    path = tmp_path / "stories.json"
    path.write_text(json.dumps({"themes": {"Animals": {"stories": "nope"}}}))
    fake_input, prompts = scripted_input(["1"])

    code = asyncio.run(main([str(path)], input_func=fake_input, print_func=lambda _: None))

    assert code == 1
    assert prompts == []
    assert "Invalid story catalog" in capsys.readouterr().err


def test_main_reports_closed_input(tmp_path: Path, capsys) -> None:
    path = tmp_path / "stories.json"
    path.write_text(json.dumps(animals_catalog()))
    fake_input, _ = scripted_input(["1", "cow"])

    code = asyncio.run(main([str(path), "--no-color"], input_func=fake_input, print_func=lambda _: None))

    assert code == 1
    assert "Input closed" in capsys.readouterr().err


def run_module_env() -> dict:
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(REPO_ROOT), env.get("PYTHONPATH")]))
    return env


def test_module_plays_shipped_catalog_from_another_directory(tmp_path: Path) -> None:
    result = subprocess.run(
        [sys.executable, "-m", "madlibs", "--no-color", "--seed", "0"],
        input="1\n" + "word\n" * 10,
        capture_output=True,
        text=True,
        cwd=tmp_path,
        env=run_module_env(),
        timeout=30,
        check=False,
    )
    assert result.returncode == 0, result.stderr
    assert "Here is your completed story:" in result.stdout


def test_module_exits_1_without_prompting_on_malformed_catalog(tmp_path: Path) -> None:
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"themes": {"Animals": {"stories": "nope"}}}))

    result = subprocess.run(
        [sys.executable, "-m", "madlibs", str(path)],
        input="1\n",
        capture_output=True,
        text=True,
        cwd=tmp_path,
        env=run_module_env(),
        timeout=30,
        check=False,
    )

    assert result.returncode == 1
    assert result.stdout == ""
    assert "Invalid story catalog" in result.stderr


@pytest.mark.skipif(sys.platform == "win32", reason="needs POSIX signals")
def test_ctrl_c_at_theme_prompt_exits_promptly(tmp_path: Path) -> None:
    proc = subprocess.Popen(
        [sys.executable, "-m", "madlibs", "--no-color"],
        stdin=subprocess.PIPE,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        cwd=tmp_path,
        env=run_module_env(),
    )
    try:
        seen = b""
        deadline = time.monotonic() + 15
        while THEME_PROMPT.encode() not in seen:
            remaining = deadline - time.monotonic()
            assert remaining > 0, f"theme prompt never appeared: {seen!r}"
            ready, _, _ = select.select([proc.stdout], [], [], remaining)
            if ready:
                chunk = os.read(proc.stdout.fileno(), 4096)
                assert chunk, f"process exited early: {seen!r}"
                seen += chunk

        proc.send_signal(signal.SIGINT)
        out, _ = proc.communicate(timeout=5)
    finally:
        if proc.poll() is None:
            proc.kill()
            proc.wait()

    assert b"[Interrupted] Bye." in out
    assert proc.returncode == 0


def test_main_says_goodbye_on_keyboard_interrupt(tmp_path: Path, capsys) -> None:
    path = tmp_path / "stories.json"
    path.write_text(json.dumps(animals_catalog()))

    def interrupted(prompt: str) -> str:
        raise KeyboardInterrupt

    code = asyncio.run(main([str(path)], input_func=interrupted, print_func=lambda _: None))

    assert code == 0
    assert "[Interrupted] Bye." in capsys.readouterr().out
