import io
import logging
import re
import sys

import pytest

from argonsync import logger
from argonsync.logger import ARGON_LOG, PromptTheme, Table
from argonsync.util import LogStyle, Verbosity

_ANSI = re.compile(r"\x1b\[[0-9;]*m")


class _FakeTty(io.StringIO):
    def isatty(self):
        return True


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    level = root.level
    yield
    logger.init(Verbosity.OFF, LogStyle.NEVER)
    root.setLevel(level)


def test_table_render(monkeypatch):
    monkeypatch.setenv("RUST_LOG_STYLE", "never")
    table = Table()
    table.set_header(["Name", "Id"])
    table.add_row(["alpha", "1"])
    assert str(table) == "| Name  | Id |\n|-------|----|\n| alpha | 1  |\n"


def test_table_column_widths_track_longest_cell():
    table = Table()
    table.set_header(["a", "bb"])
    table.add_row(["cccc", "d", "eee"])
    assert table.columns == [4, 2, 3]


def test_table_bold_header(monkeypatch):
    monkeypatch.setenv("RUST_LOG_STYLE", "always")
    table = Table()
    table.set_header(["Name"])
    table.add_row(["x"])
    text = str(table)
    assert "\x1b[1m" in text
    monkeypatch.setenv("RUST_LOG_STYLE", "never")
    assert _ANSI.sub("", text) == str(table)


def test_empty_table_raises():
    with pytest.raises(ValueError):
        str(Table())


def test_prompt_theme_no_color():
    theme = PromptTheme.no_color()
    assert theme.format_confirm_prompt("Continue?") == "PROMPT: Continue? (y/n)"
    assert theme.format_confirm_prompt("") == "(y/n)"
    assert theme.format_confirm_prompt_selection("Continue?", True) == "PROMPT: Continue? · yes"
    assert theme.format_confirm_prompt_selection("Continue?", False) == "PROMPT: Continue? · no"
    assert theme.format_confirm_prompt_selection("", None) == "· none"


@pytest.mark.parametrize("selection", [True, False, None])
def test_prompt_theme_color_matches_plain(selection):
    colored = PromptTheme.color().format_confirm_prompt_selection("Go?", selection)
    plain = PromptTheme.no_color().format_confirm_prompt_selection("Go?", selection)
    assert "\x1b[" in colored
    assert _ANSI.sub("", colored) == plain


@pytest.mark.parametrize("default", [True, False])
def test_prompt_env_yes_returns_default(monkeypatch, default):
    monkeypatch.setenv("RUST_YES", "1")
    assert logger.prompt("Proceed?", default) is default


@pytest.mark.parametrize("default", [True, False])
def test_prompt_without_terminal_returns_default(monkeypatch, default):
    monkeypatch.setenv("RUST_YES", "0")
    monkeypatch.setattr(sys, "stdin", io.StringIO("y\n"))
    assert logger.prompt("Proceed?", default) is default


@pytest.mark.parametrize(
    "answer, default, expected",
    [("y\n", False, True), ("yes\n", False, True), ("n\n", True, False), ("\n", True, True), ("maybe\nno\n", True, False)],
)
def test_prompt_reads_answer(monkeypatch, capsys, answer, default, expected):
    monkeypatch.setenv("RUST_YES", "0")
    monkeypatch.setenv("RUST_LOG_STYLE", "never")
    monkeypatch.setattr(sys, "stdin", _FakeTty(answer))
    assert logger.prompt("Proceed?", default) is expected
    assert "PROMPT: Proceed? (y/n)" in capsys.readouterr().err


def test_init_argon_logs_ignore_verbosity(capsys, restore_logging):
    logger.init(Verbosity.ERROR, LogStyle.NEVER)
    logging.getLogger(ARGON_LOG).info("hello")
    logging.getLogger(ARGON_LOG).warning("careful")
    logging.getLogger("argonsync.sample").info("hidden")
    err = capsys.readouterr().err
    assert err == "INFO: hello\nWARN: careful\n"


def test_init_other_logs_carry_location(capsys, restore_logging):
    logger.init(Verbosity.ERROR, LogStyle.NEVER)
    logging.getLogger("argonsync.sample").error("boom")
    err = capsys.readouterr().err
    assert err.startswith("ERROR: boom [argonsync.sample:")
    assert err.rstrip().endswith("]")


def test_init_off_silences_everything(capsys, restore_logging):
    logger.init(Verbosity.OFF, LogStyle.NEVER)
    logging.getLogger(ARGON_LOG).error("nothing")
    assert capsys.readouterr().err == ""


def test_init_color(capsys, restore_logging):
    logger.init(Verbosity.INFO, LogStyle.ALWAYS)
    logging.getLogger(ARGON_LOG).info("hi")
    err = capsys.readouterr().err
    assert "\x1b[" in err
    assert _ANSI.sub("", err) == "INFO: hi\n"