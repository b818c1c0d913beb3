import os
from pathlib import Path

import pytest

from argonsync import util
from argonsync.util import LogStyle, Verbosity

_LEVEL_NAMES = ["OFF", "ERROR", "WARN", "INFO", "DEBUG", "TRACE"]


def _levels_from_env(monkeypatch):
    levels = []
    for name in _LEVEL_NAMES:
        monkeypatch.setenv("RUST_VERBOSE", name)
        levels.append(util.env_verbosity())
    return levels


@pytest.mark.parametrize(
    "class_name, expected",
    [
        ("Script", True),
        ("LocalScript", True),
        ("ModuleScript", True),
        ("Part", False),
        ("script", False),
    ],
)
def test_is_script(class_name, expected):
    assert util.is_script(class_name) is expected


def test_verbosity_is_ordered(monkeypatch):
    levels = _levels_from_env(monkeypatch)
    assert sorted(levels) == levels
    assert levels[0] < levels[-1]


def test_verbosity_logging_levels_decrease(monkeypatch):
    levels = [v.logging_level for v in _levels_from_env(monkeypatch)]
    assert levels == sorted(levels, reverse=True)


@pytest.mark.parametrize("value", _LEVEL_NAMES)
def test_env_verbosity_known(monkeypatch, value):
    monkeypatch.setenv("RUST_VERBOSE", value)
    assert util.env_verbosity() is Verbosity[value]


def test_env_verbosity_defaults(monkeypatch):
    monkeypatch.delenv("RUST_VERBOSE", raising=False)
    assert util.env_verbosity() is Verbosity.ERROR
    monkeypatch.setenv("RUST_VERBOSE", "loud")
    assert util.env_verbosity() is Verbosity.ERROR


@pytest.mark.parametrize(
    "value, expected",
    [("always", LogStyle.ALWAYS), ("never", LogStyle.NEVER), ("auto", LogStyle.AUTO), ("other", LogStyle.AUTO)],
)
def test_env_log_style(monkeypatch, value, expected):
    monkeypatch.setenv("RUST_LOG_STYLE", value)
    assert util.env_log_style() is expected


def test_env_log_style_default(monkeypatch):
    monkeypatch.delenv("RUST_LOG_STYLE", raising=False)
    assert util.env_log_style() is LogStyle.AUTO


def test_env_flags(monkeypatch):
    monkeypatch.setenv("RUST_YES", "1")
    monkeypatch.setenv("RUST_BACKTRACE", "0")
    assert util.env_yes() is True
    assert util.env_backtrace() is False
    monkeypatch.delenv("RUST_YES")
    monkeypatch.setenv("RUST_BACKTRACE", "1")
    assert util.env_yes() is False
    assert util.env_backtrace() is True


def test_progress_style_plain(monkeypatch):
    monkeypatch.setenv("RUST_LOG_STYLE", "never")
    assert util.get_progress_style() == ("PROGRESS: [{bar:40}] ({bytes}/{total_bytes})", "=>-")


def test_progress_style_colored(monkeypatch):
    monkeypatch.setenv("RUST_LOG_STYLE", "always")
    template, chars = util.get_progress_style()
    assert "\x1b[" in template
    assert template.endswith("[{bar:40}] ({bytes}/{total_bytes})")
    assert chars == "=>-"


def test_get_argon_dir(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    assert util.get_argon_dir() == Path(tmp_path) / ".argon"


def test_count_loc_from_properties():
    properties = {"Source": "a\nb\n", "Value": "c", "Other": 5}
    assert util.count_loc_from_properties(properties) == 3


def test_count_loc_ignores_empty_strings():
    assert util.count_loc_from_properties({"Source": "", "Number": 1.5}) == 0


def test_process_exists_for_current_process():
    assert util.process_exists(os.getpid()) is True