"""Shared helpers: paths, process control and environment flags."""

from __future__ import annotations

import enum
import getpass
import logging
import os
import subprocess
import sys
from collections.abc import Mapping
from pathlib import Path

_WINDOWS = sys.platform == "win32"

TRACE_LEVEL = 5


class Verbosity(enum.IntEnum):
    """Log verbosity, ordered from silent to most detailed."""

    OFF = 0
    ERROR = 1
    WARN = 2
    INFO = 3
    DEBUG = 4
    TRACE = 5

    @property
    def logging_level(self) -> int:
        """The matching level of the standard logging module."""
        return _LOGGING_LEVELS[self]


_LOGGING_LEVELS = {
    Verbosity.OFF: logging.CRITICAL + 10,
    Verbosity.ERROR: logging.ERROR,
    Verbosity.WARN: logging.WARNING,
    Verbosity.INFO: logging.INFO,
    Verbosity.DEBUG: logging.DEBUG,
    Verbosity.TRACE: TRACE_LEVEL,
}


class LogStyle(enum.Enum):
    """Whether log output is coloured."""

    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"

    def __str__(self) -> str:
        return self.value


def get_argon_dir() -> Path:
    """Return the `.argon` directory in the user's home."""
    return Path.home() / ".argon"


def get_username() -> str:
    """Return the Git user name, falling back to the local user name."""
    try:
        result = subprocess.run(["git", "config", "user.name"], capture_output=True, check=False)
    except OSError:
        pass
    else:
        username = result.stdout.decode(errors="replace").strip()
        if username:
            return username

    try:
        return getpass.getuser()
    except (OSError, KeyError):
        return "Unknown"


def is_script(class_name: str) -> bool:
    """Check whether the class is a script class."""
    return class_name in ("Script", "LocalScript", "ModuleScript")


def kill_process(pid: int) -> None:
    """Kill the process with the given pid and its children."""
    if _WINDOWS:
        commands = [["TASKKILL", "/F", "/T", "/PID", str(pid)]]
    else:
        commands = [["kill", str(pid)], ["pkill", "-P", str(pid)]]

    for command in commands:
        try:
            subprocess.run(command, capture_output=True, check=False)
        except OSError:
            pass


def process_exists(pid: int) -> bool:
    """Check whether a process with the given pid is running."""
    try:
        if _WINDOWS:
            result = subprocess.run(
                ["TASKLIST", "/NH", "/FI", f"PID eq {pid}"],
                capture_output=True,
                check=False,
            )
            return "argon.exe" in result.stdout.decode(errors="replace")

        result = subprocess.run(["kill", "-0", str(pid)], capture_output=True, check=False)
        return result.returncode == 0
    except OSError:
        return False


def get_progress_style() -> tuple[str, str]:
    """Return the progress bar template and its progress characters."""
    if env_log_style() is LogStyle.ALWAYS:
        template = "\x1b[1;35mPROGRESS: \x1b[0m"
    else:
        template = "PROGRESS: "
    template += "[{bar:40}] ({bytes}/{total_bytes})"
    return template, "=>-"


def env_verbosity() -> Verbosity:
    """Return the verbosity stored in `RUST_VERBOSE`."""
    value = os.environ.get("RUST_VERBOSE", "ERROR")
    try:
        return Verbosity[value]
    except KeyError:
        return Verbosity.ERROR


def env_log_style() -> LogStyle:
    """Return the log style stored in `RUST_LOG_STYLE`."""
    value = os.environ.get("RUST_LOG_STYLE", "auto")
    if value == "always":
        return LogStyle.ALWAYS
    if value == "never":
        return LogStyle.NEVER
    return LogStyle.AUTO


def env_backtrace() -> bool:
    """Return whether `RUST_BACKTRACE` is enabled."""
    return os.environ.get("RUST_BACKTRACE", "0") == "1"


def env_yes() -> bool:
    """Return whether `RUST_YES` is enabled."""
    return os.environ.get("RUST_YES", "0") == "1"


def _count_lines(text: str) -> int:
    if not text:
        return 0
    return text.count("\n") + (0 if text.endswith("\n") else 1)


def count_loc_from_properties(properties: Mapping[str, object]) -> int:
    """Count lines of code across the string values of a property map."""
    return sum(_count_lines(value) for value in properties.values() if isinstance(value, str))