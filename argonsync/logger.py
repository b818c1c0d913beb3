"""Log output setup, confirmation prompts and plain-text tables."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field

from . import util
from .util import TRACE_LEVEL, LogStyle, Verbosity

ARGON_LOG = "argon_log"

_QUIET_LOGGERS = ("watchdog", "urllib3", "requests")

_COLORS = {
    "ERROR": "31",
    "WARN": "33",
    "INFO": "32",
    "DEBUG": "36",
    "TRACE": "37",
}

_handler: logging.Handler | None = None


def _level_name(levelno: int) -> str:
    if levelno >= logging.ERROR:
        return "ERROR"
    if levelno >= logging.WARNING:
        return "WARN"
    if levelno >= logging.INFO:
        return "INFO"
    if levelno >= logging.DEBUG:
        return "DEBUG"
    return "TRACE"


class _ArgonFormatter(logging.Formatter):
    def __init__(self, color: bool) -> None:
        super().__init__()
        self._color = color

    def format(self, record: logging.LogRecord) -> str:
        level = _level_name(record.levelno)
        if self._color:
            level = f"\x1b[1;{_COLORS[level]}m{level}\x1b[0m"
        message = record.getMessage()
        if record.name == ARGON_LOG:
            return f"{level}: {message}"
        return f"{level}: {message} [{record.name}:{record.lineno}]"


class _VerbosityFilter(logging.Filter):
    def __init__(self, verbosity: Verbosity) -> None:
        super().__init__()
        self._threshold = verbosity.logging_level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.name == ARGON_LOG or record.levelno >= self._threshold


def init(verbosity: Verbosity, log_style: LogStyle) -> None:
    """Install the log handler on the root logger.

    Records sent to the `argon_log` logger ignore verbosity unless it is OFF.
    """
    global _handler

    root = logging.getLogger()
    logging.addLevelName(TRACE_LEVEL, "TRACE")

    if _handler is not None:
        root.removeHandler(_handler)
        _handler = None

    if verbosity is Verbosity.OFF:
        root.setLevel(Verbosity.OFF.logging_level)
        return

    stream = sys.stderr
    if log_style is LogStyle.AUTO:
        color = bool(getattr(stream, "isatty", lambda: False)())
    else:
        color = log_style is LogStyle.ALWAYS

    handler = logging.StreamHandler(stream)
    handler.setFormatter(_ArgonFormatter(color))
    handler.addFilter(_VerbosityFilter(verbosity))
    root.addHandler(handler)
    _handler = handler

    effective = Verbosity.INFO if verbosity <= Verbosity.INFO else verbosity
    root.setLevel(effective.logging_level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


@dataclass(frozen=True)
class _Style:
    codes: tuple[str, ...] = ()

    def apply(self, text: str) -> str:
        if not self.codes:
            return text
        return f"\x1b[{';'.join(self.codes)}m{text}\x1b[0m"


@dataclass(frozen=True)
class PromptTheme:
    """Styles used to render confirmation prompts."""

    prompt_style: _Style
    prompt_prefix: str
    prompt_suffix: str
    yes_style: _Style
    no_style: _Style
    none_style: _Style
    hint_style: _Style

    @classmethod
    def color(cls) -> PromptTheme:
        bright_black = _Style(("90",))
        return cls(
            prompt_style=_Style(),
            prompt_prefix=_Style(("34", "1")).apply("PROMPT"),
            prompt_suffix=bright_black.apply("·"),
            yes_style=_Style(("32",)),
            no_style=_Style(("31",)),
            none_style=_Style(("36",)),
            hint_style=bright_black,
        )

    @classmethod
    def no_color(cls) -> PromptTheme:
        plain = _Style()
        return cls(
            prompt_style=plain,
            prompt_prefix="PROMPT",
            prompt_suffix="·",
            yes_style=plain,
            no_style=plain,
            none_style=plain,
            hint_style=plain,
        )

    def _head(self, prompt: str) -> str:
        if not prompt:
            return ""
        return f"{self.prompt_prefix}: {self.prompt_style.apply(prompt)} "

    def format_confirm_prompt(self, prompt: str) -> str:
        """Render the question shown before an answer is given."""
        return self._head(prompt) + self.hint_style.apply("(y/n)")

    def format_confirm_prompt_selection(self, prompt: str, selection: bool | None) -> str:
        """Render the question together with the chosen answer."""
        if selection is None:
            answer = self.none_style.apply("none")
        elif selection:
            answer = self.yes_style.apply("yes")
        else:
            answer = self.no_style.apply("no")
        return f"{self._head(prompt)}{self.prompt_suffix} {answer}"


def prompt(message: str, default: bool) -> bool:
    """Ask a yes/no question on the terminal; return `default` when it cannot be asked."""
    if util.env_yes():
        return default

    theme = PromptTheme.color() if util.env_log_style() is LogStyle.ALWAYS else PromptTheme.no_color()

    stdin, stderr = sys.stdin, sys.stderr
    if stdin is None or not stdin.isatty():
        return default

    try:
        while True:
            stderr.write(theme.format_confirm_prompt(message) + " ")
            stderr.flush()

            line = stdin.readline()
            if not line:
                return default

            answer = line.strip().lower()
            if answer in ("y", "yes"):
                selection = True
            elif answer in ("n", "no"):
                selection = False
            elif not answer:
                selection = default
            else:
                continue

            stderr.write(theme.format_confirm_prompt_selection(message, selection) + "\n")
            stderr.flush()
            return selection
    except OSError:
        return default


@dataclass
class Table:
    """A plain-text table whose first row is the header."""

    rows: list[list[str]] = field(default_factory=list)
    columns: list[int] = field(default_factory=list)

    def add_row(self, row) -> None:
        row = [str(cell) for cell in row]
        for index, cell in enumerate(row):
            if index >= len(self.columns):
                self.columns.append(len(cell))
            elif self.columns[index] < len(cell):
                self.columns[index] = len(cell)
        self.rows.append(row)

    def set_header(self, row) -> None:
        self.add_row(row)

    def __str__(self) -> str:
        if not self.rows:
            raise ValueError("table has no header row")

        bold = util.env_log_style() is LogStyle.ALWAYS

        def header_cell(cell: str, width: int) -> str:
            padded = cell.ljust(width)
            return f"\x1b[1m{padded}\x1b[0m" if bold else padded

        header = "".join(f"| {header_cell(cell, width)} " for cell, width in zip(self.rows[0], self.columns))
        separator = "".join("|" + "-" * (width + 2) for width in self.columns)

        lines = [header + "|", separator + "|"]
        for row in self.rows[1:]:
            lines.append("".join(f"| {cell.ljust(width)} " for cell, width in zip(row, self.columns)) + "|")

        return "\n".join(lines) + "\n"