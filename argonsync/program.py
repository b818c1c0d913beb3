"""Starting external programs: the tool itself, Git, package managers and Wally."""

from __future__ import annotations

import enum
import logging
import os
import shutil
import subprocess
import sys
import webbrowser
from dataclasses import dataclass
from pathlib import Path

from . import logger, util
from .logger import ARGON_LOG
from .util import LogStyle, Verbosity

_log = logging.getLogger(ARGON_LOG)

_WINDOWS = sys.platform == "win32"


class ProgramName(enum.Enum):
    """The external programs that can be started."""

    ARGON = "argon"
    GIT = "git"
    NPM = "npm"
    NPX = "npx"
    WALLY = "wally"


@dataclass(frozen=True)
class _Command:
    argv: list[str]
    cwd: Path | None
    env: dict[str, str] | None
    quiet: bool


def _bold(text: str) -> str:
    if util.env_log_style() is LogStyle.ALWAYS:
        return f"\x1b[1m{text}\x1b[0m"
    return text


def _current_executable() -> str:
    if sys.argv and sys.argv[0]:
        candidate = Path(sys.argv[0])
        if candidate.is_file() and os.access(candidate, os.X_OK):
            return str(candidate.resolve())
    return "argon"


class Program:
    """A builder for one invocation of an external program."""

    def __init__(
        self,
        program: ProgramName,
        package_manager: str = "npm",
        install_link: str | None = None,
    ) -> None:
        self._program = program
        self._package_manager = package_manager
        self._install_link = install_link
        self._args: list[str] = []
        self._current_dir = Path.cwd()
        self._message = "Failed to start child process"

    def arg(self, value) -> Program:
        """Append an argument; empty arguments are ignored."""
        value = str(value)
        if not value:
            return self

        # `npm create` needs `--` before the arguments of the created command
        if len(self._args) == 1 and self._program is ProgramName.NPM and self._package_manager == "npm":
            self._args.append("--")

        self._args.append(value)
        return self

    def args(self, values) -> Program:
        for value in values:
            self.arg(value)
        return self

    def current_dir(self, directory) -> Program:
        self._current_dir = Path(directory)
        return self

    def message(self, text: str) -> Program:
        """Set the message used when the program cannot be started."""
        self._message = text
        return self

    def spawn(self) -> subprocess.Popen | None:
        """Start the program; return None if it is not installed."""
        command = self._command()
        stream = subprocess.DEVNULL if command.quiet else None
        try:
            return subprocess.Popen(
                command.argv, cwd=command.cwd, env=command.env, stdout=stream, stderr=stream
            )
        except OSError as err:
            return self._handle_error(err)

    def output(self) -> subprocess.CompletedProcess | None:
        """Run the program to completion; return None if it is not installed."""
        command = self._command()
        stream = subprocess.DEVNULL if command.quiet else subprocess.PIPE
        try:
            return subprocess.run(
                command.argv,
                cwd=command.cwd,
                env=command.env,
                stdout=stream,
                stderr=stream,
                check=False,
            )
        except OSError as err:
            return self._handle_error(err)

    def _command(self) -> _Command:
        if self._program is ProgramName.ARGON:
            env = {
                **os.environ,
                "RUST_VERBOSE": util.env_verbosity().name,
                "RUST_LOG_STYLE": str(util.env_log_style()),
                "RUST_BACKTRACE": "1" if util.env_backtrace() else "0",
                "RUST_YES": "1" if util.env_yes() else "0",
            }
            argv = [_current_executable(), *self._args, "--argon-spawn"]
            return _Command(argv=argv, cwd=None, env=env, quiet=False)

        manager = self._package_manager
        if self._program is ProgramName.NPM:
            program = manager
        elif self._program is ProgramName.NPX:
            program = "npx" if manager == "npm" else manager
        elif self._program is ProgramName.GIT:
            program = "git"
        else:
            program = "wally"

        if (
            _WINDOWS
            and self._program in (ProgramName.NPM, ProgramName.NPX)
            and shutil.which(manager) is None
        ):
            program += ".cmd"

        return _Command(
            argv=[program, *self._args],
            cwd=self._current_dir,
            env=None,
            quiet=util.env_verbosity() is Verbosity.OFF,
        )

    def _handle_error(self, error: OSError) -> None:
        if not isinstance(error, FileNotFoundError) or self._program is ProgramName.ARGON:
            raise RuntimeError(f"{self._message}: {error}") from error

        _log.error("%s", self._error_text())

        if self._install_link is not None and logger.prompt(self._prompt_text(), False):
            webbrowser.open(self._install_link)

        return None

    def _display_name(self) -> str:
        if self._program is ProgramName.GIT:
            return "Git"
        if self._program is ProgramName.WALLY:
            return "Wally"
        return self._package_manager

    def _error_text(self) -> str:
        if self._program is ProgramName.GIT:
            return (
                f"{self._message}: {_bold('Git')} is not installed. To suppress this message remove "
                f"{_bold('--git')} option or disable {_bold('use_git')} setting"
            )
        if self._program is ProgramName.WALLY:
            return f"{self._message}: Wally is not installed"
        return f"{self._message}: {_bold(self._package_manager)} is not installed"

    def _prompt_text(self) -> str:
        return f"Do you want to install {_bold(self._display_name())} now?"