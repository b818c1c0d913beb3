"""Registry of running serve sessions, stored in `sessions.toml`."""

from __future__ import annotations

import logging
import signal
import sys
import threading
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

import tomli_w

from . import util

_log = logging.getLogger(__name__)


@dataclass
class Session:
    """A running session: its process id and where it serves."""

    pid: int
    host: str | None = None
    port: int | None = None

    def get_address(self) -> str | None:
        if self.host is not None and self.port is not None:
            return f"http://{self.host}:{self.port}"
        return None

    def _to_toml(self) -> dict:
        data: dict = {"pid": self.pid}
        if self.host is not None:
            data["host"] = self.host
        if self.port is not None:
            data["port"] = self.port
        return data

    @classmethod
    def _from_toml(cls, data: dict) -> Session:
        pid = data["pid"]
        host = data.get("host")
        port = data.get("port")
        if not isinstance(pid, int) or isinstance(pid, bool):
            raise TypeError("pid must be an integer")
        if host is not None and not isinstance(host, str):
            raise TypeError("host must be a string")
        if port is not None and (not isinstance(port, int) or isinstance(port, bool)):
            raise TypeError("port must be an integer")
        return cls(pid=pid, host=host, port=port)


@dataclass
class _Sessions:
    last_session: str = ""
    active_sessions: dict[str, Session] = field(default_factory=dict)

    def to_toml(self) -> str:
        return tomli_w.dumps(
            {
                "last_session": self.last_session,
                "active_sessions": {key: s._to_toml() for key, s in self.active_sessions.items()},
            }
        )

    @classmethod
    def from_toml(cls, text: str) -> _Sessions:
        data = tomllib.loads(text)
        last_session = data["last_session"]
        if not isinstance(last_session, str):
            raise TypeError("last_session must be a string")
        active = {key: Session._from_toml(value) for key, value in data["active_sessions"].items()}
        return cls(last_session=last_session, active_sessions=active)

    def generate_id(self) -> str:
        index = 0
        while str(index) in self.active_sessions:
            index += 1
        return str(index)


def _sessions_path() -> Path:
    return util.get_argon_dir() / "sessions.toml"


def _load(path: Path) -> _Sessions:
    if path.exists():
        try:
            return _Sessions.from_toml(path.read_text(encoding="utf-8"))
        except (tomllib.TOMLDecodeError, KeyError, TypeError, AttributeError, UnicodeDecodeError):
            _log.warning("Session data file is corrupted! Creating new one..")

    sessions = _Sessions()
    _store(sessions, path)
    return sessions


def _store(sessions: _Sessions, path: Path) -> None:
    path.write_text(sessions.to_toml(), encoding="utf-8")


def _cleanup(sessions: _Sessions, path: Path) -> None:
    stale = [key for key, s in sessions.active_sessions.items() if not util.process_exists(s.pid)]
    for key in stale:
        del sessions.active_sessions[key]
    if stale:
        _store(sessions, path)


def _run_cleanup(sessions: _Sessions, path: Path) -> None:
    try:
        _cleanup(sessions, path)
    except OSError as err:
        _log.warning("Failed to cleanup sessions: %s", err)
    else:
        _log.debug("Session cleanup completed")


def add(session_id: str | None, host: str | None, port: int | None, pid: int, run_async: bool) -> None:
    """Register a session and make it the last one.

    Unless `run_async` is set, the entry is removed again on Ctrl-C.
    """
    path = _sessions_path()
    sessions = _load(path)

    session = Session(pid=pid, host=host, port=port)
    if session_id is None:
        session_id = sessions.generate_id()

    sessions.last_session = session_id
    sessions.active_sessions[session_id] = Session(pid=pid, host=host, port=port)
    _store(sessions, path)

    if not run_async:

        def _on_interrupt(signum, frame):
            try:
                remove(session)
            except (OSError, LookupError) as err:
                _log.warning("Failed to remove session entry: %s", err)
            else:
                _log.log(util.TRACE_LEVEL, "Session entry removed")
            sys.exit(0)

        signal.signal(signal.SIGINT, _on_interrupt)

    # Crashed sessions leave stale entries behind; prune them in the background.
    threading.Thread(target=_run_cleanup, args=(sessions, path), daemon=True).start()


def get(session_id: str | None, host: str | None, port: int | None) -> Session | None:
    """Find a session by id, or by host or port; with no criteria return the last one."""
    sessions = _load(_sessions_path())

    if session_id is None and host is None and port is None:
        return sessions.active_sessions.get(sessions.last_session)
    if session_id is not None:
        return sessions.active_sessions.get(session_id)

    return next(
        (s for s in sessions.active_sessions.values() if s.host == host or s.port == port),
        None,
    )


def get_multiple(ids) -> dict[str, Session]:
    """Return the sessions among `ids` that exist."""
    active = _load(_sessions_path()).active_sessions
    return {key: active[key] for key in ids if key in active}


def get_all() -> dict[str, Session]:
    """Return every registered session keyed by id."""
    return _load(_sessions_path()).active_sessions


def remove(session: Session) -> None:
    """Remove the given session; raise LookupError if it is not registered."""
    path = _sessions_path()
    sessions = _load(path)

    session_id = next((key for key, s in sessions.active_sessions.items() if s == session), None)
    if session_id is None:
        raise LookupError("Session not found")

    del sessions.active_sessions[session_id]

    if sessions.last_session == session_id:
        sessions.last_session = next(iter(sessions.active_sessions), "")

    _store(sessions, path)


def remove_multiple(ids) -> None:
    """Remove the sessions with the given ids."""
    path = _sessions_path()
    sessions = _load(path)

    for key in ids:
        sessions.active_sessions.pop(key, None)

    sessions.last_session = next(iter(sessions.active_sessions), "")
    _store(sessions, path)


def remove_all() -> None:
    """Forget every session."""
    _store(_Sessions(), _sessions_path())