import queue
import time
from pathlib import Path
from types import SimpleNamespace

import pytest

from argonsync.vfs import debouncer
from argonsync.vfs.debouncer import VfsDebouncer
from argonsync.vfs.events import EventKind, VfsEvent


def _raw(kind, src, dest="", is_directory=False):
    return SimpleNamespace(event_type=kind, src_path=src, dest_path=dest, is_directory=is_directory)


def _collect(receiver, predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    seen = []
    while time.monotonic() < deadline:
        try:
            event = receiver.get(timeout=0.1)
        except queue.Empty:
            continue
        seen.append(event)
        if predicate(event):
            break
    return seen


def test_translate_deleted():
    context = debouncer._DebounceContext()
    assert debouncer._translate(_raw("deleted", "a/b"), 1.0, context) == [VfsEvent(EventKind.DELETE, "a/b")]


def test_translate_moved_gives_delete_then_create():
    context = debouncer._DebounceContext()
    result = debouncer._translate(_raw("moved", "a", "b"), 1.0, context)
    assert result == [VfsEvent(EventKind.DELETE, "a"), VfsEvent(EventKind.CREATE, "b")]


def test_translate_created_records_context(tmp_path):
    target = tmp_path / "new.luau"
    target.write_text("")
    context = debouncer._DebounceContext()
    result = debouncer._translate(_raw("created", str(target)), 7.0, context)
    assert result == [VfsEvent(EventKind.CREATE, target)]
    assert context.path == target
    assert context.time == 7.0


def test_write_right_after_create_is_dropped(tmp_path):
    target = tmp_path / "new.luau"
    target.write_text("")
    context = debouncer._DebounceContext()
    debouncer._translate(_raw("created", str(target)), 10.0, context)
    assert debouncer._translate(_raw(debouncer._WRITE_EVENT, str(target)), 10.0, context) == []
    later = debouncer._translate(_raw(debouncer._WRITE_EVENT, str(target)), 11.0, context)
    assert later == [VfsEvent(EventKind.WRITE, target)]


def test_directory_write_is_ignored():
    context = debouncer._DebounceContext()
    assert debouncer._translate(_raw(debouncer._WRITE_EVENT, "dir", is_directory=True), 1.0, context) == []


def test_unknown_event_is_ignored():
    context = debouncer._DebounceContext()
    assert debouncer._translate(_raw("opened", "file"), 1.0, context) == []


def test_watch_missing_path_raises(tmp_path):
    with VfsDebouncer() as deb:
        with pytest.raises(FileNotFoundError):
            deb.watch(tmp_path / "missing", True)


def test_unwatch_unwatched_path_raises(tmp_path):
    with VfsDebouncer() as deb:
        with pytest.raises(FileNotFoundError):
            deb.unwatch(tmp_path)


def test_create_event_is_delivered(tmp_path):
    with VfsDebouncer(quiet_period=0.0) as deb:
        deb.watch(tmp_path, True)
        target = tmp_path / "script.luau"
        target.write_text("print(1)")

        resolved = target.resolve()
        seen = _collect(
            deb.receiver(),
            lambda e: e.kind is EventKind.CREATE and Path(e.path).resolve() == resolved,
        )
        assert any(e.kind is EventKind.CREATE and Path(e.path).resolve() == resolved for e in seen)


def test_paused_debouncer_drops_events(tmp_path):
    with VfsDebouncer(quiet_period=0.0) as deb:
        deb.watch(tmp_path, True)
        deb.pause()
        (tmp_path / "ignored.txt").write_text("x")
        time.sleep(0.6)
        assert deb.receiver().empty()


def test_unwatched_path_stops_events(tmp_path):
    with VfsDebouncer(quiet_period=0.0) as deb:
        deb.watch(tmp_path, True)
        deb.unwatch(tmp_path)
        (tmp_path / "late.txt").write_text("x")
        time.sleep(0.6)
        assert deb.receiver().empty()