"""Turns raw file system notifications into create, delete and write events."""

from __future__ import annotations

import os
import queue
import sys
import threading
import time
from dataclasses import dataclass
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .events import EventKind, VfsEvent

# A write that follows the creation of the same path this closely is part of it.
DEBOUNCE_TIME = 0.0005

_MACOS = sys.platform == "darwin"
_WRITE_EVENT = "closed" if sys.platform.startswith("linux") else "modified"


@dataclass
class _DebounceContext:
    time: float = float("-inf")
    path: Path | None = None


def _translate(event, received: float, context: _DebounceContext) -> list[VfsEvent]:
    kind = event.event_type
    source = Path(os.fsdecode(event.src_path))

    if kind == "created":
        if _MACOS and not source.exists():
            return []
        context.time = received
        context.path = source
        return [VfsEvent(EventKind.CREATE, source)]

    if kind == "deleted":
        return [VfsEvent(EventKind.DELETE, source)]

    if kind == "moved":
        target = Path(os.fsdecode(event.dest_path))
        return [VfsEvent(EventKind.DELETE, source), VfsEvent(EventKind.CREATE, target)]

    if kind == _WRITE_EVENT and not event.is_directory:
        if source == context.path and received - context.time < DEBOUNCE_TIME:
            return []
        return [VfsEvent(EventKind.WRITE, source)]

    return []


class _Handler(FileSystemEventHandler):
    def __init__(self, inner: queue.Queue) -> None:
        super().__init__()
        self._inner = inner

    def on_any_event(self, event: FileSystemEvent) -> None:
        self._inner.put((time.monotonic(), event))


class VfsDebouncer:
    """Watches paths and delivers batched, debounced `VfsEvent`s to a queue.

    Events arriving while paused, or within `quiet_period` seconds of a pause
    or resume, are dropped.
    """

    def __init__(self, quiet_period: float = 0.1, batch_window: float = 0.1) -> None:
        self._quiet_period = quiet_period
        self._batch_window = batch_window
        self._inner: queue.Queue = queue.Queue()
        self._receiver: queue.Queue[VfsEvent] = queue.Queue()
        self._lock = threading.Lock()
        self._pause_state = (False, time.monotonic())
        self._watches: dict[Path, object] = {}

        self._handler = _Handler(self._inner)
        self._observer = Observer()
        self._observer.daemon = True
        self._observer.start()

        threading.Thread(target=self._run, name="debouncer", daemon=True).start()

    def _run(self) -> None:
        context = _DebounceContext()

        while True:
            first = self._inner.get()
            if first is None:
                return

            batch = [first]
            stop = False
            while True:
                try:
                    item = self._inner.get(timeout=self._batch_window)
                except queue.Empty:
                    break
                if item is None:
                    stop = True
                    break
                batch.append(item)

            with self._lock:
                paused, stamp = self._pause_state

            if not paused and time.monotonic() - stamp >= self._quiet_period:
                for received, event in batch:
                    for vfs_event in _translate(event, received, context):
                        self._receiver.put(vfs_event)

            if stop:
                return

    def watch(self, path: str | os.PathLike, recursive: bool) -> None:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"path {path} not found")
        self._watches[path] = self._observer.schedule(self._handler, str(path), recursive=recursive)

    def unwatch(self, path: str | os.PathLike) -> None:
        path = Path(path)
        watch = self._watches.pop(path, None)
        if watch is None:
            raise FileNotFoundError(f"path {path} is not watched")
        try:
            self._observer.unschedule(watch)
        except KeyError as err:
            raise FileNotFoundError(f"path {path} is not watched") from err

    def pause(self) -> None:
        with self._lock:
            self._pause_state = (True, time.monotonic())

    def resume(self) -> None:
        with self._lock:
            self._pause_state = (False, time.monotonic())

    def receiver(self) -> queue.Queue[VfsEvent]:
        return self._receiver

    def __enter__(self) -> VfsDebouncer:
        return self

    def __exit__(self, *exc_info) -> None:
        self._observer.stop()
        self._inner.put(None)