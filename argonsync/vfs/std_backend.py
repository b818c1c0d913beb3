"""A backend over the real file system, with optional change watching."""

from __future__ import annotations

import os
import queue
import shutil
from pathlib import Path

from .debouncer import VfsDebouncer
from .events import VfsBackend, VfsEvent


class StdBackend(VfsBackend):
    """Reads and writes the disk; when `watch` is set, reports changes."""

    def __init__(self, watch: bool) -> None:
        self._watching = watch
        self._debouncer = VfsDebouncer()
        self._watched_paths: list[Path] = []

    def read(self, path: str | os.PathLike) -> bytes:
        return Path(path).read_bytes()

    def read_to_string(self, path: str | os.PathLike) -> str:
        return Path(path).read_text(encoding="utf-8")

    def read_dir(self, path: str | os.PathLike) -> list[Path]:
        return list(Path(path).iterdir())

    def write(self, path: str | os.PathLike, contents: bytes) -> None:
        Path(path).write_bytes(contents)

    def create_dir(self, path: str | os.PathLike) -> None:
        Path(path).mkdir(parents=True, exist_ok=True)

    def rename(self, source: str | os.PathLike, target: str | os.PathLike) -> None:
        os.replace(source, target)

    def remove(self, path: str | os.PathLike) -> None:
        path = Path(path)
        self.unwatch(path)

        if path.is_dir():
            shutil.rmtree(path)
        else:
            path.unlink()

    def exists(self, path: str | os.PathLike) -> bool:
        return Path(path).exists()

    def is_dir(self, path: str | os.PathLike) -> bool:
        return Path(path).is_dir()

    def is_file(self, path: str | os.PathLike) -> bool:
        return Path(path).is_file()

    def watch(self, path: str | os.PathLike, recursive: bool) -> None:
        path = Path(path)

        if not self._watching or any(path.is_relative_to(p) for p in self._watched_paths):
            return

        self._debouncer.watch(path, recursive)
        self._watched_paths.append(path)

    def unwatch(self, path: str | os.PathLike) -> None:
        if not self._watching:
            return

        path = Path(path)
        kept = []
        for watched in self._watched_paths:
            if watched.is_relative_to(path):
                try:
                    self._debouncer.unwatch(watched)
                except OSError:
                    pass
            else:
                kept.append(watched)
        self._watched_paths = kept

    def pause(self) -> None:
        self._debouncer.pause()

    def resume(self) -> None:
        self._debouncer.resume()

    def receiver(self) -> queue.Queue[VfsEvent]:
        return self._debouncer.receiver()