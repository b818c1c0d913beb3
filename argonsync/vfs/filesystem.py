"""The thread-safe file system front end used by the rest of the package."""

from __future__ import annotations

import os
import queue
import threading
from pathlib import Path

from .events import VfsBackend, VfsEvent
from .mem_backend import MemBackend
from .std_backend import StdBackend


class Vfs:
    """Serialises access to a backend: the disk by default, or memory."""

    def __init__(self, watch: bool = False, backend: VfsBackend | None = None) -> None:
        self._backend = backend if backend is not None else StdBackend(watch)
        self._lock = threading.Lock()

    @classmethod
    def new_virtual(cls) -> Vfs:
        """Create a file system that lives only in memory."""
        return cls(backend=MemBackend())

    def read(self, path: str | os.PathLike) -> bytes:
        with self._lock:
            return self._backend.read(path)

    def read_to_string(self, path: str | os.PathLike) -> str:
        with self._lock:
            return self._backend.read_to_string(path)

    def read_dir(self, path: str | os.PathLike) -> list[Path]:
        with self._lock:
            return self._backend.read_dir(path)

    def write(self, path: str | os.PathLike, contents: bytes) -> None:
        with self._lock:
            self._backend.write(path, contents)

    def create_dir(self, path: str | os.PathLike) -> None:
        with self._lock:
            self._backend.create_dir(path)

    def rename(self, source: str | os.PathLike, target: str | os.PathLike) -> None:
        with self._lock:
            self._backend.rename(source, target)

    def remove(self, path: str | os.PathLike) -> None:
        with self._lock:
            self._backend.remove(path)

    def exists(self, path: str | os.PathLike) -> bool:
        with self._lock:
            return self._backend.exists(path)

    def is_dir(self, path: str | os.PathLike) -> bool:
        with self._lock:
            return self._backend.is_dir(path)

    def is_file(self, path: str | os.PathLike) -> bool:
        with self._lock:
            return self._backend.is_file(path)

    def watch(self, path: str | os.PathLike, recursive: bool) -> None:
        with self._lock:
            self._backend.watch(path, recursive)

    def unwatch(self, path: str | os.PathLike) -> None:
        with self._lock:
            self._backend.unwatch(path)

    def pause(self) -> None:
        with self._lock:
            self._backend.pause()

    def resume(self) -> None:
        with self._lock:
            self._backend.resume()

    def receiver(self) -> queue.Queue[VfsEvent]:
        with self._lock:
            return self._backend.receiver()