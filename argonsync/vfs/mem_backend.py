"""An in-memory file system backend."""

from __future__ import annotations

import os
import queue
from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn

from .events import VfsBackend, VfsEvent


@dataclass
class VfsEntry:
    """A file holding bytes, or a directory holding child paths."""

    contents: bytes = b""
    children: list[Path] | None = None

    @classmethod
    def directory(cls, children: list[Path] | None = None) -> VfsEntry:
        return cls(children=list(children or []))

    @classmethod
    def file(cls, contents: bytes = b"") -> VfsEntry:
        return cls(contents=bytes(contents))

    @property
    def is_dir(self) -> bool:
        return self.children is not None


def _not_found(path: Path) -> NoReturn:
    raise FileNotFoundError(f"path {path} not found")


def _not_file(path: Path) -> NoReturn:
    raise IsADirectoryError(f"path {path} was a directory, but must be a file")


def _not_dir(path: Path) -> NoReturn:
    raise NotADirectoryError(f"path {path} was a file, but must be a directory")


class MemBackend(VfsBackend):
    """Keeps every file and directory in a dictionary; never emits events."""

    def __init__(self) -> None:
        self._entries: dict[Path, VfsEntry] = {}
        self._receiver: queue.Queue[VfsEvent] = queue.Queue()

    def get_entry(self, path: str | os.PathLike) -> VfsEntry:
        path = Path(path)
        entry = self._entries.get(path)
        if entry is None:
            _not_found(path)
        return entry

    def read(self, path: str | os.PathLike) -> bytes:
        entry = self.get_entry(path)
        if entry.is_dir:
            _not_file(Path(path))
        return entry.contents

    def read_to_string(self, path: str | os.PathLike) -> str:
        return self.read(path).decode("utf-8")

    def read_dir(self, path: str | os.PathLike) -> list[Path]:
        entry = self.get_entry(path)
        if not entry.is_dir:
            _not_dir(Path(path))
        return list(entry.children)

    def write(self, path: str | os.PathLike, contents: bytes) -> None:
        path = Path(path)
        entry = self._entries.setdefault(path, VfsEntry.file())
        if entry.is_dir:
            _not_file(path)
        entry.contents = bytes(contents)

    def create_dir(self, path: str | os.PathLike) -> None:
        current: Path | None = None

        for part in Path(path).parts:
            parent = current
            current = Path(part) if current is None else current / part

            entry = self._entries.get(current)
            if entry is None:
                self._entries[current] = VfsEntry.directory()
                parent_entry = self._entries.get(parent) if parent is not None else None
                if parent_entry is not None and parent_entry.is_dir:
                    parent_entry.children.append(current)
            elif not entry.is_dir:
                _not_dir(current)

    def rename(self, source: str | os.PathLike, target: str | os.PathLike) -> None:
        source, target = Path(source), Path(target)

        entry = self._entries.pop(source, None)
        if entry is None:
            _not_found(source)

        self._entries[target] = entry

        parent = self._entries.get(source.parent)
        if parent is not None and parent.is_dir:
            parent.children = [child for child in parent.children if child != source]
            parent.children.append(target)

    def remove(self, path: str | os.PathLike) -> None:
        path = Path(path)

        entry = self._entries.pop(path, None)
        if entry is None:
            _not_found(path)

        if entry.is_dir:
            self._entries = {key: value for key, value in self._entries.items() if not key.is_relative_to(path)}

    def exists(self, path: str | os.PathLike) -> bool:
        return Path(path) in self._entries

    def is_dir(self, path: str | os.PathLike) -> bool:
        entry = self._entries.get(Path(path))
        return entry is not None and entry.is_dir

    def is_file(self, path: str | os.PathLike) -> bool:
        entry = self._entries.get(Path(path))
        return entry is not None and not entry.is_dir

    def watch(self, path: str | os.PathLike, recursive: bool) -> None:
        """Nothing to watch in memory."""

    def unwatch(self, path: str | os.PathLike) -> None:
        """Nothing to unwatch in memory."""

    def pause(self) -> None:
        """Events are never produced, so there is nothing to pause."""

    def resume(self) -> None:
        """Events are never produced, so there is nothing to resume."""

    def receiver(self) -> queue.Queue[VfsEvent]:
        return self._receiver