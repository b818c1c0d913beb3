"""File system change events and the interface every VFS backend provides."""

from __future__ import annotations

import abc
import enum
import os
import queue
from dataclasses import dataclass
from pathlib import Path


class EventKind(enum.Enum):
    """What happened to a path."""

    CREATE = "create"
    DELETE = "delete"
    WRITE = "write"


@dataclass(frozen=True)
class VfsEvent:
    """A change to a single path."""

    kind: EventKind
    path: Path

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", Path(self.path))


class VfsBackend(abc.ABC):
    """Storage behind a `Vfs`: a real file system or an in-memory one."""

    @abc.abstractmethod
    def read(self, path: str | os.PathLike) -> bytes: ...

    @abc.abstractmethod
    def read_to_string(self, path: str | os.PathLike) -> str: ...

    @abc.abstractmethod
    def read_dir(self, path: str | os.PathLike) -> list[Path]: ...

    @abc.abstractmethod
    def write(self, path: str | os.PathLike, contents: bytes) -> None: ...

    @abc.abstractmethod
    def create_dir(self, path: str | os.PathLike) -> None: ...

    @abc.abstractmethod
    def rename(self, source: str | os.PathLike, target: str | os.PathLike) -> None: ...

    @abc.abstractmethod
    def remove(self, path: str | os.PathLike) -> None: ...

    @abc.abstractmethod
    def exists(self, path: str | os.PathLike) -> bool: ...

    @abc.abstractmethod
    def is_dir(self, path: str | os.PathLike) -> bool: ...

    @abc.abstractmethod
    def is_file(self, path: str | os.PathLike) -> bool: ...

    @abc.abstractmethod
    def watch(self, path: str | os.PathLike, recursive: bool) -> None: ...

    @abc.abstractmethod
    def unwatch(self, path: str | os.PathLike) -> None: ...

    @abc.abstractmethod
    def pause(self) -> None: ...

    @abc.abstractmethod
    def resume(self) -> None: ...

    @abc.abstractmethod
    def receiver(self) -> queue.Queue[VfsEvent]: ...