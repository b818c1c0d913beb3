"""Reading and writing plain text files as StringValue instances."""

from __future__ import annotations

import os
from collections.abc import Mapping

from ..vfs.filesystem import Vfs


def read_txt(path: str | os.PathLike, vfs: Vfs) -> tuple[str, dict[str, object]]:
    """Read a text file; return the `StringValue` class and its `Value`."""
    return "StringValue", {"Value": vfs.read_to_string(path)}


def write_txt(properties: Mapping[str, object], path: str | os.PathLike, vfs: Vfs) -> dict[str, object]:
    """Write the `Value` property to `path`; return the remaining properties."""
    remaining = dict(properties)
    value = remaining.pop("Value", None)
    if isinstance(value, str):
        vfs.write(path, value.encode("utf-8"))
    return remaining