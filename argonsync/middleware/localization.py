"""Reading and writing CSV files as LocalizationTable instances."""

from __future__ import annotations

import csv
import io
import json
import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from ..vfs.filesystem import Vfs

_FIELDS = {"Key": "key", "Source": "source", "Context": "context", "Example": "example"}


@dataclass
class _Entry:
    key: str | None = None
    context: str | None = None
    example: str | None = None
    source: str | None = None
    values: dict[str, str] = field(default_factory=dict)

    def to_json(self) -> dict:
        return {
            "key": self.key,
            "context": self.context,
            "example": self.example,
            "source": self.source,
            "values": self.values,
        }

    @classmethod
    def from_json(cls, data: object) -> _Entry:
        if not isinstance(data, dict):
            raise ValueError("localization entry must be an object")
        if "values" not in data:
            raise ValueError("missing field `values`")

        values = data["values"]
        if not isinstance(values, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in values.items()
        ):
            raise ValueError("`values` must map strings to strings")

        texts = {}
        for name in ("key", "context", "example", "source"):
            value = data.get(name)
            if value is not None and not isinstance(value, str):
                raise ValueError(f"`{name}` must be a string or null")
            texts[name] = value

        return cls(values=dict(values), **texts)


def read_csv(path: str | os.PathLike, vfs: Vfs) -> tuple[str, dict[str, object]]:
    """Read a localization CSV; return the `LocalizationTable` class and its `Contents`.

    Rows with neither a key nor a source are skipped.
    """
    contents = vfs.read(path)
    if not contents:
        return "LocalizationTable", {}

    rows = csv.reader(io.StringIO(contents.decode("utf-8"), newline=""))
    headers = next(rows, [])

    entries = []
    for record in rows:
        entry = _Entry()
        for header, value in zip(headers, record):
            if not value:
                continue
            attribute = _FIELDS.get(header)
            if attribute is None:
                entry.values[header] = value
            else:
                setattr(entry, attribute, value)

        if entry.key is not None or entry.source is not None:
            entries.append(entry.to_json())

    serialized = json.dumps(entries, separators=(",", ":"), ensure_ascii=False)
    return "LocalizationTable", {"Contents": serialized}


def write_csv(properties: Mapping[str, object], path: str | os.PathLike, vfs: Vfs) -> dict[str, object]:
    """Write the `Contents` property to `path` as CSV; return the remaining properties."""
    remaining = dict(properties)
    contents = remaining.pop("Contents", None)

    if isinstance(contents, str):
        data = json.loads(contents)
        if not isinstance(data, list):
            raise ValueError("localization contents must be an array")
        entries = [_Entry.from_json(item) for item in data]

        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(["Key", "Source", "Context", "Example"])
        for entry in entries:
            writer.writerow(
                [
                    entry.key or "",
                    entry.source or "",
                    entry.context or "",
                    entry.example or "",
                    *entry.values.values(),
                ]
            )

        vfs.write(path, buffer.getvalue().encode("utf-8"))

    return remaining