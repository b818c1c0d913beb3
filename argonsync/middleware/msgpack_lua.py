"""Reading MessagePack files as Luau module scripts."""

from __future__ import annotations

import math
import os
from decimal import Decimal

import msgpack

from ..vfs.filesystem import Vfs

_ESCAPES = {"\n": "\\n", "\t": "\\t", "\r": "\\r", "\\": "\\\\", '"': '\\"'}


class _Pairs(list):
    """Map entries in their encoded order; keys need not be hashable."""


def _unpack(data: bytes) -> object:
    return msgpack.unpackb(
        data,
        raw=False,
        unicode_errors="surrogateescape",
        strict_map_key=False,
        object_pairs_hook=_Pairs,
    )


def _format_float(number: float) -> str:
    if math.isinf(number):
        return "math.huge"
    if math.isnan(number):
        return "NaN"
    if number == 0:
        return "-0" if math.copysign(1.0, number) < 0 else "0"
    if number.is_integer():
        return str(int(number))
    text = repr(number)
    if "e" in text or "E" in text:
        text = format(Decimal(text), "f")
    return text


def _format_string(text: str) -> str:
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        text = ""
    return f'"{escape_chars(text)}"'


def escape_chars(string: str) -> str:
    """Escape a string for use inside a double-quoted Luau literal."""
    return "".join(_ESCAPES.get(char, char) for char in string)


def msgpack_to_lua(value: object) -> str:
    """Render a decoded MessagePack value as a Luau expression."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, str):
        return _format_string(value)
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    if isinstance(value, _Pairs):
        return "{" + "".join(f"[{msgpack_to_lua(k)}] = {msgpack_to_lua(v)}," for k, v in value) + "}"
    if isinstance(value, dict):
        return "{" + "".join(f"[{msgpack_to_lua(k)}] = {msgpack_to_lua(v)}," for k, v in value.items()) + "}"
    if isinstance(value, (list, tuple)):
        return "{" + "".join(f"{msgpack_to_lua(item)}," for item in value) + "}"
    # Extension types have no Luau form.
    return ""


def read_msgpack(path: str | os.PathLike, vfs: Vfs) -> tuple[str, dict[str, object]]:
    """Read a MessagePack file; return the `ModuleScript` class and its `Source`."""
    data = vfs.read(path)
    if not data:
        return "ModuleScript", {}

    return "ModuleScript", {"Source": f"return {msgpack_to_lua(_unpack(data))}"}