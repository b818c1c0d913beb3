"""Reading and writing Luau script sources."""

from __future__ import annotations

import os
from collections.abc import Mapping

from ..vfs.filesystem import Vfs
from .kinds import RunContext, ScriptType


def _script_class(use_legacy_scripts: bool, script_type: ScriptType) -> tuple[str, RunContext | None]:
    if script_type is ScriptType.MODULE:
        return "ModuleScript", None
    if use_legacy_scripts:
        if script_type is ScriptType.SERVER:
            return "Script", RunContext.LEGACY
        return "LocalScript", None
    if script_type is ScriptType.SERVER:
        return "Script", RunContext.SERVER
    return "Script", RunContext.CLIENT


def read_luau(
    path: str | os.PathLike, use_legacy_scripts: bool, vfs: Vfs, script_type: ScriptType
) -> tuple[str, dict[str, object]]:
    """Read a script file; return its instance class and properties."""
    class_name, run_context = _script_class(use_legacy_scripts, script_type)

    source = vfs.read_to_string(path)

    properties: dict[str, object] = {}
    if script_type is not ScriptType.MODULE and run_context is not None:
        properties["RunContext"] = run_context
    properties["Source"] = source

    return class_name, properties


def write_luau(properties: Mapping[str, object], path: str | os.PathLike, vfs: Vfs) -> dict[str, object]:
    """Write the `Source` property to `path`; return the remaining properties."""
    remaining = dict(properties)
    source = remaining.pop("Source", None)
    if isinstance(source, str):
        vfs.write(path, source.encode("utf-8"))
    return remaining