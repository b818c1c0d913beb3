"""Middleware kinds: which reader or writer handles a path or class."""

from __future__ import annotations

import enum
from collections.abc import MutableMapping


class RunContext(enum.IntEnum):
    """The `RunContext` enum of a script instance."""

    LEGACY = 0
    SERVER = 1
    CLIENT = 2


class Middleware(enum.Enum):
    """A kind of file that maps to an instance."""

    PROJECT = "Project"
    INSTANCE_DATA = "InstanceData"

    SERVER_SCRIPT = "ServerScript"
    CLIENT_SCRIPT = "ClientScript"
    MODULE_SCRIPT = "ModuleScript"

    STRING_VALUE = "StringValue"
    LOCALIZATION_TABLE = "LocalizationTable"

    JSON_MODULE = "JsonModule"
    TOML_MODULE = "TomlModule"
    YAML_MODULE = "YamlModule"
    MSGPACK_MODULE = "MsgpackModule"

    JSON_MODEL = "JsonModel"
    RBXM_MODEL = "RbxmModel"
    RBXMX_MODEL = "RbxmxModel"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_class(
        cls, class_name: str, properties: MutableMapping[str, object] | None = None
    ) -> Middleware | None:
        """Pick the middleware that writes instances of `class_name`.

        For a `Script`, a `RunContext` property is taken out of `properties`
        and decides between server and client script; a value other than
        server or client is put back and the script is written as a server one.
        """
        if class_name == "Script":
            if properties is not None and "RunContext" in properties:
                run_context = properties.pop("RunContext")
                if isinstance(run_context, int) and not isinstance(run_context, bool):
                    if run_context == RunContext.SERVER:
                        return cls.SERVER_SCRIPT
                    if run_context == RunContext.CLIENT:
                        return cls.CLIENT_SCRIPT
                    properties["RunContext"] = run_context
            return cls.SERVER_SCRIPT

        return _BY_CLASS.get(class_name)


_BY_CLASS = {
    "LocalScript": Middleware.CLIENT_SCRIPT,
    "ModuleScript": Middleware.MODULE_SCRIPT,
    "StringValue": Middleware.STRING_VALUE,
    "LocalizationTable": Middleware.LOCALIZATION_TABLE,
}


class ScriptType(enum.Enum):
    """Which kind of script a source file holds."""

    SERVER = "server"
    CLIENT = "client"
    MODULE = "module"

    @classmethod
    def from_middleware(cls, middleware: Middleware) -> ScriptType:
        """Map a script middleware to its script type; raise ValueError for any other."""
        try:
            return _SCRIPT_TYPES[middleware]
        except KeyError:
            raise ValueError(f"Cannot convert {middleware} to ScriptType") from None


_SCRIPT_TYPES = {
    Middleware.SERVER_SCRIPT: ScriptType.SERVER,
    Middleware.CLIENT_SCRIPT: ScriptType.CLIENT,
    Middleware.MODULE_SCRIPT: ScriptType.MODULE,
}