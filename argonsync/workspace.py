"""Creating new project workspaces from templates."""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass
from datetime import datetime, timezone
from itertools import islice
from pathlib import Path

import requests

from . import util
from .logger import ARGON_LOG
from .program import Program, ProgramName

_log = logging.getLogger(ARGON_LOG)
_debug = logging.getLogger(__name__)


@dataclass
class WorkspaceConfig:
    """What to put into a new workspace."""

    project: Path
    template: str
    license: str
    git: bool = False
    wally: bool = False
    selene: bool = False
    docs: bool = False
    rojo_mode: bool = False
    use_lua: bool = False

    def __post_init__(self) -> None:
        self.project = Path(self.project)


def _dir_name(directory: Path) -> str:
    return directory.name or directory.absolute().name


def _lines(text: str) -> list[str]:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line.removesuffix("\r") for line in lines]


def _strip_packages(contents: str) -> str:
    """Drop the `Packages` node, and the comma before it, from a project file."""
    output = ""
    lines = iter(_lines(contents))
    for line in lines:
        if "Packages" in line:
            output = output[:-2] + "\n"
            list(islice(lines, 2))
        else:
            output += line + "\n"
    return output


def _copy(source: Path, target: Path) -> None:
    if source.is_dir():
        shutil.copytree(source, target)
    else:
        shutil.copyfile(source, target)


def _copy_with_name(source: Path, target: Path, name: str) -> None:
    target.write_text(source.read_text(encoding="utf-8").replace("$name", name), encoding="utf-8")


def init(workspace: WorkspaceConfig) -> None:
    """Fill the project's directory from its template, skipping files that exist."""
    template_dir = util.get_argon_dir() / "templates" / workspace.template
    if not template_dir.exists():
        raise FileNotFoundError(f"Template {workspace.template} does not exist")

    workspace_dir = workspace.project.parent
    project_name = _dir_name(workspace_dir)

    workspace_dir.mkdir(parents=True, exist_ok=True)

    for path in sorted(template_dir.iterdir()):
        name = path.name
        new_path = workspace.project if name == "project.json" else workspace_dir / name

        if new_path.exists():
            continue

        if name == "project.json":
            contents = path.read_text(encoding="utf-8").replace("$name", project_name)
            if not workspace.wally:
                contents = _strip_packages(contents)
            new_path.write_text(contents, encoding="utf-8")
        elif name in (".gitignore", ".github"):
            if workspace.git:
                _copy(path, new_path)
        elif name == "wally.toml":
            if workspace.wally or workspace.template == "package":
                contents = path.read_text(encoding="utf-8")
                contents = contents.replace("$name", project_name.lower())
                contents = contents.replace("$author", util.get_username().lower())
                contents = contents.replace("$license", workspace.license)
                new_path.write_text(contents, encoding="utf-8")
        elif name == "selene.toml":
            if workspace.selene:
                _copy(path, new_path)
        elif path.stem in ("README", "CHANGELOG"):
            if workspace.docs:
                _copy_with_name(path, new_path, project_name)
        elif path.stem == "LICENSE":
            if workspace.docs:
                add_license(new_path, workspace.license, path.read_text(encoding="utf-8"))
        elif path.is_dir():
            copy_dir(path, new_path, workspace.rojo_mode, workspace.use_lua)
        else:
            shutil.copyfile(path, new_path)

    if workspace.git:
        initialize_repo(workspace_dir)


def init_ts(workspace: WorkspaceConfig, package_manager: str) -> Path | None:
    """Create a roblox-ts project with the package manager, then add template extras.

    Returns the project directory, or None if the project was not created.
    """
    _log.info("Waiting for %s..", package_manager)

    template = workspace.template
    project = workspace.project
    env_yes = util.env_yes()

    command = template if template in ("plugin", "package", "model") else "game" if template == "place" else "init"

    if project.name.endswith(".project.json"):
        project = workspace.project.parent

    if command == "init" and env_yes:
        command = "game"

    child = (
        Program(ProgramName.NPM, package_manager)
        .message("Failed to initialize roblox-ts project")
        .arg("create")
        .arg("roblox-ts")
        .arg(command)
        .arg("--skipBuild")
        .arg(f"--git={str(workspace.git).lower()}")
        .arg(f"--packageManager={package_manager}")
        .args(["--dir", str(project)])
        .arg("--yes" if env_yes else "")
        .spawn()
    )

    if child is None or child.wait() != 0:
        return None

    template_dir = util.get_argon_dir() / "templates" / template
    if not template_dir.exists():
        _log.warning("Template %s does not exist, additional files won't be added!", template)
        return project

    project_name = _dir_name(project)

    for path in sorted(template_dir.iterdir()):
        new_path = project / path.name
        if new_path.exists():
            continue

        stem = path.stem
        if stem == "wally":
            if workspace.wally or template == "package":
                contents = path.read_text(encoding="utf-8")
                contents = contents.replace("$name", project_name.lower())
                contents = contents.replace("$author", util.get_username().lower())
                new_path.write_text(contents, encoding="utf-8")
        elif stem in ("README", "CHANGELOG"):
            if workspace.docs:
                _copy_with_name(path, new_path, project_name)
        elif stem == "LICENSE":
            if workspace.docs:
                add_license(new_path, workspace.license, path.read_text(encoding="utf-8"))

    return project


def initialize_repo(directory) -> None:
    """Run `git init` in the directory."""
    output = (
        Program(ProgramName.GIT)
        .message("Failed to initialize repository")
        .arg("init")
        .arg(str(directory))
        .output()
    )
    if output is not None:
        _debug.debug("Initialized Git repository")


def _fetch_license(license: str) -> str:
    base = os.environ.get("ARGON_LICENSE_API")
    if not base:
        raise LookupError("No license service configured")

    try:
        response = requests.get(f"{base.rstrip('/')}/{license}", headers={"User-Agent": "Argon"}, timeout=30)
    except requests.RequestException as err:
        raise ConnectionError("No internet connection") from err

    try:
        data = response.json()
    except ValueError as err:
        raise LookupError("Bad SPDX License ID") from err

    body = data.get("body") if isinstance(data, dict) else None
    if not isinstance(body, str):
        raise LookupError("Bad SPDX License ID")
    return body


def add_license(path, license: str, fallback: str) -> None:
    """Write the license text to `path`, using `fallback` if it cannot be fetched.

    The license text is fetched from the service named by `ARGON_LICENSE_API`.
    """
    _debug.debug("Getting %s license template..", license)

    path = Path(path)
    name = util.get_username()
    year = str(datetime.now(timezone.utc).year)

    try:
        text = _fetch_license(license)
    except (ConnectionError, LookupError) as err:
        text = fallback.replace("$license", license).replace("$year", year).replace("$owner", name)
        path.write_text(text, encoding="utf-8")
        _log.warning("Failed to add license: %s. Using basic fallback instead!", err)
        return

    replacements = (
        ("[yyyy]", year),
        ("[name of copyright owner]", name),
        ("[year]", year),
        ("[fullname]", name),
        ("<year>", year),
        ("<name of author>", name),
    )
    for placeholder, value in replacements:
        text = text.replace(placeholder, value)

    path.write_text(text, encoding="utf-8")


def copy_dir(source, target, rojo_mode: bool, use_lua: bool) -> None:
    """Copy a template directory, renaming sources for Rojo mode and plain Lua."""
    source, target = Path(source), Path(target)
    target.mkdir(parents=True, exist_ok=True)

    for path in sorted(source.iterdir()):
        name = path.name

        if name.startswith(".src") and rojo_mode:
            name = name.replace(".src", "init")
        if name.endswith(".luau") and use_lua:
            name = name.replace(".luau", ".lua")

        if path.is_dir():
            copy_dir(path, target / name, rojo_mode, use_lua)
        elif name != ".gitkeep":
            shutil.copyfile(path, target / name)