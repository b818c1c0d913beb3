[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "argonsync"
version = "0.1.0"
description = "Toolkit for syncing game project trees with files: virtual file systems, file middleware, sessions, usage stats and workspace scaffolding"
requires-python = ">=3.11"
keywords = ["sync", "vfs", "luau", "workspace", "sessions", "msgpack"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development",
]
dependencies = [
    "requests",
    "watchdog",
    "msgpack",
    "tomli-w",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["argonsync"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"
