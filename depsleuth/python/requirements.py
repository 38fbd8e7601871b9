"""Parsing of pip requirements files and ``pip list --format freeze`` output."""

from __future__ import annotations

import os

from depsleuth.common import Dependency

_OPERATORS = ">=<"


def parse_requirements(data: str) -> list[Dependency]:
    """Parse ``name==version`` style lines; lines without ``=`` have no version."""
    deps: list[Dependency] = []
    for raw in data.split("\n"):
        line = raw.strip()
        if not line:
            continue
        name, sep, version = line.partition("=")
        name = name.rstrip(_OPERATORS).strip()
        version = version.lstrip(_OPERATORS).strip() if sep else ""
        deps.append(Dependency(name=name, version=version))
    return deps


def read_requirements(path: str | os.PathLike) -> list[Dependency]:
    """Read and parse a requirements file; raises ``OSError`` if it cannot be read."""
    with open(path, "rb") as f:
        data = f.read()
    return parse_requirements(data.decode("utf-8", "replace"))