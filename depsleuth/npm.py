"""Inspection of npm projects through ``package-lock.json``."""

from __future__ import annotations

import json
import os
from typing import Any

from depsleuth.common import Dependency, Language, Module, PackageManager, use_logger
from depsleuth.utils import is_file

_MAX_DEPTH = 5


def _ci_get(obj: Any, key: str, default: Any = None) -> Any:
    """Look a key up exactly, then without regard to case."""
    if not isinstance(obj, dict):
        return default
    if key in obj:
        return obj[key]
    lowered = key.lower()
    for name, value in obj.items():
        if name.lower() == lowered:
            return value
    return default


def _string(value: Any, what: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"package-lock.json: {what} is not a string")
    return value


def _load_packages(raw: Any) -> dict[str, tuple[str, list[str]]]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError("package-lock.json: dependencies is not an object")
    packages: dict[str, tuple[str, list[str]]] = {}
    for name, entry in raw.items():
        if name.startswith("node_modules/"):
            continue
        if entry is not None and not isinstance(entry, dict):
            raise ValueError(f"package-lock.json: bad entry for {name}")
        version = _string(_ci_get(entry, "version"), f"version of {name}")
        requires = _ci_get(entry, "requires") or {}
        if not isinstance(requires, dict):
            raise ValueError(f"package-lock.json: bad requires of {name}")
        packages[name] = (version, list(requires))
    return packages


def _conv_dep(
    name: str,
    packages: dict[str, tuple[str, list[str]]],
    visited: set[str],
    depth: int,
) -> Dependency | None:
    if depth > _MAX_DEPTH or name in visited:
        return None
    entry = packages.get(name)
    if entry is None:
        return None
    visited.add(name)
    try:
        version, requires = entry
        node = Dependency(name=name, version=version)
        for child_name in requires:
            child = _conv_dep(child_name, packages, visited, depth + 1)
            if child is not None:
                node.dependencies.append(child)
        return node
    finally:
        visited.discard(name)


def scan_npm_project(scan_dir: str | os.PathLike) -> list[Module]:
    """Read ``package-lock.json`` in ``scan_dir`` and return its module.

    Raises ``OSError`` if the file cannot be read and ``ValueError`` if it is
    malformed or of an unsupported lockfile version.
    """
    logger = use_logger()
    scan_dir = os.fspath(scan_dir)
    lock_path = os.path.join(scan_dir, "package-lock.json")
    logger.debug("Read package-lock.json: %s", lock_path)
    with open(lock_path, "rb") as f:
        lock = json.loads(f.read())
    if not isinstance(lock, dict):
        raise ValueError("package-lock.json is not an object")

    lockfile_version = _ci_get(lock, "LockfileVersion", 0)
    if isinstance(lockfile_version, bool) or not isinstance(lockfile_version, int):
        raise ValueError("package-lock.json: lockfileVersion is not an integer")
    if not 1 <= lockfile_version <= 2:
        raise ValueError(f"unsupported lockfileVersion: {lockfile_version}")

    packages = _load_packages(_ci_get(lock, "dependencies"))

    indegree = dict.fromkeys(packages, 0)
    for _, requires in packages.values():
        for dep in requires:
            indegree[dep] = indegree.get(dep, 0) + 1
    roots = [name for name, count in indegree.items() if count == 0]
    if not roots:
        logger.warning("Not found root component")

    module = Module(
        package_manager=PackageManager.NPM,
        language=Language.JAVASCRIPT,
        package_file="package-lock.json",
        name=_string(_ci_get(lock, "name"), "name"),
        version=_string(_ci_get(lock, "version"), "version"),
        file_path=os.path.join(scan_dir, "package.json"),
    )
    for root in roots:
        node = _conv_dep(root, packages, set(), 1)
        if node is not None:
            module.dependencies.append(node)
    return [module]


class NpmInspector:
    """Collects dependencies of projects locked with ``package-lock.json``."""

    def __str__(self) -> str:
        return "NpmInspector"

    def check_dir(self, directory: str | os.PathLike) -> bool:
        return is_file(os.path.join(directory, "package.json")) and is_file(
            os.path.join(directory, "package-lock.json")
        )

    def inspect(self, scan_dir: str | os.PathLike, project_dir: str | os.PathLike) -> list[Module]:
        return scan_npm_project(scan_dir)