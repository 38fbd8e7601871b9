"""Inspection of Poetry projects."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field

from depsleuth.common import Dependency, Language, Module, PackageManager, use_logger
from depsleuth.simpletoml import parse_toml
from depsleuth.utils import is_file, read_file_limited

_MAX_READ = 4 * 1024 * 1024


class PoetryError(Exception):
    """A Poetry manifest could not be read or understood."""


@dataclass
class Manifest:
    """Project name and declared dependencies of a Poetry manifest."""

    name: str
    dependencies: list[Dependency] = field(default_factory=list)


def parse_poetry(data: bytes | str) -> Manifest:
    """Parse a ``pyproject.toml`` with a ``[tool.poetry]`` section."""
    try:
        root = parse_toml(data)
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        raise PoetryError("ErrParsePoetry: Bad manifest: Parse toml failed") from e
    table = root.get("tool", "poetry", "dependencies").value
    if not isinstance(table, dict):
        raise PoetryError("ErrParsePoetry: Bad manifest: bad toml")
    deps: list[Dependency] = []
    for name, spec in table.items():
        if not isinstance(spec, str):
            continue
        version = spec.strip("~^* ")
        if version:
            deps.append(Dependency(name=name, version=version))
    return Manifest(name=root.get("tool", "poetry", "name").string("<noname>"), dependencies=deps)


def parse_poetry_lock(path: str | os.PathLike) -> list[Dependency]:
    """Return the packages listed in a Poetry lock file."""
    logger = use_logger()
    try:
        root = parse_toml(read_file_limited(path, _MAX_READ))
    except OSError:
        logger.warning("Read file failed: %s", path)
        raise
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        logger.warning("Parse toml failed: %s", path)
        raise PoetryError(f"Parse toml failed: {e}") from e
    deps = [
        Dependency(name=item.get("name").string(), version=item.get("version").string())
        for item in root.get("package").array()
    ]
    logger.info("Parse poetry.lock, found %d", len(deps))
    return deps


class PoetryInspector:
    """Collects dependencies from ``pyproject.toml`` and the Poetry lock file."""

    def __str__(self) -> str:
        return "PoetryInspector"

    def check_dir(self, directory: str | os.PathLike) -> bool:
        return is_file(os.path.join(directory, "pyproject.toml"))

    def inspect(self, scan_dir: str | os.PathLike, project_dir: str | os.PathLike) -> list[Module]:
        pyproject = os.path.join(scan_dir, "pyproject.toml")
        try:
            data = read_file_limited(pyproject, _MAX_READ)
        except OSError as e:
            raise PoetryError(f"Read pyproject.toml fail: {e}") from e
        manifest = parse_poetry(data)
        components = {dep.name: dep.version for dep in manifest.dependencies}
        lock_file = os.path.join(scan_dir, "poetry.lock.py")
        if is_file(lock_file):
            try:
                locked = parse_poetry_lock(lock_file)
            except (OSError, PoetryError):
                locked = []
            components.update((dep.name, dep.version) for dep in locked)
        return [
            Module(
                package_manager=PackageManager.POETRY,
                language=Language.PYTHON,
                package_file="pyproject.toml",
                name=manifest.name,
                dependencies=[Dependency(name=k, version=v) for k, v in components.items()],
            )
        ]