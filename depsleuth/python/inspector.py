"""Inspection of plain Python projects: imports, requirements and build requirements."""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator

from depsleuth.common import Dependency, Language, Module, PackageManager, use_logger
from depsleuth.python.buildsys import toml_build_sys_file
from depsleuth.python.imports import parse_py_import
from depsleuth.python.pip import PipError, execute_pip_list
from depsleuth.python.requirements import read_requirements
from depsleuth.utils import is_file

_MAX_PY_READ = 4 * 1024 * 1024
_MAX_LINE = 16 * 1024


def merge_component_version_only(target: dict[str, str], deps: Iterable[Dependency]) -> None:
    """Fill in versions of already known components that have none yet."""
    for dep in deps:
        if dep.name in target and not target[dep.name] and dep.version:
            target[dep.name] = dep.version


def merge_component_into(target: dict[str, str], deps: Iterable[Dependency]) -> None:
    """Add components; an empty version never replaces a known one."""
    for dep in deps:
        if not dep.version and target.get(dep.name, ""):
            continue
        target[dep.name] = dep.version


def _walk(directory: str) -> Iterator[tuple[str, str, bool]]:
    """Yield (path, name, is_dir) below ``directory`` in lexical order, skipping venv."""
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError:
        return
    for entry in entries:
        entry_is_dir = entry.is_dir(follow_symlinks=False)
        if entry_is_dir and entry.name == "venv":
            continue
        yield entry.path, entry.name, entry_is_dir
        if entry_is_dir:
            yield from _walk(entry.path)


def _read_imports(path: str) -> Iterator[str]:
    with open(path, "rb") as f:
        data = f.read(_MAX_PY_READ)
    for raw in data.split(b"\n"):
        if len(raw) > _MAX_LINE:
            break
        yield from parse_py_import(raw.decode("utf-8", "replace"))


class PythonInspector:
    """Collects the components a Python project uses."""

    def __init__(self, blacklist: Iterable[str] = (), use_pip: bool = True) -> None:
        self.blacklist = frozenset(blacklist)
        self.use_pip = use_pip

    def __str__(self) -> str:
        return "PythonInspector"

    def check_dir(self, directory: str | os.PathLike) -> bool:
        try:
            names = os.listdir(directory)
        except OSError:
            return False
        return any(
            os.path.splitext(name)[1] == ".py"
            or name.startswith("requirements")
            or name == "pyproject.toml"
            for name in names
        )

    def inspect(self, scan_dir: str | os.PathLike, project_dir: str | os.PathLike) -> list[Module]:
        """Return the module found in ``scan_dir``, or an empty list if it has no components."""
        logger = use_logger()
        scan_dir = os.fspath(scan_dir)
        try:
            relative_dir = os.path.relpath(scan_dir, project_dir).replace(os.sep, "/")
        except ValueError:
            relative_dir = ""

        components: dict[str, str] = {}
        requirements_files: set[str] = set()
        ignored: set[str] = set()

        logger.debug("Start walk python project dir: %s", scan_dir)
        root_name = os.path.basename(os.path.normpath(scan_dir))
        if root_name != "venv":
            ignored.add(root_name)
            for path, name, entry_is_dir in _walk(scan_dir):
                if entry_is_dir:
                    ignored.add(name)
                    continue
                ext = os.path.splitext(name)[1]
                if ext in (".txt", "") and name.startswith("requirements"):
                    requirements_files.add(path)
                    continue
                if ext != ".py":
                    continue
                try:
                    imports = list(_read_imports(path))
                except OSError as e:
                    logger.warning("Open python file failed: %s, path: %s", e, path)
                    break
                for pkg in imports:
                    if pkg not in self.blacklist:
                        components[pkg] = ""

        for path in sorted(requirements_files):
            logger.debug("Merge requirements file: %s", path)
            try:
                deps = read_requirements(path)
            except OSError as e:
                logger.error("Read requirements failed: %s", e)
                continue
            merge_component_into(components, deps)

        toml_path = os.path.join(scan_dir, "pyproject.toml")
        if is_file(toml_path):
            try:
                build_deps = toml_build_sys_file(toml_path)
            except Exception as e:  # any unreadable or malformed file is only reported
                logger.warning("Analyze pyproject.toml failed: %s", e)
            else:
                logger.debug("Merge components from toml build file, total: %d", len(build_deps))
                merge_component_into(components, build_deps)

        if self.use_pip:
            try:
                pip_deps = execute_pip_list(scan_dir)
            except PipError as e:
                logger.warning("pip list execution failed: %s", e)
            else:
                merge_component_version_only(components, pip_deps)

        for name in ignored:
            components.pop(name, None)
        if not components:
            logger.warning("No components valid, omit module")
            return []
        return [
            Module(
                package_manager=PackageManager.PIP,
                language=Language.PYTHON,
                name=relative_dir,
                file_path=scan_dir,
                dependencies=[Dependency(name=k, version=v) for k, v in components.items()],
            )
        ]