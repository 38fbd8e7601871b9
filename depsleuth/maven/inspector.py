"""Inspection of Maven projects, with the graph plugin or from POM files alone."""

from __future__ import annotations

import os
from collections.abc import Container, Iterable

from depsleuth.common import Dependency, Language, Module, PackageManager, use_logger
from depsleuth.maven.backup import backup_resolve
from depsleuth.maven.deps import DepsMap
from depsleuth.maven.deptree import MavenDependency
from depsleuth.maven.errors import MavenError, MvnErrorKind
from depsleuth.maven.mvn_command import check_mvn_command
from depsleuth.maven.plugin import scan_deps_by_plugin_command
from depsleuth.utils import is_file

DEFAULT_SCOPES: frozenset[str] = frozenset({"", "compile", "runtime"})


def _command_timeout() -> float:
    try:
        return float(os.environ.get("MVN_COMMAND_TIMEOUT", "0"))
    except ValueError:
        return 0


def _convert(dep: MavenDependency) -> Dependency | None:
    if not dep.group_id or not dep.artifact_id or not dep.version:
        return None
    return Dependency(
        name=dep.name(),
        version=dep.version,
        dependencies=convert_dependencies(dep.children),
    )


def convert_dependencies(deps: Iterable[MavenDependency]) -> list[Dependency]:
    """Convert Maven trees, dropping nodes without a full coordinate."""
    return [d for d in (_convert(dep) for dep in deps) if d is not None]


def scan_maven_project(scan_dir: str | os.PathLike, scopes: Container[str]) -> list[Module]:
    """Return one module per Maven module found in ``scan_dir``.

    The graph plugin is used when ``mvn`` works; otherwise, or if it fails,
    the POM files are resolved directly.
    """
    logger = use_logger()
    scan_dir = os.fspath(scan_dir)
    deps: DepsMap | None = None
    use_backup = False
    try:
        info = check_mvn_command()
    except MavenError as e:
        use_backup = True
        logger.warning("Mvn command not found, results may be incomplete: [%s] %s", scan_dir, e)
    else:
        logger.info("Mvn command found: %s", info)
        try:
            deps = scan_deps_by_plugin_command(scan_dir, info, _command_timeout(), scopes)
        except MavenError as e:
            logger.error("Scan maven dependencies failed: [%s] %s", scan_dir, e)
            use_backup = True

    if use_backup:
        try:
            deps = backup_resolve(scan_dir, scopes, os.environ.get("MAVEN_CENTRAL", ""))
        except (OSError, ValueError, MavenError) as e:
            logger.error("Use backup resolver failed: %s", e)
    if deps is None:
        raise MavenError(MvnErrorKind.INSPECTION)

    return [
        Module(
            package_manager=PackageManager.MAVEN,
            language=Language.JAVA,
            package_file="pom.xml",
            name=entry.coordinate.name(),
            version=entry.coordinate.version,
            file_path=os.path.join(scan_dir, entry.relative_path),
            dependencies=convert_dependencies(entry.children),
        )
        for entry in deps.entries()
    ]


class MavenInspector:
    """Collects dependencies of projects built with Maven."""

    def __init__(self, scopes: Container[str] = DEFAULT_SCOPES) -> None:
        self.scopes = scopes

    def __str__(self) -> str:
        return "MavenInspector"

    def check_dir(self, directory: str | os.PathLike) -> bool:
        return is_file(os.path.join(directory, "pom.xml"))

    def inspect(self, scan_dir: str | os.PathLike, project_dir: str | os.PathLike) -> list[Module]:
        return scan_maven_project(scan_dir, self.scopes)