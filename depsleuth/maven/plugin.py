"""Running the depgraph Maven plugin and collecting the graphs it writes."""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Container, Iterator
from dataclasses import dataclass, field

from depsleuth.common import use_logger
from depsleuth.maven.deps import DepsMap
from depsleuth.maven.errors import MavenError, MvnErrorKind
from depsleuth.maven.graph import PluginGraphOutput
from depsleuth.maven.mvn_command import MvnCommandInfo
from depsleuth.maven.project import read_pom_file

_PLUGIN_GOAL = "com.github.ferstl:depgraph-maven-plugin:4.0.1:graph"
_GRAPH_FILE = "dependency-graph.json"


def _log_output(logger: logging.Logger, output: bytes | None) -> None:
    if not output:
        return
    for line in output.decode("utf-8", "replace").splitlines():
        logger.debug("mvn: %s", line)


@dataclass
class PluginGraphCmd:
    """An invocation of the depgraph plugin's ``graph`` goal."""

    path: str
    profiles: list[str] = field(default_factory=list)
    timeout: float = 0
    scan_dir: str = ""

    def args(self) -> list[str]:
        args = [self.path, _PLUGIN_GOAL, "-DgraphFormat=json", "--batch-mode"]
        if self.profiles:
            args += ["-P", ",".join(self.profiles)]
        return args

    def run(self) -> None:
        """Run the command; raises ``MavenError`` if it cannot start or fails."""
        logger = use_logger()
        args = self.args()
        timeout = self.timeout if self.timeout and self.timeout > 0 else None
        logger.info("Start command: %s (dir: %s)", " ".join(args), self.scan_dir)
        try:
            completed = subprocess.run(
                args,
                cwd=self.scan_dir or None,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired as e:
            _log_output(logger, e.output)
            logger.error("%s: timed out", MvnErrorKind.MVN_CMD.value)
            raise MvnErrorKind.MVN_CMD.detailed("signal: killed") from e
        except OSError as e:
            logger.error("Start command failed: %s", e)
            raise MvnErrorKind.MVN_CMD.detailed(str(e)) from e
        _log_output(logger, completed.stdout)
        if completed.returncode != 0:
            logger.error("%s: exit code %d", MvnErrorKind.MVN_CMD.value, completed.returncode)
            raise MvnErrorKind.MVN_CMD.detailed(f"exit status {completed.returncode}")
        logger.info("Mvn graph command exit with no errors")


def find_pom_profiles(pom_path: str | os.PathLike) -> list[str]:
    """Return the ids of the profiles declared in a POM file."""
    return list(read_pom_file(pom_path).profiles)


def _walk_graph_files(root: str, logger: logging.Logger) -> Iterator[str]:
    try:
        with os.scandir(root) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as e:
        logger.warning("Error during graph collection: %s", e)
        return
    for entry in entries:
        if entry.name == _GRAPH_FILE:
            logger.debug("Found graph file: %s", entry.path)
            yield entry.path
        if entry.is_dir(follow_symlinks=False):
            yield from _walk_graph_files(entry.path, logger)


def collect_plugin_result_file(
    project_dir: str | os.PathLike, scopes: Container[str]
) -> DepsMap:
    """Read every ``dependency-graph.json`` below ``project_dir`` into a ``DepsMap``.

    Graphs that cannot be read or turned into a tree are skipped.
    """
    logger = use_logger()
    project_dir = os.fspath(project_dir)
    result = DepsMap()
    for graph_path in _walk_graph_files(project_dir, logger):
        logger.debug("Processing graph: %s", graph_path)
        try:
            tree = PluginGraphOutput.from_file(graph_path).tree(scopes)
        except MavenError as e:
            logger.error("Build deps tree failed: %s: %s", graph_path, e)
            continue
        module_dir = os.path.dirname(os.path.dirname(graph_path))
        try:
            rel = os.path.relpath(module_dir, project_dir)
        except ValueError as e:
            logger.warning("Calculate relative path failed: %s", e)
            rel = ""
        result.put(tree.coordinate, tree.children, os.path.normpath(os.path.join(rel, "pom.xml")))
    return result


def scan_deps_by_plugin_command(
    project_dir: str | os.PathLike,
    mvn_info: MvnCommandInfo,
    timeout: float,
    scopes: Container[str],
) -> DepsMap:
    """Run the graph plugin in ``project_dir`` and collect the graphs it writes."""
    logger = use_logger()
    project_dir = os.fspath(project_dir)
    try:
        profiles = find_pom_profiles(os.path.join(project_dir, "pom.xml"))
    except (OSError, MavenError) as e:
        logger.warning("Error during find pom profiles: %s", e)
        profiles = []
    else:
        logger.info("Found %d profiles", len(profiles))
    cmd = PluginGraphCmd(path=mvn_info.path, profiles=profiles, timeout=timeout, scan_dir=project_dir)
    try:
        cmd.run()
    except MavenError as e:
        logger.error("Maven graph command execution failed: %s", e)
        raise
    logger.info("Maven graph command succeeded, collecting graph file...")
    return collect_plugin_result_file(project_dir, scopes)