"""The ``dependency-graph.json`` file written by the depgraph Maven plugin."""

from __future__ import annotations

import json
import os
from collections.abc import Container
from dataclasses import dataclass, field
from typing import Any

from depsleuth.maven.coordinate import Coordinate
from depsleuth.maven.deptree import MavenDependency
from depsleuth.maven.errors import MvnErrorKind


@dataclass
class GraphArtifact:
    """One node of the graph."""

    group_id: str = ""
    artifact_id: str = ""
    version: str = ""
    optional: bool = False
    scopes: list[str] = field(default_factory=list)


def _str(value: Any) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeError(f"expected a string, got {value!r}")
    return value


def _int(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected an integer, got {value!r}")
    return value


@dataclass
class PluginGraphOutput:
    """Artifacts and the ``(from, to)`` edges between their indexes."""

    graph_name: str = ""
    artifacts: list[GraphArtifact] = field(default_factory=list)
    dependencies: list[tuple[int, int]] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: bytes | str) -> PluginGraphOutput:
        try:
            doc = json.loads(data)
            if not isinstance(doc, dict):
                raise TypeError("graph document is not an object")
            artifacts = [
                GraphArtifact(
                    group_id=_str(a.get("groupId")),
                    artifact_id=_str(a.get("artifactId")),
                    version=_str(a.get("version")),
                    optional=bool(a.get("optional", False)),
                    scopes=[_str(s) for s in (a.get("scopes") or [])],
                )
                for a in (doc.get("artifacts") or [])
            ]
            edges = [
                (_int(d.get("numericFrom")), _int(d.get("numericTo")))
                for d in (doc.get("dependencies") or [])
            ]
            return cls(_str(doc.get("graphName")), artifacts, edges)
        except (ValueError, TypeError, AttributeError) as e:
            raise MvnErrorKind.BAD_DEPS_GRAPH.wrap(e) from e

    @classmethod
    def from_file(cls, path: str | os.PathLike) -> PluginGraphOutput:
        """Read a ``dependency-graph.json`` file."""
        try:
            with open(path, "rb") as f:
                data = f.read()
        except OSError as e:
            raise MvnErrorKind.BAD_DEPS_GRAPH.detailed_wrap("read graph file", e) from e
        return cls.from_json(data)

    def _edges(self) -> dict[int, list[int]]:
        edges: dict[int, list[int]] = {}
        seen: set[tuple[int, int]] = set()
        for edge in self.dependencies:
            if edge in seen:
                continue
            seen.add(edge)
            edges.setdefault(edge[0], []).append(edge[1])
        return edges

    def _root(self) -> int:
        candidate = [False] * len(self.artifacts)
        for _, to in self.dependencies:
            if not 0 <= to < len(candidate):
                raise MvnErrorKind.BAD_DEPS_GRAPH.detailed("numeric_to > len(artifacts)")
            candidate[to] = True
        for index, reached in enumerate(candidate):
            if not reached:
                return index
        raise MvnErrorKind.BAD_DEPS_GRAPH.detailed("root node not found")

    def tree(self, scopes: Container[str]) -> MavenDependency:
        """Return the tree below the root artifact.

        Artifacts whose scopes are outside ``scopes``, or that are neither
        compile nor runtime scoped, are left out with everything below them.
        """
        edges = self._edges()
        visited = [False] * len(self.artifacts)

        def build(index: int) -> MavenDependency | None:
            if visited[index]:
                return None
            artifact = self.artifacts[index]
            if artifact.scopes and not any(s in scopes for s in artifact.scopes):
                return None
            if "compile" not in artifact.scopes and "runtime" not in artifact.scopes:
                return None
            visited[index] = True
            try:
                node = MavenDependency(
                    Coordinate(artifact.group_id, artifact.artifact_id, artifact.version)
                )
                for to in edges.get(index, []):
                    child = build(to)
                    if child is not None:
                        node.children.append(child)
                return node
            finally:
                visited[index] = False

        result = build(self._root())
        if result is None:
            raise MvnErrorKind.BAD_DEPS_GRAPH.detailed("empty graph")
        return result