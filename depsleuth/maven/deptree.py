"""Dependency trees built from resolved POMs, and version reconciling."""

from __future__ import annotations

from collections import deque
from collections.abc import Container, Iterable
from dataclasses import dataclass, field

from depsleuth.common import use_logger
from depsleuth.maven.coordinate import Coordinate
from depsleuth.maven.errors import MavenError
from depsleuth.maven.project import Exclusion, PomDependency
from depsleuth.maven.resolver import PomResolver


@dataclass
class MavenDependency:
    """A Maven artifact and the artifacts it depends on."""

    coordinate: Coordinate
    children: list[MavenDependency] = field(default_factory=list)

    @property
    def group_id(self) -> str:
        return self.coordinate.group_id

    @property
    def artifact_id(self) -> str:
        return self.coordinate.artifact_id

    @property
    def version(self) -> str:
        return self.coordinate.version

    def name(self) -> str:
        return self.coordinate.name()

    def __str__(self) -> str:
        return f"{self.coordinate}: [{' '.join(str(c) for c in self.children)}]"


class _DependencyManagement:
    """Managed versions; an ancestor's entry wins over a descendant's."""

    def __init__(self, parent: _DependencyManagement | None, deps: Iterable[PomDependency]) -> None:
        self.parent = parent
        self.versions = {d.group_id + d.artifact_id: d.version for d in deps}

    def version_of(self, group_id: str, artifact_id: str) -> str:
        if self.parent is not None:
            inherited = self.parent.version_of(group_id, artifact_id)
            if inherited:
                return inherited
        return self.versions.get(group_id + artifact_id, "")


class _Exclusions:
    """Exclusions collected along the path from the root."""

    def __init__(self, parent: _Exclusions | None, exclusions: Iterable[Exclusion]) -> None:
        self.parent = parent
        self.keys = {e.group_id + e.artifact_id for e in exclusions}

    def has(self, group_id: str, artifact_id: str) -> bool:
        node: _Exclusions | None = self
        key = group_id + artifact_id
        while node is not None:
            if key in node.keys:
                return True
            node = node.parent
        return False


@dataclass(eq=False)
class _Item:
    coordinate: Coordinate
    exclusions: _Exclusions | None = None
    management: _DependencyManagement | None = None
    parent: _Item | None = None
    children: list[_Item] = field(default_factory=list)

    def in_ancestors(self) -> bool:
        node = self.parent
        while node is not None:
            if node.coordinate == self.coordinate:
                return True
            node = node.parent
        return False


def _to_tree(item: _Item) -> MavenDependency:
    return MavenDependency(item.coordinate, [_to_tree(child) for child in item.children])


def build_dep_tree(
    resolver: PomResolver, coordinate: Coordinate, scopes: Container[str]
) -> MavenDependency:
    """Walk the dependencies of ``coordinate`` breadth first and return the tree.

    The first version chosen for an artifact is kept for every later occurrence.
    """
    logger = use_logger()
    version_chosen: dict[str, str] = {}
    root = _Item(coordinate)
    queue: deque[_Item] = deque([root])
    while queue:
        cur = queue.popleft()
        if cur.in_ancestors():
            continue
        try:
            pom = resolver.resolve_pom(cur.coordinate)
        except MavenError as e:
            logger.warning("Resolve dependency failed: %s: %s", cur.coordinate, e)
            continue
        management = _DependencyManagement(cur.management, pom.list_dependency_managements())
        for dep in pom.list_dependencies(scopes):
            if cur.exclusions is not None and cur.exclusions.has(dep.group_id, dep.artifact_id):
                continue
            key = dep.group_id + dep.artifact_id
            version = version_chosen.get(key, "")
            if not version:
                version = management.version_of(dep.group_id, dep.artifact_id) or dep.version
                if not version:
                    logger.warning(
                        "Resolution version failed in %s: %s:%s",
                        coordinate,
                        dep.group_id,
                        dep.artifact_id,
                    )
                    continue
                version_chosen[key] = version
            child = _Item(
                Coordinate(dep.group_id, dep.artifact_id, version),
                exclusions=_Exclusions(cur.exclusions, dep.exclusions),
                management=management,
                parent=cur,
            )
            cur.children.append(child)
            queue.append(child)
    return _to_tree(root)


def version_reconciling(root: MavenDependency) -> None:
    """Give every occurrence of an artifact the first version met in pre-order."""
    versions: dict[str, str] = {}

    def visit(node: MavenDependency) -> None:
        key = f"{node.group_id}:{node.artifact_id}"
        if not versions.get(key) and node.version:
            versions[key] = node.version
        for child in node.children:
            visit(child)

    def assign(node: MavenDependency) -> None:
        key = f"{node.group_id}:{node.artifact_id}"
        node.coordinate = Coordinate(node.group_id, node.artifact_id, versions.get(key, ""))
        for child in node.children:
            assign(child)

    visit(root)
    assign(root)