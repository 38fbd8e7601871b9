"""POM documents before and after inheritance and property resolution."""

from __future__ import annotations

import dataclasses
from collections.abc import Container
from dataclasses import dataclass

from depsleuth.maven.coordinate import Coordinate
from depsleuth.maven.depset import PomDependencySet
from depsleuth.maven.project import PomDependency, Project
from depsleuth.maven.properties import Properties


def _parent_coordinate(project: Project) -> Coordinate | None:
    parent = project.parent
    coordinate = Coordinate(parent.group_id, parent.artifact_id, parent.version)
    return coordinate if coordinate.complete() else None


def _resolve_dependency(dep: PomDependency, properties: Properties) -> PomDependency:
    return dataclasses.replace(
        dep,
        group_id=properties.resolve(dep.group_id),
        artifact_id=properties.resolve(dep.artifact_id),
        version=properties.resolve(dep.version),
        type=properties.resolve(dep.type),
        classifier=properties.resolve(dep.classifier),
        scope=properties.resolve(dep.scope),
        system_path=properties.resolve(dep.system_path),
        exclusions=list(dep.exclusions),
    )


@dataclass
class UnresolvedPom:
    """A parsed POM as it was read, with the path it came from."""

    project: Project
    path: str = ""

    def coordinate(self) -> Coordinate:
        """Return the declared coordinate, falling back to the parent's fields."""
        p = self.project
        return Coordinate(
            p.group_id or p.parent.group_id,
            p.artifact_id or p.parent.artifact_id,
            p.version or p.parent.version,
        )

    def parent_coordinate(self) -> Coordinate | None:
        """Return the parent coordinate, or None if it is incomplete."""
        return _parent_coordinate(self.project)


@dataclass
class Pom:
    """A POM with inheritance merged and its coordinate resolved."""

    coordinate: Coordinate
    project: Project
    dep_set: PomDependencySet
    depm_set: PomDependencySet
    properties: Properties

    def list_dependencies(self, scopes: Container[str]) -> list[PomDependency]:
        """Return non-optional dependencies of the given scopes, properties expanded."""
        result: list[PomDependency] = []
        for dep in self.dep_set.list_all():
            resolved = _resolve_dependency(dep, self.properties)
            if resolved.optional == "true":
                continue
            if dep.scope not in scopes:
                continue
            result.append(resolved)
        return result

    def list_dependency_managements(self) -> list[PomDependency]:
        """Return non-optional managed dependencies, properties expanded."""
        result: list[PomDependency] = []
        for dep in self.depm_set.list_all():
            resolved = _resolve_dependency(dep, self.properties)
            if resolved.optional == "true":
                continue
            result.append(resolved)
        return result

    def parent_coordinate(self) -> Coordinate | None:
        """Return the parent coordinate, or None if it is incomplete."""
        return _parent_coordinate(self.project)