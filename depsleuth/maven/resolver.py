"""Resolution of POM inheritance, properties and imported dependency management."""

from __future__ import annotations

import dataclasses
import logging

from depsleuth.common import use_logger
from depsleuth.maven.cache import PomCache, ResolverStats
from depsleuth.maven.coordinate import Coordinate
from depsleuth.maven.depset import PomDependencySet
from depsleuth.maven.errors import MavenError, MvnErrorKind
from depsleuth.maven.pom import Pom, UnresolvedPom
from depsleuth.maven.project import PomDependency
from depsleuth.maven.properties import Properties
from depsleuth.maven.repo import PomRepo


class PomResolver:
    """Fetches POMs from repositories and resolves them into effective POMs."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger if logger is not None else use_logger()
        self.repos: list[PomRepo] = []
        self.pom_cache = PomCache()
        self.stats = ResolverStats()
        self._resolved: dict[Coordinate, Pom] = {}
        self._resolve_errors: dict[Coordinate, MavenError] = {}

    def add_repo(self, repo: PomRepo) -> None:
        self.repos.append(repo)

    def fetch_pom(self, coordinate: Coordinate) -> UnresolvedPom:
        """Return the raw POM of ``coordinate`` from the cache or the first repo that has it."""
        self.stats.total_req += 1
        try:
            cached = self.pom_cache.fetch(coordinate)
        except Exception:
            self.stats.cache_hit += 1
            raise
        if cached is not None:
            self.stats.cache_hit += 1
            return cached
        self.logger.debug("Fetch pom: %s", coordinate)
        for repo in self.repos:
            try:
                pom = repo.fetch(coordinate)
            except MavenError as e:
                if not e.is_kind(MvnErrorKind.ARTIFACT_NOT_FOUND):
                    self.logger.info("Fetch %s from repo[%s] failed: %s", coordinate, repo, e)
                continue
            except Exception as e:  # a failing repository is reported and skipped
                self.logger.info("Fetch %s from repo[%s] failed: %s", coordinate, repo, e)
                continue
            self.pom_cache.write(coordinate, pom, None)
            return pom
        error = MavenError(MvnErrorKind.ARTIFACT_NOT_FOUND)
        self.pom_cache.write(coordinate, None, error)
        raise error

    def resolve_pom(self, coordinate: Coordinate) -> Pom:
        """Return the effective POM of ``coordinate``; results and failures are cached."""
        error = self._resolve_errors.get(coordinate)
        if error is not None:
            raise error
        pom = self._resolved.get(coordinate)
        if pom is not None:
            return pom
        try:
            pom = _ResolveContext(self).resolve(coordinate)
        except MavenError as e:
            self._resolve_errors[coordinate] = e
            raise
        self._resolved[coordinate] = pom
        return pom


class _PomBuilder:
    def __init__(self, pom: UnresolvedPom) -> None:
        self.pom = pom
        self.parent_coordinate = pom.parent_coordinate()
        self.coordinate = Coordinate()
        self.properties = Properties()
        self.deps = PomDependencySet()
        self.depms = PomDependencySet()

    def list_dependency_managements(self) -> list[PomDependency]:
        props = self.properties
        return [
            dataclasses.replace(
                dep,
                group_id=props.resolve(dep.group_id),
                artifact_id=props.resolve(dep.artifact_id),
                version=props.resolve(dep.version),
                type=props.resolve(dep.type),
                classifier=props.resolve(dep.classifier),
                scope=props.resolve(dep.scope),
                system_path=props.resolve(dep.system_path),
                exclusions=list(dep.exclusions),
            )
            for dep in self.depms.list_all()
        ]

    def build(self) -> Pom:
        return Pom(
            coordinate=self.coordinate,
            project=self.pom.project,
            dep_set=self.deps,
            depm_set=self.depms,
            properties=self.properties,
        )


class _ResolveContext:
    def __init__(self, resolver: PomResolver) -> None:
        self.resolver = resolver
        self.logger = resolver.logger
        self.visiting: set[Coordinate] = set()

    def resolve(self, coordinate: Coordinate) -> Pom:
        if coordinate.is_bad():
            raise MvnErrorKind.BAD_COORDINATE.detailed(str(coordinate))
        if coordinate in self.visiting:
            raise MvnErrorKind.POM_CIRCULAR_DEPENDENT.detailed(str(coordinate))
        self.visiting.add(coordinate)
        try:
            builder = _PomBuilder(self.resolver.fetch_pom(coordinate))
            self._resolve_inheritance(builder)
            self._resolve_coordinate(builder)
            self._resolve_dependency_management_import(builder)
            builder.deps.merge_all(builder.depms.list_all(), False, True)
            return builder.build()
        finally:
            self.visiting.discard(coordinate)

    def _resolve_dependency_management_import(self, builder: _PomBuilder) -> None:
        for dep in builder.list_dependency_managements():
            if dep.scope != "import":
                continue
            try:
                imported = self.resolve(Coordinate(dep.group_id, dep.artifact_id, dep.version))
            except MavenError:
                continue
            builder.depms.merge_all(imported.list_dependency_managements(), False, False)

    def _resolve_inheritance(self, builder: _PomBuilder) -> None:
        chain = [builder.pom]
        seen: set[Coordinate] = set()
        coordinate = builder.parent_coordinate
        while coordinate is not None and coordinate not in seen:
            seen.add(coordinate)
            try:
                parent = self.resolver.fetch_pom(coordinate)
            except MavenError as e:
                self.logger.warning("Fetch parent failed: %s: %s", coordinate, e)
                break
            chain.append(parent)
            coordinate = parent.parent_coordinate()

        for pom in reversed(chain):
            project = pom.project
            builder.properties.put_map(project.properties)
            builder.depms.merge_all(project.dependency_management, False, False)
            builder.deps.merge_all(project.dependencies, True, False)

        parent_coordinate = builder.parent_coordinate
        if parent_coordinate is not None:
            builder.properties.put_if_absent("project.parent.version", parent_coordinate.version)
            builder.properties.put_if_absent("project.parent.artifactId", parent_coordinate.artifact_id)
            builder.properties.put_if_absent("project.parent.groupId", parent_coordinate.group_id)

    def _resolve_coordinate(self, builder: _PomBuilder) -> None:
        project = builder.pom.project
        props = builder.properties
        coordinate = Coordinate(
            props.resolve(project.group_id or project.parent.group_id),
            props.resolve(project.artifact_id or project.parent.artifact_id),
            props.resolve(project.version or project.parent.version),
        )
        if not coordinate.complete():
            raise MvnErrorKind.COULD_NOT_RESOLVE.detailed(f"bad coordinate: {coordinate}")
        builder.coordinate = coordinate
        props.put_if_absent("project.version", coordinate.version)
        props.put_if_absent("project.artifactId", coordinate.artifact_id)
        props.put_if_absent("project.groupId", coordinate.group_id)
        props.put_if_absent(f"{coordinate.artifact_id}.groupId", coordinate.group_id)
        props.put_if_absent(f"{coordinate.artifact_id}.version", coordinate.version)