"""An ordered set of POM dependencies keyed by ``groupId:artifactId``."""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable

from depsleuth.maven.project import Exclusion, PomDependency
from depsleuth.maven.properties import Properties


def _copy(dep: PomDependency) -> PomDependency:
    return dataclasses.replace(dep, exclusions=list(dep.exclusions))


def _merge_exclusions(old: list[Exclusion], new: list[Exclusion]) -> list[Exclusion]:
    if not old:
        return list(new)
    if not new:
        return old
    return sorted(set(old) | set(new), key=lambda e: (e.artifact_id, e.group_id))


class PomDependencySet:
    """Dependencies in first-seen order; merging fills in or overrides fields."""

    def __init__(self) -> None:
        self._deps: dict[str, PomDependency] = {}

    def __len__(self) -> int:
        return len(self._deps)

    def __str__(self) -> str:
        return "\n".join(f"{key} -> {dep}" for key, dep in self._deps.items())

    def list_all(self) -> list[PomDependency]:
        """Return copies of the dependencies in insertion order."""
        return [_copy(dep) for dep in self._deps.values()]

    def merge_property(self, properties: Properties) -> None:
        """Expand property references in the coordinates of every dependency."""
        for dep in self._deps.values():
            dep.artifact_id = properties.resolve(dep.artifact_id)
            dep.group_id = properties.resolve(dep.group_id)
            dep.version = properties.resolve(dep.version)

    def merge_all(
        self, deps: Iterable[PomDependency], override: bool, ignore_if_not_exists: bool
    ) -> None:
        for dep in deps:
            self.merge_item(dep, override, ignore_if_not_exists)

    def merge_item(self, dep: PomDependency, override: bool, ignore_if_not_exists: bool) -> None:
        """Add ``dep`` or merge it into the entry with the same coordinates.

        Version and scope are taken when missing, or when ``override`` is set
        and ``dep`` has one; exclusions are united.
        """
        key = f"{dep.group_id}:{dep.artifact_id}"
        existing = self._deps.get(key)
        if existing is None:
            if not ignore_if_not_exists:
                self._deps[key] = _copy(dep)
            return
        if (dep.version and override) or not existing.version:
            existing.version = dep.version
        if (dep.scope and override) or not existing.scope:
            existing.scope = dep.scope
        existing.exclusions = _merge_exclusions(existing.exclusions, dep.exclusions)