"""Dependency trees of the modules of a Maven project, keyed by coordinate."""

from __future__ import annotations

import functools
from dataclasses import dataclass, field

from depsleuth.maven.coordinate import Coordinate
from depsleuth.maven.deptree import MavenDependency


@dataclass
class DepsEntry:
    """One module: its coordinate, direct dependencies and POM path."""

    coordinate: Coordinate
    children: list[MavenDependency] = field(default_factory=list)
    relative_path: str = ""


class DepsMap:
    """Module dependency trees; a later entry replaces one with the same coordinate."""

    def __init__(self) -> None:
        self._entries: dict[Coordinate, DepsEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, coordinate: object) -> bool:
        return coordinate in self._entries

    def put(
        self, coordinate: Coordinate, children: list[MavenDependency], relative_path: str
    ) -> None:
        self._entries[coordinate] = DepsEntry(coordinate, list(children or []), relative_path)

    def entries(self) -> list[DepsEntry]:
        """Return all entries ordered by coordinate."""
        return sorted(
            self._entries.values(),
            key=functools.cmp_to_key(lambda a, b: a.coordinate.compare(b.coordinate)),
        )