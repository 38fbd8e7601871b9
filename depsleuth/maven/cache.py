"""Caching of fetched POM documents and resolver statistics."""

from __future__ import annotations

import threading
from dataclasses import dataclass

from depsleuth.maven.coordinate import Coordinate
from depsleuth.maven.pom import UnresolvedPom


@dataclass
class ResolverStats:
    """Counts of POM requests and how many the cache answered."""

    total_req: int = 0
    cache_hit: int = 0


class PomCache:
    """Thread-safe cache of fetched POMs and of failures to fetch them."""

    def __init__(self) -> None:
        self._poms: dict[Coordinate, UnresolvedPom] = {}
        self._errors: dict[Coordinate, BaseException] = {}
        self._lock = threading.Lock()

    def add(self, pom: UnresolvedPom) -> None:
        """Cache ``pom`` under its own coordinate."""
        self.write(pom.coordinate(), pom, None)

    def fetch(self, coordinate: Coordinate) -> UnresolvedPom | None:
        """Return the cached POM, raise the cached error, or return None if unknown."""
        with self._lock:
            pom = self._poms.get(coordinate)
            if pom is not None:
                return pom
            error = self._errors.get(coordinate)
        if error is not None:
            raise error
        return None

    def write(
        self,
        coordinate: Coordinate,
        pom: UnresolvedPom | None,
        error: BaseException | None,
    ) -> None:
        """Store a POM, or else the error met while fetching it."""
        with self._lock:
            if pom is not None:
                self._poms[coordinate] = pom
            elif error is not None:
                self._errors[coordinate] = error