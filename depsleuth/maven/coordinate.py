"""Maven artifact coordinates."""

from __future__ import annotations

import re
from dataclasses import dataclass

_WHITESPACE = re.compile(r"[\t\n\f\r ]")


@dataclass(frozen=True)
class Coordinate:
    """groupId, artifactId and version of a Maven artifact."""

    group_id: str = ""
    artifact_id: str = ""
    version: str = ""

    def normalize(self) -> Coordinate:
        return Coordinate(
            _WHITESPACE.sub("", self.group_id),
            _WHITESPACE.sub("", self.artifact_id),
            _WHITESPACE.sub("", self.version),
        )

    def has_version(self) -> bool:
        return self.normalize().version != ""

    def name(self) -> str:
        c = self.normalize()
        return f"{c.group_id}:{c.artifact_id}"

    def __str__(self) -> str:
        c = self.normalize()
        if not c.version:
            return f"{c.group_id}:{c.artifact_id}"
        return f"{c.group_id}:{c.artifact_id}:{c.version}"

    def is_bad(self) -> bool:
        c = self.normalize()
        return (
            c.group_id.startswith("${")
            or c.artifact_id.startswith("${")
            or c.version.startswith(("${", "[", "("))
        )

    def complete(self) -> bool:
        c = self.normalize()
        return bool(c.group_id and c.artifact_id and c.version) and not c.is_bad()

    def compare(self, other: Coordinate) -> int:
        mine = (self.group_id, self.artifact_id, self.version)
        theirs = (other.group_id, other.artifact_id, other.version)
        return (mine > theirs) - (mine < theirs)

    def to_dict(self) -> dict[str, str]:
        return {"group_id": self.group_id, "artifact_id": self.artifact_id, "version": self.version}