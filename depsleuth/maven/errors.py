"""Error kinds raised while inspecting Maven projects."""

from __future__ import annotations

from enum import Enum


class MvnErrorKind(Enum):
    """The categories of Maven inspection failures."""

    MVN_DISABLED = "mvn command disabled"
    MVN_NOT_FOUND = "mvn command not found"
    CHECK_MVN_VERSION = "eval mvn version failed"
    BAD_DEPS_GRAPH = "bad dependency graph"
    INVALID_COORDINATE = "invalid coordinate"
    ARTIFACT_NOT_FOUND = "artifact not found"
    PARSE_POM_FAILED = "parse pom failed"
    OPEN_PROJECT = "open project failed"
    POM_CIRCULAR_DEPENDENT = "pom file circular dependent"
    BAD_COORDINATE = "bad coordinate"
    COULD_NOT_RESOLVE = "couldn't resolve"
    MVN_EXIT_ERR = "mvn command exit with non-zero code"
    MVN_CMD = "error during mvn execution"
    INSPECTION = "can't inspect the maven project"

    def detailed(self, detail: str) -> MavenError:
        return MavenError(self, detail=detail)

    def wrap(self, cause: BaseException) -> MavenError:
        return MavenError(self, cause=cause)

    def detailed_wrap(self, detail: str, cause: BaseException) -> MavenError:
        return MavenError(self, detail=detail, cause=cause)


class MavenError(Exception):
    """An error of a given kind, optionally with a detail and an underlying cause."""

    def __init__(
        self,
        kind: MvnErrorKind,
        detail: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.kind = kind
        self.detail = detail
        self.cause = cause
        super().__init__(self._message())
        if cause is not None:
            self.__cause__ = cause

    def _message(self) -> str:
        parts = [self.kind.value]
        if self.cause is not None:
            parts.append(str(self.cause))
        if self.detail:
            parts.append(self.detail)
        return ": ".join(parts)

    def __str__(self) -> str:
        return self._message()

    def is_kind(self, kind: MvnErrorKind) -> bool:
        """Return True if this error or a wrapped cause is of ``kind``."""
        if self.kind is kind:
            return True
        return isinstance(self.cause, MavenError) and self.cause.is_kind(kind)