"""Repositories that POM documents can be fetched from."""

from __future__ import annotations

import http.client
import os
import posixpath
import urllib.error
import urllib.parse
import urllib.request
from abc import ABC, abstractmethod

from depsleuth.maven.coordinate import Coordinate
from depsleuth.maven.errors import MvnErrorKind
from depsleuth.maven.pom import UnresolvedPom
from depsleuth.maven.project import Project, parse_pom
from depsleuth.utils import is_file


def _pom_file_name(coordinate: Coordinate) -> str:
    return f"{coordinate.artifact_id}-{coordinate.version}.pom"


class PomRepo(ABC):
    """A source of POM documents."""

    @abstractmethod
    def fetch(self, coordinate: Coordinate) -> UnresolvedPom:
        """Return the POM of ``coordinate``; raise ``MavenError`` if it is unavailable."""


def fetch_pom(url: str) -> Project:
    """Download and parse the POM at ``url``."""
    try:
        with urllib.request.urlopen(url) as resp:
            if resp.status != 200:
                raise MvnErrorKind.ARTIFACT_NOT_FOUND.detailed(
                    f"HTTP {resp.status} - {resp.status} {resp.reason}"
                )
            try:
                data = resp.read()
            except (OSError, http.client.HTTPException) as e:
                raise MvnErrorKind.PARSE_POM_FAILED.detailed_wrap("read body", e) from e
    except urllib.error.HTTPError as e:
        if e.code == 404:
            raise MvnErrorKind.ARTIFACT_NOT_FOUND.wrap(e) from e
        raise MvnErrorKind.ARTIFACT_NOT_FOUND.detailed(
            f"HTTP {e.code} - {e.code} {e.reason}"
        ) from e
    return parse_pom(data)


class HttpRepo(PomRepo):
    """A remote Maven repository reached over HTTP."""

    def __init__(self, base_url: str) -> None:
        self.base_url = base_url
        self._parts = urllib.parse.urlsplit(base_url)

    def __str__(self) -> str:
        return f"HttpRepo[{self.base_url}]"

    def url_of(self, coordinate: Coordinate) -> str:
        """Return the URL where the POM of ``coordinate`` lives."""
        path = posixpath.join(
            "/",
            self._parts.path.lstrip("/"),
            *coordinate.group_id.split("."),
            coordinate.artifact_id,
            coordinate.version,
            _pom_file_name(coordinate),
        )
        return urllib.parse.urlunsplit(self._parts._replace(path=posixpath.normpath(path)))

    def fetch(self, coordinate: Coordinate) -> UnresolvedPom:
        if not coordinate.complete():
            raise MvnErrorKind.INVALID_COORDINATE.detailed(str(coordinate))
        return UnresolvedPom(fetch_pom(self.url_of(coordinate)), "")


class LocalRepo(PomRepo):
    """A repository laid out on the local file system, such as ``~/.m2/repository``."""

    def __init__(self, base_dir: str | os.PathLike) -> None:
        self.base_dir = os.fspath(base_dir)

    def __str__(self) -> str:
        return f"LocalRepo[{self.base_dir}]"

    def path_of(self, coordinate: Coordinate) -> str:
        """Return the file path where the POM of ``coordinate`` lives."""
        return os.path.join(
            self.base_dir,
            *coordinate.group_id.split("."),
            coordinate.artifact_id,
            coordinate.version,
            _pom_file_name(coordinate),
        )

    def fetch(self, coordinate: Coordinate) -> UnresolvedPom:
        if not coordinate.complete():
            raise MvnErrorKind.INVALID_COORDINATE.detailed(str(coordinate))
        path = self.path_of(coordinate)
        if not is_file(path):
            raise MvnErrorKind.ARTIFACT_NOT_FOUND.detailed(str(coordinate))
        try:
            with open(path, "rb") as f:
                data = f.read()
        except OSError as e:
            raise MvnErrorKind.PARSE_POM_FAILED.detailed_wrap("open pom", e) from e
        return UnresolvedPom(parse_pom(data))