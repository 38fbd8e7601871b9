"""Locating the ``mvn`` command and finding out its version."""

from __future__ import annotations

import functools
import os
import re
import shutil
import subprocess
from dataclasses import dataclass

from depsleuth.maven.errors import MavenError, MvnErrorKind
from depsleuth.utils import is_file

_VERSION_TIMEOUT = 8
_VERSION_PATTERN = re.compile(r"Apache Maven (\d+(?:\.[\dA-Za-z_-]+)+)")
_IDEA_MAVEN_BIN = os.path.join("plugins", "maven", "lib", "maven3", "bin")


@dataclass(frozen=True)
class MvnCommandInfo:
    """Path and version of a working ``mvn`` command."""

    path: str
    mvn_version: str

    def __str__(self) -> str:
        return f"[{self.mvn_version}]{self.path}"


def _os_mvn_path() -> str:
    found = shutil.which("mvn")
    return os.path.abspath(found) if found else ""


def _idea_mvn_path(idea_install_path: str) -> str:
    if not idea_install_path:
        return ""
    names = ["mvn", "mvn.cmd", "mvn.bat"] if os.name == "nt" else ["mvn", "mvn.sh"]
    for name in names:
        path = os.path.abspath(os.path.join(idea_install_path, _IDEA_MAVEN_BIN, name))
        if is_file(path):
            return path
    return ""


def get_mvn_command_path(idea_install_path: str = "") -> str:
    """Return the ``mvn`` on PATH, else the one bundled with IntelliJ IDEA, else ""."""
    return _os_mvn_path() or _idea_mvn_path(idea_install_path)


@functools.cache
def _probe() -> tuple[MvnCommandInfo | None, MavenError | None]:
    if os.environ.get("NO_MVN"):
        return None, MvnErrorKind.MVN_DISABLED.detailed("environment variable NO_MVN set")
    path = get_mvn_command_path(os.environ.get("IDEA_INSTALL_PATH", ""))
    if not path:
        return None, MavenError(MvnErrorKind.MVN_NOT_FOUND)
    try:
        completed = subprocess.run(
            [path, "--version"], capture_output=True, timeout=_VERSION_TIMEOUT, check=True
        )
    except (OSError, subprocess.SubprocessError) as e:
        return None, MvnErrorKind.CHECK_MVN_VERSION.wrap(e)
    for line in completed.stdout.decode("utf-8", "replace").split("\n"):
        match = _VERSION_PATTERN.search(line.strip())
        if match:
            return MvnCommandInfo(path, match.group(1)), None
    return None, MavenError(MvnErrorKind.CHECK_MVN_VERSION)


def check_mvn_command() -> MvnCommandInfo:
    """Return the working ``mvn`` command; the outcome of the first check is kept.

    Raises ``MavenError`` if Maven is disabled, missing or does not report a version.
    """
    info, error = _probe()
    if error is not None:
        raise error
    assert info is not None
    return info