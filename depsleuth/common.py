"""Shared model types, version information and the context logger."""

from __future__ import annotations

import contextlib
import contextvars
import functools
import logging
import os
import platform
import sys
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator

_VERSION = "v1.9.0"
_UNKNOWN_OS = "<unknownOS>"


class PackageManager(str, Enum):
    """Package managers whose projects can be inspected."""

    MAVEN = "maven"
    NPM = "npm"
    NUGET = "nuget"
    POETRY = "poetry"
    PIP = "pip"
    YARN = "yarn"


class Language(str, Enum):
    """Programming languages of inspected modules."""

    JAVA = "Java"
    JAVASCRIPT = "JavaScript"
    DOTNET = "DotNet"
    PYTHON = "Python"


@dataclass
class Dependency:
    """A component together with the components it depends on."""

    name: str
    version: str = ""
    dependencies: list[Dependency] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready mapping; empty child lists are left out."""
        result: dict[str, Any] = {"name": self.name, "version": self.version}
        if self.dependencies:
            result["dependencies"] = [d.to_dict() for d in self.dependencies]
        return result


@dataclass
class Module:
    """One inspected project module and its dependency tree."""

    package_manager: PackageManager
    language: Language
    name: str = ""
    version: str = ""
    package_file: str = ""
    file_path: str = ""
    dependencies: list[Dependency] = field(default_factory=list)
    runtime_info: Any = None
    uuid: uuid.UUID = field(default_factory=uuid.uuid4)


def version(pro: bool = False) -> str:
    """Return the version string; the hosted edition carries a suffix."""
    return _VERSION if pro else _VERSION + "-saas"


def _os_name() -> str:
    name = f"{platform.system()} {platform.release()}".strip()
    return name or _UNKNOWN_OS


@functools.cache
def user_agent() -> str:
    """Return the User-Agent string sent with HTTP requests."""
    return f"depsleuth-cli/{version()} ({_os_name()});"


def print_version_info() -> None:
    """Print the program name and its version to stdout."""
    argv0 = sys.argv[0] if sys.argv and sys.argv[0] else "depsleuth"
    name = os.path.basename(os.path.realpath(argv0))
    print(f"{name} {version()}")


def _make_nop_logger() -> logging.Logger:
    logger = logging.getLogger("depsleuth.nop")
    logger.addHandler(logging.NullHandler())
    logger.propagate = False
    logger.disabled = True
    return logger


_NOP_LOGGER = _make_nop_logger()
_current_logger: contextvars.ContextVar[logging.Logger | None] = contextvars.ContextVar(
    "depsleuth_logger", default=None
)


def use_logger() -> logging.Logger:
    """Return the logger of the current context, or a logger that discards everything."""
    logger = _current_logger.get()
    return logger if logger is not None else _NOP_LOGGER


@contextlib.contextmanager
def with_logger(logger: logging.Logger) -> Iterator[logging.Logger]:
    """Make ``logger`` the context logger inside the ``with`` block."""
    token = _current_logger.set(logger)
    try:
        yield logger
    finally:
        _current_logger.reset(token)