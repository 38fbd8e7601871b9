"""Listing installed packages with the pip command."""

from __future__ import annotations

import os
import shutil
import subprocess

from depsleuth.common import Dependency, use_logger
from depsleuth.python.requirements import parse_requirements

_PIP_NAMES = ("pip", "pip3", "pip2")


class PipError(Exception):
    """pip is missing or ``pip list`` failed."""


def locate_pip_command() -> str | None:
    """Return the path of the first pip command found on PATH, or None."""
    logger = use_logger()
    logger.debug("Trying to locate pip command...")
    for name in _PIP_NAMES:
        path = shutil.which(name)
        if path:
            return path
        logger.debug("%s not found", name)
    return None


def execute_pip_list(directory: str | os.PathLike) -> list[Dependency]:
    """Run ``pip list --format freeze`` in ``directory`` and parse its output."""
    logger = use_logger()
    path = locate_pip_command()
    if path is None:
        raise PipError("pip command not found")
    args = [path, "list", "--format", "freeze"]
    logger.info("Call command: %s", " ".join(args))
    try:
        completed = subprocess.run(args, cwd=directory, capture_output=True, check=True)
    except (OSError, subprocess.SubprocessError) as e:
        raise PipError("pip list execution failed") from e
    logger.info("pip list command execute succeeded")
    return parse_requirements(completed.stdout.decode("utf-8", "replace"))