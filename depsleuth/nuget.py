"""Inspection of NuGet ``packages.config`` files."""

from __future__ import annotations

import os
import xml.etree.ElementTree as ET

from depsleuth.common import Dependency, Language, Module, PackageManager
from depsleuth.utils import is_file, read_file_limited

_MAX_READ = 4 * 1024 * 1024
_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE = {"0", "f", "F", "FALSE", "false", "False"}


def _local(tag: object) -> str:
    return tag.rsplit("}", 1)[-1] if isinstance(tag, str) else ""


def _parse_bool(text: str) -> bool:
    text = text.strip()
    if not text or text in _FALSE:
        return False
    if text in _TRUE:
        return True
    raise ValueError(f"invalid boolean value: {text!r}")


def parse_packages_config(data: bytes | str) -> list[Dependency]:
    """Return the non-development packages listed in a ``packages.config`` document.

    Versions holding a wildcard are dropped. Raises ``ValueError`` on bad input.
    """
    try:
        root = ET.fromstring(data)
    except ET.ParseError as e:
        raise ValueError(f"Parse packages.config failed: {e}") from e
    if _local(root.tag) != "packages":
        raise ValueError(f"Parse packages.config failed: unexpected root <{_local(root.tag)}>")
    deps: list[Dependency] = []
    for element in root:
        if _local(element.tag) != "package":
            continue
        if _parse_bool(element.get("developmentDependency", "")):
            continue
        version = element.get("version", "")
        if "*" in version:
            version = ""
        deps.append(Dependency(name=element.get("id", ""), version=version))
    return deps


def inspect_packages_config(path: str | os.PathLike) -> list[Dependency]:
    """Read and parse a ``packages.config`` file."""
    return parse_packages_config(read_file_limited(path, _MAX_READ))


class NugetInspector:
    """Collects dependencies listed in ``packages.config``."""

    def __str__(self) -> str:
        return "NugetInspector"

    def check_dir(self, directory: str | os.PathLike) -> bool:
        return is_file(os.path.join(directory, "packages.config"))

    def inspect(self, scan_dir: str | os.PathLike, project_dir: str | os.PathLike) -> list[Module]:
        deps = inspect_packages_config(os.path.join(scan_dir, "packages.config"))
        return [
            Module(
                package_manager=PackageManager.NUGET,
                language=Language.DOTNET,
                name="packages.config",
                file_path=os.path.join(project_dir, "packages.config"),
                dependencies=deps,
            )
        ]