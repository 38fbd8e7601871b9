"""Dependencies declared in the ``build-system`` table of ``pyproject.toml``."""

from __future__ import annotations

import os
import re
import tomllib

from depsleuth.common import Dependency, use_logger
from depsleuth.simpletoml import parse_toml
from depsleuth.utils import read_file_limited

_MAX_READ = 4 * 1024 * 1024
_REQUIREMENT = re.compile(r"([\w.-]+)(?:[>=]?=([\w.-]+))?", re.ASCII)
_SEMVER = re.compile(
    r"v(0|[1-9][0-9]*)"
    r"(?:\.(0|[1-9][0-9]*)"
    r"(?:\.(0|[1-9][0-9]*)(?:-([0-9A-Za-z.-]+))?(?:\+([0-9A-Za-z.-]+))?)?)?"
)


class TomlParseError(Exception):
    """The TOML document could not be parsed."""


def _parse_semver(text: str) -> tuple[int, int, int, str] | None:
    match = _SEMVER.fullmatch(text)
    if match is None:
        return None
    major, minor, patch, pre, build = match.groups()
    if pre is not None:
        for ident in pre.split("."):
            if not ident or (ident.isdigit() and len(ident) > 1 and ident[0] == "0"):
                return None
    if build is not None and any(not ident for ident in build.split(".")):
        return None
    return int(major), int(minor or 0), int(patch or 0), pre or ""


def _compare_prerelease(x: str, y: str) -> int:
    if x == y:
        return 0
    if not x:
        return 1
    if not y:
        return -1
    xs, ys = x.split("."), y.split(".")
    for a, b in zip(xs, ys):
        if a == b:
            continue
        a_num, b_num = a.isdigit(), b.isdigit()
        if a_num and b_num:
            return -1 if int(a) < int(b) else 1
        if a_num != b_num:
            return -1 if a_num else 1
        return -1 if a < b else 1
    return (len(xs) > len(ys)) - (len(xs) < len(ys))


def _semver_compare(v: str, w: str) -> int:
    pv, pw = _parse_semver(v), _parse_semver(w)
    if pv is None or pw is None:
        return (pv is not None) - (pw is not None)
    if pv[:3] != pw[:3]:
        return -1 if pv[:3] < pw[:3] else 1
    return _compare_prerelease(pv[3], pw[3])


def toml_build_sys(data: bytes | str) -> list[Dependency]:
    """Return the build requirements, keeping the first pinned version of each name."""
    try:
        doc = parse_toml(data)
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        raise TomlParseError(f"Parse toml failed: {e}") from e
    chosen: dict[str, str] = {}
    for item in doc.get("build-system", "requires").array():
        match = _REQUIREMENT.search(item.string(""))
        if match is None:
            continue
        name, version = match.group(1), match.group(2) or ""
        old = chosen.get(name, "")
        if old:
            if not version:
                continue
            if _parse_semver(version) is not None and _semver_compare(old, version) < 0:
                chosen[name] = version
        else:
            chosen[name] = version
    return [Dependency(name=name, version=version) for name, version in chosen.items()]


def toml_build_sys_file(path: str | os.PathLike) -> list[Dependency]:
    """Read a ``pyproject.toml`` file and return its build requirements."""
    use_logger().debug("Process toml buildSys file: %s", path)
    return toml_build_sys(read_file_limited(path, _MAX_READ))