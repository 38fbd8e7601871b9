"""Inspection of Yarn projects through ``yarn.lock`` or ``package.json``."""

from __future__ import annotations

import json
import os
import re
import stat
from typing import Any

from depsleuth.common import Dependency, Language, Module, PackageManager, use_logger
from depsleuth.utils import read_file_limited

_MAX_LOCK = 16 * 1024 * 1024
_MAX_PACKAGE = 1024 * 1024
_MAX_DEPTH = 5
_PKG_NAME = re.compile(r"(@?[^@]+)@(.+)")
_BARE_WORD = re.compile(r"[^\s:]+")


def _unquote(text: str) -> str:
    if len(text) >= 2 and text[0] == '"' and text[-1] == '"':
        try:
            value = json.loads(text)
        except ValueError:
            return text[1:-1]
        return value if isinstance(value, str) else text[1:-1]
    return text


def _read_key(text: str) -> tuple[str, str]:
    if text.startswith('"'):
        i = 1
        while i < len(text):
            if text[i] == "\\":
                i += 2
                continue
            if text[i] == '"':
                return _unquote(text[: i + 1]), text[i + 1 :]
            i += 1
        raise ValueError(f"unterminated string: {text}")
    match = _BARE_WORD.match(text)
    if match is None:
        raise ValueError(f"expected a key: {text}")
    return match.group(0), text[match.end() :]


def _split_keys(header: str) -> list[str]:
    keys: list[str] = []
    current: list[str] = []
    in_quote = escaped = False
    for ch in header:
        if escaped:
            escaped = False
        elif ch == "\\" and in_quote:
            escaped = True
        elif ch == '"':
            in_quote = not in_quote
        elif ch == "," and not in_quote:
            keys.append("".join(current))
            current = []
            continue
        current.append(ch)
    keys.append("".join(current))
    return [_unquote(k.strip()) for k in keys if k.strip()]


def parse_yarn_lock(text: str) -> dict[str, dict[str, Any]]:
    """Parse a yarn lock file into a mapping of ``name@range`` to entry fields.

    Every specifier of an entry header maps to the same entry dictionary;
    nested sections such as ``dependencies`` become dictionaries too.
    Raises ``ValueError`` on malformed input.
    """
    lockfile: dict[str, dict[str, Any]] = {}
    stack: list[tuple[int, dict[str, Any]]] = []
    for lineno, raw in enumerate(text.splitlines(), 1):
        stripped = raw.strip()
        if not stripped or stripped.startswith("#"):
            continue
        indent = len(raw) - len(raw.lstrip(" \t"))
        if indent == 0:
            if not stripped.endswith(":"):
                raise ValueError(f"line {lineno}: expected an entry header")
            entry: dict[str, Any] = {}
            for key in _split_keys(stripped[:-1]):
                lockfile[key] = entry
            stack = [(0, entry)]
            continue
        while stack and stack[-1][0] >= indent:
            stack.pop()
        if not stack:
            raise ValueError(f"line {lineno}: field outside of an entry")
        container = stack[-1][1]
        key, rest = _read_key(stripped)
        rest = rest.strip()
        had_colon = rest.startswith(":")
        if had_colon:
            rest = rest[1:].strip()
        if not rest and had_colon:
            section: dict[str, Any] = {}
            container[key] = section
            stack.append((indent, section))
        else:
            container[key] = _unquote(rest)
    return lockfile


def _dependencies_of(entry: dict[str, Any]) -> dict[str, str]:
    deps = entry.get("dependencies")
    if not isinstance(deps, dict):
        return {}
    return {name: spec for name, spec in deps.items() if isinstance(spec, str)}


def root_elements(lockfile: dict[str, dict[str, Any]]) -> list[str]:
    """Return the keys that no entry of the lock file depends on."""
    referenced = {
        f"{name}@{spec}"
        for entry in lockfile.values()
        for name, spec in _dependencies_of(entry).items()
    }
    return [key for key in lockfile if key not in referenced]


def parse_pkg_name(text: str) -> tuple[str, str]:
    """Split ``name@range`` into name and range; ``("", "")`` if it does not match."""
    match = _PKG_NAME.search(text)
    if match is None:
        return "", ""
    return match.group(1), match.group(2)


def _build_node(
    lockfile: dict[str, dict[str, Any]], element: str, visited: set[str], depth: int
) -> Dependency | None:
    if depth < 0 or element in visited:
        return None
    visited.add(element)
    try:
        info = lockfile.get(element)
        if info is None:
            return None
        name, spec = parse_pkg_name(element)
        if not name or not spec:
            return None
        version = info.get("version", "")
        node = Dependency(name=name, version=version if isinstance(version, str) else "")
        seen: set[tuple[str, str]] = set()
        for child_name, child_spec in _dependencies_of(info).items():
            child = _build_node(lockfile, f"{child_name}@{child_spec}", visited, depth - 1)
            if child is None or (child.name, child.version) in seen:
                continue
            seen.add((child.name, child.version))
            node.dependencies.append(child)
        return node
    finally:
        visited.discard(element)


def build_dep_tree(lockfile: dict[str, dict[str, Any]]) -> list[Dependency]:
    """Build dependency trees from the root elements of a parsed lock file."""
    trees: list[Dependency] = []
    for key in root_elements(lockfile):
        node = _build_node(lockfile, key, set(), _MAX_DEPTH)
        if node is not None:
            trees.append(node)
    return trees


def _ci_get(obj: dict[str, Any], key: str) -> Any:
    if key in obj:
        return obj[key]
    lowered = key.lower()
    for name, value in obj.items():
        if name.lower() == lowered:
            return value
    return None


def read_module_name(directory: str | os.PathLike) -> tuple[str, str]:
    """Return name and version from ``package.json``, or empty strings."""
    try:
        data = json.loads(read_file_limited(os.path.join(directory, "package.json"), _MAX_PACKAGE))
    except (OSError, ValueError):
        return "", ""
    if not isinstance(data, dict):
        return "", ""
    name, version = data.get("name"), data.get("version")
    return (name if isinstance(name, str) else "", version if isinstance(version, str) else "")


def yarn_fallback(directory: str | os.PathLike) -> list[Dependency]:
    """Return the dependencies declared in ``package.json``."""
    data = read_file_limited(os.path.join(directory, "package.json"), _MAX_PACKAGE)
    try:
        pkg = json.loads(data)
    except ValueError as e:
        raise ValueError(f"parse failed: {e}") from e
    if not isinstance(pkg, dict):
        raise ValueError("parse failed: package.json is not an object")
    merged: dict[str, str] = {}
    for section_name in ("dev_dependencies", "dependencies"):
        section = _ci_get(pkg, section_name)
        if section is None:
            continue
        if not isinstance(section, dict) or not all(isinstance(v, str) for v in section.values()):
            raise ValueError(f"parse failed: bad {section_name}")
        merged.update(section)
    return [Dependency(name=name, version=spec) for name, spec in merged.items()]


def analyze_yarn_dep(directory: str | os.PathLike) -> list[Dependency]:
    """Return the dependency trees of ``yarn.lock``, or of ``package.json`` without one."""
    try:
        data = read_file_limited(os.path.join(directory, "yarn.lock"), _MAX_LOCK)
    except OSError as e:
        use_logger().info("Open yarn.lock failed: %s", e)
        return yarn_fallback(directory)
    try:
        lockfile = parse_yarn_lock(data.decode("utf-8", "replace"))
    except ValueError as e:
        raise ValueError(f"Parse lockfile failed: {e}") from e
    return build_dep_tree(lockfile)


class YarnInspector:
    """Collects dependencies of Yarn projects."""

    def __str__(self) -> str:
        return "YarnInspector"

    def check_dir(self, directory: str | os.PathLike) -> bool:
        try:
            st = os.stat(os.path.join(directory, "yarn.lock"))
        except OSError:
            try:
                st = os.stat(os.path.join(directory, "package.json"))
            except OSError:
                return False
        return not stat.S_ISDIR(st.st_mode)

    def inspect(self, scan_dir: str | os.PathLike, project_dir: str | os.PathLike) -> list[Module]:
        scan_dir = os.fspath(scan_dir)
        use_logger().info("yarn inspect: %s", scan_dir)
        deps = analyze_yarn_dep(scan_dir)
        module = Module(
            package_manager=PackageManager.YARN,
            language=Language.JAVASCRIPT,
            package_file="yarn.lock",
            name=os.path.basename(os.path.normpath(scan_dir)),
            file_path=os.path.join(scan_dir, "yarn.lock"),
            dependencies=deps,
        )
        name, version = read_module_name(scan_dir)
        if name:
            module.name = name
            module.version = version
        return [module]