"""Extraction of top-level package names from Python import statements."""

from __future__ import annotations

import re

_IMPORT_LIST = re.compile(
    r"import\s+(?:[A-Za-z_-][\w.-]*)(?:\s*,\s*(?:[A-Za-z_-][\w.-]*))", re.ASCII
)
_FROM_IMPORT = re.compile(r"from\s+([A-Za-z_-][\w-]*)", re.ASCII)


def parse_py_import(line: str) -> list[str]:
    """Return the top-level package names an import line refers to.

    Plain ``import`` lines are recognised only in their comma separated
    form, and only the first two names of the list are taken.
    """
    line = line.strip()
    names: list[str] = []
    if line.startswith("import "):
        match = _IMPORT_LIST.search(line)
        listed = match.group(0).removeprefix("import") if match else ""
        for part in listed.split(","):
            name = part.strip().split(".")[0]
            if name:
                names.append(name)
    if line.startswith("from "):
        match = _FROM_IMPORT.search(line)
        if match:
            names.append(match.group(1))
    return names


def parse_blacklist(text: str) -> frozenset[str]:
    """Parse a package blacklist: one name per line, ``#`` starts a comment line."""
    return frozenset(
        entry
        for entry in (raw.strip() for raw in text.split("\n"))
        if not entry.startswith("#")
    )