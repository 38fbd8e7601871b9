"""Maven property table with ``${name}`` interpolation."""

from __future__ import annotations

import re
from collections.abc import Mapping

_INLINE_PROPERTY = re.compile(r"\$\{([^{}]+)\}")


class Properties:
    """A property table that expands ``${name}`` references, guarding against cycles."""

    def __init__(self) -> None:
        self._values: dict[str, str] = {}

    def put_if_absent(self, key: str, value: str) -> None:
        self._values.setdefault(key, value)

    def put(self, key: str, value: str) -> None:
        self._values[key] = value

    def put_map(self, mapping: Mapping[str, str] | None) -> None:
        if mapping:
            self._values.update(mapping)

    def resolve(self, text: str) -> str:
        """Expand references repeatedly; each name is expanded at most once."""
        visited: set[str] = set()
        while True:
            pieces: list[str] = []
            pos = 0
            for match in _INLINE_PROPERTY.finditer(text):
                pieces.append(text[pos : match.start()])
                key = match.group(1)
                seen = key in visited
                visited.add(key)
                value = self._values.get(key)
                pieces.append(match.group(0) if value is None or seen else value)
                pos = match.end()
            pieces.append(text[pos:])
            result = "".join(pieces)
            if result == text:
                return text
            text = result