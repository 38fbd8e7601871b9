"""Lenient navigation over parsed TOML documents."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Toml:
    """A TOML value; lookups that miss yield an empty value instead of failing."""

    value: Any = None

    def get(self, *args: str) -> Toml:
        current = self.value
        for key in args:
            if not isinstance(current, dict):
                return Toml()
            current = current.get(key)
        return Toml(current)

    def string(self, default: str = "") -> str:
        return self.value if isinstance(self.value, str) else default

    def array(self) -> list[Toml]:
        if isinstance(self.value, list):
            return [Toml(item) for item in self.value]
        return []


def parse_toml(data: bytes | str) -> Toml:
    """Parse a TOML document; raises ``tomllib.TOMLDecodeError`` on bad input."""
    if isinstance(data, bytes):
        data = data.decode("utf-8")
    return Toml(tomllib.loads(data))