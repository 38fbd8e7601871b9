"""File helpers, small collection helpers and a logging pipe."""

from __future__ import annotations

import logging
import os
import threading
from typing import Hashable, Iterable, TypeVar

from depsleuth.common import use_logger

T = TypeVar("T", bound=Hashable)


def is_path_exist(path: str | os.PathLike) -> bool:
    """Return True if something exists at ``path``."""
    return os.path.exists(path)


def is_dir(path: str | os.PathLike) -> bool:
    """Return True if ``path`` is a directory."""
    return os.path.isdir(path)


def is_file(path: str | os.PathLike) -> bool:
    """Return True if ``path`` exists and is not a directory."""
    try:
        st = os.stat(path)
    except (OSError, ValueError):
        return False
    return not os.path.isdir(path) and st is not None


def distinct(items: Iterable[T]) -> list[T]:
    """Return the items without duplicates, keeping first occurrences in order."""
    return list(dict.fromkeys(items))


def read_file_limited(path: str | os.PathLike, max_read: int) -> bytes:
    """Read at most ``max_read`` bytes from the start of a file."""
    with open(path, "rb") as f:
        if max_read <= 0:
            return b""
        return f.read(max_read)


class LogPipe:
    """A writable pipe whose lines are logged at debug level with a prefix.

    It has a real file descriptor, so it can serve as a child process's
    stdout or stderr.
    """

    def __init__(self, logger: logging.Logger | None = None, prefix: str = "") -> None:
        self._logger = logger if logger is not None else use_logger()
        self._prefix = prefix
        read_fd, write_fd = os.pipe()
        self._reader = os.fdopen(read_fd, "rb")
        self._writer = os.fdopen(write_fd, "wb")
        self._closed = False
        self._thread = threading.Thread(target=self._pump, daemon=True)
        self._thread.start()

    def _pump(self) -> None:
        with self._reader:
            for raw in self._reader:
                text = raw.removesuffix(b"\n").removesuffix(b"\r").decode("utf-8", "replace")
                self._logger.debug("%s: %s", self._prefix, text)

    def fileno(self) -> int:
        return self._writer.fileno()

    def write(self, data: bytes) -> int:
        try:
            self._writer.write(data)
            self._writer.flush()
        except (OSError, ValueError):
            pass
        return len(data)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._writer.close()
        self._thread.join()

    def __enter__(self) -> LogPipe:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()