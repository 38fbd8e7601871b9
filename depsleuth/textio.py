"""Byte stream adapters: line-ending conversion and a bounded tail buffer."""

from __future__ import annotations

from typing import BinaryIO

_CR = 0x0D
_LF = 0x0A


class _WrappingWriter:
    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream

    def _close_stream(self) -> None:
        close = getattr(self._stream, "close", None)
        if close is not None:
            close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:  # pragma: no cover - overridden
        raise NotImplementedError


class Dos2UnixWriter(_WrappingWriter):
    """Writer that turns CRLF into LF; other carriage returns are kept."""

    def __init__(self, stream: BinaryIO) -> None:
        super().__init__(stream)
        self._last_cr = False

    def write(self, data: bytes) -> int:
        out = bytearray()
        for ch in data:
            if self._last_cr:
                if ch in (_LF, _CR):
                    out.append(ch)
                else:
                    out += bytes((_CR, ch))
            elif ch != _CR:
                out.append(ch)
            self._last_cr = ch == _CR
        self._stream.write(bytes(out))
        return len(data)

    def close(self) -> None:
        if self._last_cr:
            self._stream.write(b"\r")
            self._last_cr = False
        self._close_stream()


class Unix2DosWriter(_WrappingWriter):
    """Writer that turns a bare LF into CRLF."""

    def __init__(self, stream: BinaryIO) -> None:
        super().__init__(stream)
        self._last_cr = False

    def write(self, data: bytes) -> int:
        out = bytearray()
        for ch in data:
            if self._last_cr:
                self._last_cr = False
            else:
                if ch == _LF:
                    out.append(_CR)
                elif ch == _CR:
                    self._last_cr = True
            out.append(ch)
        self._stream.write(bytes(out))
        return len(data)

    def close(self) -> None:
        self._close_stream()


class SuffixBuffer:
    """Keeps only the last ``capacity`` bytes written to it."""

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError("capacity must not be negative")
        self._capacity = capacity
        self._data = bytearray()

    def write(self, data: bytes) -> int:
        if self._capacity:
            self._data += data
            del self._data[: max(0, len(self._data) - self._capacity)]
        return len(data)

    def getvalue(self) -> bytes:
        return bytes(self._data)