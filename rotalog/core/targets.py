"""Output targets a logger writes to: a rotation slot file or a stream."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional, Protocol, TextIO


class OutputTarget(Protocol):
    """Minimal surface the logger needs from its active output."""

    owns_handle: bool

    def write(self, text: str) -> None:
        ...

    def close(self) -> None:
        ...


class FileTarget:
    """Append-mode handle on a single rotation slot file."""

    owns_handle = True

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._handle: Optional[TextIO] = self.path.open(
            "a", encoding="utf-8", errors="backslashreplace"
        )

    @property
    def closed(self) -> bool:
        return self._handle is None

    def write(self, text: str) -> None:
        if self._handle is None:
            raise ValueError(f"write to closed log file {self.path}")
        self._handle.write(text)
        # Size checks stat the file, so nothing may linger in the buffer.
        self._handle.flush()

    def close(self) -> None:
        handle, self._handle = self._handle, None
        if handle is not None:
            handle.close()

    def __repr__(self) -> str:
        return f"FileTarget({str(self.path)!r})"


class StreamTarget:
    """Writes to a stream the logger does not own, ``sys.stdout`` by default.

    The stream is looked up at write time when none is given, so redirections
    of ``sys.stdout`` made after construction are honoured.
    """

    owns_handle = False

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def write(self, text: str) -> None:
        stream = self.stream
        stream.write(text)
        stream.flush()

    def close(self) -> None:
        """Streams belong to the caller and are left open."""

    def __repr__(self) -> str:
        return f"StreamTarget({self._stream!r})"


__all__ = ["FileTarget", "OutputTarget", "StreamTarget"]
