"""Character-by-character reading of a source file with position tracking."""

from __future__ import annotations

import os
from types import TracebackType


class SourceFile:
    """Reads a text file one character at a time, tracking line and column.

    At end of file :meth:`peek_char` and :meth:`get_char` return ``""``.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._file = open(path, "r", encoding="utf-8", newline="")
        self.path = os.path.realpath(path)
        self._pending: str | None = None
        self._line = 1
        self._column = 1

    def peek_char(self) -> str:
        if self._pending is None:
            self._pending = self._file.read(1)
        return self._pending

    def get_char(self) -> str:
        c = self.peek_char()
        if c:
            self._pending = None
            if c == "\n":
                self._column = 0
                self._line += 1
            else:
                self._column += 1
        return c

    def is_eof(self) -> bool:
        return self.peek_char() == ""

    def line(self) -> int:
        return self._line

    def column(self) -> int:
        return self._column

    def close(self) -> None:
        self._file.close()

    def __enter__(self) -> "SourceFile":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()