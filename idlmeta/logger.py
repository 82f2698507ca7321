"""Tagged, level-filtered logging to text streams."""

from __future__ import annotations

import sys
from enum import IntEnum
from typing import TextIO


class LogLevel(IntEnum):
    VERBOSE = 0
    DEBUG = 1
    ERROR = 2
    NOLOG = 3


class Logger:
    """Writes ``[tag]: message`` lines; errors go to the error stream."""

    def __init__(
        self,
        level: LogLevel = LogLevel.DEBUG,
        out: TextIO | None = None,
        err: TextIO | None = None,
    ) -> None:
        self.level = LogLevel(level)
        self._out = out
        self._err = err

    @property
    def out(self) -> TextIO:
        return self._out if self._out is not None else sys.stdout

    @property
    def err(self) -> TextIO:
        return self._err if self._err is not None else sys.stderr

    def set_level(self, level: LogLevel) -> None:
        self.level = LogLevel(level)

    def debug(self, tag: str, message: str) -> None:
        if self.level > LogLevel.DEBUG:
            return
        self._write(self.out, tag, message)

    def error(self, tag: str, message: str) -> None:
        if self.level > LogLevel.ERROR:
            return
        self._write(self.err, tag, message)

    def verbose(self, tag: str, message: str) -> None:
        if self.level > LogLevel.VERBOSE:
            return
        self._write(self.out, tag, message)

    @staticmethod
    def _write(stream: TextIO, tag: str, message: str) -> None:
        stream.write(f"[{tag}]: {message}\n")