"""A pool of NUL-terminated strings addressed by byte offset."""

from __future__ import annotations


class StringPool:
    """Collects distinct non-empty strings into one contiguous byte block.

    Each string is stored once as UTF-8 followed by a NUL byte. Its offset
    is the position of its first byte in the block.
    """

    def __init__(self) -> None:
        self._data = bytearray()
        self._offsets: dict[str, int] = {}

    def add(self, string: str | None) -> None:
        """Add ``string`` unless it is empty, ``None`` or already present."""
        if not string or string in self._offsets:
            return
        self._offsets[string] = len(self._data)
        self._data += string.encode("utf-8")
        self._data.append(0)

    def offset(self, string: str | None) -> int:
        """Return the offset of ``string``; strings never added map to 0."""
        if string is None:
            return 0
        return self._offsets.get(string, 0)

    def __contains__(self, string: object) -> bool:
        return string in self._offsets

    def __len__(self) -> int:
        return len(self._data)

    def data(self) -> bytes:
        """Return the pooled bytes."""
        return bytes(self._data)