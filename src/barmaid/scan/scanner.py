"""Forward search for fixed byte sequences over a seekable source.

The source is read in fixed-size chunks. An :class:`OverlapBuffer` carries the
tail of the previous window into the next one, so a pattern that straddles a
chunk boundary is still found.
"""

from __future__ import annotations

import logging

from ..core.model import Missing, Offset

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192
LONGEST_MAGIC = 32      # longest pattern the scanner is ever asked for
CURRENT = -1            # search from the source's current cursor


class OverlapBuffer:
    """Search window holding one chunk plus the retained tail of the previous one."""

    def __init__(self, max_pattern: int = LONGEST_MAGIC):
        if max_pattern < 1:
            raise ValueError("max_pattern must be positive")
        self.max_pattern = max_pattern
        self._window = bytearray()
        self.base = 0           # absolute offset of _window[0]

    def reset(self, base: int) -> None:
        self._window.clear()
        self.base = base

    def feed(self, chunk: bytes) -> None:
        self._window += chunk

    def find(self, pattern: bytes) -> int | None:
        """Absolute offset of the first match in the window, or None."""
        idx = self._window.find(pattern)
        if idx < 0:
            return None
        return self.base + idx

    def retain(self) -> None:
        """Drop everything but the last max_pattern - 1 bytes."""
        keep = min(len(self._window), self.max_pattern - 1)
        drop = len(self._window) - keep
        del self._window[:drop]
        self.base += drop

    def __len__(self) -> int:
        return len(self._window)


class ByteScanner:
    """Chunked first-match search, reusable across calls."""

    def __init__(self, chunk_size: int = CHUNK_SIZE, max_pattern: int = LONGEST_MAGIC):
        if chunk_size < 1:
            raise ValueError("chunk_size must be positive")
        self.chunk_size = chunk_size
        self._buffer = OverlapBuffer(max_pattern)

    def find(self, source, offset: int, pattern: bytes) -> Offset:
        """Return the absolute offset of the first `pattern` at or after `offset`.

        `offset` of ``CURRENT`` searches from the current cursor. On a match the
        cursor is left at the match. ``Missing.NOT_FOUND`` is returned when the
        source is exhausted and ``Missing.IO_ERROR`` when seeking or reading fails.
        """
        if not pattern:
            raise ValueError("pattern must not be empty")
        if len(pattern) > self._buffer.max_pattern:
            raise ValueError(f"pattern longer than {self._buffer.max_pattern} bytes")

        try:
            if offset != CURRENT:
                source.seek(offset)
            self._buffer.reset(source.tell())
            while chunk := source.read(self.chunk_size):
                self._buffer.feed(chunk)
                pos = self._buffer.find(pattern)
                if pos is not None:
                    source.seek(pos)
                    logger.debug("found %s at 0x%X", pattern.hex(), pos)
                    return pos
                self._buffer.retain()
        except (OSError, ValueError) as e:
            logger.debug("scan for %s from %d failed: %s", pattern.hex(), offset, e)
            return Missing.IO_ERROR

        logger.debug("%s not found from %d", pattern.hex(), offset)
        return Missing.NOT_FOUND


def find_sequence(source, offset: int, pattern: bytes, *, chunk_size: int = CHUNK_SIZE) -> Offset:
    """Find the first occurrence of `pattern` at or after `offset` in `source`."""
    return ByteScanner(chunk_size).find(source, offset, pattern)
