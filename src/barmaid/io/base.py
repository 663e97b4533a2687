"""Base protocols and shared types for I/O layer."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class ByteSource(Protocol):
    """Protocol for seekable, read-only byte sources."""

    def read(self, size: int = -1) -> bytes:
        """Return up to `size` bytes from the cursor; b'' at end of source."""
        ...

    def seek(self, offset: int, whence: int = 0) -> int:
        ...

    def tell(self) -> int:
        ...


@runtime_checkable
class ByteSink(Protocol):
    """Protocol for artifact sinks."""

    def write(self, data: bytes) -> int:
        ...

    def seek(self, offset: int, whence: int = 0) -> int:
        ...
