"""Local file sources."""

import io
import os
from pathlib import Path
from typing import BinaryIO, Union


def source_size(source) -> int:
    """Return the total byte length of an open source without moving its cursor."""
    size = getattr(source, "size", None)
    if isinstance(size, int):
        return size
    try:
        return os.fstat(source.fileno()).st_size
    except (AttributeError, io.UnsupportedOperation, OSError):
        # Fallback for objects without a descriptor (like BytesIO)
        pos = source.tell()
        end = source.seek(0, os.SEEK_END)
        source.seek(pos)
        return end


class LocalByteSource:
    """Seekable read-only view of a local file or binary stream."""

    def __init__(self, source: Union[Path, str, BinaryIO]):
        self.bytes_fetched = 0
        self.requests_made = 0
        self._should_close_file = False

        if hasattr(source, 'read'):
            # BinaryIO object
            if not source.seekable():
                raise IOError("Source is not seekable")
            self._file = source
            self.name = getattr(source, "name", "<stream>")
        else:
            # Path or str
            self._file = open(source, 'rb')
            self._should_close_file = True
            self.name = str(source)
        self._size = None

    @property
    def size(self) -> int:
        """Return the total size of the source in bytes."""
        if self._size is None:
            self._size = source_size(self._file)
        return self._size

    def read(self, size: int = -1) -> bytes:
        self.requests_made += 1
        data = self._file.read(size)
        self.bytes_fetched += len(data)
        return data

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        if whence == os.SEEK_SET and offset < 0:
            raise IOError("Start offset cannot be negative")
        return self._file.seek(offset, whence)

    def tell(self) -> int:
        return self._file.tell()

    def seekable(self) -> bool:
        return True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        """Close the file if we opened it."""
        if self._should_close_file and self._file is not None:
            self._file.close()
            self._file = None


def open_local_source(source: Union[Path, str, BinaryIO]) -> LocalByteSource:
    """Create a local byte source."""
    return LocalByteSource(source)
