"""I/O layer for barmaid - seekable sources and artifact sinks."""

# Re-export these for import convenience
from .base import ByteSource, ByteSink
from .local import LocalByteSource, open_local_source, source_size


def open_source(source):
    """Factory function to create a LocalByteSource from a path or binary stream."""
    return open_local_source(source)
