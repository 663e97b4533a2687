"""Chunked pattern search and padding resolution over seekable sources."""

from .scanner import CURRENT, ByteScanner, OverlapBuffer, find_sequence
from .padding import skip_padding
