"""Structural parser for BarTender (.btw) files.

Layout::

    SOF marker | header ... FF FE FF 00 | pad | u32 len | preview PNG | pad
               | u32 len | mask PNG | pad | [00 01] payload ... EOF

Each segment's start depends on the end of the one before it, so the image
segments are resolved by folding over ``LAYOUT``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import BinaryIO, ClassVar, Sequence

from ..core.model import ParseResult, ParseError, Span, Missing, is_offset
from ..core.parser_base import ContainerParser
from ..io.local import source_size
from ..scan.scanner import ByteScanner
from ..scan.padding import skip_padding

logger = logging.getLogger(__name__)

# Marker constants
BTW_SOF = b"\r\nBar Tender Format File\r\n"
END_OF_META = b"\xFF\xFE\xFF\x00"
ZLIB_MARKER = b"\x00\x01"


@dataclass(frozen=True)
class LengthPrefixed:
    """Segment introduced by a little-endian unsigned length field."""
    name: str
    width: int = 4

    def resolve(self, source, start: int, size: int) -> Span:
        source.seek(start)
        raw = source.read(self.width)
        if len(raw) < self.width:
            raise ParseError(f"{self.name}: short read on length field at 0x{start:X}")
        length = int.from_bytes(raw, "little")
        data_start = start + self.width
        if data_start + length > size:
            raise ParseError(f"{self.name}: declared length {length} runs past end of file")
        return Span(data_start, data_start + length)


@dataclass(frozen=True)
class Fixed:
    """Segment of a known length with no length field."""
    name: str
    length: int

    def resolve(self, source, start: int, size: int) -> Span:
        if start + self.length > size:
            raise ParseError(f"{self.name}: runs past end of file")
        return Span(start, start + self.length)


LAYOUT: Sequence = (LengthPrefixed("preview"), LengthPrefixed("mask"))


def _next_segment(source, offset: int, what: str) -> int:
    pos = skip_padding(source, offset)
    if pos is Missing.EXHAUSTED:
        raise ParseError(f"no data after {what}")
    if not is_offset(pos):
        raise ParseError(f"padding after {what}: {pos.value}")
    return pos


def is_btw(source) -> bool:
    """Check for the start-of-file marker."""
    source.seek(0)
    return source.read(len(BTW_SOF)) == BTW_SOF


class BTWParser(ContainerParser):
    """BarTender container reader."""

    name: ClassVar = "btw"
    signatures: ClassVar = ((0, BTW_SOF),)
    priority: ClassVar = 10

    layout: ClassVar[Sequence] = LAYOUT

    # ------------------------------------------------------------------ #
    @classmethod
    def _find_prefix_end(cls, source) -> int:
        if not is_btw(source):
            raise ParseError("Missing Bar Tender start-of-file marker")
        found = ByteScanner().find(source, len(BTW_SOF), END_OF_META)
        if not is_offset(found):
            raise ParseError(f"end-of-metadata marker {found.value}")
        return _next_segment(source, found + len(END_OF_META), "header")

    @classmethod
    def _resolve_segments(cls, source, start: int, size: int, result: ParseResult) -> int:
        """Fill ``result.image_ranges`` and return where the payload segment starts."""
        offset = start
        for i, segment in enumerate(cls.layout):
            span = segment.resolve(source, offset, size)
            result.image_ranges[i] = span
            logger.debug("%s: 0x%X - 0x%X", segment.name, span.start, span.end)
            offset = _next_segment(source, span.end, segment.name)
        return offset

    @classmethod
    def _resolve_payload(cls, source, start: int, size: int, result: ParseResult) -> None:
        source.seek(start)
        marker = source.read(len(ZLIB_MARKER))
        if len(marker) < len(ZLIB_MARKER):
            raise ParseError(f"short read on payload marker at 0x{start:X}")
        if marker == ZLIB_MARKER:
            result.payload_compressed = True
            start += len(ZLIB_MARKER)
        if start <= 0 or size <= 0:
            raise ParseError("payload range is empty")
        result.payload_range = Span(start, size)

    @classmethod
    def _parse(cls, source, result: ParseResult) -> None:
        result.prefix_end = cls._find_prefix_end(source)
        logger.debug("prefix: 0x0 - 0x%X", result.prefix_end)
        size = source_size(source)
        payload_start = cls._resolve_segments(source, result.prefix_end, size, result)
        cls._resolve_payload(source, payload_start, size, result)

    @classmethod
    def parse(cls, source: BinaryIO) -> ParseResult:
        result = ParseResult(mode=cls.name, image_ranges=[None] * len(cls.layout))
        try:
            cls._parse(source, result)
        except ParseError as e:
            result.error = str(e)
            return result
        except (OSError, ValueError) as e:
            result.error = f"I/O error: {e}"
            return result
        result.success = True
        return result


def parse_container(source: BinaryIO) -> ParseResult:
    """Resolve header, preview, mask and payload ranges of a .btw source."""
    return BTWParser.parse(source)
