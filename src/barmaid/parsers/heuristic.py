from __future__ import annotations

import logging
from typing import BinaryIO, ClassVar

from ..core.model import ParseResult, Span, ParseError, is_offset
from ..core.parser_base import ContainerParser
from ..scan.scanner import ByteScanner
from .png import PNG_START, PNG_END

logger = logging.getLogger(__name__)


class HeuristicPNGParser(ContainerParser):
    """Locate two consecutive PNG images by signature alone.

    Container structure is ignored, so only ``image_ranges`` is filled in.
    """

    name: ClassVar = "heuristic"
    signatures: ClassVar = ()
    priority: ClassVar = 90

    @classmethod
    def _find_images(cls, source, result: ParseResult) -> None:
        scanner = ByteScanner()
        offset = 0
        for i in range(len(result.image_ranges)):
            start = scanner.find(source, offset, PNG_START)
            if not is_offset(start):
                raise ParseError(f"PNG #{i} start signature {start.value}")
            end = scanner.find(source, start, PNG_END)
            if not is_offset(end):
                raise ParseError(f"PNG #{i} end signature {end.value}")
            offset = end + len(PNG_END)
            result.image_ranges[i] = Span(start, offset)
            logger.debug("PNG #%d: 0x%X - 0x%X", i, start, offset)

    @classmethod
    def parse(cls, source: BinaryIO) -> ParseResult:
        result = ParseResult(mode=cls.name)
        try:
            cls._find_images(source, result)
        except ParseError as e:
            result.error = str(e)
            return result
        result.success = True
        return result


def scan_heuristic(source: BinaryIO) -> ParseResult:
    """Find the preview and mask PNGs by their start and end signatures."""
    return HeuristicPNGParser.parse(source)
