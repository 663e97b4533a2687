from __future__ import annotations

from typing import Any, Dict

from ..core.model import ParseError, Span

# PNG signature
PNG_SIG = b'\x89PNG\r\n\x1a\n'
IHDR_CHUNK_TYPE = b'IHDR'

# magic + IHDR length/type, and a zero-length IEND chunk with its CRC
PNG_START = PNG_SIG + b'\x00\x00\x00\x0d' + IHDR_CHUNK_TYPE
PNG_END = b'\x00\x00\x00\x00IEND\xae\x42\x60\x82'

_IHDR_END = 26    # signature, chunk header, width, height, depth, colour type

_COLOUR_TYPES = {
    0: "greyscale", 2: "truecolour", 3: "indexed",
    4: "greyscale+alpha", 6: "truecolour+alpha",
}


def describe_png(source, span: Span) -> Dict[str, Any]:
    """Return IHDR fields of the PNG stored at `span` in `source`."""
    if len(span) < _IHDR_END:
        raise ParseError("File too small to be a valid PNG")
    source.seek(span.start)
    buf = source.read(_IHDR_END)
    if len(buf) < _IHDR_END:
        raise ParseError("Unexpected end of file")

    if buf[:8] != PNG_SIG:
        raise ParseError("Invalid PNG signature")

    if buf[12:16] != IHDR_CHUNK_TYPE:
        raise ParseError("IHDR chunk not found")

    return {
        "format": "PNG",
        "width": int.from_bytes(buf[16:20], "big"),
        "height": int.from_bytes(buf[20:24], "big"),
        "bit_depth": buf[24],
        "colour_type": _COLOUR_TYPES.get(buf[25]),
    }
