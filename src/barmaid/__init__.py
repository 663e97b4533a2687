"""barmaid - split BarTender (.btw) files into preview images, header and payload."""

from .core.model import (                                             # re-export
    ParseResult, Span, Missing, Offset,
    BarmaidError, ParseError, ExtractError, BuildError, UnknownModeError,
)
from .core.registry import _REGISTRY, AUTO                            # singleton
from .io import open_source

# Import parsers to trigger registration
from .parsers import btw, heuristic  # noqa: F401
from .parsers.btw import parse_container
from .parsers.heuristic import scan_heuristic
from .scan import find_sequence, skip_padding
from .extract import Artifact, extract_range, extract_artifacts, inflate
from .build import build_container, verify_container

_SNIFF_SIZE = 64


def parse_source(src, *, mode: str = "btw") -> ParseResult:
    """Parse an open seekable source with the parser selected by `mode`."""
    src.seek(0)
    first_bytes = src.read(_SNIFF_SIZE)
    parser_cls = _REGISTRY.choose(mode, first_bytes)
    return parser_cls.parse(src)


def parse(source, *, mode: str = "btw") -> ParseResult:
    """Parse a path or binary stream; `mode` is "btw", "heuristic" or "auto"."""
    with open_source(source) as src:
        return parse_source(src, mode=mode)


__all__ = [
    "parse", "parse_source", "parse_container", "scan_heuristic",
    "find_sequence", "skip_padding",
    "extract_range", "extract_artifacts", "inflate", "Artifact",
    "build_container", "verify_container", "open_source",
    "ParseResult", "Span", "Missing", "Offset", "AUTO",
    "BarmaidError", "ParseError", "ExtractError", "BuildError", "UnknownModeError",
]
