from __future__ import annotations
import enum
from dataclasses import dataclass, field
from typing import Union


class Missing(enum.Enum):
    """Why an offset could not be resolved."""
    NOT_SEARCHED = "not searched"
    NOT_FOUND = "not found"          # scanner reached end of source
    EXHAUSTED = "padding exhausted"  # padding ran to end of source
    IO_ERROR = "i/o error"           # seek or read failed


Offset = Union[int, Missing]


def is_offset(value: Offset) -> bool:
    return not isinstance(value, Missing)


@dataclass(frozen=True, slots=True)
class Span:
    """Half-open byte range [start, end)."""
    start: int
    end: int

    def __post_init__(self):
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"Invalid span [{self.start}, {self.end})")

    def __len__(self) -> int:
        return self.end - self.start


@dataclass(slots=True)
class ParseResult:
    success: bool = False
    mode: str = ""
    prefix_end: Offset = Missing.NOT_SEARCHED
    image_ranges: list[Span | None] = field(default_factory=lambda: [None, None])
    payload_compressed: bool = False
    payload_range: Span | None = None
    error: str | None = None


class BarmaidError(RuntimeError):
    """Base class for all barmaid errors."""
    pass


class ParseError(BarmaidError):
    """Raised when a parser encounters malformed input."""
    pass


class ExtractError(BarmaidError):
    """Raised when a segment cannot be copied or inflated to its sink."""
    pass


class BuildError(BarmaidError):
    """Raised when a container cannot be rebuilt or fails verification."""
    pass


class UnknownModeError(BarmaidError):
    """Raised when no parser is registered for the requested mode."""
    pass
