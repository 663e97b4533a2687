from abc import ABC, abstractmethod
from typing import BinaryIO, ClassVar, Sequence, Tuple
from .model import ParseResult

Signature = Tuple[int, bytes]          # (offset, byte-pattern)


class ContainerParser(ABC):
    # --- required by subclasses ---
    name: ClassVar[str]                        # mode name, e.g. "btw"
    signatures: ClassVar[Sequence[Signature]]  # magic bytes patterns, empty = fallback
    priority: ClassVar[int] = 100              # lower = examined earlier

    @classmethod
    @abstractmethod
    def parse(cls, source: BinaryIO) -> ParseResult:
        """Resolve segment ranges from a seekable binary source."""
        ...

    # --- registry hook ---
    def __init_subclass__(cls, **kw):
        super().__init_subclass__(**kw)
        from .registry import _REGISTRY
        _REGISTRY.register(cls)           # noqa: E402
