from __future__ import annotations
import bisect
from typing import Dict, List, Type

from .parser_base import ContainerParser
from .model import UnknownModeError

AUTO = "auto"


class ParserRegistry:
    def __init__(self) -> None:
        self._by_name: Dict[str, Type[ContainerParser]] = {}
        self._parsers: List[tuple[int, str, Type[ContainerParser]]] = []   # sorted by priority

    # called from ContainerParser.__init_subclass__
    def register(self, parser_cls: Type[ContainerParser]) -> None:
        # Use (priority, class_name, parser_cls) to ensure stable sorting
        entry = (parser_cls.priority, parser_cls.__name__, parser_cls)
        bisect.insort(self._parsers, entry)
        self._by_name[parser_cls.name] = parser_cls

    @property
    def modes(self) -> list[str]:
        return [p.name for _, _, p in self._parsers]

    # --- detection helpers ---
    def _sniff(self, first_bytes: bytes) -> Type[ContainerParser] | None:
        for _, _, p in self._parsers:
            for offset, pat in p.signatures:
                if len(first_bytes) >= offset + len(pat):
                    if first_bytes[offset : offset + len(pat)] == pat:
                        return p
        return None

    def _fallback(self) -> Type[ContainerParser] | None:
        for _, _, p in self._parsers:
            if not p.signatures:
                return p
        return None

    def choose(self, mode: str, first_bytes: bytes = b"") -> Type[ContainerParser]:
        if mode != AUTO:
            if parser := self._by_name.get(mode):
                return parser
            raise UnknownModeError(f"No parser for mode {mode!r}")
        # 1) magic-number sniff
        parser = self._sniff(first_bytes)
        if parser:
            return parser
        # 2) signature-less fallback
        if parser := self._fallback():
            return parser
        raise UnknownModeError("No parser matches and no fallback is registered")


# singleton used project-wide
_REGISTRY = ParserRegistry()
