"""Copy resolved segments out of a source into standalone artifacts."""

from __future__ import annotations

import contextlib
import logging
import zlib
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Union

from .core.model import ExtractError, ParseResult, Span, is_offset
from .io.base import ByteSink, ByteSource

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192

Target = Union[str, Path, BinaryIO]


@dataclass(slots=True)
class Artifact:
    name: str
    target: str
    span: Span
    size: int                  # bytes written to the sink
    inflated: bool = False


def _write(sink, data: bytes) -> int:
    try:
        written = sink.write(data)
    except OSError as e:
        raise ExtractError(f"write failed: {e}") from e
    if written is not None and written != len(data):
        raise ExtractError(f"short write: {written} of {len(data)} bytes")
    return len(data)


def extract_range(source: ByteSource, start: int, end: int, sink: ByteSink, *,
                  chunk_size: int = CHUNK_SIZE) -> int:
    """Copy bytes [start, end) of `source` to the beginning of `sink`.

    Returns the number of bytes copied. Raises ExtractError if the source ends
    early or the sink rejects a write; whatever was written stays in the sink.
    """
    if start < 0 or end < start:
        raise ExtractError(f"invalid range [{start}, {end})")
    try:
        source.seek(start)
        sink.seek(0)
    except (OSError, ValueError) as e:
        raise ExtractError(f"seek failed: {e}") from e

    remaining = end - start
    while remaining:
        want = min(remaining, chunk_size)
        try:
            chunk = source.read(want)
        except OSError as e:
            raise ExtractError(f"read failed: {e}") from e
        if len(chunk) != want:
            raise ExtractError(f"unexpected end of source at 0x{end - remaining + len(chunk):X}")
        _write(sink, chunk)
        remaining -= want
    return end - start


def inflate(source: ByteSource, sink: ByteSink, *, chunk_size: int = CHUNK_SIZE) -> int:
    """Decompress the zlib stream at the source's cursor into `sink`.

    Reads until the stream's own end marker; trailing bytes are left unread.
    Returns the number of decompressed bytes written.
    """
    d = zlib.decompressobj()
    total = 0
    try:
        while not d.eof:
            chunk = source.read(chunk_size)
            if not chunk:
                raise ExtractError("compressed payload is truncated")
            total += _write(sink, d.decompress(chunk))
    except zlib.error as e:
        raise ExtractError(f"compressed payload is corrupt: {e}") from e
    except OSError as e:
        raise ExtractError(f"read failed: {e}") from e
    return total


@contextlib.contextmanager
def open_sink(target: Target):
    """Yield a writable binary sink for a path or an already open stream."""
    if hasattr(target, "write"):
        yield target
        return
    try:
        fh = open(target, "wb")
    except OSError as e:
        raise ExtractError(f"{target}: failed to open file") from e
    with fh:
        yield fh


def _target_name(target: Target) -> str:
    if isinstance(target, (str, Path)):
        return str(target)
    return str(getattr(target, "name", "<stream>"))


def extract_artifacts(
    source,
    result: ParseResult,
    *,
    preview: Target | None = None,
    mask: Target | None = None,
    prefix: Target | None = None,
    payload: Target | None = None,
    head: Target | None = None,
) -> list[Artifact]:
    """Write each requested artifact of a successful parse.

    ``prefix`` is the header region [0, prefix_end), ``head`` everything in
    front of the payload, ``payload`` the container (inflated when flagged
    compressed). Prefix, head and payload need a structural parse.
    """
    if not result.success:
        raise ExtractError(f"cannot extract from a failed parse: {result.error}")

    jobs: list[tuple[str, Target, Span]] = []
    for name, target, span in (
        ("preview", preview, result.image_ranges[0]),
        ("mask", mask, result.image_ranges[1]),
    ):
        if target is not None:
            jobs.append((name, target, span))

    structural = {"prefix": prefix, "head": head, "payload": payload}
    if any(t is not None for t in structural.values()):
        if not is_offset(result.prefix_end) or result.payload_range is None:
            raise ExtractError(f"{result.mode} mode cannot extract prefix, head or payload")
        if prefix is not None:
            jobs.append(("prefix", prefix, Span(0, result.prefix_end)))
        if head is not None:
            jobs.append(("head", head, Span(0, result.payload_range.start)))

    artifacts = []
    for name, target, span in jobs:
        if span is None:
            raise ExtractError(f"{name}: segment not found")
        with open_sink(target) as sink:
            try:
                size = extract_range(source, span.start, span.end, sink)
            except ExtractError as e:
                raise ExtractError(f"{name}: {e}") from e
        logger.debug("wrote %s (%d bytes) to %s", name, size, _target_name(target))
        artifacts.append(Artifact(name, _target_name(target), span, size))

    if payload is not None:
        artifacts.append(_extract_payload(source, result, payload))
    return artifacts


def _extract_payload(source, result: ParseResult, target: Target) -> Artifact:
    span = result.payload_range
    with open_sink(target) as sink:
        try:
            if result.payload_compressed:
                source.seek(span.start)
                sink.seek(0)
                size = inflate(source, sink)
            else:
                size = extract_range(source, span.start, span.end, sink)
        except (OSError, ValueError) as e:
            raise ExtractError(f"payload: seek failed: {e}") from e
        except ExtractError as e:
            raise ExtractError(f"payload: {e}") from e
    logger.debug("wrote %s payload (%d bytes) to %s",
                 "inflated" if result.payload_compressed else "raw", size, _target_name(target))
    return Artifact("payload", _target_name(target), span, size, inflated=result.payload_compressed)
