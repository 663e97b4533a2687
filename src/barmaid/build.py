"""Reassemble a .btw file from the head and payload produced by extraction.

The file is the head bytes verbatim followed by the payload, re-compressed
with zlib when the input file's payload was compressed. Compressor settings may differ
from the program that wrote the input file, so the result is checked by
re-parsing it rather than assumed to be byte-identical.
"""

from __future__ import annotations

import contextlib
import hashlib
import io
import logging
import zlib
from pathlib import Path
from typing import BinaryIO, Union

from .core.model import BuildError, ExtractError
from .extract import CHUNK_SIZE, extract_artifacts, open_sink
from .io import open_source
from .parsers.btw import parse_container

logger = logging.getLogger(__name__)

Input = Union[str, Path, BinaryIO]


@contextlib.contextmanager
def _open_input(source: Input):
    if hasattr(source, "read"):
        yield source
        return
    try:
        fh = open(source, "rb")
    except OSError as e:
        raise BuildError(f"{source}: failed to open file") from e
    with fh:
        yield fh


def _copy(src, sink, transform=None) -> int:
    total = 0
    while chunk := src.read(CHUNK_SIZE):
        if transform is not None:
            chunk = transform(chunk)
        sink.write(chunk)
        total += len(chunk)
    return total


def build_container(head: Input, payload: Input, sink: Input, *,
                    compress: bool = True, level: int = -1) -> int:
    """Write `head` then `payload` (zlib-compressed if `compress`) to `sink`.

    Returns the number of bytes written.
    """
    try:
        with _open_input(head) as h, _open_input(payload) as p, open_sink(sink) as out:
            written = _copy(h, out)
            if compress:
                c = zlib.compressobj(level)
                written += _copy(p, out, c.compress)
                tail = c.flush()
                out.write(tail)
                written += len(tail)
            else:
                written += _copy(p, out)
    except ExtractError as e:
        raise BuildError(str(e)) from e
    except OSError as e:
        raise BuildError(f"write failed: {e}") from e
    logger.debug("built container of %d bytes", written)
    return written


def _digest(source: Input) -> str:
    h = hashlib.sha256()
    with _open_input(source) as fh:
        fh.seek(0)
        while chunk := fh.read(CHUNK_SIZE):
            h.update(chunk)
    return h.hexdigest()


def verify_container(built: Input, payload: Input, *, compressed: bool = True) -> None:
    """Re-parse `built` and check that its payload matches `payload` exactly."""
    with open_source(built) as src:
        result = parse_container(src)
        if not result.success:
            raise BuildError(f"rebuilt file does not parse: {result.error}")
        if result.payload_compressed != compressed:
            raise BuildError("rebuilt payload compression flag does not match")
        out = io.BytesIO()
        try:
            extract_artifacts(src, result, payload=out)
        except ExtractError as e:
            raise BuildError(f"rebuilt payload cannot be extracted: {e}") from e

    out.seek(0)
    if _digest(out) != _digest(payload):
        raise BuildError("rebuilt payload differs from the input payload")
    logger.debug("verified rebuilt payload")
