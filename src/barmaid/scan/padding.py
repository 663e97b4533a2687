from __future__ import annotations

import logging

from ..core.model import Missing, Offset
from .scanner import CURRENT

logger = logging.getLogger(__name__)

GROUP = 4   # segments are zero-padded in 4-byte groups


def skip_padding(source, offset: int = CURRENT) -> Offset:
    """Return the start of the first 4-byte group at or after `offset` holding a non-zero byte.

    The cursor is left at the returned offset. If the source runs out first,
    the cursor goes back to where the scan began and ``Missing.EXHAUSTED`` is
    returned; a failing seek gives ``Missing.IO_ERROR``.
    """
    try:
        if offset != CURRENT:
            source.seek(offset)
        began = source.tell()
        pos = began
        while group := source.read(GROUP):
            if any(group):
                source.seek(pos)
                if pos != began:
                    logger.debug("skipped %d padding bytes at 0x%X", pos - began, began)
                return pos
            pos += len(group)
        source.seek(began)
    except (OSError, ValueError) as e:
        logger.debug("padding scan from %d failed: %s", offset, e)
        return Missing.IO_ERROR
    return Missing.EXHAUSTED
