from __future__ import annotations
from typing import Dict, Any, Iterable
from .model import ParseResult, Span, is_offset


def _span_asdict(span: Span | None) -> Dict[str, int] | None:
    if span is None:
        return None
    return {"start": span.start, "end": span.end, "size": len(span)}


def hex_span(span: Span | None) -> str:
    """Format a span the way verbose output prints it: 0xSTART - 0xEND."""
    if span is None:
        return "not found"
    return f"0x{span.start:X} - 0x{span.end:X}"


def result_asdict(res: ParseResult, *, fields: Iterable[str] | None = None) -> Dict[str, Any]:
    """Return a JSON-serialisable dict (skip None) optionally filtered."""
    if not res.success:
        return {"success": False, "mode": res.mode, "error": res.error}
    payload = {
        "mode": res.mode,
        "prefix_end": res.prefix_end if is_offset(res.prefix_end) else None,
        "preview": _span_asdict(res.image_ranges[0]),
        "mask": _span_asdict(res.image_ranges[1]),
        "payload": _span_asdict(res.payload_range),
        "payload_compressed": res.payload_compressed if res.payload_range is not None else None,
    }
    payload = {k: v for k, v in payload.items() if v is not None}
    if fields:
        wanted = set(fields)
        payload = {k: v for k, v in payload.items() if k in wanted}
    payload["success"] = True
    return payload
