import io

import pytest

from barmaid.core.model import ParseError, Span
from barmaid.parsers.png import describe_png

from create_tiny_btw import create_tiny_png


def test_describe_png():
    data = b"junk" + create_tiny_png(10, 20)
    info = describe_png(io.BytesIO(data), Span(4, len(data)))
    assert info["format"] == "PNG"
    assert info["width"] == 10
    assert info["height"] == 20
    assert info["bit_depth"] == 8
    assert info["colour_type"] == "truecolour+alpha"


def test_invalid_signature():
    data = b"\x00" * 40
    with pytest.raises(ParseError, match="Invalid PNG signature"):
        describe_png(io.BytesIO(data), Span(0, 40))


def test_too_small():
    with pytest.raises(ParseError, match="too small"):
        describe_png(io.BytesIO(b"\x89PNG"), Span(0, 4))


def test_span_past_end():
    png = create_tiny_png()
    with pytest.raises(ParseError, match="Unexpected end of file"):
        describe_png(io.BytesIO(png[:20]), Span(0, 30))
