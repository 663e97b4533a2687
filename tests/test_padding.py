"""Tests for zero-padding resolution."""

import io

import pytest

from barmaid.core.model import Missing
from barmaid.scan.padding import skip_padding
from barmaid.scan.scanner import CURRENT


class TestSkipPadding:
    """Test the 4-byte padding resolver."""

    def test_skips_zero_groups(self):
        src = io.BytesIO(b"\x00" * 12 + b"\x01\x00\x00\x00" + b"rest")
        assert skip_padding(src, 0) == 12
        assert src.tell() == 12

    def test_no_padding(self):
        src = io.BytesIO(b"\x2a\x00\x00\x00")
        assert skip_padding(src, 0) == 0
        assert src.tell() == 0

    def test_nonzero_late_in_group(self):
        src = io.BytesIO(b"\x00" * 4 + b"\x00\x00\x00\x05")
        assert skip_padding(src, 0) == 4

    def test_relative_to_offset(self):
        # groups are counted from the starting offset, not from 0
        src = io.BytesIO(b"\xff\xff\xff" + b"\x00" * 8 + b"\x00\x00\x09\x00")
        assert skip_padding(src, 3) == 11

    def test_current_position(self):
        src = io.BytesIO(b"abcd" + b"\x00" * 4 + b"efgh")
        src.seek(4)
        assert skip_padding(src, CURRENT) == 8

    @pytest.mark.parametrize("offset", [0, 3, 8, 16])
    def test_idempotent(self, offset):
        data = b"\x00" * 5 + b"\x10" + b"\x00" * 9 + b"\x20\x30" + b"\x00" * 20 + b"\x40"
        first = skip_padding(io.BytesIO(data), offset)
        assert skip_padding(io.BytesIO(data), first) == first

    def test_exhausted(self):
        src = io.BytesIO(b"\x01\x02" + b"\x00" * 14)
        assert skip_padding(src, 2) is Missing.EXHAUSTED
        assert src.tell() == 2

    def test_exhausted_at_end_of_source(self):
        src = io.BytesIO(b"\x01\x02\x03\x04")
        assert skip_padding(src, 4) is Missing.EXHAUSTED
        assert src.tell() == 4

    def test_short_trailing_group(self):
        src = io.BytesIO(b"\x00" * 4 + b"\x00\x07")
        assert skip_padding(src, 0) == 4

    def test_seek_failure(self):
        src = io.BytesIO(b"\x01")
        assert skip_padding(src, -3) is Missing.IO_ERROR

    def test_failure_distinct_from_scanner(self):
        assert Missing.EXHAUSTED is not Missing.NOT_FOUND
        assert Missing.EXHAUSTED is not Missing.IO_ERROR
