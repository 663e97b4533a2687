#!/usr/bin/env python3
"""Create minimal BTW and PNG files for testing."""

import struct
import zlib
from pathlib import Path

PNG_SIG = b"\x89PNG\r\n\x1a\n"
PNG_END = bytes.fromhex("0000000049454e44ae426082")
BTW_SOF = b"\r\nBar Tender Format File\r\n"
END_OF_META = b"\xff\xfe\xff\x00"
ZLIB_MARKER = b"\x00\x01"


def create_tiny_png(width=10, height=20, body=b"\x00\x00\x00\x04IDATdata\x12\x34\x56\x78"):
    """Create a PNG-shaped blob: signature, IHDR, `body`, IEND."""
    ihdr = struct.pack(">IIBBBBB", width, height, 8, 6, 0, 0, 0)
    return (
        PNG_SIG
        + struct.pack(">I", len(ihdr)) + b"IHDR" + ihdr
        + struct.pack(">I", zlib.crc32(b"IHDR" + ihdr))
        + body
        + PNG_END
    )


def create_tiny_btw(
    header=b"\x01\x02Version=10.1;Printer=Zebra\x00\x07",
    images=None,
    pads=(8, 4, 12),
    payload=b"<Document><Label>Hello</Label></Document>" * 4,
    compress=True,
):
    """Create a BTW file and return (data, layout) with the offsets a parser should find.

    `pads` are the zero-padding lengths after the header, preview and mask;
    each must be a multiple of 4.
    """
    if images is None:
        images = (create_tiny_png(10, 20), create_tiny_png(10, 20, body=b"mask"))
    data = bytearray(BTW_SOF + header + END_OF_META)
    data += bytes(pads[0])
    layout = {"prefix_end": len(data)}

    for name, image, pad in zip(("preview", "mask"), images, pads[1:]):
        data += struct.pack("<I", len(image))
        layout[name] = (len(data), len(data) + len(image))
        data += image
        data += bytes(pad)

    if compress:
        data += ZLIB_MARKER
        layout["payload_start"] = len(data)
        data += zlib.compress(payload)
    else:
        layout["payload_start"] = len(data)
        data += payload
    layout["payload_end"] = len(data)
    return bytes(data), layout


def create_png_pair(filler=b"\x13\x37" * 50):
    """Two PNG blobs wrapped in arbitrary filler; returns (data, [(start, end), ...])."""
    first, second = create_tiny_png(4, 4), create_tiny_png(8, 8, body=b"second")
    data = bytearray(filler)
    ranges = []
    for image in (first, second):
        ranges.append((len(data), len(data) + len(image)))
        data += image + filler
    return bytes(data), ranges


if __name__ == "__main__":
    fixtures_dir = Path(__file__).parent / "fixtures"
    fixtures_dir.mkdir(exist_ok=True)

    btw_data, _ = create_tiny_btw()
    with open(fixtures_dir / "tiny.btw", "wb") as f:
        f.write(btw_data)

    print(f"Created tiny.btw ({len(btw_data)} bytes)")
