"""Shared test helpers: mock Gemini response factories and sample replies."""

import io
import struct
import zlib
from unittest.mock import MagicMock

from PIL import Image


def _make_text_response(text: str | None):
    """Create a mock Gemini response with text content."""
    part = MagicMock()
    part.text = text

    content = MagicMock()
    content.role = "model"
    content.parts = [part]

    candidate = MagicMock()
    candidate.content = content

    response = MagicMock()
    response.candidates = [candidate]
    response.text = text
    return response


def _make_image_bytes(fmt: str = "PNG", size: tuple[int, int] = (4, 4)) -> bytes:
    """Render a tiny solid image in the given Pillow format."""
    buf = io.BytesIO()
    Image.new("RGB", size, (0, 128, 255)).save(buf, format=fmt)
    return buf.getvalue()


def _make_oversized_png_header(width: int = 60000, height: int = 60000) -> bytes:
    """A PNG with only a header claiming huge dimensions, no pixel data."""

    def chunk(tag: bytes, data: bytes) -> bytes:
        crc = zlib.crc32(tag + data) & 0xFFFFFFFF
        return struct.pack(">I", len(data)) + tag + data + struct.pack(">I", crc)

    ihdr = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    return b"\x89PNG\r\n\x1a\n" + chunk(b"IHDR", ihdr) + chunk(b"IEND", b"")


SAMPLE_HTML = "<!DOCTYPE html>\n<html>\n<body><canvas id=\"c\"></canvas></body>\n</html>"

SAMPLE_BOM = (
    "| Component | Specifications/Value | Quantity | Usage Notes |\n"
    "|---|---|---|---|\n"
    "| Servo | SG90 | 2 | Drives the pendulum arm |"
)

SAMPLE_REPLY = (
    "Section 1: Summary and Explanation\n"
    "## 🧪 ASV Output: Simple Pendulum\n"
    "A bob swings under gravity. Drag the slider to change length.\n"
    "Concept Source: Text\n\n"
    "```html\n" + SAMPLE_HTML + "\n```\n\n"
    "Section 3: Hardware Bill of Materials (BOM)\n" + SAMPLE_BOM + "\n"
)
