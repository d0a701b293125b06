"""Shared fixtures: a Gemini-free visualizer and sample attachments."""

from unittest.mock import MagicMock

import pytest

from sciviz.generation.attachments import encode_attachment
from sciviz.generation.client import GeminiVisualizer
from sciviz.workspace import Workspace
from tests.helpers import _make_image_bytes, _make_text_response


@pytest.fixture
def png_bytes():
    return _make_image_bytes("PNG")


@pytest.fixture
def jpeg_bytes():
    return _make_image_bytes("JPEG")


@pytest.fixture
def png_attachment(png_bytes):
    return encode_attachment(png_bytes, filename="setup.png")


@pytest.fixture
def jpeg_attachment(jpeg_bytes):
    return encode_attachment(jpeg_bytes, filename="photo.jpg")


@pytest.fixture
def visualizer():
    """GeminiVisualizer with a fake key and a mocked SDK client."""
    viz = GeminiVisualizer(api_key="fake")
    viz._client = MagicMock()
    viz._client.models.generate_content.return_value = _make_text_response("")
    return viz


@pytest.fixture
def mock_visualizer():
    """Stand-in for GeminiVisualizer at the workspace seam."""
    return MagicMock(spec=GeminiVisualizer)


@pytest.fixture
def workspace(mock_visualizer):
    return Workspace(visualizer=mock_visualizer)
