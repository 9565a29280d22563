"""
Shared fixtures.
"""
from io import BytesIO

import pytest
from PIL import Image


def make_png_bytes(size=(8, 8), color="white") -> bytes:
    """Encode a tiny RGBA PNG like the provider returns."""
    buffer = BytesIO()
    Image.new("RGBA", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def png_bytes():
    return make_png_bytes()
