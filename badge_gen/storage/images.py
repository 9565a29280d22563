"""
Image persistence with format conversion.
"""

from io import BytesIO
from pathlib import Path

from PIL import Image

JPEG_QUALITY = 95

_PIL_FORMATS = {"png": "PNG", "jpg": "JPEG"}


def save_image(image_bytes: bytes, out_path: Path, image_format: str) -> Path:
    """Decode provider image bytes and save them in the requested format.

    Args:
        image_bytes: Encoded image as returned by the provider
        out_path: Destination file path
        image_format: ``png`` or ``jpg``

    Returns:
        The destination path

    Raises:
        ValueError: If the format is not supported
        PIL.UnidentifiedImageError: If the bytes are not an image
    """
    if image_format not in _PIL_FORMATS:
        raise ValueError(f"Unsupported image format: {image_format}")

    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    with Image.open(BytesIO(image_bytes)) as img:
        if image_format == "jpg":
            img.convert("RGB").save(out_path, format="JPEG", quality=JPEG_QUALITY)
        else:
            img.save(out_path, format="PNG")
    return out_path
