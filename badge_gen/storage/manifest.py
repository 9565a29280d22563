"""
Manifest assembly and persistence.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Sequence

from badge_gen import __version__
from .models import ImageResult, Manifest, ManifestMetadata

MANIFEST_FILENAME = "manifest.json"

logger = logging.getLogger(__name__)


class ManifestWriteError(OSError):
    """Raised when the manifest file can't be written."""


def build_metadata(
    images: Sequence[ImageResult],
    style: str,
    image_format: str,
    cost_usd: float,
    generated_at: Optional[str] = None
) -> ManifestMetadata:
    """Derive manifest metadata from the final list of images."""
    return ManifestMetadata(
        generated_at=generated_at or datetime.now(timezone.utc).isoformat(),
        tool_version=__version__,
        style=style,
        total_count=len(images),
        male_count=sum(1 for image in images if image.gender == "male"),
        female_count=sum(1 for image in images if image.gender == "female"),
        format=image_format,
        cost_usd=cost_usd
    )


def create_manifest(metadata: ManifestMetadata, images: Sequence[ImageResult]) -> Manifest:
    return Manifest(metadata=metadata, images=list(images))


def save_manifest(output_dir: str, manifest: Manifest) -> Path:
    """Write ``manifest.json`` into the output directory.

    The directory is created if needed and any previous manifest is
    overwritten.

    Args:
        output_dir: Directory that receives the manifest
        manifest: Manifest to write

    Returns:
        Path of the written file

    Raises:
        ManifestWriteError: If the directory or file can't be written
    """
    manifest_path = Path(output_dir) / MANIFEST_FILENAME
    try:
        manifest_path.parent.mkdir(parents=True, exist_ok=True)
        with open(manifest_path, 'w', encoding='utf-8') as f:
            json.dump(manifest.to_dict(), f, indent=2)
    except OSError as e:
        raise ManifestWriteError(f"Failed to save manifest: {e}") from e

    logger.info("Manifest saved to %s", manifest_path)
    return manifest_path
