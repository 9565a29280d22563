"""
Data models for generated images and manifests.

Serialized keys follow the manifest.json format (camelCase).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class ImageDimensions:
    """Actual size of an image plus the bounds it was requested with."""
    width: int
    height: int
    requested_min: str
    requested_max: str
    actual_size: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "requestedMin": self.requested_min,
            "requestedMax": self.requested_max,
            "actualSize": self.actual_size,
        }


@dataclass(frozen=True)
class ImageResult:
    """Immutable record of one generated and saved image."""
    id: str
    gender: str
    path: str
    dimensions: ImageDimensions
    prompt: str
    style: str
    generated_at: str
    provider: str
    model: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "gender": self.gender,
            "path": self.path,
            "dimensions": self.dimensions.to_dict(),
            "prompt": self.prompt,
            "style": self.style,
            "generatedAt": self.generated_at,
            "provider": self.provider,
            "model": self.model,
        }


@dataclass(frozen=True)
class ManifestMetadata:
    """Aggregate facts about a finished batch."""
    generated_at: str
    tool_version: str
    style: str
    total_count: int
    male_count: int
    female_count: int
    format: str
    cost_usd: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "generatedAt": self.generated_at,
            "toolVersion": self.tool_version,
            "style": self.style,
            "totalCount": self.total_count,
            "maleCount": self.male_count,
            "femaleCount": self.female_count,
            "format": self.format,
            "costUsd": self.cost_usd,
        }


@dataclass(frozen=True)
class Manifest:
    """Metadata plus the ordered list of images of one batch."""
    metadata: ManifestMetadata
    images: List[ImageResult] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metadata": self.metadata.to_dict(),
            "images": [image.to_dict() for image in self.images],
        }
