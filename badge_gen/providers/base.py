"""
Image provider contract and error taxonomy.

Allows for multiple text-to-image backends behind one interface.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Optional

from badge_gen.core.dimensions import Dimension
from badge_gen.storage.models import ImageResult


class ProviderError(Exception):
    """Failure reported by an image provider.

    Attributes:
        status_code: HTTP status code, if the provider returned one
        payload: Raw error payload from the provider
        retryable: Whether a retry may succeed
    """
    retryable = True

    def __init__(self, message: str, status_code: Optional[int] = None, payload: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class UnauthorizedError(ProviderError):
    """Bad or missing credentials."""
    retryable = False


class InvalidRequestError(ProviderError):
    """The provider rejected the request parameters."""
    retryable = False


class RateLimitedError(ProviderError):
    """Too many requests."""


class ServerError(ProviderError):
    """Provider-side 5xx failure."""


class NetworkTimeoutError(ProviderError):
    """Transport failure or timeout before a response arrived."""


class UnknownProviderError(ProviderError):
    """Anything not classified above."""


def is_retryable(error: Exception) -> bool:
    """Provider errors carry their own flag; anything else is retried."""
    if isinstance(error, ProviderError):
        return error.retryable
    return True


@dataclass(frozen=True)
class GenerationRequest:
    """One image to generate."""
    prompt: str
    width: int
    height: int
    style: str


@dataclass(frozen=True)
class GeneratedImage:
    """Provider output: result metadata plus the raw image bytes to persist."""
    result: ImageResult
    image_bytes: bytes


class ImageProvider(ABC):
    """Capability set every image generation backend implements."""

    name: str
    model: str

    @abstractmethod
    def generate_image(self, request: GenerationRequest) -> GeneratedImage:
        """Generate a single image.

        Raises:
            ProviderError: Classified provider failure
        """

    @abstractmethod
    def estimate_cost(self, count: int) -> float:
        """Estimated cost in USD for ``count`` images."""

    @abstractmethod
    def get_supported_dimensions(self) -> List[Dimension]:
        """Sizes this provider accepts."""

    def close(self) -> None:
        """Release any held connections."""
