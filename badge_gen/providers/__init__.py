"""
Image generation providers.

Backends are selected by name from the registry below.
"""

from typing import Any, Dict, List, Type

from .base import (
    GeneratedImage,
    GenerationRequest,
    ImageProvider,
    InvalidRequestError,
    NetworkTimeoutError,
    ProviderError,
    RateLimitedError,
    ServerError,
    UnauthorizedError,
    UnknownProviderError,
    is_retryable,
)
from .stability import StabilityAIProvider

PROVIDERS: Dict[str, Type[ImageProvider]] = {
    StabilityAIProvider.name: StabilityAIProvider,
}


def list_providers() -> List[str]:
    return list(PROVIDERS)


def get_provider(name: str, api_key: str, **kwargs: Any) -> ImageProvider:
    """Instantiate a provider by registry name.

    Raises:
        ValueError: If no provider is registered under ``name``
    """
    if name not in PROVIDERS:
        raise ValueError(f"Unknown provider: {name}. Available providers: {', '.join(PROVIDERS)}")
    return PROVIDERS[name](api_key, **kwargs)


__all__ = [
    "GeneratedImage",
    "GenerationRequest",
    "ImageProvider",
    "InvalidRequestError",
    "NetworkTimeoutError",
    "ProviderError",
    "RateLimitedError",
    "ServerError",
    "UnauthorizedError",
    "UnknownProviderError",
    "get_provider",
    "is_retryable",
    "list_providers",
]
