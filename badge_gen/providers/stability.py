"""
Stability AI text-to-image provider.
"""

import base64
import binascii
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, List, Optional

import httpx

from badge_gen.core.dimensions import Dimension
from badge_gen.storage.models import ImageDimensions, ImageResult
from .base import (
    GeneratedImage,
    GenerationRequest,
    ImageProvider,
    InvalidRequestError,
    NetworkTimeoutError,
    RateLimitedError,
    ServerError,
    UnauthorizedError,
    UnknownProviderError,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.stability.ai/v1/generation"
DEFAULT_ENGINE = "stable-diffusion-xl-1024-v1-0"
COST_PER_IMAGE = 0.01
CFG_SCALE = 7
STEPS = 30

SUPPORTED_DIMENSIONS = [
    Dimension(width=768, height=1344),
    Dimension(width=640, height=1536),
    Dimension(width=1024, height=1024),
]


def _categorize_http_error(status_code: int) -> type:
    """Map HTTP status code to a provider error class."""
    if status_code in (401, 403):
        return UnauthorizedError
    if status_code == 408:
        return NetworkTimeoutError
    if status_code == 429:
        return RateLimitedError
    if 400 <= status_code < 500:
        return InvalidRequestError
    if 500 <= status_code < 600:
        return ServerError
    return UnknownProviderError


def _error_payload(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class StabilityAIProvider(ImageProvider):
    """Stability AI REST backend authenticated with a bearer API key."""

    name = "stability-ai"

    def __init__(
        self,
        api_key: str,
        engine: str = DEFAULT_ENGINE,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 120.0,
        transport: Optional[httpx.BaseTransport] = None
    ):
        self.api_key = api_key
        self.model = engine
        self.base_url = base_url.rstrip("/")
        self.client = httpx.Client(timeout=timeout, transport=transport)

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/{self.model}/text-to-image"

    def build_payload(self, request: GenerationRequest) -> dict:
        return {
            "text_prompts": [{"text": request.prompt, "weight": 1}],
            "cfg_scale": CFG_SCALE,
            "height": request.height,
            "width": request.width,
            "samples": 1,
            "steps": STEPS,
        }

    def generate_image(self, request: GenerationRequest) -> GeneratedImage:
        """Submit one text-to-image request and decode the returned artifact.

        Raises:
            UnauthorizedError: On 401/403
            RateLimitedError: On 429
            InvalidRequestError: On other 4xx
            ServerError: On 5xx
            NetworkTimeoutError: On 408, transport failures and timeouts
            UnknownProviderError: On unexpected statuses or response bodies
        """
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

        try:
            response = self.client.post(
                self.endpoint, json=self.build_payload(request), headers=headers
            )
        except httpx.TransportError as e:
            raise NetworkTimeoutError(f"Stability AI request failed: {e}") from e

        if not response.is_success:
            payload = _error_payload(response)
            error_cls = _categorize_http_error(response.status_code)
            raise error_cls(
                f"Stability AI API error ({response.status_code}): {payload}",
                status_code=response.status_code,
                payload=payload
            )

        try:
            artifact = response.json()["artifacts"][0]
            image_bytes = base64.b64decode(artifact["base64"], validate=True)
        except (ValueError, KeyError, IndexError, TypeError, binascii.Error) as e:
            raise UnknownProviderError(
                f"Stability AI returned no usable image: {e}",
                status_code=response.status_code,
                payload=response.text
            ) from e

        size = f"{request.width}x{request.height}"
        result = ImageResult(
            id=f"{self.name}-{uuid.uuid4()}",
            gender="",
            path="",
            dimensions=ImageDimensions(
                width=request.width,
                height=request.height,
                requested_min=size,
                requested_max=size,
                actual_size=size
            ),
            prompt=request.prompt,
            style=request.style,
            generated_at=datetime.now(timezone.utc).isoformat(),
            provider=self.name,
            model=self.model
        )
        logger.debug("Received %d bytes from %s for %s", len(image_bytes), self.name, size)
        return GeneratedImage(result=result, image_bytes=image_bytes)

    def estimate_cost(self, count: int) -> float:
        # Conservative flat per-image price
        return count * COST_PER_IMAGE

    def get_supported_dimensions(self) -> List[Dimension]:
        return list(SUPPORTED_DIMENSIONS)

    def close(self) -> None:
        self.client.close()
