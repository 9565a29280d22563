"""
Tests for the provider registry and the Stability AI provider.
"""
import base64
import json

import httpx
import pytest

from badge_gen.core.dimensions import Dimension
from badge_gen.providers import (
    GenerationRequest,
    InvalidRequestError,
    NetworkTimeoutError,
    RateLimitedError,
    ServerError,
    UnauthorizedError,
    UnknownProviderError,
    get_provider,
    is_retryable,
    list_providers,
)
from badge_gen.providers.stability import DEFAULT_ENGINE, StabilityAIProvider

from conftest import make_png_bytes

REQUEST = GenerationRequest(prompt="portrait, senior Asian male with glasses", width=768, height=1344, style="pixar")


def make_provider(handler) -> StabilityAIProvider:
    return StabilityAIProvider("test-key", transport=httpx.MockTransport(handler))


class TestStabilityAIProvider:
    """Test request shape, response decoding and error classification."""

    def test_generate_image_success(self):
        """Test a 200 response is decoded into bytes and result metadata."""
        image = make_png_bytes()
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={
                "artifacts": [{"base64": base64.b64encode(image).decode(), "seed": 1}]
            })

        generated = make_provider(handler).generate_image(REQUEST)

        assert generated.image_bytes == image
        assert seen["url"] == (
            f"https://api.stability.ai/v1/generation/{DEFAULT_ENGINE}/text-to-image"
        )
        assert seen["auth"] == "Bearer test-key"
        assert seen["body"] == {
            "text_prompts": [{"text": REQUEST.prompt, "weight": 1}],
            "cfg_scale": 7,
            "height": 1344,
            "width": 768,
            "samples": 1,
            "steps": 30,
        }

        result = generated.result
        assert result.provider == "stability-ai"
        assert result.model == DEFAULT_ENGINE
        assert result.prompt == REQUEST.prompt
        assert result.style == "pixar"
        assert result.dimensions.actual_size == "768x1344"
        assert result.generated_at

    @pytest.mark.parametrize("status,error_cls,retryable", [
        (401, UnauthorizedError, False),
        (403, UnauthorizedError, False),
        (400, InvalidRequestError, False),
        (408, NetworkTimeoutError, True),
        (429, RateLimitedError, True),
        (500, ServerError, True),
        (503, ServerError, True),
    ])
    def test_error_classification(self, status, error_cls, retryable):
        """Test non-2xx statuses map to typed errors with status and payload."""
        payload = {"name": "error", "message": "nope"}

        def handler(request):
            return httpx.Response(status, json=payload)

        with pytest.raises(error_cls) as excinfo:
            make_provider(handler).generate_image(REQUEST)

        assert excinfo.value.status_code == status
        assert excinfo.value.payload == payload
        assert f"Stability AI API error ({status})" in str(excinfo.value)
        assert is_retryable(excinfo.value) is retryable

    def test_non_json_error_payload(self):
        """Test plain-text error bodies are kept as text."""
        def handler(request):
            return httpx.Response(502, text="Bad Gateway")

        with pytest.raises(ServerError) as excinfo:
            make_provider(handler).generate_image(REQUEST)

        assert excinfo.value.payload == "Bad Gateway"

    def test_transport_timeout(self):
        """Test transport failures become NetworkTimeoutError."""
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        with pytest.raises(NetworkTimeoutError) as excinfo:
            make_provider(handler).generate_image(REQUEST)

        assert excinfo.value.status_code is None
        assert is_retryable(excinfo.value)

    def test_missing_artifacts(self):
        """Test a 200 without an image is an unknown, retryable failure."""
        def handler(request):
            return httpx.Response(200, json={"artifacts": []})

        with pytest.raises(UnknownProviderError) as excinfo:
            make_provider(handler).generate_image(REQUEST)

        assert is_retryable(excinfo.value)

    def test_estimate_cost(self):
        """Test the flat per-image price."""
        provider = StabilityAIProvider("k")
        assert provider.estimate_cost(10) == pytest.approx(0.10)
        assert provider.estimate_cost(0) == 0

    def test_supported_dimensions(self):
        """Test the supported sizes are fixed and portrait-or-square."""
        dims = StabilityAIProvider("k").get_supported_dimensions()

        assert dims == [Dimension(768, 1344), Dimension(640, 1536), Dimension(1024, 1024)]
        assert all(d.height >= d.width for d in dims)


class TestProviderRegistry:
    """Test provider lookup by name."""

    def test_get_provider(self):
        """Test the registered provider is built with the key."""
        provider = get_provider("stability-ai", "abc")

        assert isinstance(provider, StabilityAIProvider)
        assert provider.api_key == "abc"
        assert list_providers() == ["stability-ai"]

    def test_unknown_provider(self):
        """Test unknown names list the available providers."""
        with pytest.raises(ValueError, match="Unknown provider: dalle. Available providers: stability-ai"):
            get_provider("dalle", "abc")

    def test_close_releases_client(self):
        """Test closing the provider closes its HTTP client."""
        provider = get_provider("stability-ai", "abc")

        provider.close()

        assert provider.client.is_closed

    def test_non_provider_errors_are_retryable(self):
        assert is_retryable(RuntimeError("x")) is True
