"""
Art style test run.

Generates one sample image per style preset so the styles can be
compared side by side. No budget check or write-back is done.
"""

import logging
import random
import time
from dataclasses import replace
from pathlib import Path
from typing import Callable, List, Optional

from badge_gen.config.loader import GenerationParams, RetryConfig
from badge_gen.config.styles import get_style_preset, list_styles
from badge_gen.core.dimensions import randomize_dimensions
from badge_gen.core.retry import retry_with_backoff
from badge_gen.providers import GenerationRequest, ImageProvider, is_retryable
from badge_gen.storage.images import save_image
from badge_gen.storage.models import ImageResult

logger = logging.getLogger(__name__)

TEST_ATTRIBUTES = "middle-aged Caucasian professional with glasses"


def generate_art_test(
    params: GenerationParams,
    provider: ImageProvider,
    retry_config: Optional[RetryConfig] = None,
    rng: Optional[random.Random] = None,
    sleep: Callable[[float], None] = time.sleep
) -> List[ImageResult]:
    """Generate one image for every style preset.

    Files are written as ``<output_dir>/<style>.<format>``. A failed style
    is logged and skipped.

    Returns:
        Results for the styles that succeeded, in style order
    """
    retry_config = retry_config or RetryConfig()
    styles = list_styles()
    output_dir = Path(params.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    supported = provider.get_supported_dimensions()

    logger.info("Generating %d art test images: %s", len(styles), ", ".join(styles))

    results: List[ImageResult] = []
    for index, style in enumerate(styles, start=1):
        logger.info("[%d/%d] Generating %s sample...", index, len(styles), style)
        try:
            prompt = f"{get_style_preset(style).prompt_template}, {TEST_ATTRIBUTES}"
            size = randomize_dimensions(params.min_size, params.max_size, supported, rng)
            request = GenerationRequest(
                prompt=prompt, width=size.width, height=size.height, style=style
            )
            generated = retry_with_backoff(
                lambda: provider.generate_image(request),
                retry_config,
                retry_on=is_retryable,
                sleep=sleep
            )
            out_path = save_image(
                generated.image_bytes, output_dir / f"{style}.{params.format}", params.format
            )
        except Exception as e:
            logger.error("Failed to generate %s: %s", style, e)
            continue

        results.append(replace(generated.result, id=style, gender="male", path=str(out_path)))
        logger.info("Saved %s", out_path)

    logger.info(
        "Art test complete: %d/%d styles generated, output %s",
        len(results), len(styles), output_dir
    )
    return results
