"""
Batch generation orchestration.

Runs one batch end to end:

1. Budget gate - estimate the cost and refuse to start when it doesn't fit
2. Gender split - ceil(count/2) male, floor(count/2) female, assigned by position
3. Generation loop - attributes, prompt, size, provider call with retry, save
4. Finalization - manifest first, then the budget write-back

Per-image failures are logged and skipped. A failure also triggers a
running budget estimate that can stop the loop early.
"""

import logging
import math
import random
import time
import uuid
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from badge_gen.config.budget import (
    BudgetCheck,
    BudgetStatus,
    check_budget,
    format_budget_check,
    update_budget_spent,
)
from badge_gen.config.loader import (
    SUPPORTED_FORMATS,
    BadgeGenConfig,
    BudgetConfig,
    ConfigError,
    GenerationParams,
    RetryConfig,
    load_full_config,
)
from badge_gen.config.styles import build_prompt, get_style_preset
from badge_gen.core.dimensions import Dimension, parse_dimension, randomize_dimensions
from badge_gen.core.diversity import generate_diversity_attributes
from badge_gen.core.retry import retry_with_backoff
from badge_gen.providers import GenerationRequest, ImageProvider, get_provider, is_retryable
from badge_gen.storage.images import save_image
from badge_gen.storage.manifest import build_metadata, create_manifest, save_manifest
from badge_gen.storage.models import ImageDimensions, ImageResult

logger = logging.getLogger(__name__)


class BudgetExceededError(Exception):
    """Raised when the pre-flight budget check denies a batch."""
    def __init__(self, check: BudgetCheck, report: str):
        super().__init__(check.message)
        self.check = check
        self.report = report


@dataclass
class BatchSummary:
    """Outcome of a batch run."""
    requested: int
    results: List[ImageResult] = field(default_factory=list)
    estimated_cost: float = 0.0
    cost_usd: float = 0.0
    output_dir: str = ""
    manifest_path: Optional[Path] = None
    aborted_by_budget: bool = False
    dry_run: bool = False

    @property
    def generated(self) -> int:
        return len(self.results)

    @property
    def failed(self) -> int:
        return self.requested - self.generated


def calculate_gender_distribution(count: int) -> Tuple[int, int]:
    """Split a count into (male, female), rounding males up."""
    male_count = math.ceil(count / 2)
    return male_count, count - male_count


def gender_for_index(index: int, male_count: int) -> str:
    return "male" if index < male_count else "female"


def running_cost_estimate(spent: float, generated: int, per_image_cost: float) -> float:
    """Linear spend estimate: prior spend plus the average cost of each image so far."""
    return spent + generated * per_image_cost


def generate_batch(
    params: GenerationParams,
    provider: Optional[ImageProvider] = None,
    rng: Optional[random.Random] = None,
    sleep: Callable[[float], None] = time.sleep
) -> BatchSummary:
    """Generate a batch of badge photos.

    Args:
        params: Resolved generation parameters
        provider: Image provider, built from ``params.provider`` and closed
            afterwards when omitted
        rng: Random source for attributes and sizes
        sleep: Sleep function used between retries

    Returns:
        BatchSummary describing what was generated

    Raises:
        FileNotFoundError: If the config file is missing
        yaml.YAMLError: If the config file is invalid
        ConfigError: If the config has no budget section, or the count or format is invalid
        ValueError: If the style is unknown
        MalformedDimensionSpec: If a size string is malformed
        BudgetExceededError: If the estimate doesn't fit the remaining budget
        ManifestWriteError: If the manifest can't be written
        OSError: If the budget write-back fails
    """
    config = load_full_config(params.config_path)
    if config.budget is None:
        raise ConfigError(f"Missing required 'budget' section in {params.config_path}")
    if params.count < 1:
        raise ConfigError(f"count must be >= 1, got {params.count}")

    budget = config.budget
    if params.budget is not None:
        budget = replace(budget, total=params.budget)

    # Setup failures surface before any output exists
    get_style_preset(params.style)
    if params.format not in SUPPORTED_FORMATS:
        raise ConfigError(f"format must be one of {list(SUPPORTED_FORMATS)}, got '{params.format}'")
    parse_dimension(params.min_size)
    parse_dimension(params.max_size)

    if provider is not None:
        return _run_batch(params, config, budget, provider, rng, sleep)

    provider = get_provider(params.provider, params.api_key)
    try:
        return _run_batch(params, config, budget, provider, rng, sleep)
    finally:
        provider.close()


def _run_batch(
    params: GenerationParams,
    config: BadgeGenConfig,
    budget: BudgetConfig,
    provider: ImageProvider,
    rng: Optional[random.Random],
    sleep: Callable[[float], None]
) -> BatchSummary:
    """Budget gate, generation loop and finalization for a validated batch."""
    logger.info("Starting batch generation: %d images in %s style", params.count, params.style)

    estimated_cost = provider.estimate_cost(params.count)
    check = check_budget(budget, estimated_cost)
    report = format_budget_check(budget.total, budget.spent, estimated_cost)
    logger.info("\n%s", report)

    if not check.allowed:
        logger.error(check.message)
        raise BudgetExceededError(check, report)
    if check.status == BudgetStatus.WARNING:
        logger.warning(check.message)
    else:
        logger.info(check.message)

    male_count, female_count = calculate_gender_distribution(params.count)
    logger.info("Gender distribution: %d male, %d female", male_count, female_count)

    summary = BatchSummary(
        requested=params.count,
        estimated_cost=estimated_cost,
        output_dir=params.output_dir,
        dry_run=params.dry_run
    )
    if params.dry_run:
        logger.info("Dry run: no images generated")
        return summary

    output_root = Path(params.output_dir)
    for gender in ("male", "female"):
        (output_root / gender).mkdir(parents=True, exist_ok=True)

    per_image_cost = estimated_cost / params.count
    supported = provider.get_supported_dimensions()
    results: List[ImageResult] = []

    for index in range(params.count):
        gender = gender_for_index(index, male_count)
        logger.info("[%d/%d] Generating %s image...", index + 1, params.count, gender)

        try:
            result = _generate_one(
                params, provider, config.retry, supported, gender, output_root, rng, sleep
            )
        except Exception as e:
            logger.error("[%d/%d] Failed to generate image: %s", index + 1, params.count, e)

            running_estimate = running_cost_estimate(budget.spent, len(results), per_image_cost)
            if running_estimate >= budget.total:
                logger.warning(
                    "Stopping early: running cost estimate $%.4f reached budget $%.4f",
                    running_estimate, budget.total
                )
                summary.aborted_by_budget = True
                break
            continue

        results.append(result)
        logger.info("[%d/%d] Saved %s", index + 1, params.count, result.path)

    # Images are already on disk; manifest goes before the budget write-back
    actual_cost = len(results) * per_image_cost
    metadata = build_metadata(results, params.style, params.format, actual_cost)
    summary.manifest_path = save_manifest(params.output_dir, create_manifest(metadata, results))
    update_budget_spent(params.config_path, actual_cost)

    summary.results = results
    summary.cost_usd = actual_cost

    logger.info(
        "Batch complete: %d/%d images generated (%d failed), cost $%.4f, output %s",
        summary.generated, summary.requested, summary.failed, actual_cost, params.output_dir
    )
    return summary


def _generate_one(
    params: GenerationParams,
    provider: ImageProvider,
    retry_config: RetryConfig,
    supported: Sequence[Dimension],
    gender: str,
    output_root: Path,
    rng: Optional[random.Random],
    sleep: Callable[[float], None]
) -> ImageResult:
    """Generate, save and describe a single image."""
    attributes = generate_diversity_attributes(gender, rng)
    prompt = build_prompt(params.style, attributes)
    size = randomize_dimensions(params.min_size, params.max_size, supported, rng)

    request = GenerationRequest(
        prompt=prompt, width=size.width, height=size.height, style=params.style
    )
    generated = retry_with_backoff(
        lambda: provider.generate_image(request),
        retry_config,
        retry_on=is_retryable,
        sleep=sleep
    )

    image_id = str(uuid.uuid4())
    out_path = output_root / gender / f"{image_id}.{params.format}"
    save_image(generated.image_bytes, out_path, params.format)

    return replace(
        generated.result,
        id=image_id,
        gender=gender,
        path=str(out_path),
        dimensions=ImageDimensions(
            width=size.width,
            height=size.height,
            requested_min=params.min_size,
            requested_max=params.max_size,
            actual_size=str(size)
        )
    )
