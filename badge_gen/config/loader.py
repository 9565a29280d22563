"""
Configuration management and loading.

Handles the YAML config file and the CLI > file > environment > default
cascade that produces the parameters for a generation run.
"""

import logging
import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "badge-gen.config.yaml"
API_KEY_ENV_VAR = "STABILITY_API_KEY"
DEFAULT_PROVIDER = "stability-ai"
SUPPORTED_FORMATS = ("png", "jpg")


class ConfigError(ValueError):
    """Raised when the resolved configuration cannot be used."""


@dataclass(frozen=True)
class BudgetConfig:
    """Budget state persisted in the config file."""
    total: float
    spent: float = 0.0
    warn_threshold: float = 0.8

    def __post_init__(self):
        """Validate the warning threshold is a fraction."""
        if not 0 <= self.warn_threshold <= 1:
            raise ValueError("warnThreshold must be between 0 and 1")

    @property
    def remaining(self) -> float:
        return self.total - self.spent


@dataclass(frozen=True)
class DefaultSettings:
    """Fallback generation settings from the config file."""
    count: int = 10
    style: str = "bitmoji"
    format: str = "png"
    output_dir: str = "./badges"
    min_size: str = "900x800"
    max_size: str = "2100x1500"


@dataclass(frozen=True)
class DimensionConstraints:
    """Advisory size limits. The min/max size strings take precedence."""
    min_width: int = 768
    min_height: int = 1024
    max_width: int = 1536
    max_height: int = 2048
    maintain_portrait: bool = True


@dataclass(frozen=True)
class RetryConfig:
    """Retry policy for provider calls."""
    max_attempts: int = 3
    initial_delay_ms: float = 1000
    max_delay_ms: float = 10000
    backoff_multiplier: float = 2

    def __post_init__(self):
        """Validate retry policy values."""
        if self.max_attempts < 1:
            raise ValueError("maxAttempts must be >= 1")
        if self.initial_delay_ms < 0 or self.max_delay_ms < 0:
            raise ValueError("retry delays must be >= 0")
        if self.backoff_multiplier <= 1:
            raise ValueError("backoffMultiplier must be > 1")


@dataclass(frozen=True)
class GenderDistribution:
    """Configured gender ratios (the batch split is always 50/50)."""
    male_ratio: float = 0.5
    female_ratio: float = 0.5


@dataclass(frozen=True)
class BadgeGenConfig:
    """Complete contents of the config file."""
    api_key: str = ""
    budget: Optional[BudgetConfig] = None
    defaults: DefaultSettings = field(default_factory=DefaultSettings)
    dimensions: DimensionConstraints = field(default_factory=DimensionConstraints)
    retry: RetryConfig = field(default_factory=RetryConfig)
    gender: GenderDistribution = field(default_factory=GenderDistribution)


@dataclass(frozen=True)
class GenerationParams:
    """Resolved parameters for a single run."""
    count: int
    style: str
    format: str
    output_dir: str
    min_size: str
    max_size: str
    api_key: str
    budget: Optional[float] = None
    dry_run: bool = False
    config_path: str = DEFAULT_CONFIG_PATH
    provider: str = DEFAULT_PROVIDER


def read_raw_config(path: str) -> Dict[str, Any]:
    """Read the config file as a plain mapping.

    Args:
        path: Path to YAML configuration file

    Returns:
        Parsed mapping (empty for an empty file)

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValueError: If the document is not a mapping
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML in config file {path}: {e}")

    if raw_config is None:
        return {}
    if not isinstance(raw_config, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return raw_config


def save_config(path: str, raw_config: Mapping[str, Any]) -> None:
    """Write a config mapping back to disk, keeping key order."""
    with open(path, 'w', encoding='utf-8') as f:
        yaml.safe_dump(dict(raw_config), f, sort_keys=False, default_flow_style=False)


def load_full_config(path: str) -> BadgeGenConfig:
    """Load and validate the complete configuration file.

    Missing sections fall back to their defaults, except ``budget`` which
    stays ``None`` so callers that need it can fail loudly.

    Args:
        path: Path to YAML configuration file

    Returns:
        Validated BadgeGenConfig

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValueError: If a section is malformed
    """
    raw = read_raw_config(path)

    budget = None
    if raw.get('budget') is not None:
        budget_data = _section(raw, 'budget')
        if 'total' not in budget_data:
            raise ValueError("Missing required 'total' in budget")
        budget = BudgetConfig(
            total=float(budget_data['total']),
            spent=float(budget_data.get('spent', 0.0)),
            warn_threshold=float(budget_data.get('warnThreshold', 0.8))
        )

    defaults_data = _section(raw, 'defaults')
    base_defaults = DefaultSettings()
    defaults = DefaultSettings(
        count=int(defaults_data.get('count', base_defaults.count)),
        style=str(defaults_data.get('style', base_defaults.style)),
        format=str(defaults_data.get('format', base_defaults.format)),
        output_dir=str(defaults_data.get('outputDir', base_defaults.output_dir)),
        min_size=str(defaults_data.get('minSize', base_defaults.min_size)),
        max_size=str(defaults_data.get('maxSize', base_defaults.max_size))
    )

    dims_data = _section(raw, 'dimensions')
    base_dims = DimensionConstraints()
    dimensions = DimensionConstraints(
        min_width=int(dims_data.get('minWidth', base_dims.min_width)),
        min_height=int(dims_data.get('minHeight', base_dims.min_height)),
        max_width=int(dims_data.get('maxWidth', base_dims.max_width)),
        max_height=int(dims_data.get('maxHeight', base_dims.max_height)),
        maintain_portrait=bool(dims_data.get('maintainPortrait', base_dims.maintain_portrait))
    )

    retry_data = _section(raw, 'retry')
    base_retry = RetryConfig()
    retry = RetryConfig(
        max_attempts=int(retry_data.get('maxAttempts', base_retry.max_attempts)),
        initial_delay_ms=float(retry_data.get('initialDelayMs', base_retry.initial_delay_ms)),
        max_delay_ms=float(retry_data.get('maxDelayMs', base_retry.max_delay_ms)),
        backoff_multiplier=float(retry_data.get('backoffMultiplier', base_retry.backoff_multiplier))
    )

    gender_data = _section(raw, 'gender')
    gender = GenderDistribution(
        male_ratio=float(gender_data.get('maleRatio', 0.5)),
        female_ratio=float(gender_data.get('femaleRatio', 0.5))
    )

    return BadgeGenConfig(
        api_key=str(raw.get('apiKey') or ""),
        budget=budget,
        defaults=defaults,
        dimensions=dimensions,
        retry=retry,
        gender=gender
    )


def _section(raw: Dict[str, Any], name: str) -> Dict[str, Any]:
    """Return a config section as a dict, empty when absent."""
    data = raw.get(name)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"'{name}' must be a dictionary")
    return data


def _is_provided(value: Any) -> bool:
    """A value counts as provided unless it is None, blank or NaN."""
    if value is None:
        return False
    if isinstance(value, str) and value.strip() == "":
        return False
    if isinstance(value, float) and math.isnan(value):
        return False
    return True


def _to_number(value: Any, kind: type) -> Optional[Any]:
    """Parse a CLI number, returning None when it can't be parsed."""
    if value is None:
        return None
    try:
        return kind(value)
    except (TypeError, ValueError):
        return None


def _first_provided(*values: Any) -> Any:
    for value in values:
        if _is_provided(value):
            return value
    return None


def resolve_generation_params(
    config_path: str,
    cli_options: Mapping[str, Any],
    environ: Optional[Mapping[str, str]] = None
) -> GenerationParams:
    """Merge CLI options, config file, environment and defaults.

    Precedence is CLI > config file > environment > hard-coded default.
    The config file is optional at this stage.

    Args:
        config_path: Path to YAML configuration file
        cli_options: Option values keyed by ``count``, ``style``, ``format``,
            ``output``, ``min_size``, ``max_size``, ``api_key``, ``budget``,
            ``dry_run`` and ``provider``
        environ: Environment mapping, defaults to ``os.environ``

    Returns:
        Resolved GenerationParams

    Raises:
        ValueError: If the defaults or budget section isn't a dictionary
        ConfigError: If no API key is available outside dry-run mode
    """
    environ = os.environ if environ is None else environ
    file_config: Dict[str, Any] = {}
    try:
        file_config = read_raw_config(config_path)
    except (OSError, yaml.YAMLError, ValueError):
        logger.info("No config file found at %s, using defaults", config_path)

    file_defaults = _section(file_config, 'defaults')
    file_budget = _section(file_config, 'budget')
    fallback = DefaultSettings()

    count = _first_provided(
        _to_number(cli_options.get('count'), int),
        file_defaults.get('count'),
        fallback.count
    )
    budget = _first_provided(
        _to_number(cli_options.get('budget'), float),
        file_budget.get('total')
    )

    params = GenerationParams(
        count=int(count),
        style=_first_provided(cli_options.get('style'), file_defaults.get('style'), fallback.style),
        format=_first_provided(cli_options.get('format'), file_defaults.get('format'), fallback.format),
        output_dir=_first_provided(
            cli_options.get('output'), file_defaults.get('outputDir'), fallback.output_dir
        ),
        min_size=_first_provided(
            cli_options.get('min_size'), file_defaults.get('minSize'), fallback.min_size
        ),
        max_size=_first_provided(
            cli_options.get('max_size'), file_defaults.get('maxSize'), fallback.max_size
        ),
        api_key=_first_provided(
            cli_options.get('api_key'), file_config.get('apiKey'), environ.get(API_KEY_ENV_VAR)
        ) or "",
        budget=float(budget) if budget is not None else None,
        dry_run=cli_options.get('dry_run') is True,
        config_path=config_path,
        provider=_first_provided(cli_options.get('provider'), DEFAULT_PROVIDER)
    )

    if params.format not in SUPPORTED_FORMATS:
        raise ConfigError(f"format must be one of {list(SUPPORTED_FORMATS)}, got '{params.format}'")

    if not params.api_key and not params.dry_run:
        raise ConfigError(
            f"API key is required. Set via --api-key, config file, or {API_KEY_ENV_VAR} env var"
        )

    return params
