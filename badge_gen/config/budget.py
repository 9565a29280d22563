"""
Budget tracking and validation.

Pre-flight allow/deny decision for a batch and the write-back of actual
spend to the config file once the batch is finished.
"""

import math
from dataclasses import dataclass
from enum import Enum

from .loader import BudgetConfig, read_raw_config, save_config


class BudgetStatus(Enum):
    """Outcome kind of a budget check."""
    OK = "ok"
    WARNING = "warning"
    EXCEEDED = "exceeded"


@dataclass(frozen=True)
class BudgetCheck:
    """Result of comparing an estimate against the remaining budget."""
    allowed: bool
    status: BudgetStatus
    message: str


def check_budget(budget: BudgetConfig, estimated_cost: float) -> BudgetCheck:
    """Check whether an estimated cost fits within the remaining budget.

    Args:
        budget: Current budget state
        estimated_cost: Estimated cost of the operation

    Returns:
        BudgetCheck with the allowed flag and a display message
    """
    remaining = budget.total - budget.spent
    allowed = remaining >= estimated_cost
    after_generation = budget.spent + estimated_cost

    if not allowed:
        message = (
            f"Budget exceeded! Estimated cost (${estimated_cost:.4f}) exceeds "
            f"remaining budget (${remaining:.4f}).\n"
            f"Total budget: ${budget.total:.4f} | Spent: ${budget.spent:.4f} | "
            f"Remaining: ${remaining:.4f}"
        )
        return BudgetCheck(allowed=False, status=BudgetStatus.EXCEEDED, message=message)

    after_percent = _percent(after_generation, budget.total)
    if after_percent >= budget.warn_threshold * 100:
        message = (
            f"Warning: This generation will use {after_percent:.1f}% of your total budget.\n"
            f"Total budget: ${budget.total:.4f} | Spent: ${budget.spent:.4f} | "
            f"Remaining: ${remaining:.4f}\n"
            f"Estimated cost: ${estimated_cost:.4f} | After generation: ${after_generation:.4f}"
        )
        return BudgetCheck(allowed=True, status=BudgetStatus.WARNING, message=message)

    message = (
        f"Budget check passed. Estimated cost: ${estimated_cost:.4f} | "
        f"Remaining after: ${remaining - estimated_cost:.4f}"
    )
    return BudgetCheck(allowed=True, status=BudgetStatus.OK, message=message)


def update_budget_spent(config_path: str, amount_spent: float) -> float:
    """Add an amount to ``budget.spent`` in the config file.

    Read-modify-write of the whole file; every other field is written back
    unchanged. Negative amounts are accepted (refunds). Errors propagate.

    Args:
        config_path: Path to the YAML configuration file
        amount_spent: Amount to add to the spent total

    Returns:
        The new spent total

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValueError: If the file has no budget section
        OSError: If the file can't be written
    """
    raw_config = read_raw_config(config_path)
    budget_data = raw_config.get('budget')
    if not isinstance(budget_data, dict):
        raise ValueError(f"Missing 'budget' section in config file {config_path}")

    budget_data['spent'] = float(budget_data.get('spent') or 0.0) + amount_spent
    save_config(config_path, raw_config)
    return budget_data['spent']


def format_budget_check(total: float, spent: float, estimated: float) -> str:
    """Format a budget breakdown for display.

    Args:
        total: Total budget
        spent: Amount already spent
        estimated: Estimated cost for the current operation

    Returns:
        Multi-line overview string
    """
    remaining = total - spent
    after_generation = spent + estimated
    remaining_after = remaining - estimated

    def pct(value: float) -> str:
        return f"{_percent(value, total):.1f}%"

    lines = [
        "=== Budget Overview ===",
        f"Total Budget:       ${total:.4f}",
        f"Already Spent:      ${spent:.4f} ({pct(spent)})",
        f"Remaining:          ${remaining:.4f} ({pct(remaining)})",
        "",
        f"Estimated Cost:     ${estimated:.4f}",
        f"After Generation:   ${after_generation:.4f} ({pct(after_generation)})",
        f"Remaining After:    ${remaining_after:.4f} ({pct(remaining_after)})",
        "======================",
    ]
    return "\n".join(lines)


def _percent(value: float, total: float) -> float:
    """Percentage of total; non-finite when the total is zero."""
    if total == 0:
        return math.copysign(math.inf, value) if value else math.nan
    return (value / total) * 100
