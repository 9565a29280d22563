"""
Dimension parsing and selection.

Picks a supported provider size for each image from a random draw
between the requested minimum and maximum bounds.
"""

import random
import re
from dataclasses import dataclass
from typing import Optional, Sequence


class MalformedDimensionSpec(ValueError):
    """Raised when a size string is not of the form WxH."""


@dataclass(frozen=True)
class Dimension:
    """Image size in pixels."""
    width: int
    height: int

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def is_portrait(self) -> bool:
        """Portrait-or-square: height is at least the width."""
        return self.height >= self.width

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


DEFAULT_DIMENSION = Dimension(width=1024, height=1024)

_SIZE_PATTERN = re.compile(r"^\s*(\d+)x(\d+)\s*$")


def parse_dimension(size_spec: str) -> Dimension:
    """Parse a ``WxH`` string into a Dimension.

    Args:
        size_spec: Size string such as ``900x800``

    Returns:
        Parsed Dimension

    Raises:
        MalformedDimensionSpec: If either half is missing, non-numeric or zero
    """
    match = _SIZE_PATTERN.match(size_spec or "")
    width = int(match.group(1)) if match else 0
    height = int(match.group(2)) if match else 0
    if width <= 0 or height <= 0:
        raise MalformedDimensionSpec(
            f"Invalid dimension format: {size_spec}. Expected format: WxH (e.g., 900x800)"
        )
    return Dimension(width=width, height=height)


def randomize_dimensions(
    min_size: str,
    max_size: str,
    supported: Sequence[Dimension],
    rng: Optional[random.Random] = None
) -> Dimension:
    """Pick the supported portrait size closest in area to a random draw.

    Width and height are drawn independently and uniformly within the
    inclusive bounds. Only portrait-or-square sizes are eligible; ties
    keep the first candidate in ``supported`` order.

    Args:
        min_size: Minimum size string (``WxH``)
        max_size: Maximum size string (``WxH``)
        supported: Sizes the provider accepts
        rng: Random source, defaults to the module-level generator

    Returns:
        A member of ``supported``, or the first supported size when none is
        portrait, or 1024x1024 when ``supported`` is empty

    Raises:
        MalformedDimensionSpec: If either size string is malformed
    """
    rng = rng or random
    lower = parse_dimension(min_size)
    upper = parse_dimension(max_size)

    target = Dimension(
        width=rng.randint(min(lower.width, upper.width), max(lower.width, upper.width)),
        height=rng.randint(min(lower.height, upper.height), max(lower.height, upper.height)),
    )

    portrait = [d for d in supported if d.is_portrait]
    if not portrait:
        return supported[0] if supported else DEFAULT_DIMENSION

    closest = portrait[0]
    for candidate in portrait[1:]:
        if abs(candidate.area - target.area) < abs(closest.area - target.area):
            closest = candidate
    return closest
