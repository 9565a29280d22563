"""
Diversity attribute generation.

Produces the person description appended to every style prompt.
"""

import random
from typing import List, Optional, Sequence, TypeVar

T = TypeVar("T")

GENDERS = ("male", "female")

AGE_OPTIONS: List[str] = ["young adult", "middle-aged", "senior"]

ETHNICITY_OPTIONS: List[str] = [
    "Asian",
    "Black",
    "Caucasian",
    "Hispanic",
    "Middle Eastern",
    "South Asian",
]

MALE_FEATURES: List[str] = [
    "with glasses",
    "without glasses",
    "with beard",
    "clean-shaven",
    "with mustache",
]

FEMALE_FEATURES: List[str] = [
    "with glasses",
    "without glasses",
    "with long hair",
    "with short hair",
]


def random_choice(options: Sequence[T], rng: Optional[random.Random] = None) -> T:
    """Return one element of ``options`` chosen uniformly."""
    return (rng or random).choice(options)


def generate_diversity_attributes(gender: str, rng: Optional[random.Random] = None) -> str:
    """Build an ``age ethnicity gender feature`` description.

    Args:
        gender: ``male`` or ``female``
        rng: Random source, defaults to the module-level generator

    Returns:
        The four tokens joined by single spaces

    Raises:
        ValueError: If gender is not recognised
    """
    if gender not in GENDERS:
        raise ValueError(f"gender must be one of {GENDERS}, got {gender!r}")

    features = MALE_FEATURES if gender == "male" else FEMALE_FEATURES
    age = random_choice(AGE_OPTIONS, rng)
    ethnicity = random_choice(ETHNICITY_OPTIONS, rng)
    feature = random_choice(features, rng)
    return f"{age} {ethnicity} {gender} {feature}"
