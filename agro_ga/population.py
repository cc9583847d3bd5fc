"""
Population genesis.

Random layouts are drawn by rejection sampling: a candidate centre is drawn
uniformly in the domain's bounding box and kept only if it lies inside the
domain. Overlap is not checked here; the fitness function drives it out.
"""

from typing import List, Sequence, Tuple

import numpy as np

from .data_models import Individual, PlantSlot, Point
from .domains import Domain

DEFAULT_MAX_TRIES = 10000


class SamplingError(RuntimeError):
    """Raised when rejection sampling cannot find a point inside the domain."""


def sample_point(
    domain: Domain,
    rng: np.random.Generator,
    max_tries: int = DEFAULT_MAX_TRIES
) -> Tuple[float, float]:
    """
    Draw a uniformly distributed centre inside the domain.

    Args:
        domain: Domain to sample from
        rng: Random number generator
        max_tries: Rejections allowed before giving up

    Returns:
        (x, y) inside the domain

    Raises:
        SamplingError: If no accepted point was found within max_tries draws
    """
    box = domain.bounding_box
    for _ in range(max_tries):
        x = box.min_x + rng.random() * box.width
        y = box.min_y + rng.random() * box.height
        if not domain.is_point_outside(x, y):
            return float(x), float(y)

    raise SamplingError(
        f"Could not sample a point inside {domain.describe()} after {max_tries} tries"
    )


def build_random_individual(
    domain: Domain,
    slots: Sequence[PlantSlot],
    rng: np.random.Generator,
    max_tries: int = DEFAULT_MAX_TRIES
) -> Individual:
    """Create one unevaluated individual with a sampled centre per slot."""
    genes = []
    for slot in slots:
        x, y = sample_point(domain, rng, max_tries)
        genes.append(Point.from_slot(slot, x, y))
    return Individual(genes=genes)


def create_population(
    domain: Domain,
    slots: Sequence[PlantSlot],
    size: int,
    rng: np.random.Generator,
    max_tries: int = DEFAULT_MAX_TRIES
) -> List[Individual]:
    """
    Create the initial population for one attempt.

    Args:
        domain: Domain to sample from
        slots: Gene templates; the genome length is len(slots)
        size: Number of individuals
        rng: Random number generator
        max_tries: Rejections allowed per sampled point

    Returns:
        List of size unevaluated individuals

    Raises:
        ValueError: If size is not positive
        SamplingError: If the domain cannot be sampled
    """
    if size <= 0:
        raise ValueError(f"Population size must be positive, got {size}")

    return [build_random_individual(domain, slots, rng, max_tries) for _ in range(size)]
