"""
Mutation operator.

Each gene is independently resampled to a fresh position inside the domain
with the same rejection sampler used for population genesis. Radius and
plant metadata stay with the gene.
"""

from typing import List, Tuple

import numpy as np

from .data_models import Individual
from .domains import Domain
from .population import DEFAULT_MAX_TRIES, sample_point


def mutate(
    individual: Individual,
    probability: float,
    domain: Domain,
    rng: np.random.Generator,
    max_tries: int = DEFAULT_MAX_TRIES
) -> Tuple[Individual, List[int]]:
    """
    Resample genes of an individual.

    Args:
        individual: Individual to mutate (left unchanged)
        probability: Per-gene mutation probability in [0, 1]
        domain: Domain to resample positions from
        rng: Random number generator
        max_tries: Rejections allowed per resampled point

    Returns:
        Tuple of (mutated_individual, mutated_indices)
        The mutant is a new, unevaluated individual even when no gene changed.
    """
    mutated = Individual(genes=individual.genes)
    mutated_indices = []

    hits = rng.random(len(individual)) < probability
    for index in np.flatnonzero(hits):
        index = int(index)
        x, y = sample_point(domain, rng, max_tries)
        mutated.replace_gene(index, mutated[index].moved_to(x, y))
        mutated_indices.append(index)

    return mutated, mutated_indices
