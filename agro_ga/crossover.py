"""
Crossover operator.

Uniform crossover over genes. Gene k of either parent always belongs to
plant slot k, so mixing genes position-wise keeps radius and variety
metadata aligned with the slot list.
"""

from typing import List, Tuple

import numpy as np

from .data_models import Individual


def uniform_crossover(
    parent_a: Individual,
    parent_b: Individual,
    probability: float,
    rng: np.random.Generator
) -> Tuple[Individual, List[str]]:
    """
    Combine two parents gene by gene.

    One Bernoulli trial with the given probability decides whether crossover
    happens at all. If it does, every gene is taken from A or B with equal
    probability. If it does not, the child is a copy of one parent chosen
    50/50.

    Args:
        parent_a: First parent
        parent_b: Second parent
        probability: Crossover probability in [0, 1]
        rng: Random number generator

    Returns:
        Tuple of (child, crossover_mask)
        where crossover_mask[k] is "A" or "B", the parent gene k came from

    Raises:
        ValueError: If the parents have different lengths

    Note:
        The child is unevaluated and owns a fresh gene list.
    """
    if len(parent_a) != len(parent_b):
        raise ValueError(
            f"Parents must have the same number of genes ({len(parent_a)} != {len(parent_b)})"
        )

    if rng.random() < probability:
        take_a = rng.random(len(parent_a)) < 0.5
        genes = [
            gene_a if from_a else gene_b
            for gene_a, gene_b, from_a in zip(parent_a.genes, parent_b.genes, take_a)
        ]
        mask = ["A" if from_a else "B" for from_a in take_a]
    elif rng.random() < 0.5:
        genes = parent_a.genes
        mask = ["A"] * len(parent_a)
    else:
        genes = parent_b.genes
        mask = ["B"] * len(parent_b)

    return Individual(genes=genes), mask
