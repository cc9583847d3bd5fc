"""
Parent selection operators.

Each operator draws one individual from an evaluated population; a higher
fitness never lowers the probability of being drawn. Selected individuals
are returned by reference; callers copy before modifying.
"""

from typing import Callable, Dict, List

import numpy as np

from .data_models import Individual


def tournament_select(
    population: List[Individual],
    rng: np.random.Generator,
    tournament_size: int = 3
) -> Individual:
    """
    Pick the fittest of tournament_size distinct random individuals.

    Args:
        population: Evaluated population
        rng: Random number generator
        tournament_size: Contestants, capped at the population size

    Returns:
        Tournament winner
    """
    size = min(max(1, tournament_size), len(population))
    contestants = rng.choice(len(population), size=size, replace=False)
    winner = max(contestants, key=lambda idx: population[idx].fitness)
    return population[winner]


def roulette_select(
    population: List[Individual],
    rng: np.random.Generator,
    tournament_size: int = 3
) -> Individual:
    """
    Fitness-proportionate selection.

    Fitness values are usually negative penalties, so they are shifted to be
    strictly positive before normalising. tournament_size is accepted for a
    uniform signature and ignored.
    """
    fitnesses = np.array([ind.fitness for ind in population], dtype=float)
    weights = fitnesses - fitnesses.min() + 1.0
    probabilities = weights / weights.sum()
    return population[int(rng.choice(len(population), p=probabilities))]


def rank_select(
    population: List[Individual],
    rng: np.random.Generator,
    tournament_size: int = 3
) -> Individual:
    """Linear rank selection: the worst has weight 1, the best weight N."""
    order = np.argsort([ind.fitness for ind in population], kind="stable")
    ranks = np.empty(len(population), dtype=float)
    ranks[order] = np.arange(1, len(population) + 1)
    probabilities = ranks / ranks.sum()
    return population[int(rng.choice(len(population), p=probabilities))]


SELECTION_STRATEGIES: Dict[str, Callable[..., Individual]] = {
    "tournament": tournament_select,
    "roulette": roulette_select,
    "rank": rank_select,
}


def select_parent(
    strategy: str,
    population: List[Individual],
    rng: np.random.Generator,
    tournament_size: int = 3
) -> Individual:
    """
    Dispatch to a named selection strategy.

    Raises:
        ValueError: If strategy is unknown or the population is empty
    """
    if not population:
        raise ValueError("Cannot select from an empty population")
    if strategy not in SELECTION_STRATEGIES:
        raise ValueError(
            f"Unknown selection strategy '{strategy}' "
            f"(expected one of: {', '.join(SELECTION_STRATEGIES)})"
        )
    return SELECTION_STRATEGIES[strategy](population, rng, tournament_size)


def select_elites(population: List[Individual], count: int) -> List[Individual]:
    """
    Copies of the count fittest individuals, best first.

    Ties keep population order.
    """
    ranked = sorted(population, key=lambda ind: ind.fitness, reverse=True)
    return [ind.copy() for ind in ranked[:max(0, count)]]

