"""
Fitness evaluation.

    fitness = base_score
              - domain_weight * (number of genes whose centre is outside)
              - sum of pair overlap penalties

A layout is valid exactly when both penalty terms are zero. Validity is
always read from the PenaltyBreakdown, never inferred from the fitness
value, so base_score can be changed without affecting the validity gate.
"""

from dataclasses import dataclass
from typing import Iterable

from .data_models import Individual
from .domains import Domain
from .overlap import (
    DEFAULT_OVERLAP_WEIGHT,
    DEFAULT_SPATIAL_THRESHOLD,
    resolve_overlap_strategy,
)

DEFAULT_DOMAIN_WEIGHT = 10000.0


@dataclass(frozen=True)
class PenaltyBreakdown:
    """
    Penalty terms of one individual.

    Attributes:
        domain_violations: Number of genes whose centre lies outside the domain
        domain_penalty: domain_weight * domain_violations
        overlap_penalty: Sum of pair penalties
        pair_count: Number of overlapping pairs
    """
    domain_violations: int
    domain_penalty: float
    overlap_penalty: float
    pair_count: int

    @property
    def total_penalty(self) -> float:
        return self.domain_penalty + self.overlap_penalty

    @property
    def is_valid(self) -> bool:
        return self.domain_violations == 0 and self.total_penalty == 0.0


class FitnessEvaluator:
    """
    Scores individuals against one domain.

    Args:
        domain: Domain the layout must fit in
        domain_weight: Penalty per gene outside the domain
        overlap_weight: Multiplier of the squared overlap depth
        base_score: Fitness of a perfect layout
        overlap_strategy: 'quadratic', 'spatial' or 'auto'
        spatial_threshold: Genome size above which 'auto' uses the spatial hash
    """

    def __init__(
        self,
        domain: Domain,
        domain_weight: float = DEFAULT_DOMAIN_WEIGHT,
        overlap_weight: float = DEFAULT_OVERLAP_WEIGHT,
        base_score: float = 0.0,
        overlap_strategy: str = "auto",
        spatial_threshold: int = DEFAULT_SPATIAL_THRESHOLD
    ):
        self.domain = domain
        self.domain_weight = domain_weight
        self.overlap_weight = overlap_weight
        self.base_score = base_score
        self.overlap_strategy = overlap_strategy
        self.spatial_threshold = spatial_threshold

        # Fail fast on an unknown strategy name
        resolve_overlap_strategy(overlap_strategy, 0, spatial_threshold)

    def evaluate(self, individual: Individual) -> PenaltyBreakdown:
        violations = sum(
            1 for point in individual if self.domain.is_point_outside(point.x, point.y)
        )
        strategy = resolve_overlap_strategy(
            self.overlap_strategy, len(individual), self.spatial_threshold
        )
        overlap = strategy.calculate(individual.genes, self.overlap_weight)

        return PenaltyBreakdown(
            domain_violations=violations,
            domain_penalty=violations * self.domain_weight,
            overlap_penalty=overlap.penalty,
            pair_count=overlap.pair_count
        )

    def fitness(self, individual: Individual) -> float:
        """Compute fitness without storing it on the individual."""
        return self.base_score - self.evaluate(individual).total_penalty

    def assign(self, individual: Individual) -> PenaltyBreakdown:
        """
        Evaluate an individual and store its fitness.

        Returns:
            The penalty breakdown used to compute the fitness
        """
        breakdown = self.evaluate(individual)
        individual.fitness = self.base_score - breakdown.total_penalty
        return breakdown

    def evaluate_population(self, population: Iterable[Individual]) -> None:
        for individual in population:
            self.assign(individual)

    def is_valid(self, individual: Individual) -> bool:
        return self.evaluate(individual).is_valid
