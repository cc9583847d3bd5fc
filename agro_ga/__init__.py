"""
Evolutionary Plant Layout Optimizer

This package places circular plants inside a bounded 2-D domain with a
genetic algorithm, so that no two plants overlap and every plant centre
lies inside the domain.

Key Features:
- Seven domain shapes (circle, rectangle, square, ellipse, right triangle,
  frame, annulus) with closed boundaries
- Penalty fitness: containment violations plus squared pairwise overlap
- Quadratic or spatial-hash overlap scan
- Retry on failure with attempt and time budgets

Modules:
- domains: Domain shapes, registry and factory
- data_models: Core data structures (Point, Individual, EvolutionResult)
- inventory: Plant varieties and quantities
- population: Rejection sampling and population genesis
- overlap / fitness: Penalty terms and fitness evaluation
- selection / crossover / mutation: Genetic operators
- config: Evolution settings
- engine: Evolution engine and listener hooks
- views: Console progress output
- layout_metrics / io_utils / visualization_utils: Post-run output
- cli: Run configuration handling
"""

__version__ = "0.1.0"

from .data_models import (
    AttemptReport,
    EvolutionOutcome,
    EvolutionResult,
    Individual,
    PlantSlot,
    PlantType,
    Point,
)
from .domains import DomainConstraintError, DomainType, create_domain
from .config import ConfigurationError, EvolutionSettings
from .engine import EngineState, EvolutionEngine, EvolutionListener

__all__ = [
    "AttemptReport",
    "ConfigurationError",
    "DomainConstraintError",
    "DomainType",
    "EngineState",
    "EvolutionEngine",
    "EvolutionListener",
    "EvolutionOutcome",
    "EvolutionResult",
    "EvolutionSettings",
    "Individual",
    "PlantSlot",
    "PlantType",
    "Point",
    "create_domain",
]
