"""
Data models for the plant-layout optimizer.

Core data structures representing genes (plants), individuals (layouts) and
the result of an evolution run.
"""

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterator, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .fitness import PenaltyBreakdown


class PlantType(Enum):
    """Plant categories with their numeric id and display label."""
    GENERIC = (0, "Generic")
    TOMATO = (1, "Tomato")
    CORN = (2, "Corn")
    POTATO = (3, "Potato")
    CARROT = (4, "Carrot")
    WHEAT = (5, "Wheat")
    ZUCCHINI = (6, "Zucchini")
    PUMPKIN = (7, "Pumpkin")

    def __init__(self, type_id: int, label: str):
        self.type_id = type_id
        self.label = label

    def __str__(self) -> str:
        return self.label

    @classmethod
    def from_id(cls, type_id: int) -> Optional["PlantType"]:
        for plant_type in cls:
            if plant_type.type_id == type_id:
                return plant_type
        return None

    @classmethod
    def from_name(cls, name: str) -> "PlantType":
        """
        Resolve a plant type from its name or label (case-insensitive).

        Raises:
            ValueError: If the name matches no plant type
        """
        key = str(name).strip().upper()
        try:
            return cls[key]
        except KeyError:
            valid = ", ".join(t.name.lower() for t in cls)
            raise ValueError(f"Unknown plant type '{name}' (expected one of: {valid})")


@dataclass(frozen=True)
class PlantSlot:
    """
    Metadata template for one gene position in the genome.

    A run is configured with an ordered list of slots; gene k always carries
    the radius and plant metadata of slot k.
    """
    radius: float
    plant_type: PlantType = PlantType.GENERIC
    variety_id: int = 0
    variety_name: str = ""

    def __post_init__(self):
        if not math.isfinite(self.radius) or self.radius <= 0:
            raise ValueError(f"Plant radius must be positive, got {self.radius}")


@dataclass(frozen=True)
class Point:
    """
    A single plant: centre position, radius and plant metadata.

    Attributes:
        x: Centre x coordinate (metres)
        y: Centre y coordinate (metres)
        radius: Plant footprint radius, strictly positive
        plant_type: Plant category
        variety_id: Inventory variety identifier (0 when not from an inventory)
        variety_name: Variety display name
    """
    x: float
    y: float
    radius: float
    plant_type: PlantType = PlantType.GENERIC
    variety_id: int = 0
    variety_name: str = ""

    def __post_init__(self):
        if not (math.isfinite(self.x) and math.isfinite(self.y)):
            raise ValueError(f"Point coordinates must be finite, got ({self.x}, {self.y})")
        if not math.isfinite(self.radius) or self.radius <= 0:
            raise ValueError(f"Point radius must be positive, got {self.radius}")

    @classmethod
    def from_slot(cls, slot: PlantSlot, x: float, y: float) -> "Point":
        return cls(
            x=float(x),
            y=float(y),
            radius=slot.radius,
            plant_type=slot.plant_type,
            variety_id=slot.variety_id,
            variety_name=slot.variety_name
        )

    def moved_to(self, x: float, y: float) -> "Point":
        """Return a copy at a new centre, keeping radius and plant metadata."""
        return replace(self, x=float(x), y=float(y))


@dataclass
class Individual:
    """
    A candidate layout: one gene (Point) per plant slot.

    Attributes:
        genes: Ordered list of points; gene k corresponds to plant slot k
        fitness: Last evaluated fitness, -inf when not yet evaluated
    """
    genes: List[Point]
    fitness: float = -math.inf

    def __post_init__(self):
        """Take ownership of a fresh list so individuals never share genes."""
        self.genes = list(self.genes)

    def copy(self) -> "Individual":
        """
        Create an independent copy of this individual.

        Points are immutable, so copying the list is enough.

        Returns:
            New Individual with its own gene list and the same fitness
        """
        return Individual(genes=self.genes, fitness=self.fitness)

    def replace_gene(self, index: int, point: Point) -> None:
        self.genes[index] = point

    @property
    def is_evaluated(self) -> bool:
        return self.fitness != -math.inf

    def __len__(self) -> int:
        return len(self.genes)

    def __iter__(self) -> Iterator[Point]:
        return iter(self.genes)

    def __getitem__(self, index: int) -> Point:
        return self.genes[index]


class EvolutionOutcome(Enum):
    CONVERGED = "converged"
    EXHAUSTED = "exhausted"


@dataclass
class AttemptReport:
    """
    Summary of one evolution attempt.

    Attributes:
        attempt: Attempt number (1-based)
        generations_run: Number of generations completed
        best_fitness_history: Best-so-far fitness after each generation
        elapsed_seconds: Wall-clock time spent in the attempt
        valid: Whether the attempt's candidate passed the validity gate
    """
    attempt: int
    generations_run: int
    best_fitness_history: List[float] = field(default_factory=list)
    elapsed_seconds: float = 0.0
    valid: bool = False


@dataclass
class EvolutionResult:
    """
    Outcome of a complete evolution run.

    Attributes:
        best: Accepted (or best-effort) individual
        fitness: Fitness of best
        penalty: Penalty breakdown of best
        attempts: Attempt number that produced best (last attempt when exhausted)
        elapsed_seconds: Wall-clock time of the whole run
        outcome: CONVERGED when best is a valid layout, EXHAUSTED otherwise
        timed_out: True if the run-wide time budget stopped the run
        attempt_reports: Per-attempt summaries in order
        seed: Random seed used by the run (None if the generator was supplied)
    """
    best: Individual
    fitness: float
    penalty: "PenaltyBreakdown"
    attempts: int
    elapsed_seconds: float
    outcome: EvolutionOutcome
    timed_out: bool = False
    attempt_reports: List[AttemptReport] = field(default_factory=list)
    seed: Optional[int] = None

    @property
    def converged(self) -> bool:
        return self.outcome is EvolutionOutcome.CONVERGED

