"""
Evolution engine.

Runs the generational loop over attempts:

    IDLE -> RUNNING -> CONVERGED
                    -> EXHAUSTED_ATTEMPTS

Each attempt starts from a fresh random population and evolves it for up
to `generations` generations (elites, then selection -> crossover ->
mutation -> evaluation). The best individual seen during the attempt is
its candidate. A valid candidate (zero penalty) ends the run; an invalid
one triggers a retry until `max_attempts` is used up, after which the
last candidate is returned as a best effort.

An optional run-wide time budget is checked between generations and
before each new attempt. When it runs out the current attempt stops, its
candidate still goes through the validity gate, and no further attempt is
started.

The engine prints nothing; progress is reported through an
EvolutionListener.
"""

import time
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from .config import ConfigurationError, EvolutionSettings
from .crossover import uniform_crossover
from .data_models import (
    AttemptReport,
    EvolutionOutcome,
    EvolutionResult,
    Individual,
    PlantSlot,
)
from .domains import Domain, DomainConstraintError
from .fitness import FitnessEvaluator, PenaltyBreakdown
from .mutation import mutate
from .population import create_population
from .selection import select_elites, select_parent

# Redraws allowed when the second parent is the first one
MAX_PARENT_REDRAWS = 3


class EngineState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    CONVERGED = "converged"
    EXHAUSTED_ATTEMPTS = "exhausted_attempts"


class EvolutionListener:
    """
    Receives progress notifications from the engine.

    All hooks are no-ops; subclasses override the ones they need.
    """

    def on_evolution_start(self, domain: Domain, gene_count: int,
                           settings: EvolutionSettings, seed: Optional[int]) -> None:
        pass

    def on_attempt_start(self, attempt: int, max_attempts: int) -> None:
        pass

    def on_generation(self, attempt: int, generation: int, best_fitness: float,
                      generation_best_fitness: float) -> None:
        pass

    def on_retry(self, attempt: int, max_attempts: int, elapsed_seconds: float) -> None:
        pass

    def on_success(self, attempt: int, total_elapsed_seconds: float) -> None:
        pass

    def on_exhausted(self, attempts: int, total_elapsed_seconds: float, timed_out: bool) -> None:
        pass


class EvolutionEngine:
    """
    Evolves plant layouts inside a domain.

    Args:
        domain: Domain the plants must fit in
        slots: One PlantSlot per gene (radius and plant metadata)
        settings: Evolution settings (defaults if None)
        listener: Progress listener (silent if None)
        rng: Random generator; when None one is seeded from settings.random_seed
        clock: Monotonic clock returning seconds

    Raises:
        ConfigurationError: If the genome is empty
        DomainConstraintError: If a plant is too big for the domain
    """

    def __init__(
        self,
        domain: Domain,
        slots: Sequence[PlantSlot],
        settings: Optional[EvolutionSettings] = None,
        listener: Optional[EvolutionListener] = None,
        rng: Optional[np.random.Generator] = None,
        clock: Callable[[], float] = time.perf_counter
    ):
        self.domain = domain
        self.slots = list(slots)
        self.settings = settings if settings is not None else EvolutionSettings()
        self.listener = listener if listener is not None else EvolutionListener()
        self.clock = clock
        self.state = EngineState.IDLE

        if not self.slots:
            raise ConfigurationError("Cannot evolve an empty genome: at least one plant is required")

        self._check_plant_sizes()

        if rng is None:
            seed = self.settings.random_seed
            if seed is None:
                seed = int(np.random.default_rng().integers(0, 2**31))
            rng = np.random.default_rng(seed)
            self.seed = seed
        else:
            self.seed = self.settings.random_seed
        self.rng = rng

        self.evaluator = FitnessEvaluator(
            domain,
            domain_weight=self.settings.domain_weight,
            overlap_weight=self.settings.overlap_weight,
            base_score=self.settings.base_score,
            overlap_strategy=self.settings.overlap_strategy,
            spatial_threshold=self.settings.spatial_threshold
        )
        self.timeout_seconds = self.settings.resolve_timeout(len(self.slots))

    def _check_plant_sizes(self) -> None:
        box = self.domain.bounding_box
        limit = min(box.width, box.height) / 2.0
        largest = max(slot.radius for slot in self.slots)
        if largest > limit:
            raise DomainConstraintError(
                "radius",
                f"Point is too big for this domain (radius {largest:.2f} > {limit:.2f})"
            )

    @property
    def gene_count(self) -> int:
        return len(self.slots)

    def is_valid_solution(self, individual: Individual) -> bool:
        return self.evaluator.is_valid(individual)

    def run(self) -> EvolutionResult:
        """
        Run attempts until a valid layout is found or the budget is spent.

        Returns:
            EvolutionResult; outcome is CONVERGED for a valid layout and
            EXHAUSTED for a best-effort one

        Raises:
            RuntimeError: If the engine has already been run
            SamplingError: If the domain cannot be sampled
        """
        if self.state is not EngineState.IDLE:
            raise RuntimeError(f"Engine cannot run from state {self.state.name}")

        self.state = EngineState.RUNNING
        settings = self.settings
        run_start = self.clock()
        deadline = run_start + self.timeout_seconds if self.timeout_seconds is not None else None

        self.listener.on_evolution_start(self.domain, self.gene_count, settings, self.seed)

        reports: List[AttemptReport] = []
        candidate = None
        breakdown = None
        timed_out = False
        attempt = 0

        while attempt < settings.max_attempts:
            attempt += 1
            self.listener.on_attempt_start(attempt, settings.max_attempts)
            candidate, breakdown, report, timed_out = self.run_attempt(attempt, deadline)
            reports.append(report)

            if report.valid:
                self.state = EngineState.CONVERGED
                total = self.clock() - run_start
                self.listener.on_success(attempt, total)
                return self._result(candidate, breakdown, attempt, total,
                                    EvolutionOutcome.CONVERGED, timed_out, reports)

            # No new attempt starts once the deadline has passed
            if (not timed_out and deadline is not None
                    and attempt < settings.max_attempts and self.clock() >= deadline):
                timed_out = True
            if timed_out:
                break

            self.listener.on_retry(attempt, settings.max_attempts, report.elapsed_seconds)

        self.state = EngineState.EXHAUSTED_ATTEMPTS
        total = self.clock() - run_start
        self.listener.on_exhausted(attempt, total, timed_out)
        return self._result(candidate, breakdown, attempt, total,
                            EvolutionOutcome.EXHAUSTED, timed_out, reports)

    def run_attempt(
        self,
        attempt: int,
        deadline: Optional[float] = None
    ) -> Tuple[Individual, PenaltyBreakdown, AttemptReport, bool]:
        """
        Evolve one fresh population.

        Args:
            attempt: Attempt number, for reporting
            deadline: Clock value after which no new generation starts

        Returns:
            Tuple of (candidate, penalty_breakdown, attempt_report, timed_out)
            where candidate is the best individual seen in the attempt
        """
        settings = self.settings
        attempt_start = self.clock()

        population = create_population(
            self.domain, self.slots, settings.population_size,
            self.rng, settings.max_sampling_tries
        )
        self.evaluator.evaluate_population(population)

        best = max(population, key=lambda ind: ind.fitness).copy()
        best_breakdown = self.evaluator.evaluate(best)

        history: List[float] = []
        generations_run = 0
        timed_out = False

        for generation in range(1, settings.generations + 1):
            if settings.stop_on_valid and best_breakdown.is_valid:
                break
            if deadline is not None and self.clock() >= deadline:
                timed_out = True
                break

            population = self.evolve_generation(population)
            generations_run = generation

            generation_best = max(population, key=lambda ind: ind.fitness)
            if generation_best.fitness > best.fitness:
                best = generation_best.copy()
                best_breakdown = self.evaluator.evaluate(best)

            history.append(best.fitness)
            self.listener.on_generation(attempt, generation, best.fitness, generation_best.fitness)

        report = AttemptReport(
            attempt=attempt,
            generations_run=generations_run,
            best_fitness_history=history,
            elapsed_seconds=self.clock() - attempt_start,
            valid=best_breakdown.is_valid
        )
        return best, best_breakdown, report, timed_out

    def evolve_generation(self, population: List[Individual]) -> List[Individual]:
        """
        Produce the next generation from an evaluated population.

        Elites (when enabled) are copied forward first; the remaining places
        are filled with evaluated offspring.

        Args:
            population: Evaluated population

        Returns:
            New evaluated population of settings.population_size individuals
        """
        settings = self.settings

        if settings.elitism:
            next_generation = select_elites(population, settings.elite_count)
        else:
            next_generation = []

        while len(next_generation) < settings.population_size:
            parent_a, parent_b = self._select_parents(population)

            child, _ = uniform_crossover(
                parent_a, parent_b, settings.crossover_probability, self.rng
            )
            child, _ = mutate(
                child, settings.mutation_probability, self.domain,
                self.rng, settings.max_sampling_tries
            )
            self.evaluator.assign(child)
            next_generation.append(child)

        return next_generation

    def _select_parents(self, population: List[Individual]) -> Tuple[Individual, Individual]:
        settings = self.settings
        parent_a = select_parent(settings.selection, population, self.rng, settings.tournament_size)
        parent_b = select_parent(settings.selection, population, self.rng, settings.tournament_size)

        if len(population) > 1:
            redraws = 0
            while parent_b is parent_a and redraws < MAX_PARENT_REDRAWS:
                parent_b = select_parent(
                    settings.selection, population, self.rng, settings.tournament_size
                )
                redraws += 1

        return parent_a, parent_b

    def _result(self, candidate, breakdown, attempt, elapsed, outcome, timed_out, reports) -> EvolutionResult:
        return EvolutionResult(
            best=candidate,
            fitness=candidate.fitness,
            penalty=breakdown,
            attempts=attempt,
            elapsed_seconds=elapsed,
            outcome=outcome,
            timed_out=timed_out,
            attempt_reports=reports,
            seed=self.seed
        )
