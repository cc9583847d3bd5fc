"""
Console progress view for the evolution engine.
"""

import sys
from typing import Optional, TextIO

from .config import EvolutionSettings
from .domains import Domain
from .engine import EvolutionListener


class ConsoleEvolutionView(EvolutionListener):
    """
    Prints engine progress with banner-framed sections.

    Args:
        stream: Output stream (stdout if None)
        progress_interval: Print generation progress every N generations;
            0 disables generation progress
    """

    def __init__(self, stream: Optional[TextIO] = None, progress_interval: int = 50):
        self.stream = stream if stream is not None else sys.stdout
        self.progress_interval = progress_interval

    def _print(self, message: str = "") -> None:
        print(message, file=self.stream)

    def on_evolution_start(self, domain: Domain, gene_count: int,
                           settings: EvolutionSettings, seed: Optional[int]) -> None:
        self._print("=" * 70)
        self._print("EVOLUTION")
        self._print("=" * 70)
        self._print(f"Domain: {domain.describe()}")
        self._print(f"Plants: {gene_count}")
        self._print(f"Population: {settings.population_size}, "
                    f"generations: {settings.generations}, "
                    f"max attempts: {settings.max_attempts}")
        self._print(f"Selection: {settings.selection}, "
                    f"crossover: {settings.crossover_probability}, "
                    f"mutation: {settings.mutation_probability}")
        if seed is not None:
            self._print(f"Random seed: {seed}")
        self._print()

    def on_attempt_start(self, attempt: int, max_attempts: int) -> None:
        self._print(f"Attempt #{attempt} of {max_attempts}...")

    def on_generation(self, attempt: int, generation: int, best_fitness: float,
                      generation_best_fitness: float) -> None:
        if self.progress_interval and generation % self.progress_interval == 0:
            self._print(f"  Generation {generation}: best fitness {best_fitness:.4f}")

    def on_retry(self, attempt: int, max_attempts: int, elapsed_seconds: float) -> None:
        self._print(f"  Attempt #{attempt} did not find a valid layout "
                    f"({elapsed_seconds:.2f}s)")
        if attempt < max_attempts:
            self._print("  Retrying with a fresh population...")
        else:
            self._print("  Max attempts reached. Returning best available result.")

    def on_success(self, attempt: int, total_elapsed_seconds: float) -> None:
        self._print()
        self._print("=" * 70)
        self._print("VALID LAYOUT FOUND")
        self._print("=" * 70)
        self._print(f"Attempt: #{attempt}")
        self._print(f"Execution Time: {total_elapsed_seconds:.2f}s")

    def on_exhausted(self, attempts: int, total_elapsed_seconds: float, timed_out: bool) -> None:
        self._print()
        self._print("=" * 70)
        self._print("NO VALID LAYOUT FOUND")
        self._print("=" * 70)
        self._print(f"Attempts: {attempts}")
        if timed_out:
            self._print("Stopped: time budget exhausted")
        self._print(f"Execution Time: {total_elapsed_seconds:.2f}s")
