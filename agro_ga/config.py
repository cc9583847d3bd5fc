"""
Evolution settings.

EvolutionSettings holds every tunable of the engine. Settings can be built
directly, from a dictionary (the 'evolution' section of a run config) or
from a YAML file.
"""

import math
from dataclasses import dataclass, fields
from typing import Any, Dict, List, Optional, Union

import yaml

from .overlap import OVERLAP_STRATEGIES
from .selection import SELECTION_STRATEGIES

AUTO_TIMEOUT = "auto"
AUTO_TIMEOUT_BASE_SECONDS = 5.0
AUTO_TIMEOUT_PER_GENE_SECONDS = 0.1


class ConfigurationError(Exception):
    """Raised when configuration is invalid"""
    pass


@dataclass
class EvolutionSettings:
    """
    Tunables of the evolution engine.

    Attributes:
        population_size: Individuals per generation
        generations: Maximum generations per attempt
        max_attempts: Attempts before giving up
        crossover_probability: Chance that a pair of parents is recombined
        mutation_probability: Per-gene resampling chance
        tournament_size: Contestants per tournament
        elitism: Carry the best individuals forward unchanged
        elite_fraction: Share of the population kept as elites (at least one)
        selection: 'tournament', 'roulette' or 'rank'
        domain_weight: Penalty per gene outside the domain
        overlap_weight: Multiplier of squared overlap depth
        base_score: Fitness of a perfect layout
        overlap_strategy: 'quadratic', 'spatial' or 'auto'
        spatial_threshold: Genome size above which 'auto' uses the spatial hash
        timeout_seconds: Wall-clock budget of the whole run; None for no
            budget, 'auto' for 5 s plus 0.1 s per gene
        stop_on_valid: End an attempt as soon as a valid layout is found
        random_seed: Seed of the run's random generator; None draws one
        max_sampling_tries: Rejections allowed when sampling a point
    """
    population_size: int = 100
    generations: int = 800
    max_attempts: int = 3
    crossover_probability: float = 0.9
    mutation_probability: float = 0.02
    tournament_size: int = 3
    elitism: bool = True
    elite_fraction: float = 0.05
    selection: str = "tournament"
    domain_weight: float = 10000.0
    overlap_weight: float = 100.0
    base_score: float = 0.0
    overlap_strategy: str = "auto"
    spatial_threshold: int = 80
    timeout_seconds: Optional[Union[float, str]] = None
    stop_on_valid: bool = True
    random_seed: Optional[int] = None
    max_sampling_tries: int = 10000

    def __post_init__(self):
        issues = validate_settings(self)
        if issues:
            raise ConfigurationError(
                "Invalid evolution settings:\n  - " + "\n  - ".join(issues)
            )

    @property
    def elite_count(self) -> int:
        """Elites per generation: max(1, floor(population_size * elite_fraction))."""
        return max(1, int(self.population_size * self.elite_fraction))

    def resolve_timeout(self, gene_count: int) -> Optional[float]:
        """
        Run-wide time budget in seconds for a genome of gene_count genes.

        Returns:
            None when the run has no time budget
        """
        if self.timeout_seconds is None:
            return None
        if self.timeout_seconds == AUTO_TIMEOUT:
            return AUTO_TIMEOUT_BASE_SECONDS + AUTO_TIMEOUT_PER_GENE_SECONDS * gene_count
        return float(self.timeout_seconds)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "EvolutionSettings":
        """
        Build settings from a dictionary, rejecting unknown keys.

        Args:
            data: Mapping of setting name to value; None or empty gives defaults

        Returns:
            EvolutionSettings

        Raises:
            ConfigurationError: If a key is unknown or a value is invalid
        """
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Evolution settings must be a mapping, got {type(data).__name__}"
            )

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown evolution setting(s): {', '.join(unknown)}")

        return cls(**data)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def validate_settings(settings: EvolutionSettings) -> List[str]:
    """
    Validate evolution settings.

    Args:
        settings: Settings to check

    Returns:
        List of issue descriptions (empty if valid)
    """
    issues = []

    for name in ("population_size", "generations", "max_attempts",
                 "tournament_size", "spatial_threshold", "max_sampling_tries"):
        value = getattr(settings, name)
        if not _is_int(value) or value <= 0:
            issues.append(f"{name} must be a positive integer, got {value!r}")

    for name in ("crossover_probability", "mutation_probability", "elite_fraction"):
        value = getattr(settings, name)
        if not _is_number(value) or not 0.0 <= value <= 1.0:
            issues.append(f"{name} must be within [0, 1], got {value!r}")

    for name in ("domain_weight", "overlap_weight"):
        value = getattr(settings, name)
        if not _is_number(value) or value <= 0:
            issues.append(f"{name} must be a positive number, got {value!r}")

    if not _is_number(settings.base_score):
        issues.append(f"base_score must be a finite number, got {settings.base_score!r}")

    if settings.selection not in SELECTION_STRATEGIES:
        issues.append(
            f"selection must be one of {', '.join(SELECTION_STRATEGIES)}, got {settings.selection!r}"
        )

    if settings.overlap_strategy not in OVERLAP_STRATEGIES:
        issues.append(
            f"overlap_strategy must be one of {', '.join(OVERLAP_STRATEGIES)}, "
            f"got {settings.overlap_strategy!r}"
        )

    timeout = settings.timeout_seconds
    if timeout is not None and timeout != AUTO_TIMEOUT:
        if not _is_number(timeout) or timeout <= 0:
            issues.append(f"timeout_seconds must be positive, null or 'auto', got {timeout!r}")

    for name in ("elitism", "stop_on_valid"):
        if not isinstance(getattr(settings, name), bool):
            issues.append(f"{name} must be true or false, got {getattr(settings, name)!r}")

    if (settings.elitism is True and _is_int(settings.population_size)
            and settings.population_size > 0 and _is_number(settings.elite_fraction)
            and settings.elite_count >= settings.population_size):
        issues.append(
            f"elitism keeps {settings.elite_count} of {settings.population_size} individuals, "
            f"leaving no room for offspring; lower elite_fraction or grow population_size"
        )

    if settings.random_seed is not None and (not _is_int(settings.random_seed) or settings.random_seed < 0):
        issues.append(f"random_seed must be a non-negative integer, got {settings.random_seed!r}")

    return issues


def load_config(config_path: str) -> Dict[str, Any]:
    """Load configuration from YAML file"""
    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigurationError(f"Configuration file not found: {config_path}")
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in configuration file: {e}")

    if config is None:
        raise ConfigurationError(f"Configuration file is empty: {config_path}")
    return config

