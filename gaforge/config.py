"""Run configuration for the genetic algorithm engine."""

from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import ClassVar


class SelectionStrategy(str, Enum):
    """Parent selection strategies."""

    ROULETTE = "roulette"
    TOURNAMENT = "tournament"


class GenomeKind(str, Enum):
    """Genome representations."""

    REAL = "real"
    PERMUTATION = "permutation"


class CrossoverMethod(str, Enum):
    """Crossover operators."""

    ARITHMETIC = "arithmetic"
    FIXED_POINT = "fixed_point"
    ORDER = "order"


DEFAULT_CROSSOVER: dict[GenomeKind, CrossoverMethod] = {
    GenomeKind.REAL: CrossoverMethod.ARITHMETIC,
    GenomeKind.PERMUTATION: CrossoverMethod.ORDER,
}

COMPATIBLE_CROSSOVER: dict[GenomeKind, frozenset[CrossoverMethod]] = {
    GenomeKind.REAL: frozenset(
        {CrossoverMethod.ARITHMETIC, CrossoverMethod.FIXED_POINT}
    ),
    GenomeKind.PERMUTATION: frozenset({CrossoverMethod.ORDER}),
}


@dataclass(frozen=True)
class GAConfig:
    """Parameters of a single engine run. Rates are fixed for the whole run."""

    # Population parameters
    population_size: int = 100
    genome_length: int = 10
    max_generations: int = 200
    elitism_count: int = 1

    # Operator parameters
    mutation_rate: float = 0.05
    crossover_rate: float = 0.8
    tournament_size: int = 5
    selection_strategy: SelectionStrategy = SelectionStrategy.TOURNAMENT
    crossover_method: CrossoverMethod | None = None  # None = kind default
    crossover_points: int = 1  # fixed-point crossover only
    mutation_range: float = 0.5  # perturbation noise half-width

    # Genome parameters
    genome_kind: GenomeKind = GenomeKind.REAL
    init_low: float = 0.0
    init_high: float = 10.0
    lower_bound: float = 0.0
    upper_bound: float | None = None  # None = unbounded above

    # Runtime parameters
    seed: int | None = None
    workers: int = 1  # fitness evaluation threads
    verbose: bool = False

    # Path parameters
    LOG_DIR: ClassVar[str] = "data/logs"

    def __post_init__(self) -> None:
        # Accept plain strings for the enum fields (CLI, tests).
        object.__setattr__(
            self, "selection_strategy", SelectionStrategy(self.selection_strategy)
        )
        object.__setattr__(self, "genome_kind", GenomeKind(self.genome_kind))
        if self.crossover_method is not None:
            object.__setattr__(
                self, "crossover_method", CrossoverMethod(self.crossover_method)
            )

    @property
    def effective_crossover(self) -> CrossoverMethod:
        """Crossover operator used for this run."""
        if self.crossover_method is not None:
            return self.crossover_method
        return DEFAULT_CROSSOVER[self.genome_kind]

    def validate(self) -> None:
        """Raise ValueError for any setting that would make a run invalid."""
        if self.population_size <= 0:
            raise ValueError(
                f"population_size must be positive, got {self.population_size}"
            )
        if self.genome_length <= 0:
            raise ValueError(
                f"genome_length must be positive, got {self.genome_length}"
            )
        if self.max_generations <= 0:
            raise ValueError(
                f"max_generations must be positive, got {self.max_generations}"
            )
        if not 0 <= self.elitism_count < self.population_size:
            raise ValueError(
                "elitism_count must be in [0, population_size), "
                f"got {self.elitism_count} for population {self.population_size}"
            )
        for name in ("mutation_rate", "crossover_rate"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be in [0, 1], got {value}")
        if self.selection_strategy is SelectionStrategy.TOURNAMENT:
            if self.tournament_size < 1:
                raise ValueError(
                    f"tournament_size must be >= 1, got {self.tournament_size}"
                )
            if self.tournament_size > self.population_size:
                raise ValueError(
                    f"tournament_size {self.tournament_size} exceeds "
                    f"population_size {self.population_size}"
                )
        method = self.effective_crossover
        if method not in COMPATIBLE_CROSSOVER[self.genome_kind]:
            raise ValueError(
                f"{method.value} crossover is not valid for "
                f"{self.genome_kind.value} genomes"
            )
        if self.crossover_points not in (1, 2):
            raise ValueError(
                f"crossover_points must be 1 or 2, got {self.crossover_points}"
            )
        if self.mutation_range < 0 or not math.isfinite(self.mutation_range):
            raise ValueError(
                f"mutation_range must be finite and >= 0, got {self.mutation_range}"
            )
        if self.genome_kind is GenomeKind.REAL:
            if not self.init_low < self.init_high:
                raise ValueError(
                    f"init_low must be < init_high, got [{self.init_low}, {self.init_high})"
                )
            if self.upper_bound is not None and self.upper_bound < self.lower_bound:
                raise ValueError(
                    f"upper_bound {self.upper_bound} is below lower_bound {self.lower_bound}"
                )
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")

    def with_overrides(self, **changes) -> "GAConfig":
        """Return a copy with the given fields replaced."""
        return dataclasses.replace(self, **changes)

    @classmethod
    def create_dirs(cls) -> None:
        """Create the default output directory."""
        Path(cls.LOG_DIR).mkdir(parents=True, exist_ok=True)
