"""Population container, ranking and per-generation statistics."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

import numpy as np
from numpy.random import Generator

from gaforge.evolution.fitness import FitnessEvaluator, evaluate_individuals
from gaforge.evolution.genome import GenomeFactory
from gaforge.evolution.individual import Individual


@dataclass
class PopulationHistory:
    """Summary history for a population."""

    generation: list[int] = field(default_factory=list)
    avg_fitness: list[float] = field(default_factory=list)
    best_fitness: list[float] = field(default_factory=list)
    worst_fitness: list[float] = field(default_factory=list)
    genome_diversity: list[float] = field(default_factory=list)
    best_genome: list[list[float]] = field(default_factory=list)


class Population:
    """Fixed-size collection of individuals, sorted ascending by fitness after rank()."""

    def __init__(self, individuals: list[Individual]) -> None:
        if not individuals:
            raise ValueError("population must contain at least one individual")
        self.individuals = list(individuals)
        self.cumulative_fitness = np.zeros(0, dtype=np.float64)
        self.history = PopulationHistory()
        self.roulette_degenerate = True
        self._ranked = False

    @classmethod
    def random(
        cls,
        size: int,
        factory: GenomeFactory,
        rng: Generator,
        generation: int = 0,
    ) -> "Population":
        """Population of `size` random genomes."""
        if size <= 0:
            raise ValueError(f"size must be positive, got {size}")
        return cls(
            [Individual(factory(rng), generation=generation) for _ in range(size)]
        )

    def __len__(self) -> int:
        return len(self.individuals)

    def __iter__(self) -> Iterator[Individual]:
        return iter(self.individuals)

    @property
    def size(self) -> int:
        return len(self.individuals)

    @property
    def is_ranked(self) -> bool:
        return self._ranked and all(ind.is_evaluated for ind in self.individuals)

    def replace(self, individuals: list[Individual]) -> None:
        """Swap in the next generation. The size never changes."""
        if len(individuals) != len(self.individuals):
            raise ValueError(
                f"next generation has {len(individuals)} individuals, "
                f"expected {len(self.individuals)}"
            )
        self.individuals = list(individuals)
        self.cumulative_fitness = np.zeros(0, dtype=np.float64)
        self._ranked = False
        self.roulette_degenerate = True

    def rank(self, fitness_fn: FitnessEvaluator, workers: int = 1) -> None:
        """Evaluate stale individuals, sort ascending and rebuild the roulette table."""
        evaluate_individuals(self.individuals, fitness_fn, workers=workers)
        # sort() is stable: equal fitness keeps insertion order.
        self.individuals.sort(key=lambda ind: ind.fitness)
        scores = self.fitness_scores
        self.cumulative_fitness = np.cumsum(scores)
        # Negative or all-zero scores cannot serve as selection weights.
        self.roulette_degenerate = bool(
            np.any(scores < 0) or self.cumulative_fitness[-1] <= 0.0
        )
        self._ranked = True

    def _require_ranked(self) -> None:
        if not self.is_ranked:
            raise RuntimeError("population must be ranked first")

    @property
    def fitness_scores(self) -> np.ndarray:
        return np.array([ind.fitness for ind in self.individuals], dtype=np.float64)

    @property
    def total_fitness(self) -> float:
        self._require_ranked()
        return float(self.cumulative_fitness[-1])

    def nth(self, rank: int) -> Individual:
        """Individual at `rank` in ascending order (0 is the worst)."""
        self._require_ranked()
        if not 0 <= rank < len(self.individuals):
            raise IndexError(
                f"rank {rank} outside [0, {len(self.individuals)})"
            )
        return self.individuals[rank]

    def best(self) -> Individual:
        return self.nth(len(self.individuals) - 1)

    def worst(self) -> Individual:
        return self.nth(0)

    def top(self, count: int) -> list[Individual]:
        """The `count` best individuals, best first."""
        self._require_ranked()
        count = max(0, min(count, len(self.individuals)))
        return self.individuals[::-1][:count]

    def compute_diversity(self) -> float:
        """Average pairwise genome distance."""
        if len(self.individuals) < 2:
            return 0.0
        genomes = np.array([ind.genes for ind in self.individuals], dtype=np.float64)
        distances = [
            np.linalg.norm(genomes[i + 1 :] - genomes[i], axis=1)
            for i in range(len(genomes) - 1)
        ]
        return float(np.mean(np.concatenate(distances)))

    def record_generation(self, generation: int) -> None:
        """Record generation statistics."""
        self._require_ranked()
        scores = self.fitness_scores
        self.history.generation.append(generation)
        self.history.avg_fitness.append(float(np.mean(scores)))
        self.history.best_fitness.append(float(scores[-1]))
        self.history.worst_fitness.append(float(scores[0]))
        self.history.genome_diversity.append(self.compute_diversity())
        self.history.best_genome.append(self.best().genes.tolist())
