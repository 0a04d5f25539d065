"""Individual: a genome plus its cached fitness."""

from __future__ import annotations

import itertools
import math
from typing import Callable

import numpy as np

from gaforge.evolution.genome import Genome


class Individual:
    """Candidate solution with a lazily computed fitness (higher is better)."""

    _id_counter = itertools.count()

    def __init__(
        self,
        genome: Genome,
        fitness: float | None = None,
        generation: int = 0,
        individual_id: int | None = None,
        parent_ids: tuple[int | None, int | None] | None = None,
    ) -> None:
        self.id = (
            int(individual_id) if individual_id is not None else next(self._id_counter)
        )
        self._genome = genome
        self._fitness = None if fitness is None else float(fitness)
        self.generation = generation
        self.parent_ids = parent_ids or (None, None)

    def __repr__(self) -> str:
        return (
            f"Individual(id={self.id}, fitness={self._fitness}, "
            f"genes={self._genome.genes.tolist()})"
        )

    @property
    def genome(self) -> Genome:
        return self._genome

    @genome.setter
    def genome(self, genome: Genome) -> None:
        # New genes make any cached fitness stale.
        self._genome = genome
        self._fitness = None

    @property
    def genes(self) -> np.ndarray:
        return self._genome.genes

    @property
    def is_evaluated(self) -> bool:
        return self._fitness is not None

    @property
    def fitness(self) -> float:
        if self._fitness is None:
            raise RuntimeError(f"individual {self.id} has not been evaluated")
        return self._fitness

    def invalidate(self) -> None:
        """Drop the cached fitness."""
        self._fitness = None

    def evaluate(self, fitness_fn: Callable[[np.ndarray], float]) -> float:
        """Compute and cache fitness from the current genes."""
        value = float(fitness_fn(self._genome.genes))
        if not math.isfinite(value):
            raise ValueError(
                f"fitness function returned non-finite value {value} "
                f"for individual {self.id}"
            )
        self._fitness = value
        return value

    def clone(self, individual_id: int | None = None) -> "Individual":
        """Deep copy: independent genes, same cached fitness."""
        return Individual(
            genome=self._genome.copy(),
            fitness=self._fitness,
            generation=self.generation,
            individual_id=individual_id,
            parent_ids=self.parent_ids,
        )
