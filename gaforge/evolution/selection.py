"""Selection strategies for evolutionary runs."""

from __future__ import annotations

import numpy as np
from numpy.random import Generator

from gaforge.config import SelectionStrategy
from gaforge.evolution.individual import Individual
from gaforge.evolution.population import Population


class Selection:
    """Parent selection and elite preservation over a ranked population."""

    @staticmethod
    def is_roulette_degenerate(population: Population) -> bool:
        """True when fitness values cannot be used as selection probabilities.

        The flag is computed once per rank(); evaluation already rejects
        non-finite fitness, so only negative or all-zero scores trip it.
        """

        return population.roulette_degenerate

    @staticmethod
    def roulette_index(cumulative_fitness: np.ndarray, draw: float) -> int:
        """Index of the first cumulative entry strictly greater than `draw`."""

        idx = int(np.searchsorted(cumulative_fitness, draw, side="right"))
        # Guard against float round-off at the top of the wheel.
        return min(idx, len(cumulative_fitness) - 1)

    @staticmethod
    def roulette_select(population: Population, rng: Generator) -> Individual:
        """Fitness-proportional selection.

        Falls back to a uniform pick when the fitness values are negative or
        sum to zero.
        """

        cumulative = population.cumulative_fitness
        if cumulative.size != population.size:
            raise RuntimeError("population must be ranked first")
        if Selection.is_roulette_degenerate(population):
            return population.individuals[int(rng.integers(population.size))]

        draw = rng.random() * cumulative[-1]
        idx = Selection.roulette_index(cumulative, draw)
        return population.individuals[idx]

    @staticmethod
    def tournament_select(
        population: Population,
        tournament_size: int = 3,
        rng: Generator | None = None,
    ) -> Individual:
        """Best of `tournament_size` uniform draws with replacement.

        Ties go to the competitor drawn first.
        """

        generator = rng or np.random.default_rng()
        size = max(1, min(tournament_size, population.size))
        indices = generator.integers(0, population.size, size=size)

        best = population.individuals[int(indices[0])]
        for idx in indices[1:]:
            competitor = population.individuals[int(idx)]
            if competitor.fitness > best.fitness:
                best = competitor
        return best

    @staticmethod
    def select(
        population: Population,
        strategy: SelectionStrategy,
        rng: Generator,
        tournament_size: int = 3,
    ) -> Individual:
        """Dispatch on the configured strategy."""

        if strategy is SelectionStrategy.ROULETTE:
            return Selection.roulette_select(population, rng)
        return Selection.tournament_select(population, tournament_size, rng)

    @staticmethod
    def select_parents(
        population: Population,
        strategy: SelectionStrategy,
        rng: Generator,
        tournament_size: int = 3,
    ) -> tuple[Individual, Individual]:
        """Two independently selected parents."""

        return (
            Selection.select(population, strategy, rng, tournament_size),
            Selection.select(population, strategy, rng, tournament_size),
        )

    @staticmethod
    def get_elites(population: Population, elite_count: int) -> list[Individual]:
        """Independent copies of the top elite_count individuals, best first."""

        return [ind.clone() for ind in population.top(elite_count)]
