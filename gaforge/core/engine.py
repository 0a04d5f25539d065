"""Generational genetic algorithm engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable

import numpy as np
from numpy.random import Generator

from gaforge.config import GAConfig
from gaforge.evolution.fitness import FitnessEvaluator
from gaforge.evolution.genome import GenomeFactory, genome_factory_from_config
from gaforge.evolution.individual import Individual
from gaforge.evolution.operators import GeneticOperators
from gaforge.evolution.population import Population
from gaforge.evolution.selection import Selection
from gaforge.monitoring.fitness_log import FitnessLog

StopCondition = Callable[[int, Individual], bool]


class EngineState(str, Enum):
    """Lifecycle of an engine run."""

    INIT = "init"
    RUNNING = "running"
    TERMINAL = "terminal"


@dataclass
class GenerationStats:
    """Fitness summary of one ranked generation."""

    generation: int
    best_fitness: float
    avg_fitness: float
    worst_fitness: float
    best_ever_fitness: float


class GeneticAlgorithm:
    """Evaluate, rank, carry elites, reproduce, replace, track the best ever.

    The engine owns a single random generator; every stochastic decision of a
    run is drawn from it, so a fixed ``config.seed`` reproduces a run.
    """

    def __init__(
        self,
        config: GAConfig,
        fitness_fn: FitnessEvaluator | None,
        genome_factory: GenomeFactory | None = None,
        rng: Generator | None = None,
        fitness_log: FitnessLog | None = None,
        stop_condition: StopCondition | None = None,
    ) -> None:
        if fitness_fn is None or not callable(fitness_fn):
            raise ValueError("a callable fitness function must be supplied")
        config.validate()

        self.config = config
        self.fitness_fn = fitness_fn
        self.genome_factory = genome_factory or genome_factory_from_config(config)
        self.rng = rng or np.random.default_rng(config.seed)
        self.fitness_log = fitness_log
        self.stop_condition = stop_condition

        self.state = EngineState.INIT
        self.generation = 0
        self.population: Population | None = None
        self.best_individual: Individual | None = None
        self.stats: list[GenerationStats] = []

    def initialize(self) -> Population:
        """Create, evaluate and rank the seed population."""
        if self.state is not EngineState.INIT:
            raise RuntimeError(f"cannot initialize from state {self.state.value}")

        population = Population.random(
            self.config.population_size, self.genome_factory, self.rng
        )
        genome = population.individuals[0].genome
        if len(genome) != self.config.genome_length:
            raise ValueError(
                f"genome factory produced length {len(genome)}, "
                f"expected {self.config.genome_length}"
            )
        if genome.KIND is not self.config.genome_kind:
            raise ValueError(
                f"genome factory produced {genome.KIND.value} genomes, "
                f"config expects {self.config.genome_kind.value}"
            )

        population.rank(self.fitness_fn, workers=self.config.workers)
        self.population = population
        self.generation = 0
        self.best_individual = population.best().clone()
        self._after_generation()
        self.state = EngineState.RUNNING
        return population

    def step(self) -> GenerationStats:
        """Produce, evaluate and rank one new generation."""
        if self.state is EngineState.INIT:
            self.initialize()
        if self.state is not EngineState.RUNNING:
            raise RuntimeError(f"cannot step from state {self.state.value}")

        next_individuals = self._reproduce()
        self.population.replace(next_individuals)
        # Barrier: every child is evaluated before ranking and selection.
        self.population.rank(self.fitness_fn, workers=self.config.workers)
        self.generation += 1

        current_best = self.population.best()
        if current_best.fitness > self.best_individual.fitness:
            self.best_individual = current_best.clone()

        return self._after_generation()

    def run(self) -> Individual:
        """Run max_generations generations and return the best individual seen."""
        if self.state is EngineState.INIT:
            self.initialize()

        while self.state is EngineState.RUNNING:
            if self.generation >= self.config.max_generations:
                break
            # Stop signal is only honoured between generations.
            if self.stop_condition is not None and self.stop_condition(
                self.generation, self.best_individual
            ):
                break
            self.step()

        self.state = EngineState.TERMINAL
        return self.best_individual

    @property
    def best_fitness(self) -> float:
        if self.best_individual is None:
            raise RuntimeError("engine has not been initialized")
        return self.best_individual.fitness

    def _reproduce(self) -> list[Individual]:
        config = self.config
        population = self.population
        child_generation = self.generation + 1

        new_individuals = Selection.get_elites(population, config.elitism_count)
        for elite in new_individuals:
            elite.generation = child_generation

        method = config.effective_crossover
        while len(new_individuals) < config.population_size:
            parent1, parent2 = Selection.select_parents(
                population,
                config.selection_strategy,
                self.rng,
                tournament_size=config.tournament_size,
            )

            if self.rng.random() < config.crossover_rate:
                child1_genome, child2_genome = GeneticOperators.crossover(
                    parent1.genome,
                    parent2.genome,
                    method,
                    rng=self.rng,
                    num_points=config.crossover_points,
                )
            else:
                child1_genome = parent1.genome.copy()
                child2_genome = parent2.genome.copy()

            child1_genome = GeneticOperators.mutate(
                child1_genome,
                config.mutation_rate,
                rng=self.rng,
                mutation_range=config.mutation_range,
            )
            child2_genome = GeneticOperators.mutate(
                child2_genome,
                config.mutation_rate,
                rng=self.rng,
                mutation_range=config.mutation_range,
            )

            new_individuals.append(
                Individual(
                    child1_genome,
                    generation=child_generation,
                    parent_ids=(parent1.id, parent2.id),
                )
            )
            if len(new_individuals) < config.population_size:
                new_individuals.append(
                    Individual(
                        child2_genome,
                        generation=child_generation,
                        parent_ids=(parent2.id, parent1.id),
                    )
                )

        return new_individuals

    def _after_generation(self) -> GenerationStats:
        population = self.population
        population.record_generation(self.generation)
        history = population.history
        stats = GenerationStats(
            generation=self.generation,
            best_fitness=history.best_fitness[-1],
            avg_fitness=history.avg_fitness[-1],
            worst_fitness=history.worst_fitness[-1],
            best_ever_fitness=self.best_individual.fitness,
        )
        self.stats.append(stats)
        if self.fitness_log is not None:
            self.fitness_log.record(stats.generation, stats.best_fitness)
        if self.config.verbose:
            self._print_generation_summary(stats)
        return stats

    def _print_generation_summary(self, stats: GenerationStats) -> None:
        """Print generational summary."""
        print(
            f"Generation {stats.generation:4d} | "
            f"best {stats.best_fitness:.6f} | "
            f"avg {stats.avg_fitness:.6f} | "
            f"worst {stats.worst_fitness:.6f} | "
            f"best ever {stats.best_ever_fitness:.6f}"
        )
