"""Tests for population ranking, evaluation and selection."""

from __future__ import annotations

import threading

import numpy as np
import pytest
from numpy.random import Generator

from gaforge.config import SelectionStrategy
from gaforge.evolution.fitness import evaluate_individuals
from gaforge.evolution.genome import RealGenome, RealGenomeFactory
from gaforge.evolution.individual import Individual
from gaforge.evolution.population import Population
from gaforge.evolution.selection import Selection


@pytest.fixture
def rng() -> Generator:
    """Seeded random generator."""

    return np.random.default_rng(seed=7)


def _ranked_population(fitness_values: list[float]) -> Population:
    """Population whose individual i carries genes [i] and fitness_values[i]."""
    individuals = [
        Individual(RealGenome([float(i)]), fitness=value)
        for i, value in enumerate(fitness_values)
    ]
    population = Population(individuals)
    population.rank(lambda genes: 0.0)
    return population


def _gene_sum(genes: np.ndarray) -> float:
    return float(np.sum(genes))


class FixedIndexGenerator:
    """Generator stub returning preset tournament draws."""

    def __init__(self, indices: list[int]) -> None:
        self.indices = np.array(indices)

    def integers(self, low, high=None, size=None):
        return self.indices[:size]


class TestPopulation:
    """Tests for Population."""

    def test_random_population_size(self, rng: Generator) -> None:
        population = Population.random(12, RealGenomeFactory(4), rng)
        assert len(population) == 12
        assert not population.is_ranked

    def test_empty_population_rejected(self) -> None:
        with pytest.raises(ValueError):
            Population([])

    def test_rank_sorts_ascending_and_builds_table(self, rng: Generator) -> None:
        population = Population.random(10, RealGenomeFactory(3), rng)
        population.rank(_gene_sum)

        scores = population.fitness_scores
        assert np.all(np.diff(scores) >= 0)
        assert np.allclose(population.cumulative_fitness, np.cumsum(scores))
        assert population.total_fitness == pytest.approx(scores.sum())
        assert population.best().fitness == scores.max()
        assert population.worst().fitness == scores.min()

    def test_nth_bounds(self) -> None:
        population = _ranked_population([3.0, 1.0, 2.0])
        assert population.nth(0).fitness == 1.0
        assert population.nth(2).fitness == 3.0
        with pytest.raises(IndexError):
            population.nth(3)
        with pytest.raises(IndexError):
            population.nth(-1)

    def test_nth_requires_rank(self, rng: Generator) -> None:
        population = Population.random(4, RealGenomeFactory(2), rng)
        with pytest.raises(RuntimeError):
            population.nth(0)

    def test_top_best_first(self) -> None:
        population = _ranked_population([3.0, 1.0, 5.0, 2.0])
        assert [ind.fitness for ind in population.top(2)] == [5.0, 3.0]
        assert len(population.top(10)) == 4

    def test_rank_only_evaluates_stale(self, rng: Generator) -> None:
        calls = []

        def counting(genes: np.ndarray) -> float:
            calls.append(1)
            return _gene_sum(genes)

        population = Population.random(6, RealGenomeFactory(2), rng)
        population.rank(counting)
        assert len(calls) == 6

        population.rank(counting)
        assert len(calls) == 6

        population.individuals[2].invalidate()
        population.rank(counting)
        assert len(calls) == 7

    def test_replace_keeps_size(self, rng: Generator) -> None:
        population = Population.random(5, RealGenomeFactory(2), rng)
        population.rank(_gene_sum)
        with pytest.raises(ValueError, match="expected 5"):
            population.replace(population.individuals[:4])

        population.replace([ind.clone() for ind in population.individuals])
        assert len(population) == 5
        assert not population.is_ranked

    def test_compute_diversity(self, rng: Generator) -> None:
        population = Population.random(10, RealGenomeFactory(4), rng)
        assert population.compute_diversity() > 0

        same = Population([Individual(RealGenome([1.0, 1.0])) for _ in range(4)])
        assert same.compute_diversity() == 0.0

        pair = Population([Individual(RealGenome([0.0, 0.0])), Individual(RealGenome([3.0, 4.0]))])
        assert pair.compute_diversity() == pytest.approx(5.0)

    def test_record_generation(self) -> None:
        population = _ranked_population([1.0, 2.0, 6.0])
        population.record_generation(0)
        history = population.history
        assert history.generation == [0]
        assert history.best_fitness == [6.0]
        assert history.worst_fitness == [1.0]
        assert history.avg_fitness == [pytest.approx(3.0)]
        assert history.best_genome == [[2.0]]


class TestEvaluation:
    """Tests for batch fitness evaluation."""

    def test_parallel_matches_sequential(self, rng: Generator) -> None:
        factory = RealGenomeFactory(5)
        individuals = [Individual(factory(rng)) for _ in range(30)]
        copies = [ind.clone() for ind in individuals]

        assert evaluate_individuals(individuals, _gene_sum, workers=1) == 30
        assert evaluate_individuals(copies, _gene_sum, workers=4) == 30
        assert [i.fitness for i in individuals] == [c.fitness for c in copies]

    def test_parallel_uses_worker_threads(self, rng: Generator) -> None:
        thread_ids = set()
        lock = threading.Lock()

        def recording(genes: np.ndarray) -> float:
            with lock:
                thread_ids.add(threading.get_ident())
            return _gene_sum(genes)

        individuals = [Individual(RealGenomeFactory(3)(rng)) for _ in range(20)]
        evaluate_individuals(individuals, recording, workers=3)
        assert all(ind.is_evaluated for ind in individuals)
        assert threading.get_ident() not in thread_ids

    def test_skips_evaluated(self) -> None:
        individuals = [Individual(RealGenome([1.0]), fitness=2.0)]
        assert evaluate_individuals(individuals, _gene_sum, workers=4) == 0
        assert individuals[0].fitness == 2.0

    def test_worker_errors_propagate(self, rng: Generator) -> None:
        def failing(genes: np.ndarray) -> float:
            raise ArithmeticError("boom")

        individuals = [Individual(RealGenomeFactory(2)(rng)) for _ in range(4)]
        with pytest.raises(ArithmeticError):
            evaluate_individuals(individuals, failing, workers=2)


class TestSelection:
    """Tests for Selection."""

    def test_roulette_index(self) -> None:
        cumulative = np.array([1.0, 3.0, 6.0, 10.0])
        assert Selection.roulette_index(cumulative, 0.0) == 0
        assert Selection.roulette_index(cumulative, 0.99) == 0
        assert Selection.roulette_index(cumulative, 1.0) == 1
        assert Selection.roulette_index(cumulative, 5.5) == 2
        assert Selection.roulette_index(cumulative, 9.99) == 3
        assert Selection.roulette_index(cumulative, 10.0) == 3

    def test_roulette_frequency_matches_fitness_share(self, rng: Generator) -> None:
        fitness = [1.0, 2.0, 3.0, 4.0]
        population = _ranked_population(fitness)
        trials = 40_000
        counts = {i: 0 for i in range(4)}
        for _ in range(trials):
            picked = Selection.roulette_select(population, rng)
            counts[int(picked.genes[0])] += 1

        total = sum(fitness)
        for i, value in enumerate(fitness):
            assert counts[i] / trials == pytest.approx(value / total, abs=0.01)

    def test_roulette_skips_zero_fitness(self, rng: Generator) -> None:
        population = _ranked_population([0.0, 0.0, 5.0, 0.0, 5.0])
        picked = {int(Selection.roulette_select(population, rng).genes[0]) for _ in range(500)}
        assert picked == {2, 4}

    def test_roulette_all_zero_falls_back_to_uniform(self, rng: Generator) -> None:
        population = _ranked_population([0.0] * 5)
        assert Selection.is_roulette_degenerate(population)
        picked = [int(Selection.roulette_select(population, rng).genes[0]) for _ in range(2000)]
        counts = np.bincount(picked, minlength=5)
        assert np.all(counts > 300)

    def test_roulette_negative_fitness_falls_back(self, rng: Generator) -> None:
        population = _ranked_population([-2.0, 1.0, 4.0])
        assert Selection.is_roulette_degenerate(population)
        picked = {int(Selection.roulette_select(population, rng).genes[0]) for _ in range(300)}
        assert picked == {0, 1, 2}

    def test_roulette_positive_not_degenerate(self) -> None:
        assert not Selection.is_roulette_degenerate(_ranked_population([0.0, 1.0]))

    def test_degenerate_flag_set_by_rank(self) -> None:
        population = _ranked_population([0.0, 0.0])
        assert population.roulette_degenerate

        population.replace([Individual(RealGenome([1.0])), Individual(RealGenome([2.0]))])
        population.rank(_gene_sum)
        assert not population.roulette_degenerate

    def test_roulette_draws_do_not_rescan_scores(
        self, rng: Generator, monkeypatch
    ) -> None:
        population = _ranked_population([1.0, 2.0, 3.0, 4.0])
        scans = []
        original = Population.fitness_scores

        def counting(self) -> np.ndarray:
            scans.append(1)
            return original.fget(self)

        monkeypatch.setattr(Population, "fitness_scores", property(counting))
        for _ in range(50):
            Selection.roulette_select(population, rng)
        assert scans == []

    def test_roulette_requires_rank(self, rng: Generator) -> None:
        population = Population.random(4, RealGenomeFactory(2), rng)
        with pytest.raises(RuntimeError):
            Selection.roulette_select(population, rng)

    def test_tournament_picks_best_of_draws(self) -> None:
        population = _ranked_population([4.0, 1.0, 3.0, 2.0])
        # Ranked order: fitness 1, 2, 3, 4 at positions 0..3.
        picked = Selection.tournament_select(
            population, tournament_size=3, rng=FixedIndexGenerator([0, 2, 1])
        )
        assert picked.fitness == 3.0

    def test_tournament_ties_go_to_first_drawn(self) -> None:
        population = _ranked_population([1.0, 1.0, 1.0])
        picked = Selection.tournament_select(
            population, tournament_size=3, rng=FixedIndexGenerator([2, 0, 1])
        )
        assert picked is population.individuals[2]

    def test_tournament_size_clamped(self, rng: Generator) -> None:
        population = _ranked_population([1.0, 2.0, 3.0])
        picked = Selection.tournament_select(population, tournament_size=50, rng=rng)
        assert picked in population.individuals
        picked = Selection.tournament_select(population, tournament_size=0, rng=rng)
        assert picked in population.individuals

    def test_tournament_pressure(self, rng: Generator) -> None:
        population = _ranked_population(list(np.arange(1.0, 11.0)))
        picks = [
            Selection.tournament_select(population, tournament_size=5, rng=rng).fitness
            for _ in range(2000)
        ]
        uniform = [
            Selection.tournament_select(population, tournament_size=1, rng=rng).fitness
            for _ in range(2000)
        ]
        assert np.mean(picks) > np.mean(uniform) + 2.0

    def test_select_parents_dispatch(self, rng: Generator) -> None:
        population = _ranked_population([1.0, 2.0, 3.0])
        for strategy in SelectionStrategy:
            parent1, parent2 = Selection.select_parents(population, strategy, rng)
            assert parent1 in population.individuals
            assert parent2 in population.individuals

    def test_get_elites_are_copies(self) -> None:
        population = _ranked_population([1.0, 5.0, 3.0])
        elites = Selection.get_elites(population, 2)
        assert [e.fitness for e in elites] == [5.0, 3.0]
        best = population.best()
        assert elites[0] is not best
        assert elites[0].genes is not best.genes
        assert np.array_equal(elites[0].genes, best.genes)
        assert Selection.get_elites(population, 0) == []
