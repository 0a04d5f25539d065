"""Genetic operators: crossover and mutation."""

from __future__ import annotations

import numpy as np
from numpy.random import Generator

from gaforge.config import CrossoverMethod
from gaforge.evolution.genome import Genome, PermutationGenome, RealGenome


class GeneticOperators:
    """Crossover and mutation per genome representation.

    Operators never modify their inputs; children are new genomes.
    """

    # --- crossover -------------------------------------------------------

    @staticmethod
    def arithmetic_crossover(
        parent1: RealGenome,
        parent2: RealGenome,
        rng: Generator | None = None,
        alpha: float | None = None,
    ) -> tuple[RealGenome, RealGenome]:
        """Blend crossover with one coefficient per event."""

        _check_lengths(parent1, parent2)
        if alpha is None:
            generator = rng or np.random.default_rng()
            alpha = float(generator.random())
        if not 0.0 <= alpha <= 1.0:
            raise ValueError(f"alpha must be in [0, 1], got {alpha}")

        child1_genes = alpha * parent1.genes + (1.0 - alpha) * parent2.genes
        child2_genes = (1.0 - alpha) * parent1.genes + alpha * parent2.genes
        return parent1.with_genes(child1_genes), parent1.with_genes(child2_genes)

    @staticmethod
    def order_crossover_child(
        parent_a: np.ndarray,
        parent_b: np.ndarray,
        start: int,
        end: int,
    ) -> np.ndarray:
        """OX child: parent_a's [start, end] kept in place, the rest in parent_b's order.

        Parent B is scanned from end+1 with wrap-around; values already in the
        kept segment are skipped and the others are written from end+1 onward,
        also wrapping.
        """

        length = len(parent_a)
        if not 0 <= start <= end < length:
            raise ValueError(f"invalid cut points ({start}, {end}) for length {length}")

        child = np.full(length, -1, dtype=np.int64)
        child[start : end + 1] = parent_a[start : end + 1]
        kept = set(child[start : end + 1].tolist())

        write = (end + 1) % length
        for offset in range(length):
            candidate = int(parent_b[(end + 1 + offset) % length])
            if candidate in kept:
                continue
            child[write] = candidate
            kept.add(candidate)
            write = (write + 1) % length
        return child

    @staticmethod
    def order_crossover(
        parent1: PermutationGenome,
        parent2: PermutationGenome,
        rng: Generator | None = None,
        cut_points: tuple[int, int] | None = None,
    ) -> tuple[PermutationGenome, PermutationGenome]:
        """Order crossover (OX); both children share the cut points."""

        _check_lengths(parent1, parent2)
        start, end = _cut_points(len(parent1), rng, cut_points)
        child1 = GeneticOperators.order_crossover_child(
            parent1.genes, parent2.genes, start, end
        )
        child2 = GeneticOperators.order_crossover_child(
            parent2.genes, parent1.genes, start, end
        )
        return PermutationGenome(child1), PermutationGenome(child2)

    @staticmethod
    def fixed_point_crossover(
        parent1: RealGenome,
        parent2: RealGenome,
        rng: Generator | None = None,
        num_points: int = 1,
        cut_points: tuple[int, ...] | None = None,
    ) -> tuple[RealGenome, RealGenome]:
        """One- or two-point crossover swapping gene segments.

        One point k: child1 = p1[:k] + p2[k:]. Two points: the segment
        [start, end] is exchanged between the parents.
        """

        if isinstance(parent1, PermutationGenome) or isinstance(
            parent2, PermutationGenome
        ):
            raise ValueError("fixed-point crossover breaks permutation genomes")
        _check_lengths(parent1, parent2)
        length = len(parent1)
        generator = rng or np.random.default_rng()

        child1_genes = parent1.genes.copy()
        child2_genes = parent2.genes.copy()
        if num_points == 1:
            if cut_points is None:
                cut = int(generator.integers(0, length))
            else:
                (cut,) = cut_points
            if not 0 <= cut <= length:
                raise ValueError(f"invalid cut point {cut} for length {length}")
            child1_genes[cut:] = parent2.genes[cut:]
            child2_genes[cut:] = parent1.genes[cut:]
        elif num_points == 2:
            start, end = _cut_points(length, generator, cut_points)
            child1_genes[start : end + 1] = parent2.genes[start : end + 1]
            child2_genes[start : end + 1] = parent1.genes[start : end + 1]
        else:
            raise ValueError(f"num_points must be 1 or 2, got {num_points}")

        return parent1.with_genes(child1_genes), parent1.with_genes(child2_genes)

    @staticmethod
    def crossover(
        parent1: Genome,
        parent2: Genome,
        method: CrossoverMethod,
        rng: Generator | None = None,
        num_points: int = 1,
    ) -> tuple[Genome, Genome]:
        """Dispatch on the configured crossover method."""

        if method is CrossoverMethod.ORDER:
            return GeneticOperators.order_crossover(parent1, parent2, rng=rng)
        if method is CrossoverMethod.FIXED_POINT:
            return GeneticOperators.fixed_point_crossover(
                parent1, parent2, rng=rng, num_points=num_points
            )
        return GeneticOperators.arithmetic_crossover(parent1, parent2, rng=rng)

    # --- mutation --------------------------------------------------------

    @staticmethod
    def perturbation_mutate(
        genome: RealGenome,
        mutation_rate: float = 0.1,
        mutation_range: float = 0.5,
        rng: Generator | None = None,
    ) -> RealGenome:
        """Add U[-range, range] noise to each gene with probability mutation_rate."""

        generator = rng or np.random.default_rng()
        length = len(genome)
        mask = generator.random(length) < mutation_rate
        if not mask.any():
            return genome.copy()

        noise = generator.uniform(-mutation_range, mutation_range, size=length)
        genes = np.where(mask, genome.genes + noise, genome.genes)
        # with_genes clips into the feasible domain.
        return genome.with_genes(genes)

    @staticmethod
    def swap_mutate(
        genome: PermutationGenome,
        mutation_rate: float = 0.1,
        rng: Generator | None = None,
    ) -> PermutationGenome:
        """Swap each position, with probability mutation_rate, with another position."""

        generator = rng or np.random.default_rng()
        genes = genome.genes.copy()
        length = len(genes)
        if length < 2:
            return genome.copy()

        mask = generator.random(length) < mutation_rate
        for i in np.flatnonzero(mask):
            # Uniform over the other length - 1 positions.
            j = int(generator.integers(0, length - 1))
            if j >= i:
                j += 1
            genes[i], genes[j] = genes[j], genes[i]
        return PermutationGenome(genes)

    @staticmethod
    def mutate(
        genome: Genome,
        mutation_rate: float,
        rng: Generator | None = None,
        mutation_range: float = 0.5,
    ) -> Genome:
        """Dispatch on the genome representation."""

        if isinstance(genome, PermutationGenome):
            return GeneticOperators.swap_mutate(genome, mutation_rate, rng=rng)
        return GeneticOperators.perturbation_mutate(
            genome, mutation_rate, mutation_range, rng=rng
        )


def _check_lengths(parent1: Genome, parent2: Genome) -> None:
    if len(parent1) != len(parent2):
        raise ValueError(
            f"parents differ in length: {len(parent1)} vs {len(parent2)}"
        )


def _cut_points(
    length: int,
    rng: Generator | None,
    cut_points: tuple[int, ...] | None,
) -> tuple[int, int]:
    """Two cut points ordered so that start <= end."""

    if cut_points is None:
        generator = rng or np.random.default_rng()
        first, second = (int(p) for p in generator.integers(0, length, size=2))
    else:
        first, second = cut_points
    start, end = min(first, second), max(first, second)
    if not 0 <= start <= end < length:
        raise ValueError(f"invalid cut points ({start}, {end}) for length {length}")
    return start, end
