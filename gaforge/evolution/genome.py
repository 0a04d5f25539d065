"""Genome representations: real-valued vectors and permutations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, ClassVar

import numpy as np
from numpy.random import Generator

from gaforge.config import GAConfig, GenomeKind


class Genome:
    """Fixed-length gene vector. Subclasses fix the representation."""

    KIND: ClassVar[GenomeKind]
    DTYPE: ClassVar[type] = np.float64

    def __init__(self, genes) -> None:
        arr = np.array(genes, dtype=self.DTYPE)
        if arr.ndim != 1 or arr.size == 0:
            raise ValueError(f"genes must be a non-empty 1-D vector, got {arr.shape}")
        self.genes = arr

    def __len__(self) -> int:
        return int(self.genes.size)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.genes.tolist()})"

    def copy(self) -> "Genome":
        """Deep copy with independent storage."""
        raise NotImplementedError

    def with_genes(self, genes) -> "Genome":
        """New genome of the same kind and domain holding `genes`."""
        raise NotImplementedError


class RealGenome(Genome):
    """Real-valued genome constrained to [lower_bound, upper_bound]."""

    KIND = GenomeKind.REAL
    DTYPE = np.float64

    def __init__(
        self,
        genes,
        lower_bound: float = 0.0,
        upper_bound: float | None = None,
    ) -> None:
        super().__init__(genes)
        self.lower_bound = float(lower_bound)
        self.upper_bound = None if upper_bound is None else float(upper_bound)
        self.genes = self.clip(self.genes)

    def clip(self, genes: np.ndarray) -> np.ndarray:
        """Clamp values into the feasible domain."""
        upper = np.inf if self.upper_bound is None else self.upper_bound
        return np.clip(genes, self.lower_bound, upper)

    @classmethod
    def create(
        cls,
        length: int,
        rng: Generator,
        low: float = 0.0,
        high: float = 10.0,
        lower_bound: float = 0.0,
        upper_bound: float | None = None,
    ) -> "RealGenome":
        """Genes drawn uniformly from [low, high)."""
        if length <= 0:
            raise ValueError(f"length must be positive, got {length}")
        genes = rng.uniform(low, high, size=length)
        return cls(genes, lower_bound=lower_bound, upper_bound=upper_bound)

    def copy(self) -> "RealGenome":
        return RealGenome(self.genes.copy(), self.lower_bound, self.upper_bound)

    def with_genes(self, genes) -> "RealGenome":
        return RealGenome(genes, self.lower_bound, self.upper_bound)


class PermutationGenome(Genome):
    """Permutation of the indices 0..L-1 (e.g. a route order)."""

    KIND = GenomeKind.PERMUTATION
    DTYPE = np.int64

    def __init__(self, genes) -> None:
        super().__init__(genes)
        if not self.is_valid():
            raise ValueError(
                f"genes are not a permutation of 0..{len(self) - 1}: {self.genes.tolist()}"
            )

    @classmethod
    def create(cls, length: int, rng: Generator) -> "PermutationGenome":
        """Uniform random permutation."""
        if length <= 0:
            raise ValueError(f"length must be positive, got {length}")
        return cls(rng.permutation(length))

    def is_valid(self) -> bool:
        """True when the genes are a bijection onto 0..L-1."""
        return is_permutation(self.genes)

    def copy(self) -> "PermutationGenome":
        return PermutationGenome(self.genes.copy())

    def with_genes(self, genes) -> "PermutationGenome":
        return PermutationGenome(genes)


GenomeFactory = Callable[[Generator], Genome]


@dataclass(frozen=True)
class RealGenomeFactory:
    """Produces random real-valued genomes of a fixed length."""

    length: int
    low: float = 0.0
    high: float = 10.0
    lower_bound: float = 0.0
    upper_bound: float | None = None

    def __call__(self, rng: Generator) -> RealGenome:
        return RealGenome.create(
            self.length,
            rng,
            low=self.low,
            high=self.high,
            lower_bound=self.lower_bound,
            upper_bound=self.upper_bound,
        )


@dataclass(frozen=True)
class PermutationGenomeFactory:
    """Produces uniform random permutations of a fixed length."""

    length: int

    def __call__(self, rng: Generator) -> PermutationGenome:
        return PermutationGenome.create(self.length, rng)


def genome_factory_from_config(config: GAConfig) -> GenomeFactory:
    """Default factory for the configured genome kind."""

    if config.genome_kind is GenomeKind.PERMUTATION:
        return PermutationGenomeFactory(config.genome_length)
    return RealGenomeFactory(
        config.genome_length,
        low=config.init_low,
        high=config.init_high,
        lower_bound=config.lower_bound,
        upper_bound=config.upper_bound,
    )


def is_permutation(genes: np.ndarray) -> bool:
    """Check that `genes` holds each of 0..len-1 exactly once."""

    arr = np.asarray(genes)
    if arr.ndim != 1:
        return False
    return bool(np.array_equal(np.sort(arr), np.arange(arr.size)))
