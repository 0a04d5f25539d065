"""Travelling salesman: closed-route length over a fixed set of cities."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

import numpy as np

from gaforge.config import GAConfig, GenomeKind

# Keeps 1 / length finite when all cities coincide.
DISTANCE_EPSILON = 1e-6


@dataclass(frozen=True, eq=False)
class TSPProblem:
    """Cities as an (n, 2) coordinate array; genomes are visiting orders."""

    cities: np.ndarray

    KIND: ClassVar[GenomeKind] = GenomeKind.PERMUTATION

    def __post_init__(self) -> None:
        cities = np.array(self.cities, dtype=np.float64)
        if cities.ndim != 2 or cities.shape[1] != 2 or len(cities) < 2:
            raise ValueError(f"cities must have shape (n>=2, 2), got {cities.shape}")
        object.__setattr__(self, "cities", cities)

    @property
    def genome_length(self) -> int:
        return len(self.cities)

    def route_length(self, route) -> float:
        """Total length of the closed tour visiting `route` in order."""
        ordered = self.cities[np.asarray(route, dtype=np.int64)]
        legs = ordered - np.roll(ordered, -1, axis=0)
        return float(np.sum(np.hypot(legs[:, 0], legs[:, 1])))

    def __call__(self, genes: np.ndarray) -> float:
        return 1.0 / (self.route_length(genes) + DISTANCE_EPSILON)

    def default_config(self, **overrides) -> GAConfig:
        return GAConfig(
            genome_kind=self.KIND, genome_length=self.genome_length
        ).with_overrides(**overrides)


DEMO_CITIES = np.array(
    [
        (60.0, 200.0),
        (180.0, 200.0),
        (80.0, 180.0),
        (140.0, 180.0),
        (20.0, 160.0),
        (100.0, 160.0),
        (200.0, 160.0),
        (140.0, 140.0),
        (40.0, 120.0),
        (100.0, 120.0),
        (180.0, 100.0),
        (60.0, 80.0),
        (120.0, 80.0),
        (180.0, 60.0),
        (20.0, 40.0),
        (100.0, 40.0),
        (200.0, 40.0),
        (20.0, 20.0),
        (60.0, 20.0),
        (160.0, 20.0),
    ]
)
