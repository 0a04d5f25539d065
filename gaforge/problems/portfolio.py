"""Portfolio selection: mean-variance objective on normalized weights."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

import numpy as np

from gaforge.config import GAConfig, GenomeKind

WEIGHT_EPSILON = 1e-10


@dataclass(frozen=True, eq=False)
class PortfolioProblem:
    """Genes are raw non-negative asset weights, normalized before scoring."""

    expected_returns: np.ndarray
    covariance: np.ndarray
    risk_aversion: float

    KIND: ClassVar[GenomeKind] = GenomeKind.REAL

    def __post_init__(self) -> None:
        returns = np.array(self.expected_returns, dtype=np.float64)
        covariance = np.array(self.covariance, dtype=np.float64)
        if returns.ndim != 1 or returns.size == 0:
            raise ValueError("expected_returns must be a non-empty vector")
        if covariance.shape != (returns.size, returns.size):
            raise ValueError(
                f"covariance must have shape {(returns.size, returns.size)}, "
                f"got {covariance.shape}"
            )
        object.__setattr__(self, "expected_returns", returns)
        object.__setattr__(self, "covariance", covariance)

    @property
    def genome_length(self) -> int:
        return int(self.expected_returns.size)

    @staticmethod
    def normalize(genes: np.ndarray) -> np.ndarray:
        weights = np.asarray(genes, dtype=np.float64)
        return weights / (weights.sum() + WEIGHT_EPSILON)

    def __call__(self, genes: np.ndarray) -> float:
        weights = self.normalize(genes)
        expected_return = float(weights @ self.expected_returns)
        variance = float(weights @ self.covariance @ weights)
        return expected_return - self.risk_aversion * variance

    def default_config(self, **overrides) -> GAConfig:
        return GAConfig(
            genome_kind=self.KIND,
            genome_length=self.genome_length,
            population_size=100,
            mutation_rate=0.05,
            tournament_size=5,
            max_generations=200,
            mutation_range=0.1,
            init_low=0.0,
            init_high=1.0,
        ).with_overrides(**overrides)


DEMO_PORTFOLIO = PortfolioProblem(
    expected_returns=np.array([0.10, 0.15, 0.12, 0.08, 0.20]),
    covariance=np.array(
        [
            [0.005, 0.001, 0.001, 0.001, 0.001],
            [0.001, 0.040, 0.001, 0.001, 0.001],
            [0.001, 0.001, 0.023, 0.001, 0.001],
            [0.001, 0.001, 0.001, 0.018, 0.001],
            [0.001, 0.001, 0.001, 0.001, 0.030],
        ]
    ),
    risk_aversion=0.5,
)
