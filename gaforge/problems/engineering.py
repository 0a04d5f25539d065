"""Engineering design: linear benefit minus a quadratic penalty."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

import numpy as np

from gaforge.config import GAConfig, GenomeKind


@dataclass(frozen=True, eq=False)
class EngineeringDesignProblem:
    """Fitness = sum(b_i * x_i) - c * sum(x_i ** 2) over non-negative x.

    The optimum is x_i = b_i / (2c). Fitness can be negative, so use tournament
    selection (roulette falls back to uniform picks on negative values).
    """

    benefit_coefficients: np.ndarray
    penalty_coefficient: float

    KIND: ClassVar[GenomeKind] = GenomeKind.REAL

    def __post_init__(self) -> None:
        coefficients = np.array(self.benefit_coefficients, dtype=np.float64)
        if coefficients.ndim != 1 or coefficients.size == 0:
            raise ValueError("benefit_coefficients must be a non-empty vector")
        object.__setattr__(self, "benefit_coefficients", coefficients)

    @property
    def genome_length(self) -> int:
        return int(self.benefit_coefficients.size)

    def optimum(self) -> np.ndarray:
        return np.maximum(0.0, self.benefit_coefficients / (2.0 * self.penalty_coefficient))

    def __call__(self, genes: np.ndarray) -> float:
        x = np.maximum(0.0, np.asarray(genes, dtype=np.float64))
        benefit = float(np.dot(self.benefit_coefficients, x))
        penalty = float(np.dot(x, x))
        return benefit - self.penalty_coefficient * penalty

    def default_config(self, **overrides) -> GAConfig:
        return GAConfig(
            genome_kind=self.KIND,
            genome_length=self.genome_length,
            mutation_rate=0.1,
            tournament_size=5,
            max_generations=100,
            mutation_range=0.5,
            init_low=0.0,
            init_high=10.0,
        ).with_overrides(**overrides)


DEMO_DESIGN = EngineeringDesignProblem(
    benefit_coefficients=np.array([5.0, 3.0, 8.0]),
    penalty_coefficient=0.5,
)
