"""Example problem definitions usable as fitness evaluators."""

from __future__ import annotations

from gaforge.problems.engineering import DEMO_DESIGN, EngineeringDesignProblem
from gaforge.problems.portfolio import DEMO_PORTFOLIO, PortfolioProblem
from gaforge.problems.tsp import DEMO_CITIES, TSPProblem

__all__ = [
    "DEMO_CITIES",
    "DEMO_DESIGN",
    "DEMO_PORTFOLIO",
    "EngineeringDesignProblem",
    "PortfolioProblem",
    "TSPProblem",
]
