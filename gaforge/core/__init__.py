"""Engine modules."""

from __future__ import annotations

from gaforge.core.engine import EngineState, GenerationStats, GeneticAlgorithm

__all__ = [
    "EngineState",
    "GenerationStats",
    "GeneticAlgorithm",
]
