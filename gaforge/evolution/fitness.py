"""Fitness evaluation for a generation."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Protocol

import numpy as np

from gaforge.evolution.individual import Individual


class FitnessEvaluator(Protocol):
    """Pure mapping from genes to a real fitness, higher is better."""

    def __call__(self, genes: np.ndarray) -> float: ...


def evaluate_individuals(
    individuals: Iterable[Individual],
    fitness_fn: FitnessEvaluator,
    workers: int = 1,
) -> int:
    """Evaluate every individual without a valid fitness.

    With ``workers > 1`` evaluations run on a thread pool; the call returns only
    after all of them have finished. Returns the number of evaluations.
    """

    pending = [ind for ind in individuals if not ind.is_evaluated]
    if not pending:
        return 0

    if workers <= 1 or len(pending) == 1:
        for individual in pending:
            individual.evaluate(fitness_fn)
        return len(pending)

    with ThreadPoolExecutor(max_workers=workers) as executor:
        # list() drains the iterator so worker exceptions propagate here.
        list(executor.map(lambda ind: ind.evaluate(fitness_fn), pending))
    return len(pending)
