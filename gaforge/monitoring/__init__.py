"""Monitoring module for engine output."""

from __future__ import annotations

from gaforge.monitoring.fitness_log import FitnessLog

__all__ = [
    "FitnessLog",
]
