"""Evolution module: genomes, populations, selection and operators."""

from __future__ import annotations

__all__ = [
    "genome",
    "individual",
    "fitness",
    "population",
    "selection",
    "operators",
]
