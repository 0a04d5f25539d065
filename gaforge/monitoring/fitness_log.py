"""Append-only log of per-generation best fitness."""

from __future__ import annotations

import csv
import json
from pathlib import Path

import matplotlib.pyplot as plt


class FitnessLog:
    """Collects (generation, best_fitness) records emitted by the engine."""

    def __init__(self) -> None:
        self.history: dict[str, list] = {
            "generation": [],
            "best_fitness": [],
        }

    def __len__(self) -> int:
        return len(self.history["generation"])

    def record(self, generation: int, best_fitness: float) -> None:
        """Append one record."""
        self.history["generation"].append(int(generation))
        self.history["best_fitness"].append(float(best_fitness))

    def records(self) -> list[tuple[int, float]]:
        return list(zip(self.history["generation"], self.history["best_fitness"]))

    def save_csv(self, path: str | Path) -> Path:
        """Write `generation,best_fitness` lines, one per generation."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            writer = csv.writer(f)
            for generation, best in self.records():
                writer.writerow([generation, best])
        return path

    def save(self, output_dir: str | Path) -> Path:
        """Save history to JSON."""
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        path = output_dir / "fitness_history.json"
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.history, f, indent=2)
        return path

    @classmethod
    def load(cls, path: str | Path) -> "FitnessLog":
        """Load a history written by save()."""
        with open(path, "r", encoding="utf-8") as f:
            payload = json.load(f)
        log = cls()
        for generation, best in zip(payload["generation"], payload["best_fitness"]):
            log.record(generation, best)
        return log

    def plot_fitness_curve(self, output_dir: str | Path) -> Path | None:
        """Plot best fitness per generation."""
        if not self.history["generation"]:
            return None
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        fig, ax = plt.subplots(figsize=(10, 5))
        ax.plot(self.history["generation"], self.history["best_fitness"], label="Best")
        ax.set_xlabel("Generation")
        ax.set_ylabel("Fitness")
        ax.set_title("Best Fitness per Generation")
        ax.legend()
        path = output_dir / "fitness_curve.png"
        plt.tight_layout()
        plt.savefig(path, dpi=150)
        plt.close(fig)
        return path
