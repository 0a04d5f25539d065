"""Run the genetic algorithm on one of the demo problems."""

from __future__ import annotations

import argparse
from pathlib import Path

from gaforge.config import GAConfig
from gaforge.core.engine import GeneticAlgorithm
from gaforge.monitoring.fitness_log import FitnessLog
from gaforge.problems import DEMO_CITIES, DEMO_DESIGN, DEMO_PORTFOLIO, TSPProblem

PROBLEMS = {
    "tsp": TSPProblem(DEMO_CITIES),
    "engineering": DEMO_DESIGN,
    "portfolio": DEMO_PORTFOLIO,
}


def main() -> None:
    parser = argparse.ArgumentParser(description="Run a genetic algorithm demo")
    parser.add_argument("problem", choices=sorted(PROBLEMS))
    parser.add_argument("--population", type=int, default=None)
    parser.add_argument("--generations", type=int, default=None)
    parser.add_argument("--mutation-rate", type=float, default=None)
    parser.add_argument("--crossover-rate", type=float, default=None)
    parser.add_argument("--tournament-size", type=int, default=None)
    parser.add_argument("--elitism", type=int, default=None)
    parser.add_argument(
        "--selection", choices=["roulette", "tournament"], default=None
    )
    parser.add_argument("--workers", type=int, default=None)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--verbose", action="store_true")
    parser.add_argument("--output-dir", type=str, default=None)
    args = parser.parse_args()

    problem = PROBLEMS[args.problem]
    overrides = {
        "population_size": args.population,
        "max_generations": args.generations,
        "mutation_rate": args.mutation_rate,
        "crossover_rate": args.crossover_rate,
        "tournament_size": args.tournament_size,
        "elitism_count": args.elitism,
        "selection_strategy": args.selection,
        "workers": args.workers,
    }
    config = problem.default_config(
        seed=args.seed,
        verbose=args.verbose,
        **{key: value for key, value in overrides.items() if value is not None},
    )

    log = FitnessLog()
    engine = GeneticAlgorithm(config, problem, fitness_log=log)
    best = engine.run()

    print("\n" + "=" * 60)
    print(f"Problem: {args.problem}")
    print("=" * 60)
    print(f"  Generations:  {engine.generation}")
    print(f"  Best Fitness: {best.fitness:.6f}")
    if args.problem == "tsp":
        print(f"  Route:        {' -> '.join(str(i) for i in best.genes)}")
        print(f"  Length:       {problem.route_length(best.genes):.3f}")
    elif args.problem == "portfolio":
        weights = problem.normalize(best.genes)
        for i, weight in enumerate(weights):
            print(f"  Asset {i}:      {weight:.4f}")
    else:
        for i, value in enumerate(best.genes):
            print(f"  x[{i}]:         {value:.4f}")

    if args.output_dir is None:
        GAConfig.create_dirs()
    output_dir = Path(args.output_dir or GAConfig.LOG_DIR)
    log.save_csv(output_dir / f"{args.problem}_fitness.csv")
    log.save(output_dir)
    log.plot_fitness_curve(output_dir)
    print(f"\n  Fitness log written to {output_dir}")


if __name__ == "__main__":
    main()
