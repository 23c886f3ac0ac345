"""Run a *small* experiment using the experiments/<name> layout.

This script:
- Creates a fresh experiment directory under ``experiments/`` with a
  descriptive name encoding the size parameters.
- Generates a few synthetic type-C instances with 5 agents and 20 tasks.
- Saves the instances under ``instances/`` inside the experiment folder.
- Runs all algorithms and stores results under ``results/``.
"""

from pathlib import Path
from datetime import datetime
import argparse

from .run_all import run_all_experiments
from ..model.instance_generator import generate_instance, save_instance


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Run a small experiment (5 agents, 20 tasks) in a fresh experiments/ folder."
    )
    parser.add_argument('--count', type=int, default=3, help='Number of instances (default: 3)')
    parser.add_argument('--tightness', type=float, default=0.8,
                        help='Capacity tightness of generated instances (default: 0.8)')
    parser.add_argument('--no-mip', action='store_true', help='Skip the exact MIP reference solver')
    args = parser.parse_args()

    num_agents = 5
    num_tasks = 20
    size_label = "small"

    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    experiment_name = f"{size_label}_{num_agents}agents_{num_tasks}tasks_{timestamp}"

    experiment_dir = Path('experiments') / experiment_name
    instances_dir = experiment_dir / 'instances'
    results_dir = experiment_dir / 'results'
    instances_dir.mkdir(parents=True, exist_ok=True)
    results_dir.mkdir(parents=True, exist_ok=True)

    for k in range(args.count):
        instance, _ = generate_instance(
            num_tasks=num_tasks,
            num_agents=num_agents,
            seed=42 + k,
            tightness=args.tightness,
        )
        save_instance(instance, str(instances_dir / f"{size_label}_{k:02d}.json"))

    run_all_experiments(
        instances_dir=str(instances_dir),
        output_dir=str(results_dir),
        tabu_params={
            'max_iters': 300,
            'tabu_size': 100,
            'neighbor_multiplier': 10,
            # Hard cap of 1 minute per instance for Tabu
            'time_limit': 60.0,
        },
        threshold_params={
            'batch_size': 500,
            'cooling': 0.9,
            'epsilon': 1e-3,
            'time_limit': 60.0,
        },
        include_mip=not args.no_mip,
        mip_max_time=60.0,
    )


if __name__ == '__main__':
    main()
