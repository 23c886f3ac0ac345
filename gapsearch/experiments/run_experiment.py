"""CLI experiment runner with organized directory structure."""

import argparse
import glob
import json
import shutil
import time
from pathlib import Path
from typing import Dict, Any, Optional

from .run_all import run_all_experiments, DEFAULT_TABU_PARAMS, DEFAULT_THRESHOLD_PARAMS


def setup_experiment(
    instances_source: str,
    experiment_name: Optional[str] = None,
    copy_instances: bool = True,
    base_dir: str = 'experiments',
) -> tuple[Path, Path]:
    """
    Set up experiment directories.

    Args:
        instances_source: Path to source instances (directory, glob pattern, or single file)
        experiment_name: Name for experiment (default: based on source)
        copy_instances: If True, copy instances to experiment directory
        base_dir: Root directory holding all experiments

    Returns:
        Tuple of (instances_dir, output_dir)
    """
    source_path = Path(instances_source)

    if source_path.is_file() and source_path.suffix == '.json':
        instance_files = [str(source_path)]
        base_name = source_path.stem
    elif source_path.is_dir():
        instance_files = glob.glob(str(source_path / '*.json'))
        base_name = source_path.name
    elif '*' in instances_source:
        instance_files = glob.glob(instances_source)
        base_name = instances_source.replace('*', '').replace('/', '_').replace('\\', '_').strip('_')
        if not base_name:
            base_name = 'filtered'
    else:
        raise ValueError(f"Invalid instances source: {instances_source}")

    if not instance_files:
        raise ValueError(f"No instance files found matching: {instances_source}")

    if experiment_name is None:
        experiment_name = base_name

    experiment_dir = Path(base_dir) / experiment_name
    instances_dir = experiment_dir / 'instances'
    output_dir = experiment_dir / 'results'

    output_dir.mkdir(parents=True, exist_ok=True)

    if not copy_instances and source_path.is_dir():
        # Use source directory directly (only works for directory input)
        instances_dir = source_path
    else:
        instances_dir.mkdir(parents=True, exist_ok=True)
        for src_file in instance_files:
            shutil.copy2(src_file, instances_dir / Path(src_file).name)
        print(f"Copied {len(instance_files)} instances to {instances_dir}")

    return instances_dir, output_dir


def load_params(filepath: Optional[str]) -> Dict[str, Dict[str, Any]]:
    """
    Load algorithm parameters from a JSON file.

    The file may hold a "tabu" and/or a "threshold" object whose keys are the
    engine keyword arguments, e.g. {"tabu": {"max_iters": 2000}}.
    """
    if filepath is None:
        return {}
    with open(filepath, 'r') as f:
        data = json.load(f)
    unknown = set(data) - {'tabu', 'threshold'}
    if unknown:
        raise ValueError(f"Unknown parameter sections in {filepath}: {sorted(unknown)}")
    return data


def main():
    """CLI entry point for running experiments."""
    parser = argparse.ArgumentParser(
        description='Run GAP local-search experiments on instances',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run on all instances in a directory
  python -m gapsearch.experiments.run_experiment instances/ --name baseline

  # Run on a glob of instances with custom parameters
  python -m gapsearch.experiments.run_experiment "instances/medium_*.json" --name medium \\
    --tabu-iters 2000 --tabu-size 100 --tabu-multiplier 10 \\
    --ta-batch 2000 --ta-cooling 0.95 --ta-epsilon 1e-5 --no-mip
        """
    )

    parser.add_argument(
        'instances',
        type=str,
        help='Path to instances: directory, glob pattern (e.g., "instances/medium_*.json"), or single file'
    )
    parser.add_argument('--name', type=str, default=None,
                        help='Experiment name (default: based on source)')
    parser.add_argument('--no-copy', action='store_true',
                        help='Do not copy instances (use source directory directly)')
    parser.add_argument('--params', type=str, default=None,
                        help='JSON file with "tabu" / "threshold" parameter sections')
    parser.add_argument('--seed', type=int, default=42, help='Random seed (default: 42)')

    # Tabu parameters
    parser.add_argument('--tabu-iters', type=int, default=DEFAULT_TABU_PARAMS['max_iters'],
                        help=f"Tabu iterations (default: {DEFAULT_TABU_PARAMS['max_iters']})")
    parser.add_argument('--tabu-size', type=int, default=DEFAULT_TABU_PARAMS['tabu_size'],
                        help=f"Tabu list size (default: {DEFAULT_TABU_PARAMS['tabu_size']})")
    parser.add_argument('--tabu-multiplier', type=int, default=DEFAULT_TABU_PARAMS['neighbor_multiplier'],
                        help='Neighbor pairs per task and iteration '
                             f"(default: {DEFAULT_TABU_PARAMS['neighbor_multiplier']})")

    # Threshold Accepting parameters
    parser.add_argument('--ta-batch', type=int, default=DEFAULT_THRESHOLD_PARAMS['batch_size'],
                        help=f"Accepted moves per batch (default: {DEFAULT_THRESHOLD_PARAMS['batch_size']})")
    parser.add_argument('--ta-cooling', type=float, default=DEFAULT_THRESHOLD_PARAMS['cooling'],
                        help=f"Cooling factor (default: {DEFAULT_THRESHOLD_PARAMS['cooling']})")
    parser.add_argument('--ta-epsilon', type=float, default=DEFAULT_THRESHOLD_PARAMS['epsilon'],
                        help=f"Final temperature / tolerance (default: {DEFAULT_THRESHOLD_PARAMS['epsilon']})")
    parser.add_argument('--ta-acceptance', type=float, default=DEFAULT_THRESHOLD_PARAMS['target_acceptance'],
                        help='Target acceptance ratio for T0 calibration '
                             f"(default: {DEFAULT_THRESHOLD_PARAMS['target_acceptance']})")
    parser.add_argument('--ta-baseline', choices=['initial', 'chain'],
                        default=DEFAULT_THRESHOLD_PARAMS['acceptance_baseline'],
                        help='Calibration acceptance baseline (default: initial)')

    parser.add_argument('--time-limit', type=float, default=None,
                        help='Per-run time limit in seconds for each local search')

    # MIP parameters
    parser.add_argument('--no-mip', action='store_true', help='Skip the exact MIP reference solver')
    parser.add_argument('--mip-time', type=float, default=60.0,
                        help='MIP max time limit in seconds (default: 60.0)')
    parser.add_argument('--no-plots', action='store_true', help='Do not write plots')

    args = parser.parse_args()

    print(f"\n{'='*70}")
    print(f"Setting up experiment: {args.name or 'unnamed'}")
    print(f"{'='*70}")

    instances_dir, output_dir = setup_experiment(
        args.instances,
        experiment_name=args.name,
        copy_instances=not args.no_copy
    )

    print(f"Instances directory: {instances_dir}")
    print(f"Results directory: {output_dir}")

    tabu_params = {
        'max_iters': args.tabu_iters,
        'tabu_size': args.tabu_size,
        'neighbor_multiplier': args.tabu_multiplier,
        'time_limit': args.time_limit,
    }
    threshold_params = {
        'batch_size': args.ta_batch,
        'cooling': args.ta_cooling,
        'epsilon': args.ta_epsilon,
        'target_acceptance': args.ta_acceptance,
        'acceptance_baseline': args.ta_baseline,
        'time_limit': args.time_limit,
    }
    file_params = load_params(args.params)
    tabu_params.update(file_params.get('tabu', {}))
    threshold_params.update(file_params.get('threshold', {}))

    print("\nAlgorithm parameters:")
    print(f"  Tabu: {tabu_params}")
    print(f"  Threshold: {threshold_params}")
    print(f"  MIP: {'off' if args.no_mip else f'max_time={args.mip_time}s'}")

    print(f"\n{'='*70}")
    print("Running experiments...")
    print(f"{'='*70}\n")

    start_time = time.time()

    run_all_experiments(
        instances_dir=str(instances_dir),
        output_dir=str(output_dir),
        tabu_params=tabu_params,
        threshold_params=threshold_params,
        include_mip=not args.no_mip,
        mip_max_time=args.mip_time,
        seed=args.seed,
        make_plots=not args.no_plots,
    )

    elapsed = time.time() - start_time

    print(f"\n{'='*70}")
    print("Experiment complete!")
    print(f"Total time: {elapsed:.1f} seconds ({elapsed/60:.1f} minutes)")
    print(f"Results saved to: {output_dir}")
    print(f"{'='*70}")


if __name__ == '__main__':
    main()
