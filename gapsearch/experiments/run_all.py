"""Experimental harness for running all algorithms on instances."""

import time
import json
from pathlib import Path
from typing import Dict, Any, Callable, Tuple, Optional, List
import numpy as np
import pandas as pd

from ..model.instance import Instance
from ..model.instance_generator import load_instance
from ..model.mip_solver import solve_exact
from ..model.solution import Solution
from ..heuristics.construction import greedy_constructor, random_assignment
from ..heuristics.tabu import TabuSearch
from ..heuristics.threshold import ThresholdAccepting
from .plots import create_all_plots, plot_convergence

DEFAULT_TABU_PARAMS = {
    'max_iters': 500,
    'tabu_size': 100,
    'neighbor_multiplier': 10,
    'time_limit': None,
}

DEFAULT_THRESHOLD_PARAMS = {
    'batch_size': 500,
    'epsilon': 1e-3,
    'cooling': 0.9,
    'target_acceptance': 0.9,
    'calibration_trials': 500,
    'acceptance_baseline': 'initial',
    'time_limit': None,
}


def run_all_algorithms_on_instance(
    instance: Instance,
    alg_dict: Dict[str, Callable[..., Tuple[Optional[float], Optional[np.ndarray]]]],
    seed: int = 42
) -> Dict[str, Dict[str, Any]]:
    """
    Run all algorithms on an instance.

    Args:
        instance: Problem instance
        alg_dict: Dictionary mapping algorithm name to function
            Each function takes (instance, seed) and returns (cost, assignment)
        seed: Random seed passed to every algorithm

    Returns:
        Dictionary mapping algorithm name to results
        Each result contains: cost, runtime, feasible, assignment, seed
        or an error entry if the algorithm failed
    """
    results = {}

    for alg_name, alg_func in alg_dict.items():
        try:
            start = time.perf_counter()
            cost, assignment = alg_func(instance, seed)
            runtime = time.perf_counter() - start

            # Handle None returns (e.g., MIP solver timed out)
            if cost is None or assignment is None:
                results[alg_name] = {
                    'error': 'Solver timed out or failed',
                    'cost': None,
                    'runtime': runtime,
                    'skipped': True
                }
                continue

            _, feasible = instance.evaluate(assignment)
            results[alg_name] = {
                'cost': float(cost),
                'runtime': runtime,
                'feasible': bool(feasible),
                'assignment': [int(a) for a in assignment],
                'seed': seed
            }
        except Exception as e:
            print(f"Error running {alg_name}: {e}")
            results[alg_name] = {
                'error': str(e),
                'cost': None,
                'runtime': None
            }

    return results


def save_results(results: Dict[str, Any], filepath: str) -> None:
    """
    Save results to JSON file.

    Args:
        results: Results dictionary
        filepath: Path to save file
    """
    with open(filepath, 'w') as f:
        json.dump(results, f, indent=2)


def load_results(filepath: str) -> Dict[str, Any]:
    """
    Load results from JSON file.

    Args:
        filepath: Path to results file

    Returns:
        Results dictionary
    """
    with open(filepath, 'r') as f:
        return json.load(f)


def build_algorithms(
    tabu_params: Dict[str, Any],
    threshold_params: Dict[str, Any],
    cost_logs: Dict[str, List[float]],
    include_mip: bool = True,
    mip_max_time: float = 60.0,
) -> Dict[str, Callable[..., Tuple[Optional[float], Optional[np.ndarray]]]]:
    """
    Build the algorithm dictionary used by run_all_algorithms_on_instance.

    Both local searches start from the greedy construction. Their cost logs
    are written into cost_logs under the algorithm name for the convergence
    plot.
    """
    def greedy_wrapper(inst, seed):
        u = greedy_constructor(inst)
        cost, _ = inst.evaluate(u)
        return cost, u

    def random_wrapper(inst, seed):
        u = random_assignment(inst, seed=seed)
        cost, _ = inst.evaluate(u)
        return cost, u

    def tabu_wrapper(inst, seed):
        engine = TabuSearch(inst, Solution(inst, greedy_constructor(inst)), seed=seed, **tabu_params)
        engine.run()
        cost_logs['tabu'] = list(engine.cost_log)
        return engine.best_cost(), np.array(engine.best_assignment())

    def threshold_wrapper(inst, seed):
        engine = ThresholdAccepting(inst, Solution(inst, greedy_constructor(inst)), seed=seed, **threshold_params)
        engine.run()
        cost_logs['threshold'] = list(engine.cost_log)
        return engine.best_cost(), np.array(engine.best_assignment())

    def mip_wrapper(inst, seed):
        # Larger instances get more time, capped at mip_max_time
        time_limit = min(10.0 + inst.num_tasks * inst.num_agents * 0.05, mip_max_time)
        return solve_exact(inst, time_limit=time_limit)

    alg_dict = {
        'greedy': greedy_wrapper,
        'random': random_wrapper,
        'tabu': tabu_wrapper,
        'threshold': threshold_wrapper,
    }
    if include_mip:
        alg_dict['mip'] = mip_wrapper
    return alg_dict


def run_all_experiments(
    instances_dir: str,
    output_dir: str,
    tabu_params: Optional[Dict[str, Any]] = None,
    threshold_params: Optional[Dict[str, Any]] = None,
    include_mip: bool = True,
    mip_max_time: float = 60.0,
    seed: int = 42,
    make_plots: bool = True,
) -> Optional[pd.DataFrame]:
    """
    Run all algorithms on all instances and save results.

    Writes, under output_dir:
        <instance>_results.json   per-instance results
        all_results.csv           one row per (instance, algorithm)
        *.png                     summary and convergence plots

    Args:
        instances_dir: Directory containing instance JSON files
        output_dir: Directory to save results
        tabu_params: TabuSearch keyword arguments (defaults: DEFAULT_TABU_PARAMS)
        threshold_params: ThresholdAccepting keyword arguments
            (defaults: DEFAULT_THRESHOLD_PARAMS)
        include_mip: Also run the exact MIP reference solver
        mip_max_time: Maximum time limit for MIP solver in seconds
        seed: Random seed for the randomized algorithms
        make_plots: Write plots next to the CSV summary

    Returns:
        Summary DataFrame, or None if no instances were found
    """
    tabu_params = {**DEFAULT_TABU_PARAMS, **(tabu_params or {})}
    threshold_params = {**DEFAULT_THRESHOLD_PARAMS, **(threshold_params or {})}

    instances_path = Path(instances_dir)
    instance_files = sorted(list(instances_path.glob('*.json')))

    if not instance_files:
        print(f"No instance files found in {instances_dir}")
        return None

    all_results = []
    output_path = Path(output_dir)
    output_path.mkdir(exist_ok=True, parents=True)

    print(f"Running experiments on {len(instance_files)} instances...")

    for instance_file in instance_files:
        print(f"\nProcessing {instance_file.name}...")
        instance = load_instance(str(instance_file))

        cost_logs: Dict[str, List[float]] = {}
        alg_dict = build_algorithms(
            tabu_params, threshold_params, cost_logs,
            include_mip=include_mip, mip_max_time=mip_max_time,
        )
        results = run_all_algorithms_on_instance(instance, alg_dict, seed=seed)

        mip_cost = results.get('mip', {}).get('cost')
        for alg_name in results:
            results[alg_name]['instance'] = instance_file.stem
            results[alg_name]['algorithm'] = alg_name

        save_results(results, str(output_path / f"{instance_file.stem}_results.json"))

        # Collect for summary (skip algorithms that failed or were skipped)
        for alg_name, alg_results in results.items():
            if alg_results.get('cost') is None or alg_results.get('skipped', False):
                continue
            gap = None
            if mip_cost:
                gap = (alg_results['cost'] - mip_cost) / mip_cost
            all_results.append({
                'instance': instance_file.stem,
                'num_tasks': instance.num_tasks,
                'num_agents': instance.num_agents,
                'algorithm': alg_name,
                'cost': alg_results['cost'],
                'feasible': alg_results['feasible'],
                'runtime': alg_results['runtime'],
                'gap_to_mip': gap,
            })
            print(f"  {alg_name:10s} cost={alg_results['cost']:.2f} "
                  f"feasible={alg_results['feasible']} runtime={alg_results['runtime']:.2f}s")

        if make_plots:
            plot_convergence(
                cost_logs,
                str(output_path / f"{instance_file.stem}_convergence.png"),
                title=f"Convergence on {instance_file.stem}",
            )

    df = pd.DataFrame(all_results)
    if not df.empty:
        df.to_csv(output_path / 'all_results.csv', index=False)
        print(f"\nSaved summary to {output_path / 'all_results.csv'}")

        if make_plots:
            print("\nCreating plots...")
            create_all_plots(df, str(output_path))

    print(f"\nExperiments complete! Results saved to {output_dir}/")
    return df
