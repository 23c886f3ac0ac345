"""Plotting functions for experiment results."""

import matplotlib.pyplot as plt
import pandas as pd
from pathlib import Path
from typing import Dict, List, Optional


def plot_cost_comparison(results_df: pd.DataFrame, output_path: str = 'results/cost_comparison.png'):
    """
    Create boxplot comparing best costs across algorithms.

    Args:
        results_df: DataFrame with columns: algorithm, cost
        output_path: Path to save plot
    """
    if results_df.empty or 'cost' not in results_df.columns:
        print("No cost data to plot")
        return

    plt.figure(figsize=(10, 6))
    results_df.boxplot(column='cost', by='algorithm', ax=plt.gca())
    plt.ylabel('Total Cost')
    plt.title('Cost Comparison Across Algorithms')
    plt.suptitle('')  # Remove default title
    plt.xticks(rotation=45)
    plt.tight_layout()

    Path(output_path).parent.mkdir(exist_ok=True, parents=True)
    plt.savefig(output_path)
    plt.close()
    print(f"Saved plot to {output_path}")


def plot_runtime_comparison(results_df: pd.DataFrame, output_path: str = 'results/runtime_comparison.png'):
    """
    Compare mean runtime across algorithms.

    Args:
        results_df: DataFrame with columns: algorithm, runtime
        output_path: Path to save plot
    """
    if results_df.empty or 'runtime' not in results_df.columns:
        print("No runtime data to plot")
        return

    plt.figure(figsize=(10, 6))
    results_df.groupby('algorithm')['runtime'].mean().plot(kind='bar')
    plt.ylabel('Runtime (seconds)')
    plt.title('Runtime Comparison')
    plt.xticks(rotation=45)
    plt.yscale('log')  # Log scale for better visualization
    plt.tight_layout()

    Path(output_path).parent.mkdir(exist_ok=True, parents=True)
    plt.savefig(output_path)
    plt.close()
    print(f"Saved plot to {output_path}")


def plot_feasibility_rate(results_df: pd.DataFrame, output_path: str = 'results/feasibility.png'):
    """
    Share of instances on which each algorithm ended with a feasible assignment.

    Args:
        results_df: DataFrame with columns: algorithm, feasible
        output_path: Path to save plot
    """
    if results_df.empty or 'feasible' not in results_df.columns:
        print("No feasibility data to plot")
        return

    plt.figure(figsize=(10, 6))
    results_df.groupby('algorithm')['feasible'].mean().plot(kind='bar')
    plt.ylabel('Feasible Share')
    plt.title('Feasibility Rate by Algorithm')
    plt.xticks(rotation=45)
    plt.ylim([0, 1])
    plt.tight_layout()

    Path(output_path).parent.mkdir(exist_ok=True, parents=True)
    plt.savefig(output_path)
    plt.close()
    print(f"Saved plot to {output_path}")


def plot_convergence(cost_logs: Dict[str, List[float]], output_path: str = 'results/convergence.png',
                     title: Optional[str] = None):
    """
    Plot best-cost trajectories of the local-search runs.

    The x axis is the log index (iteration for Tabu, batch for Threshold
    Accepting), normalised to [0, 1] so both strategies share one axis.

    Args:
        cost_logs: Dictionary mapping algorithm name to its cost log
        output_path: Path to save plot
        title: Optional plot title
    """
    cost_logs = {name: log for name, log in cost_logs.items() if log}
    if not cost_logs:
        print("No convergence data to plot")
        return

    plt.figure(figsize=(10, 6))
    for name, log in cost_logs.items():
        n = len(log)
        xs = [k / max(1, n - 1) for k in range(n)]
        plt.plot(xs, log, label=name)
    plt.xlabel('Search progress (fraction of run)')
    plt.ylabel('Best Cost')
    plt.title(title or 'Best-Cost Convergence')
    plt.legend(title='Algorithm')
    plt.tight_layout()

    Path(output_path).parent.mkdir(exist_ok=True, parents=True)
    plt.savefig(output_path)
    plt.close()
    print(f"Saved plot to {output_path}")


def create_all_plots(results_df: pd.DataFrame, output_dir: str = 'results'):
    """
    Create all summary plots from a results DataFrame.

    Args:
        results_df: DataFrame with structured results
        output_dir: Directory to save plots
    """
    Path(output_dir).mkdir(exist_ok=True, parents=True)

    plot_cost_comparison(results_df, f'{output_dir}/cost_comparison.png')
    plot_runtime_comparison(results_df, f'{output_dir}/runtime_comparison.png')
    plot_feasibility_rate(results_df, f'{output_dir}/feasibility.png')
