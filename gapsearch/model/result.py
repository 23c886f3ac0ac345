"""Search result data structure."""

from dataclasses import dataclass, field
from typing import List
import numpy as np


@dataclass
class SearchResult:
    """
    Results from a local-search run.

    Attributes:
        algorithm: Name of the strategy that produced the result ('tabu', 'threshold')
        best_cost: Cost of the best solution found
        best_assignment: Agent id per task of the best solution, shape (N,)
        feasible: Whether the best solution respects all capacities

        cost_log: Best cost after each iteration (Tabu) or batch (Threshold Accepting)
            Non-increasing by construction
        iterations: Number of iterations (Tabu) or batches (Threshold Accepting) executed
        runtime: Wall-clock seconds spent in run()
    """
    algorithm: str
    best_cost: float
    best_assignment: np.ndarray
    feasible: bool

    cost_log: List[float] = field(default_factory=list)
    iterations: int = 0
    runtime: float = 0.0
