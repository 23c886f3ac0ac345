"""Neighborhood generation for local search."""

import numpy as np
from typing import List

from ..model.solution import Solution


def swap_move(solution: Solution, rng: np.random.Generator) -> Solution:
    """Swap move: exchange the agents of two tasks (new solution)."""
    return solution.swap_neighbor(rng)


def shift_move(solution: Solution, rng: np.random.Generator) -> Solution:
    """Shift move: reassign one task to a different agent (new solution)."""
    return solution.shift_neighbor(rng)


def generate_neighbors(solution: Solution, count: int, rng: np.random.Generator) -> List[Solution]:
    """
    Sample a neighborhood of a solution.

    Produces count swap neighbors and count shift neighbors, interleaved as
    (swap, shift) pairs, for 2 * count candidates in total. Candidates are
    neither deduplicated nor checked for feasibility, and solution itself is
    left untouched.

    Args:
        solution: Solution to perturb
        count: Number of (swap, shift) pairs
        rng: Random source shared by the whole run

    Returns:
        List of 2 * count candidate solutions in generation order
    """
    neighbors = []
    for _ in range(count):
        neighbors.append(swap_move(solution, rng))
        neighbors.append(shift_move(solution, rng))
    return neighbors
