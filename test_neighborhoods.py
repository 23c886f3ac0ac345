"""Tests for neighborhood generation."""

import numpy as np

from gapsearch.model import Solution, generate_instance
from gapsearch.heuristics import generate_neighbors


def test_neighbor_count_and_interleaving():
    instance, _ = generate_instance(num_tasks=8, num_agents=3, seed=2)
    rng = np.random.default_rng(4)
    solution = Solution(instance, [0, 1, 2, 0, 1, 2, 0, 1])

    for count in (1, 5, 24):
        neighbors = generate_neighbors(solution, count, rng)
        assert len(neighbors) == 2 * count
        for k, neighbor in enumerate(neighbors):
            changed = int(np.sum(neighbor.assignment != solution.assignment))
            # Even positions are swaps (two tasks change), odd are shifts (one task)
            assert changed == (2 if k % 2 == 0 else 1)


def test_generation_leaves_solution_untouched():
    instance, u0 = generate_instance(num_tasks=6, num_agents=2, seed=9)
    solution = Solution(instance, u0)
    before = solution.assignment.copy()
    cost = solution.cost

    generate_neighbors(solution, 10, np.random.default_rng(0))

    assert np.array_equal(solution.assignment, before)
    assert solution.cost == cost


def test_same_seed_reproduces_neighborhood():
    instance, u0 = generate_instance(num_tasks=6, num_agents=3, seed=9)
    solution = Solution(instance, u0)

    first = generate_neighbors(solution, 10, np.random.default_rng(123))
    second = generate_neighbors(solution, 10, np.random.default_rng(123))
    assert first == second


def test_no_deduplication():
    instance, _ = generate_instance(num_tasks=2, num_agents=2, seed=0)
    solution = Solution(instance, [0, 1])
    neighbors = generate_neighbors(solution, 6, np.random.default_rng(0))
    # Only one swap neighbor exists for two tasks on two agents
    swaps = neighbors[0::2]
    assert len(swaps) == 6
    assert all(s == Solution(instance, [1, 0]) for s in swaps)
