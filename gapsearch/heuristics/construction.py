"""Construction heuristics: greedy regret and random assignment."""

import numpy as np
from typing import Optional

from ..model.instance import Instance


def greedy_constructor(instance: Instance) -> np.ndarray:
    """
    Greedy constructor using cost regret for task priority.

    For each task i, compute regret = second-cheapest cost - cheapest cost.
    Tasks with the largest regret lose the most if they miss their best
    agent, so they are placed first. Each task goes to the cheapest agent
    that still has capacity for it; if no agent has room, it goes to its
    cheapest agent and the assignment becomes infeasible.

    Args:
        instance: Problem instance

    Returns:
        Assignment, agent id per task, shape (N,)
    """
    N = instance.num_tasks
    M = instance.num_agents

    assignment = np.zeros(N, dtype=np.int64)
    if N == 0:
        return assignment

    sorted_costs = np.sort(instance.cost, axis=1)
    if M > 1:
        regret = sorted_costs[:, 1] - sorted_costs[:, 0]
    else:
        regret = np.zeros(N)

    # Descending regret, ties by ascending task index
    order = np.lexsort((np.arange(N), -regret))

    remaining = instance.capacity.astype(float).copy()

    for i in order:
        agents_by_cost = np.argsort(instance.cost[i], kind='stable')
        chosen = None
        for a in agents_by_cost:
            if instance.resource[i, a] <= remaining[a]:
                chosen = a
                break
        if chosen is None:
            chosen = agents_by_cost[0]

        assignment[i] = chosen
        remaining[chosen] -= instance.resource[i, chosen]

    return assignment


def random_assignment(instance: Instance, seed: Optional[int] = None) -> np.ndarray:
    """
    Assign every task to a uniformly random agent.

    Args:
        instance: Problem instance
        seed: Random seed for reproducibility

    Returns:
        Assignment, agent id per task, shape (N,)
    """
    rng = np.random.default_rng(seed)
    return rng.integers(instance.num_agents, size=instance.num_tasks).astype(np.int64)
