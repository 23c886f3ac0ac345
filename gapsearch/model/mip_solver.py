"""Exact MIP solver for small instances."""

import numpy as np
import pulp
from typing import Tuple, Optional

from .instance import Instance


def solve_exact(instance: Instance, time_limit: Optional[float] = 60.0) -> Tuple[Optional[float], Optional[np.ndarray]]:
    """
    Solve a GAP instance to optimality using MIP.

    Uses PuLP with the bundled CBC solver on the standard binary formulation:
    x[i, a] = 1 iff task i goes to agent a, every task assigned once, agent
    loads within capacity. If the time limit is exceeded or no feasible
    assignment exists, returns None to signal that no reference value is
    available.

    Args:
        instance: Problem instance
        time_limit: Time limit in seconds (default: 60 seconds)

    Returns:
        Tuple of (optimal_cost, optimal_assignment)
        Returns (None, None) if time limit exceeded, infeasible, or solver failed
    """
    if time_limit is None:
        time_limit = 60.0

    N = instance.num_tasks
    M = instance.num_agents

    if N == 0:
        return 0.0, np.zeros(0, dtype=np.int64)

    prob = pulp.LpProblem("GeneralizedAssignment", pulp.LpMinimize)

    # Decision variables x[i, a]
    x = {}
    for i in range(N):
        for a in range(M):
            x[i, a] = pulp.LpVariable(f"x_{i}_{a}", cat='Binary')

    # Objective: total assignment cost
    prob += pulp.lpSum([instance.cost[i, a] * x[i, a] for i in range(N) for a in range(M)])

    # Each task assigned exactly once
    for i in range(N):
        prob += pulp.lpSum([x[i, a] for a in range(M)]) == 1

    # Agent capacity
    for a in range(M):
        prob += (
            pulp.lpSum([instance.resource[i, a] * x[i, a] for i in range(N)]) <=
            instance.capacity[a]
        )

    prob.solve(pulp.PULP_CBC_CMD(timeLimit=time_limit, msg=0))

    if prob.status == pulp.LpStatusNotSolved:
        print(f"Warning: MIP solver did not solve within time limit ({time_limit}s) "
              f"for instance (N={N}, M={M})")
        return None, None
    elif prob.status != pulp.LpStatusOptimal:
        print(f"Warning: MIP solver status: {pulp.LpStatus[prob.status]} "
              f"for instance (N={N}, M={M})")
        return None, None

    optimal_cost = pulp.value(prob.objective)
    if optimal_cost is None:
        print("Warning: MIP solver returned None objective value")
        return None, None

    optimal_assignment = np.zeros(N, dtype=np.int64)
    for i in range(N):
        values = [pulp.value(x[i, a]) or 0.0 for a in range(M)]
        optimal_assignment[i] = int(np.argmax(values))

    return float(optimal_cost), optimal_assignment
