"""Assignment solution representation and the swap/shift move primitives."""

import numpy as np

from .instance import Instance


class Solution:
    """
    Candidate solution to a GAP instance.

    A Solution is an immutable value object: the assignment array is
    read-only, cost and feasibility are computed once, and every move returns
    a new Solution. Equality and hashing are structural over the assignment,
    which is what tabu membership tests rely on.

    Attributes:
        instance: Problem instance this solution belongs to
        assignment: Agent id per task, shape (N,), read-only
        cost: Total cost (lower is better)
        feasible: True if no agent capacity is exceeded
    """

    __slots__ = ('instance', 'assignment', 'cost', 'feasible', '_key')

    def __init__(self, instance: Instance, assignment):
        assignment = np.array(assignment, dtype=np.int64).reshape(instance.num_tasks)
        if instance.num_tasks > 0:
            assert assignment.min() >= 0 and assignment.max() < instance.num_agents, \
                f"assignment uses agents outside [0, {instance.num_agents})"
        assignment.setflags(write=False)

        self.instance = instance
        self.assignment = assignment
        self.cost, self.feasible = instance.evaluate(assignment)
        self._key = assignment.tobytes()

    def swap_neighbor(self, rng: np.random.Generator) -> 'Solution':
        """
        Exchange the agents of two tasks assigned to different agents.

        Task i is drawn uniformly, then task j uniformly among the tasks whose
        agent differs from i's. If all tasks share one agent, no exchange is
        possible and an equal solution is returned.
        """
        n = self.instance.num_tasks
        if n < 2:
            return self
        i = int(rng.integers(n))
        others = np.flatnonzero(self.assignment != self.assignment[i])
        if others.size == 0:
            return self
        j = int(others[rng.integers(others.size)])

        new_assignment = self.assignment.copy()
        new_assignment[i], new_assignment[j] = self.assignment[j], self.assignment[i]
        return Solution(self.instance, new_assignment)

    def shift_neighbor(self, rng: np.random.Generator) -> 'Solution':
        """
        Move one task to a different agent.

        With a single agent there is nowhere to move and an equal solution is
        returned.
        """
        n = self.instance.num_tasks
        m = self.instance.num_agents
        if n == 0 or m < 2:
            return self
        i = int(rng.integers(n))
        # Draw from the m - 1 other agents
        agent = int(rng.integers(m - 1))
        if agent >= self.assignment[i]:
            agent += 1

        new_assignment = self.assignment.copy()
        new_assignment[i] = agent
        return Solution(self.instance, new_assignment)

    def __eq__(self, other):
        if not isinstance(other, Solution):
            return NotImplemented
        return self._key == other._key

    def __hash__(self):
        return hash(self._key)

    def __str__(self):
        return ", ".join(str(int(a)) for a in self.assignment)

    def __repr__(self):
        return f"Solution(cost={self.cost:.2f}, feasible={self.feasible}, assignment=[{self}])"
