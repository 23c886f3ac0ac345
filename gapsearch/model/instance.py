"""Instance data structure for the Generalized Assignment Problem."""

from dataclasses import dataclass
from typing import Optional, Tuple
import numpy as np


@dataclass
class Instance:
    """
    Instance parameters for the Generalized Assignment Problem (GAP).

    Every task must be assigned to exactly one agent. Assigning task i to
    agent a costs cost[i, a] and consumes resource[i, a] units of that
    agent's capacity.

    Attributes:
        num_tasks: Number of tasks (N)
        num_agents: Number of agents (M)

        cost: Assignment cost, shape (N, M)
            cost[i, a] = cost of assigning task i to agent a

        capacity: Agent capacity, shape (M,)
            capacity[a] = total resource agent a can absorb

        resource: Resource consumption, shape (N, M) or None
            resource[i, a] = capacity used when task i goes to agent a
            None means every task consumes one unit (capacity counts tasks)

        penalty: Cost added per unit of capacity overload
            0.0 means infeasible assignments are priced by assignment cost only
    """
    num_tasks: int
    num_agents: int

    cost: np.ndarray  # shape (N, M)
    capacity: np.ndarray  # shape (M,)
    resource: Optional[np.ndarray] = None  # shape (N, M)
    penalty: float = 0.0

    def __post_init__(self):
        self.cost = np.asarray(self.cost, dtype=float)
        if self.cost.size == 0:
            self.cost = self.cost.reshape(self.num_tasks, self.num_agents)
        self.capacity = np.asarray(self.capacity, dtype=float)
        if self.resource is None:
            self.resource = np.ones((self.num_tasks, self.num_agents), dtype=float)
        else:
            self.resource = np.asarray(self.resource, dtype=float)

    def validate(self) -> None:
        """
        Validate that all arrays have correct shapes and non-negative values.
        Raises AssertionError if validation fails.
        """
        assert self.num_tasks >= 0, f"num_tasks must be non-negative, got {self.num_tasks}"
        assert self.num_agents > 0, f"num_agents must be positive, got {self.num_agents}"

        # Check shapes
        assert self.cost.shape == (self.num_tasks, self.num_agents), \
            f"cost shape {self.cost.shape} != ({self.num_tasks}, {self.num_agents})"
        assert self.resource.shape == (self.num_tasks, self.num_agents), \
            f"resource shape {self.resource.shape} != ({self.num_tasks}, {self.num_agents})"
        assert self.capacity.shape == (self.num_agents,), \
            f"capacity shape {self.capacity.shape} != ({self.num_agents},)"

        # Check non-negativity
        assert np.all(self.cost >= 0), "cost must be non-negative"
        assert np.all(self.resource >= 0), "resource must be non-negative"
        assert np.all(self.capacity >= 0), "capacity must be non-negative"
        assert self.penalty >= 0, "penalty must be non-negative"

    def loads(self, assignment: np.ndarray) -> np.ndarray:
        """Resource used per agent by an assignment, shape (M,)."""
        if self.num_tasks == 0:
            return np.zeros(self.num_agents, dtype=float)
        used = self.resource[np.arange(self.num_tasks), assignment]
        return np.bincount(assignment, weights=used, minlength=self.num_agents)

    def evaluate(self, assignment: np.ndarray) -> Tuple[float, bool]:
        """
        Price an assignment.

        Args:
            assignment: Agent id per task, shape (N,)

        Returns:
            Tuple of (total_cost, feasible)
            total_cost includes penalty * overload when penalty > 0
        """
        if self.num_tasks == 0:
            return 0.0, True
        total = float(self.cost[np.arange(self.num_tasks), assignment].sum())
        overload = np.maximum(0.0, self.loads(assignment) - self.capacity)
        total_overload = float(overload.sum())
        if self.penalty > 0:
            total += self.penalty * total_overload
        return total, total_overload <= 0.0
