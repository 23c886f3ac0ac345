"""Abstract base class for local-search strategies."""

from abc import ABC, abstractmethod

import numpy as np

from ..model.instance import Instance
from ..model.result import SearchResult
from ..model.solution import Solution


class LocalSearch(ABC):
    """
    Shared interface of the search strategies.

    Subclasses own their search state and update ``_best`` from ``run()``.
    Results can be queried at any time and return the best solution seen so
    far (the initial solution before ``run()``).
    """

    name = 'local_search'

    def __init__(self, instance: Instance, initial: Solution, seed=None, verbose: bool = False):
        self.instance = instance
        self.rng = np.random.default_rng(seed)
        self.verbose = verbose
        self._initial = initial
        self._current = initial
        self._best = initial
        self.cost_log = []
        self.runtime = 0.0

    @abstractmethod
    def run(self) -> None:
        """Execute the full search to completion."""
        pass

    def best_assignment(self) -> np.ndarray:
        return self._best.assignment

    def best_cost(self) -> float:
        return self._best.cost

    def is_feasible(self) -> bool:
        return self._best.feasible

    def best_solution(self) -> Solution:
        return self._best

    def current_solution(self) -> Solution:
        return self._current

    def result(self) -> SearchResult:
        return SearchResult(
            algorithm=self.name,
            best_cost=self._best.cost,
            best_assignment=np.array(self._best.assignment),
            feasible=self._best.feasible,
            cost_log=list(self.cost_log),
            iterations=len(self.cost_log),
            runtime=self.runtime,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(best_cost={self._best.cost:.2f})"
