"""Tabu Search heuristic (solution-recency tabu list, fixed iteration budget)."""

import time
from collections import Counter, deque
from enum import Enum
from typing import Tuple, List, Optional

import numpy as np

from ..model.instance import Instance
from ..model.solution import Solution
from .base import LocalSearch
from .neighborhoods import generate_neighbors

MAX_ITERATIONS = 20000
TABU_LIST_SIZE = 100
NEIGHBOR_MULTIPLIER = 10


class SearchStatus(Enum):
    INITIALIZED = 'initialized'
    RUNNING = 'running'
    TERMINATED = 'terminated'


class TabuList:
    """
    FIFO window of recently selected solutions.

    Appends go to the tail and evictions come off the head, so a solution is
    only tabu while it is among the last ``max_size`` selections. Membership
    is structural (assignment equality).
    """

    def __init__(self, max_size: int = TABU_LIST_SIZE):
        if max_size <= 0:
            raise ValueError(f"max_size must be positive, got {max_size}")
        self.max_size = max_size
        self._items = deque()
        # Multiset of members; a solution may be present more than once
        self._counts = Counter()

    def append(self, solution: Solution) -> None:
        self._items.append(solution)
        self._counts[solution] += 1
        while len(self._items) > self.max_size:
            evicted = self._items.popleft()
            self._counts[evicted] -= 1
            if self._counts[evicted] <= 0:
                del self._counts[evicted]

    def __contains__(self, solution) -> bool:
        return solution in self._counts

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(self._items)

    def snapshot(self) -> List[Solution]:
        """Members oldest-first."""
        return list(self._items)


class TabuSearch(LocalSearch):
    """
    Tabu Search over task-to-agent assignments.

    Each iteration samples 2 * num_tasks * neighbor_multiplier neighbors of
    the current solution, discards those in the tabu list, moves to the
    cheapest survivor (first one in generation order on ties) and appends it
    to the tabu list. The best solution is replaced only on strict
    improvement.

    If every neighbor is tabu the filter is relaxed for that iteration and
    the cheapest unfiltered neighbor is taken; ``relaxed_iterations`` counts
    how often that happened.
    """

    name = 'tabu'

    def __init__(
        self,
        instance: Instance,
        initial: Solution,
        max_iters: int = MAX_ITERATIONS,
        tabu_size: int = TABU_LIST_SIZE,
        neighbor_multiplier: int = NEIGHBOR_MULTIPLIER,
        time_limit: Optional[float] = None,
        seed: Optional[int] = None,
        verbose: bool = False,
        log_every: int = 1000,
    ):
        if max_iters < 0:
            raise ValueError(f"max_iters must be non-negative, got {max_iters}")
        if neighbor_multiplier <= 0:
            raise ValueError(f"neighbor_multiplier must be positive, got {neighbor_multiplier}")
        super().__init__(instance, initial, seed=seed, verbose=verbose)

        self.max_iters = max_iters
        self.neighbor_multiplier = neighbor_multiplier
        self.time_limit = time_limit
        self.log_every = log_every

        self.tabu_list = TabuList(tabu_size)
        self.status = SearchStatus.INITIALIZED
        self.iteration = 0
        self.relaxed_iterations = 0

    @property
    def neighborhood_pairs(self) -> int:
        """Number of (swap, shift) pairs sampled per iteration."""
        return self.instance.num_tasks * self.neighbor_multiplier

    def start(self) -> None:
        """Enter RUNNING: the initial solution becomes the first tabu entry."""
        if self.status is not SearchStatus.INITIALIZED:
            return
        self.tabu_list.append(self._current)
        self.status = SearchStatus.RUNNING

    def select(self, neighborhood: List[Solution]) -> Tuple[Solution, bool]:
        """
        Pick the next current solution from a complete neighborhood.

        Returns:
            Tuple of (selected, relaxed) where relaxed is True when every
            candidate was tabu and the filter was dropped for this choice
        """
        allowed = [candidate for candidate in neighborhood if candidate not in self.tabu_list]
        relaxed = not allowed
        if relaxed:
            allowed = neighborhood
        # min() keeps the first minimal element, i.e. generation order on ties
        return min(allowed, key=lambda s: s.cost), relaxed

    def step(self) -> Solution:
        """
        Run one iteration and return the solution moved to.

        An instance without tasks has no neighbors: the search terminates
        and the current solution is returned unchanged.
        """
        if self.status is SearchStatus.INITIALIZED:
            self.start()
        if self.status is SearchStatus.TERMINATED:
            return self._current

        neighborhood = generate_neighbors(self._current, self.neighborhood_pairs, self.rng)
        if not neighborhood:
            self.status = SearchStatus.TERMINATED
            return self._current
        chosen, relaxed = self.select(neighborhood)
        if relaxed:
            self.relaxed_iterations += 1

        self.tabu_list.append(chosen)
        self._current = chosen
        if chosen.cost < self._best.cost:
            self._best = chosen

        self.iteration += 1
        self.cost_log.append(self._best.cost)
        return chosen

    def run(self) -> None:
        if self.status is SearchStatus.TERMINATED:
            return
        start_time = time.perf_counter()
        self.start()

        while self.status is SearchStatus.RUNNING and self.iteration < self.max_iters:
            if self.time_limit is not None:
                elapsed = time.perf_counter() - start_time
                if elapsed >= self.time_limit:
                    if self.verbose:
                        print(f"Stopping Tabu due to time limit ({elapsed:.2f}s >= {self.time_limit:.2f}s)")
                    break

            self.step()

            if self.verbose and self.iteration % self.log_every == 0:
                print(
                    f"Iteration {self.iteration}/{self.max_iters}: best_cost={self._best.cost:.2f}, "
                    f"current_cost={self._current.cost:.2f}, tabu_size={len(self.tabu_list)}"
                )

        self.status = SearchStatus.TERMINATED
        self.runtime = time.perf_counter() - start_time


def tabu_search(
    instance: Instance,
    initial_assignment: np.ndarray,
    max_iters: int = MAX_ITERATIONS,
    tabu_size: int = TABU_LIST_SIZE,
    neighbor_multiplier: int = NEIGHBOR_MULTIPLIER,
    time_limit: Optional[float] = None,
    seed: Optional[int] = None,
    verbose: bool = False,
) -> Tuple[float, np.ndarray, List[float]]:
    """
    Tabu Search from an initial assignment.

    Returns:
        Tuple of (best_cost, best_assignment, cost_log)
    """
    engine = TabuSearch(
        instance,
        Solution(instance, initial_assignment),
        max_iters=max_iters,
        tabu_size=tabu_size,
        neighbor_multiplier=neighbor_multiplier,
        time_limit=time_limit,
        seed=seed,
        verbose=verbose,
    )
    engine.run()
    return engine.best_cost(), np.array(engine.best_assignment()), list(engine.cost_log)
