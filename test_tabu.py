"""Tests for Tabu Search and the tabu list."""

import numpy as np
import pytest

from gapsearch.model import Instance, Solution, generate_instance
from gapsearch.heuristics import TabuSearch, TabuList
from gapsearch.heuristics.tabu import SearchStatus


def small_instance():
    instance, _ = generate_instance(num_tasks=8, num_agents=3, seed=21)
    return instance


def test_tabu_list_is_fifo_and_bounded():
    instance = small_instance()
    # Task k on agent 1, everything else on agent 0
    solutions = [Solution(instance, np.eye(8, dtype=int)[k]) for k in range(6)]

    tabu = TabuList(max_size=3)
    for s in solutions:
        tabu.append(s)
        assert len(tabu) <= 3

    assert tabu.snapshot() == solutions[-3:]
    assert solutions[0] not in tabu
    assert solutions[-1] in tabu


def test_tabu_list_keeps_duplicates_until_last_copy_leaves():
    instance = small_instance()
    a = Solution(instance, np.zeros(8, dtype=int))
    b = Solution(instance, np.ones(8, dtype=int))

    tabu = TabuList(max_size=2)
    tabu.append(a)
    tabu.append(a)
    tabu.append(b)  # evicts the first a
    assert a in tabu
    tabu.append(b)  # evicts the second a
    assert a not in tabu
    assert len(tabu) == 2


def test_tabu_list_rejects_non_positive_size():
    with pytest.raises(ValueError):
        TabuList(max_size=0)


def test_list_bound_and_exclusion_during_search():
    instance = small_instance()
    initial = Solution(instance, np.zeros(8, dtype=int))
    engine = TabuSearch(instance, initial, max_iters=60, tabu_size=10, neighbor_multiplier=2, seed=5)

    engine.start()
    assert engine.status is SearchStatus.RUNNING
    assert engine.tabu_list.snapshot() == [initial]

    for _ in range(60):
        before = engine.tabu_list.snapshot()
        relaxed_before = engine.relaxed_iterations
        chosen = engine.step()
        assert len(engine.tabu_list) <= 10
        if engine.relaxed_iterations == relaxed_before:
            assert chosen not in before
        assert engine.tabu_list.snapshot()[-1] is chosen


def test_best_cost_is_monotone():
    instance = small_instance()
    engine = TabuSearch(instance, Solution(instance, np.zeros(8, dtype=int)), max_iters=80, seed=1)
    engine.run()

    log = np.array(engine.cost_log)
    assert len(log) == 80
    assert np.all(np.diff(log) <= 0)
    assert engine.best_cost() == log[-1]
    assert engine.status is SearchStatus.TERMINATED


def test_selection_prefers_first_minimum():
    instance = Instance(num_tasks=2, num_agents=2, cost=np.ones((2, 2)), capacity=[2.0, 2.0])
    engine = TabuSearch(instance, Solution(instance, [0, 0]), seed=0)
    engine.start()

    first = Solution(instance, [0, 1])
    second = Solution(instance, [1, 0])
    chosen, relaxed = engine.select([first, second])
    assert chosen is first
    assert not relaxed


def test_all_tabu_neighborhood_falls_back_to_unfiltered_minimum():
    # One task, two agents: the only neighbors are the solution itself and the other agent
    instance = Instance(num_tasks=1, num_agents=2, cost=[[1.0, 5.0]], capacity=[1.0, 1.0])
    engine = TabuSearch(instance, Solution(instance, [0]), max_iters=2, neighbor_multiplier=1, seed=0)

    engine.step()
    assert list(engine.current_solution().assignment) == [1]
    assert engine.relaxed_iterations == 0

    # Both [0] and [1] are now tabu
    engine.step()
    assert engine.relaxed_iterations == 1
    assert list(engine.current_solution().assignment) == [0]
    assert engine.best_cost() == 1.0


def test_zero_tasks_terminates_immediately():
    instance = Instance(num_tasks=0, num_agents=2, cost=np.zeros((0, 2)), capacity=[1.0, 1.0])
    initial = Solution(instance, [])
    engine = TabuSearch(instance, initial, seed=0)
    engine.run()

    assert engine.status is SearchStatus.TERMINATED
    assert engine.iteration == 0
    assert engine.best_cost() == 0.0
    assert engine.is_feasible()
    assert engine.best_solution() is initial


def test_step_on_zero_tasks_terminates_without_moving():
    instance = Instance(num_tasks=0, num_agents=2, cost=np.zeros((0, 2)), capacity=[1.0, 1.0])
    initial = Solution(instance, [])
    engine = TabuSearch(instance, initial, seed=0)

    assert engine.step() is initial
    assert engine.status is SearchStatus.TERMINATED
    assert engine.iteration == 0
    assert engine.cost_log == []
    assert engine.best_solution() is initial

    # Further steps and runs stay terminated
    assert engine.step() is initial
    engine.run()
    assert engine.iteration == 0


def test_results_available_before_run():
    instance = small_instance()
    initial = Solution(instance, np.zeros(8, dtype=int))
    engine = TabuSearch(instance, initial, max_iters=5, seed=0)
    assert engine.status is SearchStatus.INITIALIZED
    assert engine.best_cost() == initial.cost
    assert engine.is_feasible() == initial.feasible


def test_time_limit_stops_early():
    instance = small_instance()
    engine = TabuSearch(instance, Solution(instance, np.zeros(8, dtype=int)),
                        max_iters=10**6, time_limit=0.0, seed=0)
    engine.run()
    assert engine.iteration == 0
    assert engine.status is SearchStatus.TERMINATED


def test_invalid_parameters():
    instance = small_instance()
    initial = Solution(instance, np.zeros(8, dtype=int))
    with pytest.raises(ValueError):
        TabuSearch(instance, initial, neighbor_multiplier=0)
    with pytest.raises(ValueError):
        TabuSearch(instance, initial, tabu_size=0)
