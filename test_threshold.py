"""Tests for Threshold Accepting: batches, equilibrium, cooling, and calibration."""

import itertools
import math

import numpy as np
import pytest

from gapsearch.model import Instance, Solution, generate_instance
from gapsearch.heuristics import ThresholdAccepting, SearchState, threshold_accepting
from gapsearch.heuristics.construction import random_assignment

GOLDEN = (math.sqrt(5.0) - 1.0) / 2.0


class ScriptedSolution:
    """Solution stand-in whose swap neighbors take their costs from a shared iterator."""

    def __init__(self, cost, costs):
        self.cost = cost
        self.feasible = True
        self.assignment = np.zeros(1, dtype=np.int64)
        self._costs = costs

    def swap_neighbor(self, rng):
        return ScriptedSolution(next(self._costs), self._costs)


def golden_costs():
    # Low-discrepancy sequence on [0, 1): the share of values <= T is ~min(T, 1)
    return ((k * GOLDEN) % 1.0 for k in itertools.count(1))


def toy_instance():
    return Instance(num_tasks=3, num_agents=2, cost=[[4.0, 6.0], [3.0, 5.0], [8.0, 2.0]],
                    capacity=[2.0, 2.0])


def engine_for(initial, **params):
    return ThresholdAccepting(toy_instance(), initial, seed=0, **params)


def test_batch_mean_divides_by_target_size():
    costs = itertools.cycle([1.0, 100.0])
    start = ScriptedSolution(1.0, costs)
    engine = engine_for(start, batch_size=10, max_trials_factor=1)

    state, mean = engine.run_batch(SearchState(current=start, best=start), 0.5)

    # Ten trials, five accepted moves of cost 1.0: the divisor stays at 10
    assert engine.batch_mean_divisor == 10
    assert mean == pytest.approx(0.5)
    assert state.current.cost == 1.0


def test_batch_stops_at_target_and_tracks_best():
    costs = iter([5.0, 4.0, 4.0, 6.0, 3.0, 9.0])
    start = ScriptedSolution(5.0, costs)
    engine = engine_for(start, batch_size=3)

    state, mean = engine.run_batch(SearchState(current=start, best=start), 0.0)

    # 5.0 <= 5.0, 4.0 <= 5.0, 4.0 <= 4.0 accepted; batch is full
    assert mean == pytest.approx((5.0 + 4.0 + 4.0) / 3)
    assert state.best.cost == 4.0
    # Ties replace the best solution with the newer one
    assert state.best is state.current
    assert next(costs) == 6.0


def test_equilibrium_stops_when_mean_rises():
    # Batches of one accepted move each: means 5, 4, 6
    costs = iter([5.0, 4.0, 6.0, 1.0])
    start = ScriptedSolution(5.0, costs)
    engine = engine_for(start, batch_size=1)

    state, batches = engine.equilibrium(SearchState(current=start, best=start), 10.0)

    assert batches == 3
    assert state.current.cost == 6.0
    assert state.best.cost == 4.0
    assert engine.cost_log == [5.0, 4.0, 4.0]


def test_equilibrium_is_bounded_on_a_plateau():
    costs = itertools.repeat(2.0)
    start = ScriptedSolution(2.0, costs)
    engine = engine_for(start, batch_size=1, max_equilibrium_batches=7)

    _, batches = engine.equilibrium(SearchState(current=start, best=start), 1.0)
    assert batches == 7


def test_acceptance_fraction_baselines():
    # Strictly increasing neighbor costs 1, 2, 3, ...
    start = ScriptedSolution(0.0, itertools.count(1))
    initial_engine = engine_for(start, calibration_trials=10)
    assert initial_engine.acceptance_fraction(start, 1.5) == pytest.approx(0.1)

    start = ScriptedSolution(0.0, itertools.count(1))
    chain_engine = engine_for(start, calibration_trials=10, acceptance_baseline='chain')
    assert chain_engine.acceptance_fraction(start, 1.5) == pytest.approx(1.0)


@pytest.mark.parametrize('start_temperature', [0.1, 4.0])
def test_calibration_converges_to_target(start_temperature):
    start = ScriptedSolution(0.0, golden_costs())
    engine = engine_for(start, calibration_trials=2000, epsilon=0.01, target_acceptance=0.9)

    temperature = engine.initial_temperature(start, start_temperature)

    assert temperature == pytest.approx(0.9, abs=0.02)
    assert engine.acceptance_fraction(start, temperature) == pytest.approx(0.9, abs=0.02)


def test_calibration_returns_start_when_already_on_target():
    start = ScriptedSolution(0.0, golden_costs())
    engine = engine_for(start, calibration_trials=2000, epsilon=0.01, target_acceptance=0.5)
    assert engine.initial_temperature(start, 0.5) == 0.5


def test_cooling_is_monotone_and_terminates():
    instance, _ = generate_instance(num_tasks=10, num_agents=3, seed=8)
    initial = Solution(instance, random_assignment(instance, seed=8))
    engine = ThresholdAccepting(
        instance, initial,
        batch_size=30, calibration_trials=100, epsilon=1e-2, cooling=0.7,
        max_equilibrium_batches=5, seed=8,
    )
    engine.run()

    temps = engine.temperature_log
    assert len(temps) > 0
    assert all(later < earlier for earlier, later in zip(temps, temps[1:]))
    assert temps[-1] > engine.epsilon
    assert engine.temperature <= engine.epsilon
    bound = math.ceil(math.log(engine.epsilon / temps[0]) / math.log(0.7)) + 1
    assert len(temps) <= bound

    log = np.array(engine.cost_log)
    assert np.all(np.diff(log) <= 0)
    assert engine.best_cost() <= initial.cost
    assert engine.best_cost() == instance.evaluate(engine.best_assignment())[0]


def test_single_agent_start_skips_cooling_with_a_warning(capsys):
    instance, u0 = generate_instance(num_tasks=6, num_agents=3, seed=4)
    initial = Solution(instance, u0)
    engine = ThresholdAccepting(instance, initial, calibration_trials=50, seed=4, verbose=True)
    engine.run()

    assert engine.temperature_log == []
    assert engine.best_solution() is initial
    assert "no cooling steps will run" in capsys.readouterr().out


def test_functional_wrapper_and_zero_tasks():
    instance = Instance(num_tasks=0, num_agents=2, cost=np.zeros((0, 2)), capacity=[1.0, 1.0])
    best_cost, best_u, cost_log = threshold_accepting(instance, np.zeros(0, dtype=int), seed=0)
    assert best_cost == 0.0
    assert best_u.shape == (0,)
    assert cost_log == []


@pytest.mark.parametrize('params', [
    {'batch_size': 0},
    {'cooling': 1.0},
    {'cooling': 0.0},
    {'epsilon': 0.0},
    {'initial_temperature': 0.0},
    {'acceptance_baseline': 'sample'},
    {'calibration_trials': 0},
])
def test_invalid_parameters(params):
    instance = toy_instance()
    with pytest.raises(ValueError):
        ThresholdAccepting(instance, Solution(instance, [0, 0, 1]), **params)
