"""Tests for the experiment harness."""

import json

import pandas as pd
import pytest

from gapsearch.model import generate_instance, save_instance
from gapsearch.experiments.run_all import run_all_algorithms_on_instance, run_all_experiments
from gapsearch.experiments.run_experiment import load_params
from gapsearch.experiments import solve

FAST_TABU = {'max_iters': 15, 'neighbor_multiplier': 2}
FAST_THRESHOLD = {'batch_size': 20, 'calibration_trials': 50, 'epsilon': 1e-2,
                  'cooling': 0.5, 'max_equilibrium_batches': 3}


def test_failing_algorithm_is_recorded():
    instance, u0 = generate_instance(num_tasks=6, num_agents=2, seed=0)

    def broken(inst, seed):
        raise RuntimeError("boom")

    def start(inst, seed):
        cost, _ = inst.evaluate(u0)
        return cost, u0

    def timed_out(inst, seed):
        return None, None

    results = run_all_algorithms_on_instance(
        instance, {'broken': broken, 'start': start, 'timed_out': timed_out}, seed=1
    )

    assert results['broken']['error'] == 'boom'
    assert results['broken']['cost'] is None
    assert results['start']['cost'] == instance.evaluate(u0)[0]
    assert results['start']['assignment'] == [0] * 6
    assert results['timed_out']['skipped']


def test_run_all_experiments_writes_summary(tmp_path):
    instances_dir = tmp_path / 'instances'
    instances_dir.mkdir()
    for k in range(2):
        instance, _ = generate_instance(num_tasks=8, num_agents=3, seed=k)
        save_instance(instance, str(instances_dir / f'tiny_{k:02d}.json'))

    output_dir = tmp_path / 'results'
    df = run_all_experiments(
        str(instances_dir), str(output_dir),
        tabu_params=FAST_TABU, threshold_params=FAST_THRESHOLD,
        include_mip=False, make_plots=False,
    )

    assert set(df['algorithm']) == {'greedy', 'random', 'tabu', 'threshold'}
    assert len(df) == 8
    summary = pd.read_csv(output_dir / 'all_results.csv')
    assert len(summary) == 8

    per_instance = json.loads((output_dir / 'tiny_00_results.json').read_text())
    greedy = per_instance['greedy']['cost']
    assert per_instance['tabu']['cost'] <= greedy
    assert per_instance['threshold']['cost'] <= greedy


def test_load_params(tmp_path):
    path = tmp_path / 'params.json'
    path.write_text(json.dumps({'tabu': {'max_iters': 7}}))
    assert load_params(str(path)) == {'tabu': {'max_iters': 7}}
    assert load_params(None) == {}

    bad = tmp_path / 'bad.json'
    bad.write_text(json.dumps({'annealing': {}}))
    with pytest.raises(ValueError, match="annealing"):
        load_params(str(bad))


def test_solve_cli(tmp_path, monkeypatch, capsys):
    instance, _ = generate_instance(num_tasks=6, num_agents=2, seed=3)
    path = str(tmp_path / 'inst.json')
    save_instance(instance, path)

    monkeypatch.setattr('sys.argv', ['solve', path, '--max-iters', '5', '--seed', '0'])
    solve.main()
    assert "Feasible:" in capsys.readouterr().out

    monkeypatch.setattr('sys.argv', ['solve', path, '--algorithm', 'threshold', '--max-iters', '5'])
    with pytest.raises(SystemExit):
        solve.main()
    assert "--max-iters only applies" in capsys.readouterr().err
