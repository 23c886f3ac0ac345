"""Solve a single instance with one local-search strategy and report the result."""

import argparse

from ..model.instance_generator import load_instance
from ..model.solution import Solution
from ..heuristics import STRATEGIES
from ..heuristics.construction import greedy_constructor, random_assignment


def main():
    parser = argparse.ArgumentParser(
        description='Solve one GAP instance with Tabu Search or Threshold Accepting'
    )
    parser.add_argument('instance', type=str, help='Path to instance JSON file')
    parser.add_argument('--algorithm', choices=sorted(STRATEGIES), default='tabu',
                        help='Search strategy (default: tabu)')
    parser.add_argument('--start', choices=['greedy', 'random'], default='greedy',
                        help='Starting solution (default: greedy)')
    parser.add_argument('--seed', type=int, default=None, help='Random seed')
    parser.add_argument('--max-iters', type=int, default=None,
                        help='Tabu iterations, tabu only (default: engine default)')
    parser.add_argument('--time-limit', type=float, default=None,
                        help='Time limit in seconds')
    parser.add_argument('--verbose', action='store_true', help='Verbose output')
    args = parser.parse_args()
    if args.max_iters is not None and args.algorithm != 'tabu':
        parser.error('--max-iters only applies to --algorithm tabu')

    instance = load_instance(args.instance)
    if args.start == 'greedy':
        u0 = greedy_constructor(instance)
    else:
        u0 = random_assignment(instance, seed=args.seed)
    initial = Solution(instance, u0)

    params = {'seed': args.seed, 'verbose': args.verbose, 'time_limit': args.time_limit}
    if args.max_iters is not None:
        params['max_iters'] = args.max_iters

    engine = STRATEGIES[args.algorithm](instance, initial, **params)
    print(f"Running {args.algorithm} on {args.instance} "
          f"(N={instance.num_tasks}, M={instance.num_agents}, start cost={initial.cost:.2f})")
    engine.run()

    result = engine.result()
    print(f"Assignment: {engine.best_solution()}")
    print(f"Cost: {engine.best_cost():.2f}")
    print(f"Feasible: {'yes' if engine.is_feasible() else 'no'}")
    print(f"Runtime: {result.runtime:.2f}s over {result.iterations} log steps")


if __name__ == '__main__':
    main()
