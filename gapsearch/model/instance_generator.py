"""Instance generator for creating synthetic GAP instances."""

import numpy as np
import json
from pathlib import Path
from typing import Tuple

from .instance import Instance


def generate_instance(
    num_tasks: int = 50,
    num_agents: int = 5,
    seed: int = 42,
    tightness: float = 0.8,
    cost_range: Tuple[int, int] = (10, 50),
    resource_range: Tuple[int, int] = (5, 25),
    penalty: float = 0.0,
) -> Tuple[Instance, np.ndarray]:
    """
    Generate a random GAP instance in the style of the classic type-C benchmarks.

    Costs and resource consumptions are drawn uniformly from integer ranges;
    agent capacities are a common fraction of the average load per agent:
    capacity[a] = tightness * sum_i resource[i, a] / num_agents.
    Smaller tightness gives tighter (harder) instances.

    Args:
        num_tasks: Number of tasks (N)
        num_agents: Number of agents (M)
        seed: Random seed for reproducibility
        tightness: Capacity slack factor (0.8 is the type-C convention)
        cost_range: Half-open integer range for cost[i, a]
        resource_range: Half-open integer range for resource[i, a]
        penalty: Overload penalty stored on the instance

    Returns:
        Tuple of (Instance, initial_assignment)
        initial_assignment puts every task on agent 0, shape (N,)
    """
    rng = np.random.default_rng(seed)

    cost = rng.integers(cost_range[0], cost_range[1], size=(num_tasks, num_agents)).astype(float)
    resource = rng.integers(resource_range[0], resource_range[1], size=(num_tasks, num_agents)).astype(float)

    # Type-C capacities: same fraction of the per-agent column sum
    capacity = np.floor(tightness * resource.sum(axis=0) / num_agents)

    instance = Instance(
        num_tasks=num_tasks,
        num_agents=num_agents,
        cost=cost,
        capacity=capacity,
        resource=resource,
        penalty=penalty,
    )
    instance.validate()

    initial_assignment = np.zeros(num_tasks, dtype=np.int64)
    return instance, initial_assignment


def save_instance(instance: Instance, filepath: str) -> None:
    """
    Save instance to JSON file.

    Args:
        instance: Instance to save
        filepath: Path to save file
    """
    data = {
        'num_tasks': instance.num_tasks,
        'num_agents': instance.num_agents,
        'cost': instance.cost.tolist(),
        'resource': instance.resource.tolist(),
        'capacity': instance.capacity.tolist(),
        'penalty': instance.penalty,
    }

    with open(filepath, 'w') as f:
        json.dump(data, f, indent=2)


def load_instance(filepath: str) -> Instance:
    """
    Load instance from JSON file.

    Args:
        filepath: Path to instance file

    Returns:
        Loaded Instance
    """
    with open(filepath, 'r') as f:
        data = json.load(f)

    instance = Instance(
        num_tasks=data['num_tasks'],
        num_agents=data['num_agents'],
        cost=np.array(data['cost'], dtype=float),
        capacity=np.array(data['capacity'], dtype=float),
        resource=np.array(data['resource'], dtype=float) if data.get('resource') is not None else None,
        penalty=float(data.get('penalty', 0.0)),
    )

    instance.validate()
    return instance


def generate_instance_set(
    output_dir: str = 'instances',
    n_small: int = 5,
    n_medium: int = 5,
    tightness: float = 0.8,
) -> None:
    """
    Generate a set of small and medium instances and save them.

    Args:
        output_dir: Directory to save instances
        n_small: Number of small instances to generate (20 tasks, 5 agents)
        n_medium: Number of medium instances to generate (100 tasks, 10 agents)
        tightness: Capacity slack factor passed to generate_instance
    """
    output_path = Path(output_dir)
    output_path.mkdir(exist_ok=True, parents=True)

    print(f"Generating {n_small} small instances...")
    for i in range(n_small):
        instance, _ = generate_instance(
            num_tasks=20,
            num_agents=5,
            seed=100 + i,
            tightness=tightness,
        )
        filepath = output_path / f'small_{i:02d}.json'
        save_instance(instance, str(filepath))
        print(f"  Saved {filepath}")

    print(f"Generating {n_medium} medium instances...")
    for i in range(n_medium):
        instance, _ = generate_instance(
            num_tasks=100,
            num_agents=10,
            seed=200 + i,
            tightness=tightness,
        )
        filepath = output_path / f'medium_{i:02d}.json'
        save_instance(instance, str(filepath))
        print(f"  Saved {filepath}")

    print(f"\nGenerated {n_small} small and {n_medium} medium instances in {output_dir}/")


if __name__ == '__main__':
    generate_instance_set()
