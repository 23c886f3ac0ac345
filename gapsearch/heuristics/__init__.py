"""Heuristic algorithms: Tabu Search, Threshold Accepting, construction, and neighborhoods"""

from .base import LocalSearch
from .tabu import TabuSearch, TabuList, tabu_search
from .threshold import ThresholdAccepting, SearchState, threshold_accepting
from .construction import greedy_constructor, random_assignment
from .neighborhoods import generate_neighbors, swap_move, shift_move

__all__ = [
    'LocalSearch', 'STRATEGIES',
    'TabuSearch', 'TabuList', 'tabu_search',
    'ThresholdAccepting', 'SearchState', 'threshold_accepting',
    'greedy_constructor', 'random_assignment',
    'generate_neighbors', 'swap_move', 'shift_move'
]

# Strategy selection by name; the engines are alternatives, never combined
STRATEGIES = {
    TabuSearch.name: TabuSearch,
    ThresholdAccepting.name: ThresholdAccepting,
}
