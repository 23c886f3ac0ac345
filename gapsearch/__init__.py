"""Local-search metaheuristics (Tabu Search, Threshold Accepting) for the Generalized Assignment Problem"""

__version__ = "0.1.0"
