"""Mini README: Obstacle-aware path search for delivery drones.

Exports the weighted A* pathfinder and the per-run path cache used by the
trip planner. See ``astar`` for the algorithm and its trade-offs.
"""

from .astar import HEURISTIC_WEIGHT, MAX_ITERATIONS, AStarPathfinder, PathCache, SearchNode

__all__ = [
    "AStarPathfinder",
    "HEURISTIC_WEIGHT",
    "MAX_ITERATIONS",
    "PathCache",
    "SearchNode",
]
