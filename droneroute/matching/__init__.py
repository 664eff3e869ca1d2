"""Mini README: Drone selection for delivery requests.

``drone_matcher`` filters the fleet for a batch of requests and answers the
attribute queries used by operators; ``constraints`` holds the predicates the
availability explainer reuses.
"""

from .constraints import (
    estimate_cost,
    estimate_moves,
    find_service_point,
    is_available_at,
    nearest_neighbour_order,
    tour_distance,
)
from .drone_matcher import AggregateRequirements, DroneMatcher, DroneQuery, query_matches

__all__ = [
    "AggregateRequirements",
    "DroneMatcher",
    "DroneQuery",
    "estimate_cost",
    "estimate_moves",
    "find_service_point",
    "is_available_at",
    "nearest_neighbour_order",
    "query_matches",
    "tour_distance",
]
