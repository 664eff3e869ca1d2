"""Mini README: Constraint predicates shared by matching and explanations.

Structure:
    * find_service_point - the base a drone is assigned to, if any.
    * is_available_at - weekly half-open schedule test.
    * estimate_moves / estimate_cost - straight-line cost approximations.
    * nearest_neighbour_order - greedy visiting order used for tours.

The drone matcher and the availability explainer both call these so that a
drone rejected by one is explained with the same rule by the other.
"""

from __future__ import annotations

import datetime as dt
from typing import Callable, Iterable, List, Optional, Sequence, TypeVar

from ..data_source.records import Capability, DayOfWeek, ServicePoint, ServicePointAssignment
from ..geometry import MOVE_DISTANCE, Position, distance

ItemT = TypeVar("ItemT")


def find_service_point(
    drone_id: str,
    assignments: Iterable[ServicePointAssignment],
    service_points: Sequence[ServicePoint],
) -> Optional[ServicePoint]:
    """Return the service point of the first assignment listing ``drone_id``."""

    for assignment in assignments:
        if any(schedule.id == drone_id for schedule in assignment.drones):
            for service_point in service_points:
                if service_point.id == assignment.service_point_id:
                    return service_point
    return None


def is_available_at(
    drone_id: str,
    on_date: dt.date,
    at: dt.time,
    assignments: Iterable[ServicePointAssignment],
) -> bool:
    """True if any weekly window of the drone covers ``at`` on that weekday."""

    day = DayOfWeek.from_date(on_date)
    for assignment in assignments:
        for schedule in assignment.drones:
            if schedule.id != drone_id:
                continue
            if any(window.covers(day, at) for window in schedule.availability):
                return True
    return False


def estimate_moves(route_distance: float) -> float:
    """Fractional move count for a straight-line distance in degrees."""

    return route_distance / MOVE_DISTANCE


def estimate_cost(capability: Capability, moves: float) -> float:
    """Fixed take-off and landing charges plus the per-move charge."""

    return capability.cost_initial + capability.cost_final + moves * capability.cost_per_move


def nearest_neighbour_order(
    origin: Position,
    items: Iterable[ItemT],
    location: Callable[[ItemT], Position],
) -> List[ItemT]:
    """Order ``items`` by repeatedly visiting the closest remaining one.

    Ties keep the earlier item.
    """

    remaining = list(items)
    ordered: List[ItemT] = []
    current = origin
    while remaining:
        nearest = min(remaining, key=lambda item: distance(current, location(item)))
        ordered.append(nearest)
        remaining.remove(nearest)
        current = location(nearest)
    return ordered


def tour_distance(origin: Position, stops: Sequence[Position]) -> float:
    """Length of origin -> stops (in order) -> origin."""

    total = 0.0
    current = origin
    for stop in stops:
        total += distance(current, stop)
        current = stop
    return total + distance(current, origin)
