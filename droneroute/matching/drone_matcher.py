"""Mini README: Select drones able to serve a set of delivery requests.

Structure:
    * AggregateRequirements - combined load and equipment needs of a batch.
    * DroneQuery - attribute/operator/value filter for fleet searches.
    * DroneMatcher - capability, schedule, base and approximate cost filters
      over one ``FleetSnapshot``.

The cost filter is advisory. It prices a straight-line nearest-neighbour
tour, not the routed path, so it can let through drones that the trip
planner later rejects once real paths around no-fly zones are known.
"""

from __future__ import annotations

import operator as op
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from pydantic import BaseModel

from ..data_source.records import Drone, FleetSnapshot, ServicePoint
from ..dispatch import DeliveryRequest
from ..logging_utils import get_logger
from .constraints import (
    estimate_cost,
    estimate_moves,
    find_service_point,
    is_available_at,
    nearest_neighbour_order,
    tour_distance,
)

LOGGER = get_logger(__name__)

_COMPARATORS: Dict[str, Callable[[float, float], bool]] = {
    "=": op.eq,
    "!=": op.ne,
    "<": op.lt,
    ">": op.gt,
    "<=": op.le,
    ">=": op.ge,
}

_NUMERIC_ATTRIBUTES: Dict[str, Callable[[Drone], float]] = {
    "capacity": lambda drone: drone.capability.capacity,
    "maxmoves": lambda drone: drone.capability.max_moves,
    "costpermove": lambda drone: drone.capability.cost_per_move,
    "costinitial": lambda drone: drone.capability.cost_initial,
    "costfinal": lambda drone: drone.capability.cost_final,
}

_BOOLEAN_ATTRIBUTES: Dict[str, Callable[[Drone], bool]] = {
    "cooling": lambda drone: drone.capability.cooling,
    "heating": lambda drone: drone.capability.heating,
}


@dataclass(frozen=True, slots=True)
class AggregateRequirements:
    """What a single drone must provide to carry every request at once."""

    total_capacity: float
    needs_cooling: bool
    needs_heating: bool

    @classmethod
    def of(cls, requests: Sequence[DeliveryRequest]) -> "AggregateRequirements":
        return cls(
            total_capacity=sum(request.requirements.capacity for request in requests),
            needs_cooling=any(request.requirements.needs_cooling for request in requests),
            needs_heating=any(request.requirements.needs_heating for request in requests),
        )

    def satisfied_by(self, drone: Drone) -> bool:
        capability = drone.capability
        return (
            capability.capacity >= self.total_capacity
            and (not self.needs_cooling or capability.cooling)
            and (not self.needs_heating or capability.heating)
        )


class DroneQuery(BaseModel):
    attribute: str
    operator: str = "="
    value: str


def _parse_bool(value: str) -> bool:
    return value.strip().lower() == "true"


def query_matches(drone: Drone, query: DroneQuery) -> bool:
    """Evaluate one query against a drone; unknown inputs never match."""

    attribute = query.attribute.lower()
    if attribute in _BOOLEAN_ATTRIBUTES:
        return _BOOLEAN_ATTRIBUTES[attribute](drone) == _parse_bool(query.value)
    if attribute in _NUMERIC_ATTRIBUTES:
        comparator = _COMPARATORS.get(query.operator)
        if comparator is None:
            return False
        try:
            wanted = float(query.value)
        except ValueError:
            return False
        return comparator(float(_NUMERIC_ATTRIBUTES[attribute](drone)), wanted)
    return False


class DroneMatcher:
    """Answer fleet questions against one snapshot of upstream data."""

    def __init__(self, snapshot: FleetSnapshot) -> None:
        self.snapshot = snapshot

    def service_point_for(self, drone_id: str) -> Optional[ServicePoint]:
        return find_service_point(drone_id, self.snapshot.assignments, self.snapshot.service_points)

    def drone_details(self, drone_id: str) -> Optional[Drone]:
        return next((drone for drone in self.snapshot.drones if drone.id == drone_id), None)

    def drones_with_cooling(self, state: bool) -> List[str]:
        return [drone.id for drone in self.snapshot.drones if drone.capability.cooling == state]

    def drones_matching(self, attribute: str, value: str) -> List[str]:
        return self.drones_matching_queries([DroneQuery(attribute=attribute, value=value)])

    def drones_matching_queries(self, queries: Sequence[DroneQuery]) -> List[str]:
        return [
            drone.id
            for drone in self.snapshot.drones
            if all(query_matches(drone, query) for query in queries)
        ]

    def approximate_pro_rata_cost(
        self, drone: Drone, service_point: ServicePoint, requests: Sequence[DeliveryRequest]
    ) -> float:
        """Straight-line tour cost split evenly across ``requests``."""

        ordered = nearest_neighbour_order(
            service_point.location, requests, lambda request: request.delivery
        )
        route = tour_distance(service_point.location, [request.delivery for request in ordered])
        approximate = estimate_cost(drone.capability, estimate_moves(route))
        return approximate / len(requests)

    def find_available_drones(self, requests: Sequence[DeliveryRequest]) -> List[str]:
        """Ids of drones that could serve every request in one trip, in fleet order."""

        if not requests:
            return []

        needs = AggregateRequirements.of(requests)
        candidates: List[str] = []
        for drone in self.snapshot.drones:
            if not needs.satisfied_by(drone):
                continue
            if not all(
                is_available_at(drone.id, request.date, request.time, self.snapshot.assignments)
                for request in requests
            ):
                continue
            service_point = self.service_point_for(drone.id)
            if service_point is None:
                continue
            pro_rata = self.approximate_pro_rata_cost(drone, service_point, requests)
            if not all(request.requirements.within_budget(pro_rata) for request in requests):
                continue
            candidates.append(drone.id)

        LOGGER.debug(
            "Matched %s of %s drones for requests %s",
            len(candidates),
            len(self.snapshot.drones),
            [request.id for request in requests],
        )
        return candidates
