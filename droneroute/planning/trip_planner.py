"""Mini README: Group delivery requests into feasible drone trips.

Structure:
    * DeliverySegment - waypoints flown for one request within a trip.
    * Trip - one drone's round trip from and back to its service point.
    * DeliveryPlan - every trip planned for a batch plus cost and move totals.
    * TripPlanner - per-date greedy consolidation with routed re-validation.

Planning runs date by date. For each date the planner first tries to put as
many of the remaining requests as possible on one drone, shrinking the batch
one request at a time, and falls back to single-request trips. Candidate
drones come from the matcher's straight-line estimate; the trip is then
re-checked against the drone's move limit and each request's budget using
the real routed path. Requests that cannot be served are logged and dropped.

A planning call fetches one fleet snapshot and owns one path cache, so
identical legs are only searched once per call and nothing leaks between
calls.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple

from ..data_source import DataSourceClient, Drone, FleetSnapshot, ServicePoint
from ..dispatch import DeliveryRequest, group_by_date
from ..geometry import Position, Region
from ..logging_utils import get_logger
from ..matching import DroneMatcher, estimate_cost, nearest_neighbour_order
from ..pathfinding import AStarPathfinder, PathCache
from ..utils.geojson import feature_collection, line_string_feature

LOGGER = get_logger(__name__)


class Pathfinder(Protocol):
    def find_path(
        self, start: Position, end: Position, no_fly_zones: Sequence[Region]
    ) -> List[Position]:
        ...


@dataclass(frozen=True, slots=True)
class DeliverySegment:
    """Waypoints flown for one request, ending with the hover point (and the
    return leg when it is the trip's last stop)."""

    delivery_id: int
    flight_path: Tuple[Position, ...]

    def as_dict(self) -> Dict[str, Any]:
        return {
            "deliveryId": self.delivery_id,
            "flightPath": [position.as_dict() for position in self.flight_path],
        }


@dataclass(frozen=True, slots=True)
class Trip:
    drone_id: str
    service_point: ServicePoint
    deliveries: Tuple[DeliverySegment, ...]
    total_cost: float
    total_moves: int

    def delivery_ids(self) -> List[int]:
        return [segment.delivery_id for segment in self.deliveries]

    def flight_path(self) -> List[Position]:
        """Whole trip as one path; segment boundary points appear once."""

        path: List[Position] = []
        for segment in self.deliveries:
            points = segment.flight_path if not path else segment.flight_path[1:]
            path.extend(points)
        return path

    def as_dict(self) -> Dict[str, Any]:
        return {
            "droneId": self.drone_id,
            "deliveries": [segment.as_dict() for segment in self.deliveries],
        }


@dataclass(slots=True)
class DeliveryPlan:
    trips: List[Trip] = field(default_factory=list)

    @property
    def total_cost(self) -> float:
        return sum(trip.total_cost for trip in self.trips)

    @property
    def total_moves(self) -> int:
        return sum(trip.total_moves for trip in self.trips)

    def delivery_ids(self) -> List[int]:
        return [delivery_id for trip in self.trips for delivery_id in trip.delivery_ids()]

    def as_dict(self) -> Dict[str, Any]:
        return {
            "cost": self.total_cost,
            "totalMoves": self.total_moves,
            "dronePaths": [trip.as_dict() for trip in self.trips],
        }


@dataclass(slots=True)
class _PlanningRun:
    """State owned by exactly one planning call."""

    snapshot: FleetSnapshot
    matcher: DroneMatcher
    no_fly_zones: List[Region]
    pathfinder: Pathfinder
    cache: PathCache = field(default_factory=PathCache)

    def path(self, start: Position, end: Position) -> List[Position]:
        return self.cache.get_or_compute(
            start, end, lambda a, b: self.pathfinder.find_path(a, b, self.no_fly_zones)
        )


class TripPlanner:
    """Turn a batch of delivery requests into drone trips."""

    def __init__(self, data_source: DataSourceClient, pathfinder: Optional[Pathfinder] = None) -> None:
        self.data_source = data_source
        self.pathfinder = pathfinder or AStarPathfinder()

    def plan(self, requests: Sequence[DeliveryRequest]) -> DeliveryPlan:
        LOGGER.info("Starting path calculation for %s dispatches.", len(requests))
        plan = DeliveryPlan()
        if not requests:
            return plan

        snapshot = self.data_source.fetch_snapshot()
        run = _PlanningRun(
            snapshot=snapshot,
            matcher=DroneMatcher(snapshot),
            no_fly_zones=snapshot.no_fly_zones(),
            pathfinder=self.pathfinder,
        )
        for day, day_requests in group_by_date(requests).items():
            LOGGER.info("Processing %s dispatches for date: %s", len(day_requests), day)
            plan.trips.extend(self._plan_date(run, day_requests))

        LOGGER.info(
            "Path calculation finished. Total Moves: %s, Total Cost: %s (path cache %s hits / %s misses)",
            plan.total_moves,
            plan.total_cost,
            run.cache.hits,
            run.cache.misses,
        )
        return plan

    def plan_as_geojson(self, requests: Sequence[DeliveryRequest]) -> Dict[str, Any]:
        """Line projection of a single-drone, single-date plan.

        Anything else (several dates, several drones, nothing planned)
        projects to an empty FeatureCollection.
        """

        dates = {request.date for request in requests}
        if len(dates) > 1:
            LOGGER.error("GeoJSON projection needs a single date, got %s", sorted(dates))
            return feature_collection()

        plan = self.plan(requests)
        if not plan.trips:
            LOGGER.warning("No valid path found for GeoJSON request")
            return feature_collection()

        drone_ids = {trip.drone_id for trip in plan.trips}
        if len(drone_ids) > 1:
            LOGGER.error("GeoJSON projection needs a single drone, got %s", sorted(drone_ids))
            return feature_collection()

        return feature_collection(line_string_feature(trip.flight_path()) for trip in plan.trips)

    def _plan_date(self, run: _PlanningRun, requests: List[DeliveryRequest]) -> List[Trip]:
        trips: List[Trip] = []
        remaining = list(requests)

        while remaining:
            trip = self._try_consolidated(run, remaining)
            if trip is not None:
                trips.append(trip)
                fulfilled = set(trip.delivery_ids())
                remaining = [request for request in remaining if request.id not in fulfilled]
                continue

            request = remaining.pop(0)
            candidates = run.matcher.find_available_drones([request])
            if not candidates:
                LOGGER.error("No drone available for dispatch %s. Skipping.", request.id)
                continue
            trip = self._plan_single(run, candidates[0], request)
            if trip is None:
                LOGGER.error("Could not plan trip for dispatch %s. Skipping.", request.id)
                continue
            trips.append(trip)

        return trips

    def _try_consolidated(
        self, run: _PlanningRun, remaining: List[DeliveryRequest]
    ) -> Optional[Trip]:
        """Largest leading batch (at least two requests) that one drone can fly."""

        for size in range(len(remaining), 1, -1):
            batch = remaining[:size]
            candidates = run.matcher.find_available_drones(batch)
            if not candidates:
                continue
            trip = self._plan_multi(run, candidates[0], batch)
            if trip is not None:
                return trip
        return None

    def _resolve(self, run: _PlanningRun, drone_id: str) -> Optional[Tuple[Drone, ServicePoint]]:
        drone = run.matcher.drone_details(drone_id)
        service_point = run.matcher.service_point_for(drone_id)
        if drone is None or service_point is None:
            return None
        return drone, service_point

    def _plan_single(
        self, run: _PlanningRun, drone_id: str, request: DeliveryRequest
    ) -> Optional[Trip]:
        """Service point -> delivery -> service point for one request."""

        resolved = self._resolve(run, drone_id)
        if resolved is None:
            return None
        drone, service_point = resolved
        LOGGER.debug("Planning single delivery trip for drone %s to dispatch %s", drone_id, request.id)

        outward = run.path(service_point.location, request.delivery)
        if not outward:
            LOGGER.error("A* could not find path to delivery %s.", request.id)
            return None
        arrival = outward[-1]
        inward = run.path(arrival, service_point.location)
        if not inward:
            LOGGER.error("A* could not find return path from delivery %s.", request.id)
            return None

        flight_path = [*outward, arrival, *inward[1:]]
        moves = len(flight_path) - 1
        capability = drone.capability
        if moves > capability.max_moves:
            LOGGER.warning(
                "Trip for dispatch %s exceeds maxMoves for drone %s. (%s > %s)",
                request.id,
                drone_id,
                moves,
                capability.max_moves,
            )
            return None

        cost = estimate_cost(capability, moves)
        if not request.requirements.within_budget(cost):
            LOGGER.warning(
                "Trip for dispatch %s exceeds maxCost: %s > %s",
                request.id,
                cost,
                request.requirements.max_cost,
            )
            return None

        return Trip(
            drone_id=drone_id,
            service_point=service_point,
            deliveries=(DeliverySegment(request.id, tuple(flight_path)),),
            total_cost=cost,
            total_moves=moves,
        )

    def _plan_multi(
        self, run: _PlanningRun, drone_id: str, requests: Sequence[DeliveryRequest]
    ) -> Optional[Trip]:
        """One trip visiting every request in nearest-neighbour order.

        Each segment carries its full inbound leg plus the hover point, so the
        point where one segment ends is repeated at the start of the next.
        """

        resolved = self._resolve(run, drone_id)
        if resolved is None:
            return None
        drone, service_point = resolved

        ordered = nearest_neighbour_order(
            service_point.location, requests, lambda request: request.delivery
        )
        LOGGER.info(
            "Multi-delivery trip for drone %s from %s: %s",
            drone_id,
            service_point.location,
            ", ".join(f"D{request.id}" for request in ordered),
        )

        segments: List[DeliverySegment] = []
        current = service_point.location
        moves = 0
        for index, request in enumerate(ordered):
            leg = run.path(current, request.delivery)
            if not leg:
                LOGGER.error("Cannot find path to delivery %s", request.id)
                return None
            arrival = leg[-1]
            flight_path = [*leg, arrival]

            if index == len(ordered) - 1:
                inward = run.path(arrival, service_point.location)
                if not inward:
                    LOGGER.error("Cannot find return path from delivery %s", request.id)
                    return None
                flight_path.extend(inward[1:])

            LOGGER.debug(
                "Segment for delivery %s has %s positions", request.id, len(flight_path)
            )
            segments.append(DeliverySegment(request.id, tuple(flight_path)))
            moves += len(flight_path) - 1
            current = arrival

        capability = drone.capability
        if moves > capability.max_moves:
            LOGGER.warning("Multi-delivery trip exceeds maxMoves: %s > %s", moves, capability.max_moves)
            return None

        cost = estimate_cost(capability, moves)
        pro_rata = cost / len(requests)
        for request in requests:
            if not request.requirements.within_budget(pro_rata):
                LOGGER.warning(
                    "Trip exceeds maxCost for dispatch %s: pro-rata cost %s > max %s",
                    request.id,
                    pro_rata,
                    request.requirements.max_cost,
                )
                return None

        return Trip(
            drone_id=drone_id,
            service_point=service_point,
            deliveries=tuple(segments),
            total_cost=cost,
            total_moves=moves,
        )
