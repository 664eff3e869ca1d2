"""Mini README: Explain which drones could serve a single request, and why not.

Structure:
    * FailureKind / ConstraintFailure - structured record of one failed check.
    * DroneAvailabilityCheck - per-drone verdict with messages and failures.
    * AvailabilityExplanation - every check plus remediation suggestions.
    * AvailabilityExplainer - runs the checks against a fresh fleet snapshot.

Every drone is checked on its own, with no filtering, using the same
predicates as the drone matcher. Suggestions are derived from the structured
failures rather than the human-readable messages, so rewording a message never
changes which suggestions are offered.
"""

from __future__ import annotations

import datetime as dt
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..data_source import DataSourceClient, DayOfWeek, Drone, FleetSnapshot, ServicePoint
from ..dispatch import DeliveryRequest
from ..geometry import distance
from ..logging_utils import get_logger
from ..matching import estimate_cost, estimate_moves, find_service_point, is_available_at

LOGGER = get_logger(__name__)

AVAILABLE_MESSAGE = "Available - meets all requirements"


class FailureKind(str, Enum):
    COOLING = "cooling"
    HEATING = "heating"
    CAPACITY = "capacity"
    SCHEDULE = "schedule"
    SERVICE_POINT = "service_point"
    COST = "cost"


@dataclass(frozen=True, slots=True)
class ConstraintFailure:
    kind: FailureKind
    message: str
    payload: Dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "message": self.message, "payload": dict(self.payload)}


@dataclass(frozen=True, slots=True)
class DroneAvailabilityCheck:
    drone_id: str
    drone_name: str
    failures: List[ConstraintFailure] = field(default_factory=list)

    @property
    def available(self) -> bool:
        return not self.failures

    @property
    def reasons(self) -> List[str]:
        if self.available:
            return [AVAILABLE_MESSAGE]
        return [failure.message for failure in self.failures]

    def has_failure(self, kind: FailureKind) -> bool:
        return any(failure.kind is kind for failure in self.failures)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "droneId": self.drone_id,
            "droneName": self.drone_name,
            "available": self.available,
            "reasons": self.reasons,
            "failures": [failure.as_dict() for failure in self.failures],
        }


@dataclass(frozen=True, slots=True)
class AvailabilityExplanation:
    drone_checks: List[DroneAvailabilityCheck]
    suggestions: List[str]

    @property
    def available_drone_ids(self) -> List[str]:
        return [check.drone_id for check in self.drone_checks if check.available]

    def as_dict(self) -> Dict[str, Any]:
        return {
            "droneChecks": [check.as_dict() for check in self.drone_checks],
            "suggestions": list(self.suggestions),
        }


def _format_time(value: dt.time) -> str:
    if value.second or value.microsecond:
        return value.isoformat()
    return value.strftime("%H:%M")


def check_drone(
    drone: Drone, request: DeliveryRequest, snapshot: FleetSnapshot
) -> DroneAvailabilityCheck:
    """Run every constraint for one drone; the cost estimate only runs last."""

    requirements = request.requirements
    capability = drone.capability
    failures: List[ConstraintFailure] = []

    if requirements.needs_cooling and not capability.cooling:
        failures.append(
            ConstraintFailure(
                FailureKind.COOLING, "Missing cooling capability (delivery requires refrigeration)"
            )
        )
    if requirements.needs_heating and not capability.heating:
        failures.append(
            ConstraintFailure(
                FailureKind.HEATING, "Missing heating capability (delivery requires heating)"
            )
        )
    if requirements.capacity > capability.capacity:
        failures.append(
            ConstraintFailure(
                FailureKind.CAPACITY,
                f"Insufficient capacity: {capability.capacity}kg max, need {requirements.capacity}kg",
                {"droneCapacity": capability.capacity, "requiredCapacity": requirements.capacity},
            )
        )

    if not is_available_at(drone.id, request.date, request.time, snapshot.assignments):
        day = DayOfWeek.from_date(request.date)
        failures.append(
            ConstraintFailure(
                FailureKind.SCHEDULE,
                f"Not available on {day.value} at {_format_time(request.time)}",
                {"dayOfWeek": day.value, "time": request.time.isoformat()},
            )
        )

    service_point: Optional[ServicePoint] = find_service_point(
        drone.id, snapshot.assignments, snapshot.service_points
    )
    if service_point is None:
        failures.append(
            ConstraintFailure(FailureKind.SERVICE_POINT, "No service point assigned to this drone")
        )

    if not failures and requirements.max_cost is not None and service_point is not None:
        round_trip = distance(service_point.location, request.delivery) * 2
        estimated = estimate_cost(capability, estimate_moves(round_trip))
        if estimated > requirements.max_cost:
            failures.append(
                ConstraintFailure(
                    FailureKind.COST,
                    f"Estimated cost £{estimated:.2f} exceeds max budget £{requirements.max_cost:.2f}",
                    {"estimatedCost": estimated, "maxCost": requirements.max_cost},
                )
            )

    return DroneAvailabilityCheck(drone_id=drone.id, drone_name=drone.name, failures=failures)


def suggest_remedies(
    checks: List[DroneAvailabilityCheck], request: DeliveryRequest
) -> List[str]:
    """Remediation hints, only when no drone passed every check."""

    if any(check.available for check in checks):
        return []

    suggestions: List[str] = []
    requirements = request.requirements

    if checks and all(check.has_failure(FailureKind.CAPACITY) for check in checks):
        suggestions.append("Consider splitting the delivery into multiple smaller shipments")
        best_capacity = max(
            failure.payload["droneCapacity"]
            for check in checks
            for failure in check.failures
            if failure.kind is FailureKind.CAPACITY
        )
        if best_capacity > 0:
            parts = math.ceil(requirements.capacity / best_capacity)
            suggestions.append(
                f"Split into {parts} deliveries of ~{requirements.capacity / parts:.1f}kg each"
            )

    if any(check.has_failure(FailureKind.SCHEDULE) for check in checks):
        suggestions.append(
            "Try scheduling at a different time (some drones have limited availability)"
        )

    # A cooling failure implies cooling was requested, so this stays silent in practice.
    if requirements.cooling is False and any(
        check.has_failure(FailureKind.COOLING) for check in checks
    ):
        suggestions.append(
            "Consider if this delivery actually needs cooling - some medicines don't require it"
        )

    if any(check.has_failure(FailureKind.COST) for check in checks):
        suggestions.append(
            "Increase the budget, or choose a delivery location closer to a service point"
        )

    return suggestions


class AvailabilityExplainer:
    """Diagnose drone availability for one delivery request."""

    def __init__(self, data_source: DataSourceClient) -> None:
        self.data_source = data_source

    def explain(self, request: DeliveryRequest) -> AvailabilityExplanation:
        snapshot = self.data_source.fetch_snapshot()
        checks = [check_drone(drone, request, snapshot) for drone in snapshot.drones]
        suggestions = suggest_remedies(checks, request)
        LOGGER.info(
            "Explained availability for dispatch %s: %s of %s drones available, %s suggestions",
            request.id,
            sum(1 for check in checks if check.available),
            len(checks),
            len(suggestions),
        )
        return AvailabilityExplanation(drone_checks=checks, suggestions=suggestions)
