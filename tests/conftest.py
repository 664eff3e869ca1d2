"""Mini README: Shared fixtures for the DroneRoute test-suite.

Provides a small in-memory fleet (one service point, four drones with
different equipment and schedules) plus helpers for building delivery
requests and pathfinder stand-ins. Nothing here touches the network.
"""

from __future__ import annotations

import datetime as dt
from typing import List, Optional, Sequence

import pytest

from droneroute.data_source import StaticDataSource
from droneroute.dispatch import DeliveryRequest
from droneroute.geometry import Position, Region

BASE = Position(lng=-3.1863, lat=55.9445)
MONDAY = dt.date(2025, 1, 6)
TUESDAY = dt.date(2025, 1, 7)

WEEKDAYS = ["MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY"]
ALL_DAYS = WEEKDAYS + ["SATURDAY", "SUNDAY"]


def drone_payload(
    drone_id: str,
    name: str,
    *,
    cooling: bool = False,
    heating: bool = False,
    capacity: float = 10.0,
    max_moves: int = 2000,
    cost_per_move: float = 0.01,
    cost_initial: float = 1.0,
    cost_final: float = 1.0,
) -> dict:
    return {
        "id": drone_id,
        "name": name,
        "capability": {
            "cooling": cooling,
            "heating": heating,
            "capacity": capacity,
            "maxMoves": max_moves,
            "costPerMove": cost_per_move,
            "costInitial": cost_initial,
            "costFinal": cost_final,
        },
    }


def schedule_payload(drone_id: str, days: Sequence[str], start: str, until: str) -> dict:
    return {
        "id": drone_id,
        "availability": [{"dayOfWeek": day, "from": start, "until": until} for day in days],
    }


def service_point_payload(point_id: int = 1, location: Position = BASE) -> dict:
    return {"id": point_id, "name": "Appleton Tower", "location": location.as_dict()}


def make_request(
    request_id: int,
    *,
    capacity: float = 1.0,
    date: dt.date = MONDAY,
    time: str = "10:00",
    cooling: Optional[bool] = None,
    heating: Optional[bool] = None,
    max_cost: Optional[float] = None,
    offset: tuple = (0.0003, 0.0),
) -> DeliveryRequest:
    requirements: dict = {"capacity": capacity}
    if cooling is not None:
        requirements["cooling"] = cooling
    if heating is not None:
        requirements["heating"] = heating
    if max_cost is not None:
        requirements["maxCost"] = max_cost
    return DeliveryRequest.model_validate(
        {
            "id": request_id,
            "date": date.isoformat(),
            "time": time,
            "requirements": requirements,
            "delivery": {"lng": BASE.lng + offset[0], "lat": BASE.lat + offset[1]},
        }
    )


class LinearPathfinder:
    """Pathfinder stand-in: ``steps`` evenly spaced moves from start to end."""

    def __init__(self, steps: int = 1) -> None:
        self.steps = steps
        self.calls: List[tuple] = []

    def find_path(
        self, start: Position, end: Position, no_fly_zones: Sequence[Region]
    ) -> List[Position]:
        self.calls.append((start, end))
        path = [
            Position(
                lng=start.lng + (end.lng - start.lng) * index / self.steps,
                lat=start.lat + (end.lat - start.lat) * index / self.steps,
            )
            for index in range(self.steps)
        ]
        return path + [end]


class NoPathfinder:
    """Pathfinder stand-in that never finds a route."""

    def find_path(
        self, start: Position, end: Position, no_fly_zones: Sequence[Region]
    ) -> List[Position]:
        return []


@pytest.fixture()
def fleet() -> StaticDataSource:
    """Four drones at one base; drone 4 is not assigned anywhere."""

    return StaticDataSource.from_payloads(
        drones=[
            drone_payload(
                "1", "Alpha", cooling=True, capacity=4.0, max_moves=2000,
                cost_per_move=0.01, cost_initial=4.3, cost_final=6.5,
            ),
            drone_payload(
                "2", "Bravo", heating=True, capacity=8.0, max_moves=1000,
                cost_per_move=0.03, cost_initial=2.6, cost_final=5.4,
            ),
            drone_payload(
                "3", "Charlie", capacity=20.0, max_moves=4000,
                cost_per_move=0.05, cost_initial=9.5, cost_final=11.5,
            ),
            drone_payload(
                "4", "Delta", cooling=True, heating=True, capacity=12.0, max_moves=1500,
                cost_per_move=0.02, cost_initial=1.4, cost_final=2.5,
            ),
        ],
        service_points=[service_point_payload()],
        assignments=[
            {
                "servicePointId": 1,
                "drones": [
                    schedule_payload("1", WEEKDAYS, "08:00", "18:00"),
                    schedule_payload("2", ["MONDAY"], "09:00", "12:00"),
                    schedule_payload("3", ALL_DAYS, "00:00", "23:59:59"),
                ],
            }
        ],
    )
