"""Mini README: Tests for the trip planner and its GeoJSON projection.

Most tests swap the A* search for ``LinearPathfinder`` so move counts and
costs are exact; one end-to-end test runs the real pathfinder.
"""

from __future__ import annotations

from typing import List

import pytest

from conftest import (
    ALL_DAYS,
    BASE,
    MONDAY,
    TUESDAY,
    LinearPathfinder,
    NoPathfinder,
    drone_payload,
    make_request,
    schedule_payload,
    service_point_payload,
)
from droneroute.data_source import StaticDataSource
from droneroute.geometry import Position, is_close
from droneroute.planning import TripPlanner


def _fleet(drones: List[dict], schedules: List[dict]) -> StaticDataSource:
    return StaticDataSource.from_payloads(
        drones=drones,
        service_points=[service_point_payload()],
        assignments=[{"servicePointId": 1, "drones": schedules}],
    )


def _single_drone_fleet(**capability) -> StaticDataSource:
    return _fleet(
        [drone_payload("A", "Solo", **capability)],
        [schedule_payload("A", ALL_DAYS, "00:00", "23:59:59")],
    )


def _split_fleet() -> StaticDataSource:
    """Two small drones sharing the day: X in the morning, Y in the afternoon."""

    return _fleet(
        [drone_payload("X", "Morning", capacity=4.0), drone_payload("Y", "Afternoon", capacity=4.0)],
        [
            schedule_payload("X", ["MONDAY"], "08:00", "12:00"),
            schedule_payload("Y", ["MONDAY"], "12:00", "18:00"),
        ],
    )


def test_single_delivery_trip_layout_and_cost() -> None:
    source = _single_drone_fleet(cost_initial=1.0, cost_final=2.0, cost_per_move=0.05, max_moves=100)
    request = make_request(1)

    plan = TripPlanner(source, pathfinder=LinearPathfinder(steps=7)).plan([request])

    assert len(plan.trips) == 1
    trip = plan.trips[0]
    path = trip.deliveries[0].flight_path
    assert trip.drone_id == "A"
    assert trip.total_moves == 15
    assert len(path) == 16
    assert trip.total_cost == pytest.approx(3.75)
    assert path[0] == BASE
    # Hover: the arrival point is repeated before the return leg.
    assert path[7] == path[8]
    assert is_close(path[7], request.delivery)
    assert is_close(path[-1], BASE)
    assert plan.total_moves == 15
    assert plan.total_cost == pytest.approx(3.75)


def test_plan_serialises_to_wire_shape() -> None:
    source = _single_drone_fleet()
    plan = TripPlanner(source, pathfinder=LinearPathfinder(steps=1)).plan([make_request(5)])

    payload = plan.as_dict()

    assert set(payload) == {"cost", "totalMoves", "dronePaths"}
    drone_path = payload["dronePaths"][0]
    assert drone_path["droneId"] == "A"
    delivery = drone_path["deliveries"][0]
    assert delivery["deliveryId"] == 5
    assert delivery["flightPath"][0] == {"lng": BASE.lng, "lat": BASE.lat}
    assert payload["totalMoves"] == len(delivery["flightPath"]) - 1


def test_trip_exceeding_max_moves_is_dropped() -> None:
    source = _single_drone_fleet(max_moves=10)
    plan = TripPlanner(source, pathfinder=LinearPathfinder(steps=7)).plan([make_request(1)])

    assert plan.trips == []
    assert plan.total_moves == 0


def test_unreachable_delivery_is_dropped() -> None:
    plan = TripPlanner(_single_drone_fleet(), pathfinder=NoPathfinder()).plan([make_request(1)])
    assert plan.delivery_ids() == []


def test_same_date_requests_share_one_trip() -> None:
    near = make_request(1, offset=(0.0003, 0.0))
    far = make_request(2, offset=(0.0006, 0.0))

    plan = TripPlanner(_single_drone_fleet(), pathfinder=LinearPathfinder(steps=1)).plan([far, near])

    assert len(plan.trips) == 1
    trip = plan.trips[0]
    # Nearest-neighbour order from the base, not submission order.
    assert trip.delivery_ids() == [1, 2]
    first, second = trip.deliveries
    assert first.flight_path == (BASE, near.delivery, near.delivery)
    assert second.flight_path[:3] == (near.delivery, far.delivery, far.delivery)
    assert is_close(second.flight_path[-1], BASE)
    assert trip.total_moves == (len(first.flight_path) - 1) + (len(second.flight_path) - 1) == 5
    assert len(trip.flight_path()) == 6


def test_capacity_overflow_splits_across_drones() -> None:
    morning = make_request(1, capacity=3.0, time="10:00")
    afternoon = make_request(2, capacity=3.0, time="14:00", offset=(0.0003, 0.0001))

    plan = TripPlanner(_split_fleet(), pathfinder=LinearPathfinder(steps=2)).plan([morning, afternoon])

    assert sorted(plan.delivery_ids()) == [1, 2]
    assert len(plan.delivery_ids()) == 2
    assert {trip.drone_id for trip in plan.trips} == {"X", "Y"}


def test_pro_rata_budget_rejects_whole_trip() -> None:
    source = _single_drone_fleet(cost_initial=1.0, cost_final=1.0, cost_per_move=0.1, max_moves=1000)
    thrifty = make_request(1, max_cost=2.0, offset=(0.0003, 0.0))
    relaxed = make_request(2, offset=(0.0003, 0.0003))

    plan = TripPlanner(source, pathfinder=LinearPathfinder(steps=20)).plan([thrifty, relaxed])

    # The shared trip costs 8.2, i.e. 4.1 per request, over the 2.0 budget;
    # flown alone the thrifty request is still too expensive.
    assert plan.delivery_ids() == [2]
    assert plan.trips[0].total_moves == 41


def test_dates_are_planned_in_ascending_order() -> None:
    tuesday = make_request(1, date=TUESDAY)
    monday = make_request(2, date=MONDAY)

    plan = TripPlanner(_single_drone_fleet(), pathfinder=LinearPathfinder()).plan([tuesday, monday])

    assert [trip.delivery_ids() for trip in plan.trips] == [[2], [1]]


def test_empty_batch_does_not_fetch_fleet_data() -> None:
    source = _single_drone_fleet()
    plan = TripPlanner(source, pathfinder=LinearPathfinder()).plan([])

    assert plan.as_dict() == {"cost": 0, "totalMoves": 0, "dronePaths": []}
    assert source.snapshot_count == 0


def test_each_plan_uses_a_fresh_snapshot_and_cache() -> None:
    source = _single_drone_fleet()
    pathfinder = LinearPathfinder()
    planner = TripPlanner(source, pathfinder=pathfinder)
    requests = [make_request(1)]

    planner.plan(requests)
    first_run_calls = len(pathfinder.calls)
    planner.plan(requests)

    assert first_run_calls == 2
    assert len(pathfinder.calls) == 2 * first_run_calls
    assert source.snapshot_count == 2


def test_geojson_projection_for_single_drone() -> None:
    source = _single_drone_fleet()
    planner = TripPlanner(source, pathfinder=LinearPathfinder(steps=1))
    requests = [make_request(1), make_request(2, offset=(0.0006, 0.0))]

    collection = planner.plan_as_geojson(requests)
    trip = planner.plan(requests).trips[0]

    assert collection["type"] == "FeatureCollection"
    (feature,) = collection["features"]
    assert feature["properties"] == {}
    assert feature["geometry"]["type"] == "LineString"
    assert feature["geometry"]["coordinates"] == [[p.lng, p.lat] for p in trip.flight_path()]


def test_geojson_projection_is_empty_for_several_dates() -> None:
    source = _single_drone_fleet()
    planner = TripPlanner(source, pathfinder=LinearPathfinder())

    collection = planner.plan_as_geojson([make_request(1, date=MONDAY), make_request(2, date=TUESDAY)])

    assert collection == {"type": "FeatureCollection", "features": []}
    assert source.snapshot_count == 0


def test_geojson_projection_is_empty_for_several_drones() -> None:
    planner = TripPlanner(_split_fleet(), pathfinder=LinearPathfinder())
    requests = [make_request(1, capacity=3.0, time="10:00"), make_request(2, capacity=3.0, time="14:00")]

    assert planner.plan_as_geojson(requests)["features"] == []


def test_geojson_projection_is_empty_without_trips() -> None:
    planner = TripPlanner(_single_drone_fleet(), pathfinder=NoPathfinder())
    assert planner.plan_as_geojson([make_request(1)])["features"] == []


def test_end_to_end_with_astar(fleet: StaticDataSource) -> None:
    request = make_request(9, offset=(0.0012, 0.0006))

    plan = TripPlanner(fleet).plan([request])

    (trip,) = plan.trips
    path: List[Position] = list(trip.deliveries[0].flight_path)
    assert trip.drone_id == "1"
    assert path[0] == BASE
    assert is_close(path[-1], BASE)
    assert any(is_close(point, request.delivery) for point in path)
    assert trip.total_moves == len(path) - 1
    assert trip.total_cost == pytest.approx(4.3 + 6.5 + 0.01 * trip.total_moves)
