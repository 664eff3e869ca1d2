"""Mini README: Tests for drone matching and fleet queries.

Exercises aggregate capability filtering, half-open weekly schedules, the
service-point requirement, the approximate pro-rata cost filter and the
attribute query language.
"""

from __future__ import annotations

import pytest

from conftest import TUESDAY, make_request
from droneroute.data_source import StaticDataSource
from droneroute.matching import AggregateRequirements, DroneMatcher, DroneQuery


@pytest.fixture()
def matcher(fleet: StaticDataSource) -> DroneMatcher:
    return DroneMatcher(fleet.fetch_snapshot())


def test_cooling_request_only_matches_refrigerated_drones(matcher: DroneMatcher) -> None:
    request = make_request(1, capacity=2.0, cooling=True)
    assert matcher.find_available_drones([request]) == ["1"]


def test_heating_request_only_matches_heated_drones(matcher: DroneMatcher) -> None:
    request = make_request(1, heating=True)
    # Drone 4 is heated but has no service point.
    assert matcher.find_available_drones([request]) == ["2"]


def test_capacity_filter_keeps_fleet_order(matcher: DroneMatcher) -> None:
    request = make_request(1, capacity=6.0)
    assert matcher.find_available_drones([request]) == ["2", "3"]


@pytest.mark.parametrize(
    ("time", "expected"),
    [("09:00", ["2", "3"]), ("11:59", ["2", "3"]), ("12:00", ["3"]), ("08:59", ["3"])],
)
def test_schedule_windows_are_half_open(matcher: DroneMatcher, time: str, expected: list) -> None:
    request = make_request(1, capacity=6.0, time=time)
    assert matcher.find_available_drones([request]) == expected


def test_schedule_depends_on_weekday(matcher: DroneMatcher) -> None:
    request = make_request(1, capacity=6.0, date=TUESDAY)
    assert matcher.find_available_drones([request]) == ["3"]


def test_requirements_are_aggregated_across_requests(matcher: DroneMatcher) -> None:
    first = make_request(1, capacity=3.0)
    second = make_request(2, capacity=3.0, offset=(0.0, 0.0003))

    assert matcher.find_available_drones([first, second]) == ["2", "3"]

    needs = AggregateRequirements.of([first, make_request(3, capacity=3.0, cooling=True)])
    assert needs.total_capacity == 6.0
    assert needs.needs_cooling
    assert not needs.needs_heating


def test_every_request_must_fit_the_schedule(matcher: DroneMatcher) -> None:
    morning = make_request(1, capacity=6.0, time="10:00")
    afternoon = make_request(2, capacity=1.0, time="15:00")
    assert matcher.find_available_drones([morning, afternoon]) == ["3"]


def test_approximate_cost_filter(matcher: DroneMatcher) -> None:
    # 0.003 degrees out: about 40 moves for the round trip.
    request = make_request(1, max_cost=10.0, offset=(0.003, 0.0))
    assert matcher.find_available_drones([request]) == ["2"]


def test_approximate_cost_is_split_pro_rata(matcher: DroneMatcher) -> None:
    snapshot = matcher.snapshot
    drone = matcher.drone_details("2")
    base = matcher.service_point_for("2")
    requests = [make_request(1, offset=(0.003, 0.0)), make_request(2, offset=(0.003, 0.0))]

    single = matcher.approximate_pro_rata_cost(drone, base, requests[:1])
    shared = matcher.approximate_pro_rata_cost(drone, base, requests)

    assert snapshot.service_points[0] == base
    assert single == pytest.approx(2.6 + 5.4 + 40 * 0.03)
    assert shared == pytest.approx(single / 2)


def test_no_requests_means_no_candidates(matcher: DroneMatcher) -> None:
    assert matcher.find_available_drones([]) == []


def test_drones_with_cooling(matcher: DroneMatcher) -> None:
    assert matcher.drones_with_cooling(True) == ["1", "4"]
    assert matcher.drones_with_cooling(False) == ["2", "3"]


def test_drone_details_and_service_points(matcher: DroneMatcher) -> None:
    assert matcher.drone_details("2").name == "Bravo"
    assert matcher.drone_details("99") is None
    assert matcher.service_point_for("1").name == "Appleton Tower"
    assert matcher.service_point_for("4") is None


def test_attribute_equality_queries(matcher: DroneMatcher) -> None:
    assert matcher.drones_matching("cooling", "true") == ["1", "4"]
    assert matcher.drones_matching("heating", "FALSE") == ["1", "3"]
    assert matcher.drones_matching("maxMoves", "1000") == ["2"]
    assert matcher.drones_matching("capacity", "8") == ["2"]
    assert matcher.drones_matching("colour", "red") == []


def test_combined_queries(matcher: DroneMatcher) -> None:
    queries = [
        DroneQuery(attribute="capacity", operator=">", value="5"),
        DroneQuery(attribute="costPerMove", operator="<=", value="0.03"),
    ]
    assert matcher.drones_matching_queries(queries) == ["2", "4"]

    queries.append(DroneQuery(attribute="heating", value="true"))
    assert matcher.drones_matching_queries(queries) == ["2", "4"]

    queries.append(DroneQuery(attribute="costInitial", operator="!=", value="2.6"))
    assert matcher.drones_matching_queries(queries) == ["4"]


@pytest.mark.parametrize(
    "query",
    [
        DroneQuery(attribute="capacity", operator="~", value="5"),
        DroneQuery(attribute="capacity", operator=">", value="lots"),
        DroneQuery(attribute="wingspan", operator=">", value="1"),
    ],
)
def test_malformed_queries_never_match(matcher: DroneMatcher, query: DroneQuery) -> None:
    assert matcher.drones_matching_queries([query]) == []
