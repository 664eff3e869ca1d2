"""Mini README: Distance, stepping and polygon tests over (lng, lat) positions.

Structure:
    * Position / Region - immutable value types shared across the package.
    * distance / is_close - Euclidean metrics in degree space.
    * next_position - one fixed-length move along a compass direction.
    * point_in_region / segments_intersect / line_intersects_region - polygon
      tests used by the pathfinder to keep drones out of no-fly zones.

Malformed input (an angle off the 22.5 degree compass or an unclosed polygon)
raises a ``ValueError`` subclass so the web layer can map it to a client
error. Everything else is a pure function without side effects.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Sequence, Tuple

MOVE_DISTANCE = 0.00015
CLOSE_DISTANCE = 0.00015
ANGLE_INCREMENT = 22.5
COMPASS_ANGLES: Tuple[float, ...] = tuple(index * ANGLE_INCREMENT for index in range(16))

_ANGLE_TOLERANCE = 1e-9
_ON_SEGMENT_TOLERANCE = 1e-9
_COLLINEAR_TOLERANCE = 1e-9
# Nano-degree lattice used for hashing; far finer than a single move.
_KEY_SCALE = 1e9


class InvalidAngleError(ValueError):
    """Raised when a move direction is not a multiple of 22.5 degrees."""


class InvalidRegionError(ValueError):
    """Raised when a polygon is not closed or has fewer than four vertices."""


@dataclass(frozen=True, slots=True)
class Position:
    """A longitude/latitude pair in degrees."""

    lng: float
    lat: float

    def key(self) -> Tuple[int, int]:
        """Integer lattice rendering used for closed sets and caches."""

        return (round(self.lng * _KEY_SCALE), round(self.lat * _KEY_SCALE))

    def as_dict(self) -> Dict[str, float]:
        return {"lng": self.lng, "lat": self.lat}

    def as_coordinates(self) -> list:
        """GeoJSON ordering: longitude first."""

        return [self.lng, self.lat]


@dataclass(frozen=True, slots=True)
class Region:
    """Named closed polygon; the first and last vertex must coincide."""

    name: str
    vertices: Tuple[Position, ...]

    def edges(self) -> Sequence[Tuple[Position, Position]]:
        return [
            (self.vertices[index], self.vertices[index + 1])
            for index in range(len(self.vertices) - 1)
        ]


def validate_region(region: Region) -> None:
    """Raise ``InvalidRegionError`` unless the ring is closed with >= 4 vertices."""

    vertices = region.vertices
    if len(vertices) < 4 or vertices[0] != vertices[-1]:
        raise InvalidRegionError(
            f"Region '{region.name}' must be a closed ring of at least 4 vertices"
        )


def distance(first: Position, second: Position) -> float:
    """Planar Euclidean distance in degrees."""

    delta_lat = second.lat - first.lat
    delta_lng = second.lng - first.lng
    return math.sqrt(delta_lat * delta_lat + delta_lng * delta_lng)


def is_close(first: Position, second: Position) -> bool:
    """True when the points are strictly closer than one move."""

    return distance(first, second) < CLOSE_DISTANCE


def next_position(start: Position, angle: float) -> Position:
    """Move ``MOVE_DISTANCE`` from ``start`` along ``angle`` degrees.

    0 degrees points east and 90 degrees north, so longitude follows the
    cosine and latitude the sine of the angle.
    """

    quotient = angle / ANGLE_INCREMENT
    if abs(quotient - round(quotient)) > _ANGLE_TOLERANCE:
        raise InvalidAngleError(f"Angle {angle} is not a multiple of {ANGLE_INCREMENT}")

    radians = math.radians(angle)
    return Position(
        lng=start.lng + MOVE_DISTANCE * math.cos(radians),
        lat=start.lat + MOVE_DISTANCE * math.sin(radians),
    )


def point_in_region(point: Position, region: Region) -> bool:
    """Boundary-inclusive point-in-polygon test."""

    validate_region(region)
    for edge_start, edge_end in region.edges():
        if _on_edge(point, edge_start, edge_end):
            return True
    return _ray_cast(point, region.vertices)


def segments_intersect(p1: Position, q1: Position, p2: Position, q2: Position) -> bool:
    """Orientation-based intersection test for segments p1-q1 and p2-q2."""

    o1 = _orientation(p1, q1, p2)
    o2 = _orientation(p1, q1, q2)
    o3 = _orientation(p2, q2, p1)
    o4 = _orientation(p2, q2, q1)

    if o1 != o2 and o3 != o4:
        return True

    # Collinear cases fall back to bounding-box containment.
    if o1 == 0 and _on_segment(p1, p2, q1):
        return True
    if o2 == 0 and _on_segment(p1, q2, q1):
        return True
    if o3 == 0 and _on_segment(p2, p1, q2):
        return True
    if o4 == 0 and _on_segment(p2, q1, q2):
        return True
    return False


def line_intersects_region(start: Position, end: Position, region: Region) -> bool:
    """True if the segment start-end touches any edge of ``region``.

    Whether either endpoint lies inside the region is the caller's concern.
    """

    return any(
        segments_intersect(start, end, edge_start, edge_end)
        for edge_start, edge_end in region.edges()
    )


def _orientation(p: Position, q: Position, r: Position) -> int:
    """0 for collinear, 1 for clockwise, 2 for counter-clockwise."""

    value = (q.lat - p.lat) * (r.lng - q.lng) - (q.lng - p.lng) * (r.lat - q.lat)
    if abs(value) < _COLLINEAR_TOLERANCE:
        return 0
    return 1 if value > 0 else 2


def _on_segment(p: Position, q: Position, r: Position) -> bool:
    """True if ``q`` lies inside the bounding box of segment p-r."""

    return (
        min(p.lng, r.lng) <= q.lng <= max(p.lng, r.lng)
        and min(p.lat, r.lat) <= q.lat <= max(p.lat, r.lat)
    )


def _on_edge(point: Position, edge_start: Position, edge_end: Position) -> bool:
    to_start = distance(point, edge_start)
    to_end = distance(point, edge_end)
    return abs((to_start + to_end) - distance(edge_start, edge_end)) < _ON_SEGMENT_TOLERANCE


def _ray_cast(point: Position, vertices: Sequence[Position]) -> bool:
    """Even-odd rule with a ray cast towards increasing longitude."""

    inside = False
    previous = vertices[-1]
    for vertex in vertices:
        crosses = (vertex.lat > point.lat) != (previous.lat > point.lat)
        if crosses:
            intersect_lng = (previous.lng - vertex.lng) * (point.lat - vertex.lat) / (
                previous.lat - vertex.lat
            ) + vertex.lng
            if point.lng < intersect_lng:
                inside = not inside
        previous = vertex
    return inside
