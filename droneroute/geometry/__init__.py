"""Mini README: Planar geometry primitives used by routing and matching.

Positions are (longitude, latitude) pairs in degrees and every calculation is a
flat Euclidean approximation, which is accurate enough over the few kilometres
a delivery drone covers. The ``primitives`` module holds the public API.
"""

from .primitives import (
    ANGLE_INCREMENT,
    COMPASS_ANGLES,
    MOVE_DISTANCE,
    InvalidAngleError,
    InvalidRegionError,
    Position,
    Region,
    distance,
    is_close,
    line_intersects_region,
    next_position,
    point_in_region,
    segments_intersect,
    validate_region,
)

__all__ = [
    "ANGLE_INCREMENT",
    "COMPASS_ANGLES",
    "MOVE_DISTANCE",
    "InvalidAngleError",
    "InvalidRegionError",
    "Position",
    "Region",
    "distance",
    "is_close",
    "line_intersects_region",
    "next_position",
    "point_in_region",
    "segments_intersect",
    "validate_region",
]
