"""Mini README: GeoJSON helper utilities for DroneRoute.

Builds ``LineString`` features for flight paths so plans can be drawn on a
map. Keeping the logic here avoids importing the web framework when the
planner or the CLI only needs to serialise a plan.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional, Sequence

from ..geometry import Position


def line_string_feature(
    path: Sequence[Position], properties: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """Wrap an ordered path in a GeoJSON Feature (longitude first)."""

    return {
        "type": "Feature",
        "geometry": {
            "type": "LineString",
            "coordinates": [position.as_coordinates() for position in path],
        },
        "properties": dict(properties or {}),
    }


def feature_collection(features: Iterable[Dict[str, Any]] = ()) -> Dict[str, Any]:
    """Return a FeatureCollection; no features gives the empty projection."""

    return {"type": "FeatureCollection", "features": list(features)}
