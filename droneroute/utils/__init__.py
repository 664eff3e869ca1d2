"""Mini README: Utility helpers for DroneRoute.

Currently exports the GeoJSON builders used to project flight plans onto a
map.
"""

from .geojson import feature_collection, line_string_feature

__all__ = ["feature_collection", "line_string_feature"]
