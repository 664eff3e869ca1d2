"""Mini README: Core package initializer for the DroneRoute routing engine.

DroneRoute plans medical drone deliveries around no-fly zones. The package is
split into geometry, pathfinding, fleet data access, drone matching, trip
planning and availability diagnostics, with a FastAPI interface on top. This
initializer stays lightweight so importing the package never pulls in the web
framework.
"""

from .logging_utils import get_logger

__all__ = ["get_logger"]
