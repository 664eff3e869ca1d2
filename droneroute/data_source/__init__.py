"""Mini README: Upstream fleet data access for DroneRoute.

``records`` defines the typed drone, service point, schedule and no-fly zone
records; ``client`` provides the HTTP and in-memory sources that produce a
``FleetSnapshot`` at the start of every planning call.
"""

from .client import DataSourceClient, DataSourceError, IlpRestClient, StaticDataSource
from .records import (
    AvailabilityWindow,
    Capability,
    DayOfWeek,
    Drone,
    DroneSchedule,
    FleetSnapshot,
    RestrictedArea,
    ServicePoint,
    ServicePointAssignment,
)

__all__ = [
    "AvailabilityWindow",
    "Capability",
    "DataSourceClient",
    "DataSourceError",
    "DayOfWeek",
    "Drone",
    "DroneSchedule",
    "FleetSnapshot",
    "IlpRestClient",
    "RestrictedArea",
    "ServicePoint",
    "ServicePointAssignment",
    "StaticDataSource",
]
