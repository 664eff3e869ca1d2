"""Mini README: Trip planning package.

Exposes the ``TripPlanner`` and the plan value types it returns.
"""

from .trip_planner import DeliveryPlan, DeliverySegment, Pathfinder, Trip, TripPlanner

__all__ = ["DeliveryPlan", "DeliverySegment", "Pathfinder", "Trip", "TripPlanner"]
