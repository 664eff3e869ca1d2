"""Mini README: Availability diagnostics for single delivery requests."""

from .availability import (
    AVAILABLE_MESSAGE,
    AvailabilityExplainer,
    AvailabilityExplanation,
    ConstraintFailure,
    DroneAvailabilityCheck,
    FailureKind,
    check_drone,
    suggest_remedies,
)

__all__ = [
    "AVAILABLE_MESSAGE",
    "AvailabilityExplainer",
    "AvailabilityExplanation",
    "ConstraintFailure",
    "DroneAvailabilityCheck",
    "FailureKind",
    "check_drone",
    "suggest_remedies",
]
