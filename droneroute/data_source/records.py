"""Mini README: Typed records for the upstream fleet data service.

Structure:
    * Capability / Drone - drone identity and flight limits.
    * ServicePoint - a drone base with its location.
    * DayOfWeek / AvailabilityWindow / DroneSchedule / ServicePointAssignment -
      weekly availability of drones at each service point.
    * RestrictedArea - a named no-fly polygon.
    * FleetSnapshot - one consistent read of all four collections.

Records accept the service's camelCase JSON and ignore any field they do not
know about, so upstream additions never break a planning run.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date, time
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..geometry import Position, Region


class UpstreamRecord(BaseModel):
    """Base model: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


class Capability(UpstreamRecord):
    cooling: bool = False
    heating: bool = False
    capacity: float
    max_moves: int
    cost_per_move: float
    cost_initial: float
    cost_final: float


class Drone(UpstreamRecord):
    id: str
    name: str
    capability: Capability


class ServicePoint(UpstreamRecord):
    id: int
    name: str
    location: Position


class DayOfWeek(str, Enum):
    """Weekdays as spelled by the upstream service."""

    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"

    @classmethod
    def from_date(cls, value: date) -> "DayOfWeek":
        return cls(calendar.day_name[value.weekday()].upper())

    @classmethod
    def from_str(cls, value: str) -> "DayOfWeek":
        """Coerce arbitrary casing into a weekday."""

        try:
            return cls(value.strip().upper())
        except (ValueError, AttributeError) as error:
            raise ValueError(f"Unsupported day of week: {value}") from error


class AvailabilityWindow(UpstreamRecord):
    """Weekly half-open window ``[from, until)``."""

    day_of_week: DayOfWeek
    from_: time = Field(alias="from")
    until: time

    @field_validator("day_of_week", mode="before")
    @classmethod
    def _coerce_day(cls, value: object) -> object:
        if isinstance(value, str):
            return DayOfWeek.from_str(value)
        return value

    def covers(self, day: DayOfWeek, at: time) -> bool:
        return self.day_of_week is day and self.from_ <= at < self.until


class DroneSchedule(UpstreamRecord):
    id: str
    availability: List[AvailabilityWindow] = Field(default_factory=list)


class ServicePointAssignment(UpstreamRecord):
    """Drones based at one service point together with their weekly windows."""

    service_point_id: int
    drones: List[DroneSchedule] = Field(default_factory=list)


class RestrictedArea(UpstreamRecord):
    name: str
    id: Optional[int] = None
    vertices: List[Position]

    def to_region(self) -> Region:
        return Region(name=self.name, vertices=tuple(self.vertices))


@dataclass(frozen=True, slots=True)
class FleetSnapshot:
    """Everything a planning call reads from upstream, fetched once per call."""

    drones: List[Drone] = field(default_factory=list)
    service_points: List[ServicePoint] = field(default_factory=list)
    assignments: List[ServicePointAssignment] = field(default_factory=list)
    restricted_areas: List[RestrictedArea] = field(default_factory=list)

    def no_fly_zones(self) -> List[Region]:
        return [area.to_region() for area in self.restricted_areas]
