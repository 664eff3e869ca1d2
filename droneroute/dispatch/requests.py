"""Mini README: Delivery requests and their requirements.

Structure:
    * Requirements - payload weight plus optional cooling, heating and budget.
    * DeliveryRequest - one dispatch: id, date, time, requirements, destination.
    * group_by_date - split a batch into per-date lists, earliest date first.

Optional requirement fields left out mean "no constraint". Dates are ISO
``YYYY-MM-DD`` and times ``HH:MM`` (seconds optional) on the wire.
"""

from __future__ import annotations

import datetime as dt
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from ..geometry import Position


class Requirements(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    capacity: float
    cooling: Optional[bool] = None
    heating: Optional[bool] = None
    max_cost: Optional[float] = None

    @property
    def needs_cooling(self) -> bool:
        return bool(self.cooling)

    @property
    def needs_heating(self) -> bool:
        return bool(self.heating)

    def within_budget(self, cost: float) -> bool:
        """True when no budget is set or ``cost`` does not exceed it."""

        return self.max_cost is None or cost <= self.max_cost


class DeliveryRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: int
    date: dt.date
    time: dt.time
    requirements: Requirements
    delivery: Position

    @field_validator("delivery")
    @classmethod
    def _check_coordinates(cls, value: Position) -> Position:
        if not (-180.0 <= value.lng <= 180.0 and -90.0 <= value.lat <= 90.0):
            raise ValueError(f"Delivery position out of range: {value}")
        return value


def group_by_date(requests: Iterable[DeliveryRequest]) -> Dict[dt.date, List[DeliveryRequest]]:
    """Group requests by date, keeping submission order inside each date."""

    grouped: Dict[dt.date, List[DeliveryRequest]] = {}
    for request in requests:
        grouped.setdefault(request.date, []).append(request)
    return dict(sorted(grouped.items()))
