"""Mini README: Clients that read fleet data from the upstream service.

Structure:
    * DataSourceError - raised when upstream data cannot be fetched or parsed.
    * DataSourceClient - abstract interface with the four read operations and
      ``fetch_snapshot`` which bundles them for one planning call.
    * IlpRestClient - httpx implementation against the REST endpoints.
    * StaticDataSource - in-memory implementation for demos and tests.

The base URL is a constructor argument. Nothing is cached between calls: every
planning call asks for a fresh snapshot so edits upstream are picked up
immediately.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Optional, Type, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from ..logging_utils import get_logger
from .records import Drone, FleetSnapshot, RestrictedArea, ServicePoint, ServicePointAssignment

LOGGER = get_logger(__name__)

RecordT = TypeVar("RecordT")


class DataSourceError(RuntimeError):
    """Upstream fleet data was unreachable or malformed."""


class DataSourceClient(ABC):
    """Read-only access to drones, service points, schedules and no-fly zones."""

    @abstractmethod
    def get_drones(self) -> List[Drone]:
        """Return every drone known upstream."""

    @abstractmethod
    def get_service_points(self) -> List[ServicePoint]:
        """Return every service point."""

    @abstractmethod
    def get_service_point_assignments(self) -> List[ServicePointAssignment]:
        """Return the drone-to-service-point weekly availability records."""

    @abstractmethod
    def get_restricted_areas(self) -> List[RestrictedArea]:
        """Return the no-fly zone polygons."""

    def fetch_snapshot(self) -> FleetSnapshot:
        """Read all four collections for a single planning call."""

        snapshot = FleetSnapshot(
            drones=self.get_drones(),
            service_points=self.get_service_points(),
            assignments=self.get_service_point_assignments(),
            restricted_areas=self.get_restricted_areas(),
        )
        LOGGER.debug(
            "Fetched snapshot: %s drones, %s service points, %s assignments, %s restricted areas",
            len(snapshot.drones),
            len(snapshot.service_points),
            len(snapshot.assignments),
            len(snapshot.restricted_areas),
        )
        return snapshot


class IlpRestClient(DataSourceClient):
    """Fetch fleet data from the REST service with a synchronous httpx client."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(base_url=self.base_url, timeout=timeout, transport=transport)
        LOGGER.debug("Initialised IlpRestClient for %s", self.base_url)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "IlpRestClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def get_drones(self) -> List[Drone]:
        return self._get_list("/drones", Drone)

    def get_service_points(self) -> List[ServicePoint]:
        return self._get_list("/service-points", ServicePoint)

    def get_service_point_assignments(self) -> List[ServicePointAssignment]:
        return self._get_list("/drones-for-service-points", ServicePointAssignment)

    def get_restricted_areas(self) -> List[RestrictedArea]:
        return self._get_list("/restricted-areas", RestrictedArea)

    def _get_list(self, path: str, record_type: Type[RecordT]) -> List[RecordT]:
        try:
            response = self._client.get(path)
            response.raise_for_status()
            payload: Any = response.json()
        except (httpx.HTTPError, ValueError) as error:
            raise DataSourceError(f"Failed to fetch {self.base_url}{path}: {error}") from error
        try:
            return TypeAdapter(List[record_type]).validate_python(payload)  # type: ignore[valid-type]
        except ValidationError as error:
            raise DataSourceError(f"Malformed records from {path}: {error}") from error


class StaticDataSource(DataSourceClient):
    """In-memory data source holding fixed record lists."""

    def __init__(
        self,
        *,
        drones: Optional[Iterable[Drone]] = None,
        service_points: Optional[Iterable[ServicePoint]] = None,
        assignments: Optional[Iterable[ServicePointAssignment]] = None,
        restricted_areas: Optional[Iterable[RestrictedArea]] = None,
    ) -> None:
        self._drones = list(drones or [])
        self._service_points = list(service_points or [])
        self._assignments = list(assignments or [])
        self._restricted_areas = list(restricted_areas or [])
        self.snapshot_count = 0

    @classmethod
    def from_payloads(
        cls,
        *,
        drones: Iterable[dict] = (),
        service_points: Iterable[dict] = (),
        assignments: Iterable[dict] = (),
        restricted_areas: Iterable[dict] = (),
    ) -> "StaticDataSource":
        """Build from raw JSON-like dictionaries as the REST service returns them."""

        return cls(
            drones=[Drone.model_validate(item) for item in drones],
            service_points=[ServicePoint.model_validate(item) for item in service_points],
            assignments=[ServicePointAssignment.model_validate(item) for item in assignments],
            restricted_areas=[RestrictedArea.model_validate(item) for item in restricted_areas],
        )

    def get_drones(self) -> List[Drone]:
        return list(self._drones)

    def get_service_points(self) -> List[ServicePoint]:
        return list(self._service_points)

    def get_service_point_assignments(self) -> List[ServicePointAssignment]:
        return list(self._assignments)

    def get_restricted_areas(self) -> List[RestrictedArea]:
        return list(self._restricted_areas)

    def fetch_snapshot(self) -> FleetSnapshot:
        self.snapshot_count += 1
        return super().fetch_snapshot()
