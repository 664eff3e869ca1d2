"""Mini README: FastAPI-powered dispatch API for DroneRoute.

Structure:
    * Payload models - boundary validation for positions, regions and angles.
    * create_application - application factory wiring routes, the fleet data
      source and the error handlers.

Every route lives under ``/api/v1`` apart from the welcome text at ``/``.
Planning and diagnostics fetch a fresh fleet snapshot per request. Any
failure (malformed body, invalid polygon, upstream outage or an unexpected
error) is answered with HTTP 400; only an unknown drone id yields 404.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, Field

from ..configuration import get_settings
from ..data_source import DataSourceClient, DataSourceError, IlpRestClient
from ..dispatch import DeliveryRequest
from ..explain import AvailabilityExplainer
from ..geometry import Position, Region, distance, is_close, next_position, point_in_region
from ..logging_utils import get_logger
from ..matching import DroneMatcher, DroneQuery
from ..planning import Pathfinder, TripPlanner

LOGGER = get_logger(__name__)

WELCOME_MESSAGE = (
    "Welcome to the Drone Medication Delivery API. API endpoints are available under /api/v1."
)


class PositionPayload(BaseModel):
    lng: float = Field(..., ge=-180.0, le=180.0)
    lat: float = Field(..., ge=-90.0, le=90.0)

    def to_position(self) -> Position:
        return Position(lng=self.lng, lat=self.lat)


class TwoPositionPayload(BaseModel):
    position1: PositionPayload
    position2: PositionPayload


class NextPositionPayload(BaseModel):
    start: PositionPayload
    angle: float = Field(..., ge=0.0, le=360.0)


class RegionPayload(BaseModel):
    name: str
    vertices: List[PositionPayload]

    def to_region(self) -> Region:
        return Region(name=self.name, vertices=tuple(vertex.to_position() for vertex in self.vertices))


class IsInRegionPayload(BaseModel):
    position: PositionPayload
    region: RegionPayload


def create_application(
    data_source: Optional[DataSourceClient] = None,
    pathfinder: Optional[Pathfinder] = None,
) -> FastAPI:
    """Create the FastAPI application with routes and dependencies."""

    settings = get_settings()
    app = FastAPI(title="DroneRoute Dispatch Centre", version="0.1.0")
    if data_source is None:
        LOGGER.info("Using upstream data source at %s", settings.data_source_url)
        data_source = IlpRestClient(settings.data_source_url, timeout=settings.request_timeout_seconds)

    planner = TripPlanner(data_source, pathfinder=pathfinder)
    explainer = AvailabilityExplainer(data_source)
    router = APIRouter(prefix="/api/v1")

    def matcher() -> DroneMatcher:
        return DroneMatcher(data_source.fetch_snapshot())

    @app.get("/", response_class=PlainTextResponse)
    def welcome() -> str:
        return WELCOME_MESSAGE

    @router.post("/distanceTo")
    def distance_to(payload: TwoPositionPayload) -> float:
        return distance(payload.position1.to_position(), payload.position2.to_position())

    @router.post("/isCloseTo")
    def is_close_to(payload: TwoPositionPayload) -> bool:
        return is_close(payload.position1.to_position(), payload.position2.to_position())

    @router.post("/nextPosition")
    def next_position_route(payload: NextPositionPayload) -> JSONResponse:
        moved = next_position(payload.start.to_position(), payload.angle)
        return JSONResponse(moved.as_dict())

    @router.post("/isInRegion")
    def is_in_region(payload: IsInRegionPayload) -> bool:
        return point_in_region(payload.position.to_position(), payload.region.to_region())

    @router.get("/dronesWithCooling/{state}")
    def drones_with_cooling(state: bool) -> List[str]:
        return matcher().drones_with_cooling(state)

    @router.get("/droneDetails/{drone_id}")
    def drone_details(drone_id: str) -> JSONResponse:
        drone = matcher().drone_details(drone_id)
        if drone is None:
            raise HTTPException(status_code=404, detail=f"Unknown drone: {drone_id}")
        return JSONResponse(drone.model_dump(mode="json", by_alias=True))

    @router.get("/queryAsPath/{attribute}/{value}")
    def query_as_path(attribute: str, value: str) -> List[str]:
        return matcher().drones_matching(attribute, value)

    @router.post("/query")
    def query(queries: List[DroneQuery]) -> List[str]:
        return matcher().drones_matching_queries(queries)

    @router.post("/queryAvailableDrones")
    def query_available_drones(requests: List[DeliveryRequest]) -> List[str]:
        return matcher().find_available_drones(requests)

    @router.post("/calcDeliveryPath")
    def calc_delivery_path(requests: List[DeliveryRequest]) -> JSONResponse:
        plan = planner.plan(requests)
        LOGGER.info("Planned %s trips for %s requests", len(plan.trips), len(requests))
        return JSONResponse(plan.as_dict())

    @router.post("/calcDeliveryPathAsGeoJson")
    def calc_delivery_path_as_geojson(requests: List[DeliveryRequest]) -> JSONResponse:
        return JSONResponse(planner.plan_as_geojson(requests))

    @router.post("/explainAvailability")
    def explain_availability(request: DeliveryRequest) -> JSONResponse:
        return JSONResponse(explainer.explain(request).as_dict())

    app.include_router(router)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, error: RequestValidationError) -> JSONResponse:
        LOGGER.warning("Syntactic validation failed for %s: %s", request.url.path, error.errors())
        return JSONResponse({"detail": "Invalid request body"}, status_code=400)

    @app.exception_handler(ValueError)
    async def handle_value_error(request: Request, error: ValueError) -> JSONResponse:
        LOGGER.warning("Semantic validation failed for %s: %s", request.url.path, error)
        return JSONResponse({"detail": str(error)}, status_code=400)

    @app.exception_handler(DataSourceError)
    async def handle_data_source_error(request: Request, error: DataSourceError) -> JSONResponse:
        LOGGER.error("Upstream data unavailable for %s: %s", request.url.path, error)
        return JSONResponse({"detail": "Fleet data unavailable"}, status_code=400)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, error: Exception) -> JSONResponse:
        LOGGER.exception("Unexpected error processing %s", request.url.path)
        return JSONResponse({"detail": "Request could not be processed"}, status_code=400)

    return app
