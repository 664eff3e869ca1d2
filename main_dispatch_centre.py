"""Mini README: Entry point CLI for the DroneRoute dispatch centre.

This script exposes a Typer CLI with three commands:
    * run - start the FastAPI application under uvicorn.
    * plan - plan a JSON file of delivery requests and print the flight plan
      (or its GeoJSON projection).
    * explain - print the availability diagnostics for one request.

Settings (upstream endpoint, host, port, log level) come from environment
variables or a ``.env`` file; command options take precedence.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import List

import typer
import uvicorn
from pydantic import TypeAdapter, ValidationError

from droneroute.configuration import get_settings
from droneroute.data_source import DataSourceError, IlpRestClient
from droneroute.dispatch import DeliveryRequest
from droneroute.explain import AvailabilityExplainer
from droneroute.logging_utils import configure_root_logger
from droneroute.planning import TripPlanner

cli = typer.Typer(help="Launch the DroneRoute API or plan deliveries from the command line.")


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as error:
        typer.echo(f"Could not read {path}: {error}", err=True)
        raise typer.Exit(code=1) from error


def _client(endpoint: str) -> IlpRestClient:
    settings = get_settings()
    return IlpRestClient(
        endpoint or settings.data_source_url, timeout=settings.request_timeout_seconds
    )


@cli.command()
def run(
    host: str = typer.Option(None, help="Host interface to bind."),
    port: int = typer.Option(None, help="Port to listen on."),
    production: bool = typer.Option(
        False, help="Use production server settings (disable auto-reload)."
    ),
) -> None:
    """Start the FastAPI application using uvicorn."""

    settings = get_settings()
    effective_host = host or settings.interface_host
    effective_port = port or settings.interface_port
    configure_root_logger(settings.log_level)

    # Browsers cannot open the 0.0.0.0 sentinel, so point them at localhost.
    browser_host = "127.0.0.1" if effective_host in {"0.0.0.0", "::"} else effective_host
    typer.echo(
        "Starting DroneRoute on "
        f"{effective_host}:{effective_port}.\n"
        "API available at "
        f"http://{browser_host}:{effective_port}/api/v1"
    )
    uvicorn.run(
        "droneroute.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production,
    )


@cli.command()
def plan(
    requests_file: Path = typer.Argument(..., help="JSON file holding a list of delivery requests."),
    geojson: bool = typer.Option(False, "--geojson", help="Print the GeoJSON projection instead."),
    endpoint: str = typer.Option(None, help="Override the upstream data-source URL."),
) -> None:
    """Plan deliveries and print the result as JSON."""

    configure_root_logger(get_settings().log_level)
    try:
        requests: List[DeliveryRequest] = TypeAdapter(List[DeliveryRequest]).validate_python(
            _load_json(requests_file)
        )
    except ValidationError as error:
        typer.echo(f"Invalid delivery requests: {error}", err=True)
        raise typer.Exit(code=1) from error

    with _client(endpoint) as client:
        planner = TripPlanner(client)
        try:
            result = planner.plan_as_geojson(requests) if geojson else planner.plan(requests).as_dict()
        except DataSourceError as error:
            typer.echo(f"Fleet data unavailable: {error}", err=True)
            raise typer.Exit(code=2) from error
    typer.echo(json.dumps(result, indent=2))


@cli.command()
def explain(
    request_file: Path = typer.Argument(..., help="JSON file holding one delivery request."),
    endpoint: str = typer.Option(None, help="Override the upstream data-source URL."),
) -> None:
    """Explain which drones could serve a request."""

    configure_root_logger(get_settings().log_level)
    try:
        request = DeliveryRequest.model_validate(_load_json(request_file))
    except ValidationError as error:
        typer.echo(f"Invalid delivery request: {error}", err=True)
        raise typer.Exit(code=1) from error

    with _client(endpoint) as client:
        try:
            explanation = AvailabilityExplainer(client).explain(request)
        except DataSourceError as error:
            typer.echo(f"Fleet data unavailable: {error}", err=True)
            raise typer.Exit(code=2) from error
    typer.echo(json.dumps(explanation.as_dict(), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    cli()
