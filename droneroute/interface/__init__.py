"""Mini README: Interactive interfaces (web/CLI) for DroneRoute.

Exports the FastAPI application factory that serves the dispatch API. The
command line entry point lives in ``main_dispatch_centre.py`` at the
repository root.
"""

from .web_app import create_application

__all__ = ["create_application"]
