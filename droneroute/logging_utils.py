"""Mini README: Application-wide logging helpers for DroneRoute.

Structure:
    * configure_root_logger - install the shared handler once, adjust the level
      on every call.
    * get_logger - factory used by every module for a named logger.

Usage:
    Modules call ``get_logger(__name__)`` once at import time and keep the
    result in a module-level ``LOGGER``. Planning runs log milestones at INFO,
    per-stop detail at DEBUG and rejected trips or failed searches at WARNING.
    Entry points call ``configure_root_logger(settings.log_level)`` afterwards
    to apply the configured verbosity.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s"
_handler: Optional[logging.Handler] = None


def configure_root_logger(level: Union[int, str] = logging.INFO) -> None:
    """Attach the stream handler on first use and set the root level.

    ``level`` accepts either a ``logging`` constant or a name such as
    ``"debug"``.
    """

    global _handler
    root_logger = logging.getLogger()
    if _handler is None:
        _handler = logging.StreamHandler()
        _handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        root_logger.addHandler(_handler)
    if isinstance(level, str):
        level = level.strip().upper()
    root_logger.setLevel(level)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a named logger, installing the shared handler if needed."""

    if _handler is None:
        configure_root_logger()
    return logging.getLogger(name)
