"""Maintenance modes restricting which operations the API serves."""

import logging
from typing import Annotated

from fastapi import Depends

from .config import Settings, get_settings
from .errors.problem_details import InternalServerError, MaintenanceError


logger = logging.getLogger(__name__)

READ_WRITE = "rw"
READ_ONLY = "r-"
NO_READ_OR_WRITE = "--"

MODES = (READ_WRITE, READ_ONLY, NO_READ_OR_WRITE)


def check_mode(mode: str, write: bool) -> None:
    """Raise unless ``mode`` allows a read (or a write, if ``write``).

    Raises:
        MaintenanceError: If the mode forbids the operation
        InternalServerError: If the mode is unknown
    """
    if mode not in MODES:
        logger.error(f"Unknown maintenance mode: {mode!r}")
        raise InternalServerError("Unknown maintenance mode")

    if mode == NO_READ_OR_WRITE or (write and mode != READ_WRITE):
        raise MaintenanceError()


async def require_read(settings: Annotated[Settings, Depends(get_settings)]) -> None:
    """Dependency for endpoints that only read data."""
    check_mode(settings.mode, write=False)


async def require_write(settings: Annotated[Settings, Depends(get_settings)]) -> None:
    """Dependency for endpoints that modify data."""
    check_mode(settings.mode, write=True)
