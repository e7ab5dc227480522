"""Data access layer for the Account API."""

from .connection import db_manager, get_db_pool
from .errors import RangeNotSatisfiableDBError

__all__ = [
    "db_manager",
    "get_db_pool",
    "RangeNotSatisfiableDBError"
]
