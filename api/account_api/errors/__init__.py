"""Error handling module for the Account API."""

from .problem_details import (
    ProblemDetail,
    ProblemDetailException,
    BadRequestError,
    InvalidParameterError,
    UnauthorizedError,
    NotFoundError,
    RangeNotSatisfiableError,
    InternalServerError,
    UnknownPageRequestTypeError,
    ServiceUnavailableError,
    MaintenanceError,
    create_problem_response
)
from .handlers import register_exception_handlers

__all__ = [
    "ProblemDetail",
    "ProblemDetailException",
    "BadRequestError",
    "InvalidParameterError",
    "UnauthorizedError",
    "NotFoundError",
    "RangeNotSatisfiableError",
    "InternalServerError",
    "UnknownPageRequestTypeError",
    "ServiceUnavailableError",
    "MaintenanceError",
    "create_problem_response",
    "register_exception_handlers"
]
