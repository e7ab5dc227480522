"""API routers for the Account API."""

from . import payment, pins, tokens, uploads, users

routers = [
    users.router,
    tokens.router,
    uploads.router,
    pins.router,
    payment.router,
]

__all__ = ["routers"]
