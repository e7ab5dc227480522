"""Authentication module for the Account API.

This module provides:
- Magic link login with an opt-in test mode bypass
- Signed API tokens
- FastAPI dependencies resolving the caller of ``/user`` endpoints
"""

from .magic import (
    MagicLoginController,
    MagicMetadata,
    parse_authorization_header,
    parse_github,
    parse_magic
)

from .tokens import (
    sign_api_token,
    decode_api_token
)

from .dependencies import (
    Auth,
    CurrentAuth,
    get_bearer_token,
    get_current_auth,
    get_login_controller,
    security
)

__all__ = [
    # Magic link
    "MagicLoginController",
    "MagicMetadata",
    "parse_authorization_header",
    "parse_github",
    "parse_magic",

    # API tokens
    "sign_api_token",
    "decode_api_token",

    # Dependencies
    "Auth",
    "CurrentAuth",
    "get_bearer_token",
    "get_current_auth",
    "get_login_controller",
    "security"
]
