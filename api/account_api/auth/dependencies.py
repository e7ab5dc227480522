"""FastAPI dependencies for authentication."""

import logging
from dataclasses import dataclass
from typing import Annotated, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer

from ..config import Settings, get_settings
from ..db import keys as keys_db
from ..db import users as users_db
from ..errors.problem_details import UnauthorizedError
from ..models.keys import AuthKey
from ..models.users import User
from .magic import MagicLoginController, parse_authorization_header
from .tokens import decode_api_token


logger = logging.getLogger(__name__)

# HTTP Bearer security scheme for OpenAPI documentation
security = HTTPBearer(
    scheme_name="bearerAuth",
    description="Magic link DID token or API token",
    auto_error=False
)

_login_controller: Optional[MagicLoginController] = None


@dataclass
class Auth:
    """The authenticated user and, for API token requests, the token used."""

    user: User
    auth_token: Optional[AuthKey] = None


def get_login_controller(
    settings: Annotated[Settings, Depends(get_settings)]
) -> MagicLoginController:
    """Shared magic link login controller."""
    global _login_controller
    if _login_controller is None:
        _login_controller = MagicLoginController(settings)
    return _login_controller


def get_bearer_token(request: Request) -> str:
    """Extract the bearer token from the Authorization header.

    Raises:
        UnauthorizedError: If the header is missing or malformed
    """
    return parse_authorization_header(request.headers.get("Authorization"))


async def _authenticate_api_token(token: str, issuer: str) -> Auth:
    key = await keys_db.get_key_by_secret(token)
    if not key:
        raise UnauthorizedError("API token has been deleted")

    user = await users_db.get_user(issuer, include_tags=True, include_tag_proposals=True)
    if not user or user.id != key.user_id:
        raise UnauthorizedError("API token does not belong to a known user")

    return Auth(user=user, auth_token=key)


async def get_current_auth(
    token: Annotated[str, Depends(get_bearer_token)],
    settings: Annotated[Settings, Depends(get_settings)],
    controller: Annotated[MagicLoginController, Depends(get_login_controller)],
    _credentials=Depends(security)
) -> Auth:
    """Authenticate a request made with an API token or a magic link token.

    Returns:
        The authenticated user, with the API token when one was used

    Raises:
        UnauthorizedError: If the token is invalid or its user is unknown
    """
    claims = decode_api_token(token, settings.salt)
    if claims and claims.get("sub"):
        auth = await _authenticate_api_token(token, claims["sub"])
        logger.debug(f"Authenticated user {auth.user.id} with API token {auth.auth_token.id}")
        return auth

    metadata = await controller.authenticate(token)
    user = await users_db.get_user(
        metadata.issuer,
        include_tags=True,
        include_tag_proposals=True
    )
    if not user:
        raise UnauthorizedError("No user found for magic token")

    logger.debug(f"Authenticated user {user.id} with magic token")
    return Auth(user=user)


# Type alias for the authenticated caller
CurrentAuth = Annotated[Auth, Depends(get_current_auth)]
