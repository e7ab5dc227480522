"""Signing and verification of API tokens."""

import logging
import time
from typing import Any, Dict, Optional

from jose import JWTError, jwt


logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


def sign_api_token(issuer: str, name: str, secret: str, jwt_issuer: str) -> str:
    """Create a signed API token for a user.

    Args:
        issuer: Issuer (DID) of the user that owns the token
        name: Name the user gave the token
        secret: Signing secret
        jwt_issuer: Value of the ``iss`` claim

    Returns:
        Compact HS256 JWT
    """
    claims = {
        "sub": issuer,
        "iss": jwt_issuer,
        "iat": int(time.time() * 1000),
        "name": name,
    }
    return jwt.encode(claims, secret, algorithm=ALGORITHM)


def decode_api_token(token: str, secret: str) -> Optional[Dict[str, Any]]:
    """Verify an API token and return its claims, or None if it does not verify."""
    try:
        # iat is in milliseconds
        return jwt.decode(
            token,
            secret,
            algorithms=[ALGORITHM],
            options={"verify_iat": False, "verify_aud": False}
        )
    except JWTError as e:
        logger.debug(f"Bearer token is not an API token: {e}")
        return None
