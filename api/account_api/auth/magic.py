"""Magic link authentication and login record parsing."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from magic_admin import Magic
from magic_admin.error import MagicError

from ..config import Settings
from ..errors.problem_details import UnauthorizedError
from ..models.users import UserInput


logger = logging.getLogger(__name__)

TESTMODE_ISSUER = "did:ethr:testmode"
TESTMODE_EMAIL = "testMode@magic.link"


@dataclass(frozen=True)
class MagicMetadata:
    """Identity of a user as reported by Magic."""

    issuer: str
    email: str
    public_address: str


def parse_authorization_header(value: Optional[str]) -> str:
    """Extract the token from a ``Bearer <token>`` Authorization header.

    Raises:
        UnauthorizedError: If the header is missing or not a bearer token
    """
    if not value:
        raise UnauthorizedError("Missing Authorization header")

    scheme, _, token = value.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise UnauthorizedError("Authorization header must be 'Bearer <token>'")

    return token


class MagicLoginController:
    """Authenticates magic link DID tokens.

    When ``dangerously_bypass_magic_auth`` is enabled, the configured test
    mode token is accepted without contacting Magic so end-to-end tests can
    log in.
    """

    def __init__(self, settings: Settings, magic: Optional[Magic] = None):
        self.settings = settings
        self._magic = magic

    @property
    def magic(self) -> Magic:
        if self._magic is None:
            self._magic = Magic(api_secret_key=self.settings.magic_secret_key)
        return self._magic

    def is_testmode_token(self, token: str) -> bool:
        return (
            self.settings.dangerously_bypass_magic_auth
            and token == self.settings.magic_testmode_token
        )

    def _fetch_metadata(self, token: str) -> Dict[str, Any]:
        self.magic.Token.validate(token)
        return self.magic.User.get_metadata_by_token(token).data

    async def authenticate(self, token: str) -> MagicMetadata:
        """Validate a DID token and return the metadata of its user.

        Raises:
            UnauthorizedError: If Magic rejects the token or the metadata is incomplete
        """
        if self.is_testmode_token(token):
            logger.warning("Magic authentication bypassed with the test mode token")
            return MagicMetadata(
                issuer=TESTMODE_ISSUER,
                email=TESTMODE_EMAIL,
                public_address=TESTMODE_ISSUER
            )

        try:
            data = await asyncio.to_thread(self._fetch_metadata, token)
        except MagicError as e:
            logger.info(f"Magic token rejected: {e}")
            raise UnauthorizedError("Invalid magic token")

        metadata = MagicMetadata(
            issuer=data.get("issuer") or "",
            email=data.get("email") or "",
            public_address=data.get("public_address") or ""
        )
        if not (metadata.issuer and metadata.email and metadata.public_address):
            raise UnauthorizedError("Missing required metadata")

        return metadata


def parse_github(data: Dict[str, Any], metadata: MagicMetadata) -> UserInput:
    """Build the user record for a GitHub OAuth login."""
    oauth = data.get("oauth") or {}
    user_info = oauth.get("userInfo") or {}
    return UserInput(
        name=user_info.get("name") or "",
        picture=user_info.get("picture") or "",
        issuer=metadata.issuer,
        email=metadata.email,
        github=oauth.get("userHandle"),
        public_address=metadata.public_address
    )


def parse_magic(metadata: MagicMetadata) -> UserInput:
    """Build the user record for an email login."""
    return UserInput(
        name=metadata.email.split("@")[0],
        picture="",
        issuer=metadata.issuer,
        email=metadata.email,
        public_address=metadata.public_address
    )
