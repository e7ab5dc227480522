"""Unit tests for authentication functionality."""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from fastapi import Request
from jose import jwt
from magic_admin.error import DIDTokenInvalid

from account_api.auth.dependencies import Auth, get_bearer_token, get_current_auth
from account_api.auth.magic import (
    MagicLoginController,
    MagicMetadata,
    parse_authorization_header,
    parse_github,
    parse_magic
)
from account_api.auth.tokens import decode_api_token, sign_api_token
from account_api.config import Settings
from account_api.errors.problem_details import UnauthorizedError


@pytest.fixture
def metadata() -> MagicMetadata:
    return MagicMetadata(
        issuer="did:ethr:0xabc",
        email="alice@example.com",
        public_address="0xabc"
    )


class TestApiTokens:
    """Test API token signing and verification."""

    def test_sign_and_decode(self):
        token = sign_api_token("did:ethr:0xabc", "laptop", "salt", "web3-storage")

        claims = decode_api_token(token, "salt")

        assert claims["sub"] == "did:ethr:0xabc"
        assert claims["iss"] == "web3-storage"
        assert claims["name"] == "laptop"
        assert isinstance(claims["iat"], int)

    def test_token_is_hs256(self):
        token = sign_api_token("did:ethr:0xabc", "laptop", "salt", "web3-storage")

        assert jwt.get_unverified_header(token)["alg"] == "HS256"

    def test_iat_in_milliseconds(self):
        with patch("account_api.auth.tokens.time.time", return_value=1626291234.5):
            token = sign_api_token("did:ethr:0xabc", "laptop", "salt", "web3-storage")

        assert jwt.get_unverified_claims(token)["iat"] == 1626291234500

    def test_wrong_secret(self):
        token = sign_api_token("did:ethr:0xabc", "laptop", "salt", "web3-storage")

        assert decode_api_token(token, "other-salt") is None

    def test_not_a_jwt(self):
        assert decode_api_token("not-a-token", "salt") is None


class TestParseAuthorizationHeader:
    """Test bearer token extraction."""

    def test_bearer_token(self):
        assert parse_authorization_header("Bearer abc.def") == "abc.def"

    def test_scheme_is_case_insensitive(self):
        assert parse_authorization_header("bearer abc") == "abc"

    @pytest.mark.parametrize("value", [None, "", "Bearer", "Bearer   ", "Basic abc"])
    def test_invalid_headers(self, value):
        with pytest.raises(UnauthorizedError):
            parse_authorization_header(value)

    def test_get_bearer_token_dependency(self):
        request = MagicMock(spec=Request)
        request.headers = {"Authorization": "Bearer abc"}

        assert get_bearer_token(request) == "abc"


class TestMagicLoginController:
    """Test magic link authentication."""

    def make_magic(self, data=None):
        magic = MagicMock()
        magic.User.get_metadata_by_token.return_value = MagicMock(data=data or {
            "issuer": "did:ethr:0xabc",
            "email": "alice@example.com",
            "public_address": "0xabc"
        })
        return magic

    @pytest.mark.asyncio
    async def test_authenticate(self, metadata):
        magic = self.make_magic()
        controller = MagicLoginController(Settings(), magic)

        result = await controller.authenticate("did-token")

        assert result == metadata
        magic.Token.validate.assert_called_once_with("did-token")
        magic.User.get_metadata_by_token.assert_called_once_with("did-token")

    @pytest.mark.asyncio
    async def test_invalid_token(self):
        magic = self.make_magic()
        magic.Token.validate.side_effect = DIDTokenInvalid("bad token")
        controller = MagicLoginController(Settings(), magic)

        with pytest.raises(UnauthorizedError):
            await controller.authenticate("did-token")

    @pytest.mark.asyncio
    async def test_incomplete_metadata(self):
        magic = self.make_magic({"issuer": "did:ethr:0xabc", "email": None, "public_address": "0xabc"})
        controller = MagicLoginController(Settings(), magic)

        with pytest.raises(UnauthorizedError, match="metadata"):
            await controller.authenticate("did-token")

    @pytest.mark.asyncio
    async def test_testmode_bypass(self):
        magic = self.make_magic()
        settings = Settings(dangerously_bypass_magic_auth=True, magic_testmode_token="test-magic")
        controller = MagicLoginController(settings, magic)

        result = await controller.authenticate("test-magic")

        assert result.email == "testMode@magic.link"
        assert result.issuer == "did:ethr:testmode"
        assert result.public_address == result.issuer
        magic.Token.validate.assert_not_called()

    @pytest.mark.asyncio
    async def test_testmode_token_ignored_when_bypass_disabled(self):
        magic = self.make_magic()
        controller = MagicLoginController(Settings(magic_testmode_token="test-magic"), magic)

        await controller.authenticate("test-magic")

        magic.Token.validate.assert_called_once_with("test-magic")


class TestLoginParsing:
    """Test user records built from login metadata."""

    def test_parse_magic(self, metadata):
        user = parse_magic(metadata)

        assert user.name == "alice"
        assert user.picture == ""
        assert user.issuer == "did:ethr:0xabc"
        assert user.public_address == "0xabc"
        assert user.github is None

    def test_parse_github(self, metadata):
        data = {
            "oauth": {
                "userHandle": "alice-gh",
                "userInfo": {"name": "Alice", "picture": "https://example.com/a.png"}
            }
        }

        user = parse_github(data, metadata)

        assert user.name == "Alice"
        assert user.picture == "https://example.com/a.png"
        assert user.github == "alice-gh"
        assert user.email == "alice@example.com"

    def test_parse_github_without_user_info(self, metadata):
        user = parse_github({"oauth": {"userHandle": "alice-gh", "userInfo": {}}}, metadata)

        assert user.name == ""
        assert user.picture == ""


class TestGetCurrentAuth:
    """Test the get_current_auth dependency."""

    @pytest.fixture
    def settings(self):
        return Settings(salt="salt")

    @pytest.mark.asyncio
    async def test_api_token(self, settings, sample_user, sample_key):
        token = sign_api_token(sample_user.issuer, "laptop", "salt", "web3-storage")
        controller = MagicMock()

        with patch("account_api.auth.dependencies.keys_db.get_key_by_secret",
                   new=AsyncMock(return_value=sample_key)) as mock_key, \
             patch("account_api.auth.dependencies.users_db.get_user",
                   new=AsyncMock(return_value=sample_user)):
            auth = await get_current_auth(token, settings, controller)

        assert auth == Auth(user=sample_user, auth_token=sample_key)
        mock_key.assert_awaited_once_with(token)

    @pytest.mark.asyncio
    async def test_deleted_api_token(self, settings, sample_user):
        token = sign_api_token(sample_user.issuer, "laptop", "salt", "web3-storage")

        with patch("account_api.auth.dependencies.keys_db.get_key_by_secret",
                   new=AsyncMock(return_value=None)):
            with pytest.raises(UnauthorizedError):
                await get_current_auth(token, settings, MagicMock())

    @pytest.mark.asyncio
    async def test_api_token_of_other_user(self, settings, sample_user, sample_key):
        token = sign_api_token(sample_user.issuer, "laptop", "salt", "web3-storage")
        other_key = sample_key.model_copy(update={"user_id": "2"})

        with patch("account_api.auth.dependencies.keys_db.get_key_by_secret",
                   new=AsyncMock(return_value=other_key)), \
             patch("account_api.auth.dependencies.users_db.get_user",
                   new=AsyncMock(return_value=sample_user)):
            with pytest.raises(UnauthorizedError):
                await get_current_auth(token, settings, MagicMock())

    @pytest.mark.asyncio
    async def test_magic_token(self, settings, sample_user):
        controller = MagicMock()
        controller.authenticate = AsyncMock(return_value=MagicMetadata(
            issuer=sample_user.issuer,
            email=sample_user.email,
            public_address=sample_user.public_address
        ))

        with patch("account_api.auth.dependencies.users_db.get_user",
                   new=AsyncMock(return_value=sample_user)) as mock_get_user:
            auth = await get_current_auth("did-token", settings, controller)

        assert auth.user == sample_user
        assert auth.auth_token is None
        mock_get_user.assert_awaited_once_with(
            sample_user.issuer,
            include_tags=True,
            include_tag_proposals=True
        )

    @pytest.mark.asyncio
    async def test_magic_token_of_unknown_user(self, settings, metadata):
        controller = MagicMock()
        controller.authenticate = AsyncMock(return_value=metadata)

        with patch("account_api.auth.dependencies.users_db.get_user",
                   new=AsyncMock(return_value=None)):
            with pytest.raises(UnauthorizedError):
                await get_current_auth("did-token", settings, controller)
