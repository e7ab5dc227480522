"""API token endpoints."""

import logging
from typing import Annotated, List

from fastapi import APIRouter, Depends

from ..auth.dependencies import CurrentAuth
from ..auth.tokens import sign_api_token
from ..config import Settings, get_settings
from ..db.keys import create_key, delete_key, list_keys
from ..errors.problem_details import NotFoundError
from ..maintenance import require_read, require_write
from ..models.keys import AuthKey, AuthKeyCreate, DeletedResponse


logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/user/tokens",
    tags=["Tokens"],
    responses={
        401: {"description": "Unauthorized"},
        503: {"description": "API undergoing maintenance"}
    }
)


@router.post(
    "",
    response_model=AuthKey,
    status_code=201,
    dependencies=[Depends(require_write)],
    summary="Create an API token"
)
async def create_token(
    body: AuthKeyCreate,
    auth: CurrentAuth,
    settings: Annotated[Settings, Depends(get_settings)]
) -> AuthKey:
    """Sign a new API token for the user and store it."""
    secret = sign_api_token(
        issuer=auth.user.issuer,
        name=body.name,
        secret=settings.salt,
        jwt_issuer=settings.jwt_issuer
    )
    return await create_key(auth.user.id, body.name, secret)


@router.get(
    "",
    response_model=List[AuthKey],
    dependencies=[Depends(require_read)],
    summary="List API tokens"
)
async def get_tokens(auth: CurrentAuth) -> List[AuthKey]:
    """The user's API tokens, newest first."""
    return await list_keys(auth.user.id)


@router.delete(
    "/{key_id}",
    response_model=DeletedResponse,
    dependencies=[Depends(require_write)],
    summary="Delete an API token",
    responses={404: {"description": "Token not found"}}
)
async def remove_token(key_id: str, auth: CurrentAuth) -> DeletedResponse:
    """Tombstone one of the user's API tokens."""
    deleted_id = await delete_key(auth.user.id, key_id)
    if not deleted_id:
        raise NotFoundError(f"API token '{key_id}' not found")
    return DeletedResponse(id=deleted_id)
