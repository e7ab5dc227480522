"""User account API endpoints: login, account, info and tag requests."""

import asyncio
import logging
from typing import Annotated, Any, Dict

from fastapi import APIRouter, BackgroundTasks, Depends

from ..auth.dependencies import CurrentAuth, get_bearer_token, get_login_controller
from ..auth.magic import MagicLoginController, parse_github, parse_magic
from ..config import Settings, get_settings
from ..db.users import (
    create_user_request, get_storage_used, get_user, get_user_tag_value, upsert_user
)
from ..errors.problem_details import InternalServerError, MaintenanceError, UnauthorizedError
from ..maintenance import NO_READ_OR_WRITE, READ_ONLY, READ_WRITE, require_read, require_write
from ..models.users import AccountResponse, LoginRequest, LoginResponse, UserRequestCreate
from ..notify import notify_slack_user_request
from ..tags import get_tag_value, has_pending_tag_proposal, has_tag


logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/user",
    tags=["User"],
    responses={
        401: {"description": "Unauthorized"},
        503: {"description": "API undergoing maintenance"}
    }
)

RESTRICTION_TAGS = (
    "HasAccountRestriction",
    "HasDeleteRestriction",
    "HasPsaAccess",
    "HasSuperHotAccess",
)
STORAGE_LIMIT_TAG = "StorageLimitBytes"


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Log in or register",
    description="Authenticate a magic link token and create or refresh the user."
)
async def login(
    body: LoginRequest,
    token: Annotated[str, Depends(get_bearer_token)],
    settings: Annotated[Settings, Depends(get_settings)],
    controller: Annotated[MagicLoginController, Depends(get_login_controller)]
) -> LoginResponse:
    """Log a user in, registering them on first login.

    In read-only mode existing users can still log in but nobody is
    registered or updated.
    """
    metadata = await controller.authenticate(token)
    parsed = (
        parse_github(body.data or {}, metadata)
        if body.type == "github"
        else parse_magic(metadata)
    )

    if settings.mode == NO_READ_OR_WRITE:
        raise MaintenanceError()
    elif settings.mode == READ_WRITE:
        user = await upsert_user(parsed)
    elif settings.mode == READ_ONLY:
        user = await get_user(parsed.issuer)
        if not user:
            raise UnauthorizedError("User is not registered")
    else:
        raise InternalServerError("Unknown maintenance mode")

    logger.info(f"User {user.id} logged in", extra={"login_type": body.type})
    return LoginResponse(issuer=user.issuer)


@router.get(
    "/account",
    response_model=AccountResponse,
    dependencies=[Depends(require_read)],
    summary="Get storage usage"
)
async def get_account(auth: CurrentAuth) -> AccountResponse:
    """Storage used by the user and their storage limit, if any."""
    used_storage, storage_limit = await asyncio.gather(
        get_storage_used(auth.user.id),
        get_user_tag_value(auth.user.id, STORAGE_LIMIT_TAG)
    )
    return AccountResponse(used_storage=used_storage, storage_limit_bytes=storage_limit)


@router.get(
    "/info",
    dependencies=[Depends(require_read)],
    summary="Get user info"
)
async def get_info(auth: CurrentAuth) -> Dict[str, Any]:
    """The user's profile with a summary of their tags and pending requests."""
    user = auth.user
    info = user.model_dump(mode="json", by_alias=True)

    tags: Dict[str, Any] = {name: has_tag(user, name, "true") for name in RESTRICTION_TAGS}
    tags[STORAGE_LIMIT_TAG] = get_tag_value(user, STORAGE_LIMIT_TAG, "")
    info["tags"] = tags

    info["tagProposals"] = {
        name: has_pending_tag_proposal(user, name)
        for name in RESTRICTION_TAGS + (STORAGE_LIMIT_TAG,)
    }

    return {"info": info}


@router.post(
    "/request",
    dependencies=[Depends(require_write)],
    summary="Request a tag change"
)
async def post_user_request(
    body: UserRequestCreate,
    auth: CurrentAuth,
    settings: Annotated[Settings, Depends(get_settings)],
    background_tasks: BackgroundTasks
) -> Dict[str, str]:
    """Record a tag change request and notify administrators on Slack."""
    result = await create_user_request(
        auth.user.id,
        body.tag_name,
        body.requested_tag_value,
        body.user_proposal_form
    )

    background_tasks.add_task(
        notify_slack_user_request,
        auth.user,
        body.tag_name,
        body.requested_tag_value,
        body.user_proposal_form,
        settings.slack_user_request_webhook_url
    )

    return result
