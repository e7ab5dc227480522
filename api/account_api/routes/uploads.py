"""Upload listing and management endpoints."""

import logging
from typing import Annotated, Dict, List

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ..auth.dependencies import CurrentAuth
from ..config import Settings, get_settings
from ..db.errors import RangeNotSatisfiableDBError
from ..db.uploads import delete_upload, get_upload, list_uploads, rename_upload
from ..errors.problem_details import NotFoundError, RangeNotSatisfiableError
from ..maintenance import require_read, require_write
from ..models.uploads import Upload, UploadRename, UploadRenameResponse
from ..pagination import (
    PaginationConfig, build_links, format_link_header, page_response, parse_page_request
)


logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/user/uploads",
    tags=["Uploads"],
    responses={
        401: {"description": "Unauthorized"},
        503: {"description": "API undergoing maintenance"}
    }
)


@router.get(
    "",
    dependencies=[Depends(require_read)],
    summary="List uploads",
    description=(
        "List the user's uploads, newest first. Page with `page` and `size`, "
        "or with `before` (an ISO 8601 timestamp) and `size`. Follow the Link "
        "header to navigate between pages."
    ),
    responses={
        200: {"description": "A page of uploads", "model": List[Upload]},
        400: {"description": "Bad Request - Invalid pagination parameters"},
        416: {"description": "Range Not Satisfiable - Page beyond the last page"}
    }
)
async def get_uploads(
    request: Request,
    auth: CurrentAuth,
    settings: Annotated[Settings, Depends(get_settings)]
) -> JSONResponse:
    """A page of the user's uploads with pagination headers."""
    config = PaginationConfig.from_settings(settings)
    page_request = parse_page_request(request.query_params, config)

    try:
        page = await list_uploads(auth.user.id, page_request)
    except RangeNotSatisfiableDBError as e:
        logger.info(f"Upload page out of range: {e}")
        raise RangeNotSatisfiableError()

    link = format_link_header(build_links(
        request.url.path,
        page_request,
        page.items,
        page.count,
        config
    ))

    return page_response(page.items, page_request, page.count, link)


@router.get(
    "/{cid}",
    response_model=Upload,
    dependencies=[Depends(require_read)],
    summary="Get an upload",
    responses={404: {"description": "Upload not found"}}
)
async def get_user_upload(cid: str, auth: CurrentAuth) -> Upload:
    """One of the user's uploads, by CID."""
    return await get_upload(cid, auth.user.id)


@router.delete(
    "/{cid}",
    dependencies=[Depends(require_write)],
    summary="Delete an upload",
    responses={404: {"description": "Upload not found"}}
)
async def remove_upload(cid: str, auth: CurrentAuth) -> Dict[str, str]:
    """Tombstone one of the user's uploads."""
    result = await delete_upload(auth.user.id, cid)
    if not result:
        raise NotFoundError("Upload not found")
    return result


@router.post(
    "/{cid}/rename",
    response_model=UploadRenameResponse,
    dependencies=[Depends(require_write)],
    summary="Rename an upload",
    responses={404: {"description": "Upload not found"}}
)
async def rename_user_upload(
    cid: str,
    body: UploadRename,
    auth: CurrentAuth
) -> UploadRenameResponse:
    """Give one of the user's uploads a new name."""
    result = await rename_upload(auth.user.id, cid, body.name)
    if not result:
        raise NotFoundError("Upload not found")
    return UploadRenameResponse(name=result["name"])
