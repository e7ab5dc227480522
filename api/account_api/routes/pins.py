"""Pin request listing across all of a user's API tokens."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ..auth.dependencies import CurrentAuth
from ..config import Settings, get_settings
from ..db.errors import RangeNotSatisfiableDBError
from ..db.keys import list_keys
from ..db.pins import list_psa_pin_requests
from ..errors.problem_details import RangeNotSatisfiableError
from ..maintenance import require_read
from ..models.pins import PinListResponse
from ..pagination import (
    PaginationConfig, build_links, format_link_header, page_response, parse_page_request
)
from ..psa import to_pin_status_response, validate_search_params


logger = logging.getLogger(__name__)

PAGINATION_PARAMS = ("size", "page")

router = APIRouter(
    prefix="/user/pins",
    tags=["Pins"],
    responses={
        401: {"description": "Unauthorized"},
        503: {"description": "API undergoing maintenance"}
    }
)


@router.get(
    "",
    dependencies=[Depends(require_read)],
    summary="List pin requests",
    description=(
        "List pin requests made with any of the user's API tokens. Accepts the "
        "Pinning Service API filters (`cid`, `name`, `match`, `status`, "
        "`before`, `after`, `meta`) and offset pagination with `page` and `size`."
    ),
    responses={
        200: {"description": "A page of pin statuses", "model": PinListResponse},
        400: {"description": "Bad Request - Invalid filter or pagination parameters"},
        416: {"description": "Range Not Satisfiable - Page beyond the last page"}
    }
)
async def get_pins(
    request: Request,
    auth: CurrentAuth,
    settings: Annotated[Settings, Depends(get_settings)]
) -> JSONResponse:
    """A page of pin statuses with pagination headers."""
    config = PaginationConfig.from_settings(settings)
    # before filters by creation date here, it is not a cursor
    page_request = parse_page_request(request.query_params, config, allow_cursor=False)
    params = validate_search_params(request.query_params)

    filters = {
        name: value for name, value in request.query_params.items()
        if name not in PAGINATION_PARAMS
    }

    key_ids = [key.id for key in await list_keys(auth.user.id)]

    try:
        page = await list_psa_pin_requests(key_ids, params, page_request)
    except RangeNotSatisfiableDBError as e:
        logger.info(f"Pin request page out of range: {e}")
        raise RangeNotSatisfiableError()

    link = format_link_header(build_links(
        request.url.path,
        page_request,
        page.items,
        page.count,
        config,
        extra_params=filters
    ))

    body = PinListResponse(
        count=page.count,
        results=[
            to_pin_status_response(pin_request, settings.pin_delegates)
            for pin_request in page.items
        ]
    )

    return page_response(page.items, page_request, page.count, link, body=body)
