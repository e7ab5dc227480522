"""Assemble paginated HTTP responses."""

from typing import Any, Dict, Optional, Sequence

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from .page_request import OffsetPageRequest, PageRequest


def pagination_headers(
    page_request: PageRequest,
    count: Optional[int],
    link: Optional[str]
) -> Dict[str, str]:
    """Build the Count/Size/Page/Link headers for a page.

    ``Size`` and ``Page`` are kept for older clients; the Link header
    supersedes them. ``Count`` is omitted when no total was computed.
    """
    headers: Dict[str, str] = {}

    if count is not None:
        headers["Count"] = str(count)

    headers["Size"] = str(page_request.size)

    if isinstance(page_request, OffsetPageRequest):
        headers["Page"] = str(page_request.page)

    if link:
        headers["Link"] = link

    return headers


def page_response(
    items: Sequence[Any],
    page_request: PageRequest,
    count: Optional[int],
    link: Optional[str],
    body: Any = None
) -> JSONResponse:
    """Create the JSON response for a page of items.

    Args:
        items: Items of the page, serialised as the body unless ``body`` is given
        page_request: The request that produced the page
        count: Total matching items, or None
        link: Link header value, or None
        body: Optional alternative response body

    Returns:
        JSONResponse carrying the pagination headers
    """
    content = jsonable_encoder(list(items) if body is None else body)
    return JSONResponse(
        content=content,
        headers=pagination_headers(page_request, count, link)
    )
