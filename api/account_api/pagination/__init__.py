"""Pagination module for offset and cursor based listings."""

from .page_request import (
    PaginationConfig,
    OffsetPageRequest,
    CursorPageRequest,
    PageRequest,
    Page,
    parse_page_request
)
from .links import (
    LinkRelation,
    build_links,
    format_cursor,
    format_link_header
)
from .response import pagination_headers, page_response

__all__ = [
    "PaginationConfig",
    "OffsetPageRequest",
    "CursorPageRequest",
    "PageRequest",
    "Page",
    "parse_page_request",
    "LinkRelation",
    "build_links",
    "format_cursor",
    "format_link_header",
    "pagination_headers",
    "page_response"
]
