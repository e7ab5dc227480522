"""Link header generation for paginated listings (RFC 8288)."""

import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Mapping, Optional, Sequence
from urllib.parse import urlencode

from pydantic import BaseModel

from ..errors.problem_details import UnknownPageRequestTypeError
from .page_request import CursorPageRequest, OffsetPageRequest, PageRequest, PaginationConfig


class LinkRelation(BaseModel):
    """A single navigational relation of a Link header."""

    rel: Literal["next", "previous", "first", "last"]
    url: str


def format_cursor(created: Any) -> str:
    """Render an item's ``created`` value as a ``before`` cursor.

    Datetimes become ISO-8601 UTC timestamps with millisecond precision,
    or microsecond precision when truncating to milliseconds would lose
    information (and so skip items on the next page). Strings are passed
    through untouched.
    """
    if isinstance(created, datetime):
        if created.tzinfo is not None:
            created = created.astimezone(timezone.utc)
        if created.microsecond % 1000:
            fraction = f"{created.microsecond:06d}"
        else:
            fraction = f"{created.microsecond // 1000:03d}"
        return created.strftime("%Y-%m-%dT%H:%M:%S.") + fraction + "Z"
    return str(created)


def _created_of(item: Any) -> Any:
    if isinstance(item, dict):
        return item["created"]
    return getattr(item, "created")


def _link(
    base_url: str,
    rel: str,
    params: Dict[str, Any],
    extra_params: Mapping[str, str]
) -> LinkRelation:
    query = dict(params)
    query.update((name, value) for name, value in extra_params.items() if name not in params)
    return LinkRelation(rel=rel, url=f"{base_url}?{urlencode(query)}")


def build_links(
    base_url: str,
    page_request: PageRequest,
    items: Sequence[Any],
    count: Optional[int],
    config: PaginationConfig,
    extra_params: Optional[Mapping[str, str]] = None
) -> List[LinkRelation]:
    """Compute the next/last/first/previous relations for a page.

    Cursor pages only ever link forward: a full page yields a ``next``
    relation whose ``before`` is the ``created`` value of the last (oldest)
    item. Offset pages link to the next, last, first and previous pages.

    Args:
        base_url: Path (or URL without query string) of the listing
        page_request: The request that produced ``items``
        items: Items of the current page, newest first
        count: Total matching items (ignored in cursor mode)
        config: Pagination configuration
        extra_params: Other query parameters (filters) to carry into every
            link; pagination parameters take precedence

    Returns:
        Ordered list of link relations

    Raises:
        UnknownPageRequestTypeError: If the page request is of neither type
    """
    rels: List[LinkRelation] = []
    extra = extra_params or {}

    if isinstance(page_request, CursorPageRequest):
        size = page_request.size
        if len(items) == size:
            oldest = items[-1]
            cursor = format_cursor(_created_of(oldest))
            rels.append(_link(base_url, "next", {"size": size, "before": cursor}, extra))

    elif isinstance(page_request, OffsetPageRequest):
        size, page = page_request.size, page_request.page
        pages = math.ceil((count or 0) / size)

        if page < pages:
            rels.append(_link(base_url, "next", {"size": size, "page": page + 1}, extra))

        if pages > 0 or not config.omit_empty_links:
            rels.append(_link(base_url, "last", {"size": size, "page": pages}, extra))

        rels.append(_link(base_url, "first", {"size": size, "page": 1}, extra))

        if page > 1:
            rels.append(_link(base_url, "previous", {"size": size, "page": page - 1}, extra))

    else:
        raise UnknownPageRequestTypeError(
            f"Unknown page request type: {type(page_request).__name__}"
        )

    return rels


def format_link_header(relations: Sequence[LinkRelation]) -> Optional[str]:
    """Join relations into a Link header value, or ``None`` if there are none."""
    if not relations:
        return None
    return ", ".join(f'<{relation.url}>; rel="{relation.rel}"' for relation in relations)
