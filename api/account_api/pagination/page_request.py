"""Page requests: typed offset/cursor pagination parsed from query parameters."""

from typing import Any, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..config import Settings
from ..errors.problem_details import InvalidParameterError


class PaginationConfig(BaseModel):
    """Pagination behaviour shared by the parser and the link builder."""

    default_size: int = Field(default=25, ge=1, description="Page size used when none is requested")
    max_size: int = Field(default=1000, ge=1, description="Largest page size a client may request")
    omit_empty_links: bool = Field(
        default=True,
        description="Omit the last relation (page=0) when a listing has no results"
    )

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_settings(cls, settings: Settings) -> "PaginationConfig":
        """Build the pagination config from application settings."""
        return cls(
            default_size=settings.default_page_size,
            max_size=settings.max_page_size,
            omit_empty_links=settings.omit_empty_page_links
        )


class OffsetPageRequest(BaseModel):
    """Page number x page size pagination."""

    size: int = Field(gt=0, description="Number of items per page")
    page: int = Field(default=1, ge=1, description="1-based page number")

    model_config = ConfigDict(frozen=True)

    @property
    def offset(self) -> int:
        """Number of items preceding this page."""
        return (self.page - 1) * self.size


class CursorPageRequest(BaseModel):
    """Forward-only pagination over items created before a marker."""

    size: int = Field(gt=0, description="Number of items per page")
    before: str = Field(min_length=1, description="Only items created before this cursor")

    model_config = ConfigDict(frozen=True)


PageRequest = Union[OffsetPageRequest, CursorPageRequest]


class Page(BaseModel):
    """A page of items fetched for a page request.

    ``count`` is the total number of matching items, or ``None`` when it was
    not computed (cursor pagination).
    """

    items: List[Any] = Field(default_factory=list)
    count: Optional[int] = Field(default=None, ge=0)


def _parse_positive_int(params: Mapping[str, str], name: str) -> Optional[int]:
    raw = params.get(name)
    if raw is None or raw == "":
        return None
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise InvalidParameterError(name, f"{name} must be a positive integer, got {raw!r}")
    if value < 1:
        raise InvalidParameterError(name, f"{name} must be a positive integer, got {raw!r}")
    return value


def parse_page_request(
    params: Mapping[str, str],
    config: PaginationConfig,
    allow_cursor: bool = True
) -> PageRequest:
    """Parse raw query parameters into a page request.

    A ``before`` parameter selects cursor pagination; otherwise offset
    pagination is used with ``page`` defaulting to 1. ``size`` defaults to
    ``config.default_size`` when absent. Present but malformed values are
    rejected rather than replaced.

    Args:
        params: Query parameter names mapped to their raw string values
        config: Pagination configuration
        allow_cursor: Treat ``before`` as a cursor. Endpoints that use
            ``before`` as a filter pass ``False`` and always get offset pages.

    Returns:
        An ``OffsetPageRequest`` or a ``CursorPageRequest``

    Raises:
        InvalidParameterError: If ``size``, ``page`` or ``before`` is malformed
    """
    size = _parse_positive_int(params, "size")
    if size is None:
        size = config.default_size
    elif size > config.max_size:
        raise InvalidParameterError(
            "size", f"size must be at most {config.max_size}, got {size}"
        )

    if allow_cursor and "before" in params:
        before = params["before"]
        if not before:
            raise InvalidParameterError("before", "before must not be empty")
        return CursorPageRequest(size=size, before=before)

    page = _parse_positive_int(params, "page")
    return OffsetPageRequest(size=size, page=page or 1)
