"""Pinning Service API helpers: list filters and pin status responses."""

import json
from datetime import datetime
from typing import Dict, List, Literal, Mapping, Optional, Sequence

from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors.problem_details import InvalidParameterError
from .models.pins import Pin, PinStatus, PinStatusResponse, PsaPinRequest

MAX_CIDS = 10
MAX_NAME_LENGTH = 255

TextMatchingStrategy = Literal["exact", "iexact", "partial", "ipartial"]


def _split_list(value):
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


class PsaListParams(BaseModel):
    """Filters accepted when listing pin requests."""

    cid: Optional[List[str]] = Field(default=None, min_length=1, max_length=MAX_CIDS)
    name: Optional[str] = Field(default=None, min_length=1, max_length=MAX_NAME_LENGTH)
    match: TextMatchingStrategy = "exact"
    status: Optional[List[PinStatus]] = Field(default=None, min_length=1)
    before: Optional[datetime] = None
    after: Optional[datetime] = None
    meta: Optional[Dict[str, str]] = None

    model_config = {"extra": "ignore"}

    @field_validator("cid", "status", mode="before")
    @classmethod
    def split_comma_list(cls, v):
        """Accept comma separated query values."""
        return _split_list(v)

    @field_validator("meta", mode="before")
    @classmethod
    def parse_meta(cls, v):
        """Accept a JSON encoded object."""
        if isinstance(v, str):
            return json.loads(v)
        return v


def validate_search_params(params: Mapping[str, str]) -> PsaListParams:
    """Validate pin request list filters from raw query parameters.

    Pagination parameters (``size``, ``page``) are ignored here.

    Raises:
        InvalidParameterError: If a filter is malformed
    """
    try:
        return PsaListParams.model_validate(dict(params))
    except ValidationError as e:
        error = e.errors()[0]
        parameter = str(error["loc"][0]) if error["loc"] else "query"
        raise InvalidParameterError(parameter, f"Invalid {parameter}: {error['msg']}")


def to_pin_status_response(
    pin_request: PsaPinRequest,
    delegates: Sequence[str] = ()
) -> PinStatusResponse:
    """Shape a stored pin request as a Pinning Service API pin status."""
    return PinStatusResponse(
        requestid=pin_request.id,
        status=pin_request.status,
        created=pin_request.created,
        pin=Pin(
            cid=pin_request.source_cid,
            name=pin_request.name,
            origins=pin_request.origins or [],
            meta=pin_request.meta or {}
        ),
        delegates=list(delegates)
    )
