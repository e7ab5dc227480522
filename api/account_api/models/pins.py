"""Pydantic models for Pinning Service API pin requests."""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

PinStatus = Literal["queued", "pinning", "pinned", "failed"]


class PsaPinRequest(BaseModel):
    """A pin request row with its aggregated pin status."""

    id: str
    source_cid: str
    content_cid: str
    name: Optional[str] = None
    origins: Optional[List[str]] = None
    meta: Optional[Dict[str, str]] = None
    status: PinStatus
    created: datetime


class Pin(BaseModel):
    """Pin object as defined by the Pinning Service API."""

    cid: str
    name: Optional[str] = None
    origins: List[str] = Field(default_factory=list)
    meta: Dict[str, str] = Field(default_factory=dict)


class PinStatusResponse(BaseModel):
    """Pin status object as defined by the Pinning Service API."""

    requestid: str
    status: PinStatus
    created: datetime
    pin: Pin
    delegates: List[str] = Field(default_factory=list)
    info: Dict[str, Any] = Field(default_factory=dict)


class PinListResponse(BaseModel):
    """A page of pin statuses."""

    count: int
    results: List[PinStatusResponse]
