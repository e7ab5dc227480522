"""Pydantic models for API tokens."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AuthKeyCreate(BaseModel):
    """Body of a create-token request."""

    name: str = Field(min_length=1, description="Token name")


class AuthKey(BaseModel):
    """An API token owned by a user."""

    id: str = Field(alias="_id", description="Token ID")
    name: str
    secret: str = Field(description="Signed JWT used as the bearer token")
    created: datetime
    has_uploads: Optional[bool] = Field(default=None, alias="hasUploads")
    user_id: Optional[str] = Field(default=None, exclude=True)

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "_id": "315318734258474847",
                "name": "my-laptop",
                "secret": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                "created": "2021-07-14T19:30:01.102Z",
                "hasUploads": False
            }
        }
    )


class DeletedResponse(BaseModel):
    """ID of a tombstoned record."""

    id: str = Field(alias="_id")

    model_config = ConfigDict(populate_by_name=True)
