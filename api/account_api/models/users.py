"""Pydantic models for users, tags and tag change requests."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class UserTag(BaseModel):
    """A tag assigned to a user by an administrator."""

    tag: str = Field(description="Tag name")
    value: str = Field(description="Tag value")
    deleted_at: Optional[datetime] = Field(default=None, alias="deletedAt")

    model_config = ConfigDict(populate_by_name=True)


class UserTagProposal(BaseModel):
    """A user's request to change one of their tags."""

    id: Optional[str] = Field(default=None, alias="_id")
    tag: str = Field(description="Tag name")
    proposed_tag_value: str = Field(alias="proposedTagValue")
    admin_decision_type: Optional[str] = Field(default=None, alias="adminDecisionType")
    deleted_at: Optional[datetime] = Field(default=None, alias="deletedAt")

    model_config = ConfigDict(populate_by_name=True)


class UserInput(BaseModel):
    """User record built from login metadata, ready to be upserted."""

    name: str
    picture: str = ""
    issuer: str
    email: str
    github: Optional[str] = None
    public_address: str = Field(alias="publicAddress")

    model_config = ConfigDict(populate_by_name=True)


class User(BaseModel):
    """A registered user."""

    id: str = Field(alias="_id", description="User ID")
    issuer: str = Field(description="Magic issuer (DID)")
    name: str
    email: str
    github: Optional[str] = None
    picture: Optional[str] = None
    public_address: str = Field(alias="publicAddress")
    created: datetime
    updated: datetime
    tags: List[UserTag] = Field(default_factory=list)
    tag_proposals: List[UserTagProposal] = Field(default_factory=list, alias="tagProposals")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "_id": "315318734258474846",
                "issuer": "did:ethr:0x65007A739ab7AC5c537161249b81250E49e2853C",
                "name": "alice",
                "email": "alice@example.com",
                "github": None,
                "picture": "",
                "publicAddress": "0x65007A739ab7AC5c537161249b81250E49e2853C",
                "created": "2021-07-14T19:27:14.934572Z",
                "updated": "2021-07-14T19:27:14.934572Z"
            }
        }
    )


class LoginRequest(BaseModel):
    """Body of a login request."""

    type: str = Field(default="magic", description="Login type: 'magic' or 'github'")
    data: Optional[Dict[str, Any]] = Field(default=None, description="OAuth redirect result for GitHub logins")


class LoginResponse(BaseModel):
    """Response of a successful login."""

    issuer: str


class AccountResponse(BaseModel):
    """Storage usage of an account."""

    used_storage: int = Field(alias="usedStorage")
    storage_limit_bytes: Optional[str] = Field(default=None, alias="storageLimitBytes")

    model_config = ConfigDict(populate_by_name=True)


class UserRequestCreate(BaseModel):
    """Body of a tag change request."""

    tag_name: str = Field(alias="tagName", min_length=1)
    requested_tag_value: str = Field(alias="requestedTagValue")
    user_proposal_form: str = Field(alias="userProposalForm", description="JSON encoded form answers")

    model_config = ConfigDict(populate_by_name=True)
