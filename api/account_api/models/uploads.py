"""Pydantic models for uploads."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class PinInfo(BaseModel):
    """Pin status of an upload's content on one cluster peer."""

    status: str
    updated: datetime
    peer_id: str = Field(alias="peerId")
    peer_name: Optional[str] = Field(default=None, alias="peerName")
    region: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


class Upload(BaseModel):
    """An upload owned by a user."""

    id: str = Field(alias="_id", description="Upload ID")
    type: str = Field(description="Upload type, e.g. Car, Blob, Multipart")
    name: Optional[str] = None
    cid: str = Field(description="Content identifier as supplied by the uploader")
    created: datetime
    updated: datetime
    dag_size: Optional[int] = Field(default=None, alias="dagSize")
    pins: List[PinInfo] = Field(default_factory=list)

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "_id": "315318962269342301",
                "type": "Car",
                "name": "pics.car",
                "cid": "bafybeigdyrzt5sfp7udm7hu76uh7y26nf3efuylqabf3oclgtqy55fbzdi",
                "created": "2021-07-14T19:40:00.000Z",
                "updated": "2021-07-14T19:40:00.000Z",
                "dagSize": 132614,
                "pins": [
                    {
                        "status": "pinned",
                        "updated": "2021-07-14T19:41:00.000Z",
                        "peerId": "12D3KooWMbibcXHwkSjgV7VZ8TMfDKi6pZvmi97P83ZwHm9LEsvV",
                        "peerName": "web3-storage-dc13",
                        "region": "US-DC"
                    }
                ]
            }
        }
    )


class UploadRename(BaseModel):
    """Body of a rename request."""

    name: str = Field(min_length=1)


class UploadRenameResponse(BaseModel):
    """Result of a rename."""

    name: str
