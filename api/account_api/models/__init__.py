"""Data models for the Account API."""

from .users import (
    User,
    UserInput,
    UserTag,
    UserTagProposal,
    LoginRequest,
    LoginResponse,
    AccountResponse,
    UserRequestCreate
)
from .keys import AuthKey, AuthKeyCreate, DeletedResponse
from .uploads import Upload, PinInfo, UploadRename, UploadRenameResponse
from .pins import PsaPinRequest, Pin, PinStatusResponse, PinListResponse
from .payment import (
    PaymentMethod,
    PaymentSettings,
    PaymentSettingsUpdate,
    PaymentSettingsSaved
)

__all__ = [
    "User",
    "UserInput",
    "UserTag",
    "UserTagProposal",
    "LoginRequest",
    "LoginResponse",
    "AccountResponse",
    "UserRequestCreate",
    "AuthKey",
    "AuthKeyCreate",
    "DeletedResponse",
    "Upload",
    "PinInfo",
    "UploadRename",
    "UploadRenameResponse",
    "PsaPinRequest",
    "Pin",
    "PinStatusResponse",
    "PinListResponse",
    "PaymentMethod",
    "PaymentSettings",
    "PaymentSettingsUpdate",
    "PaymentSettingsSaved"
]
