"""Pydantic models for payment settings."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CardDetails(BaseModel):
    """Non-sensitive details of a saved card."""

    brand: Optional[str] = None
    last4: Optional[str] = None
    exp_month: Optional[int] = Field(default=None, alias="expMonth")
    exp_year: Optional[int] = Field(default=None, alias="expYear")

    model_config = ConfigDict(populate_by_name=True)


class PaymentMethod(BaseModel):
    """Reference to a billing provider payment method."""

    id: str = Field(min_length=1)
    card: Optional[CardDetails] = None


class PaymentSettings(BaseModel):
    """A user's payment settings."""

    payment_method: Optional[PaymentMethod] = Field(default=None, alias="paymentMethod")

    model_config = ConfigDict(populate_by_name=True)


class PaymentMethodInput(BaseModel):
    """Payment method reference sent by the client."""

    id: str = Field(min_length=1)


class PaymentSettingsUpdate(BaseModel):
    """Body of a save-payment-settings request."""

    method: PaymentMethodInput


class PaymentSettingsSaved(BaseModel):
    """Response of an accepted payment settings update."""

    location: str
