"""Payment settings endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..auth.dependencies import CurrentAuth
from ..billing import (
    StripeBillingService, StripeCustomersService,
    get_payment_settings, save_payment_settings
)
from ..config import Settings, get_settings
from ..maintenance import require_read, require_write
from ..models.payment import PaymentSettings, PaymentSettingsSaved, PaymentSettingsUpdate


logger = logging.getLogger(__name__)

PAYMENT_SETTINGS_PATH = "/user/payment"

router = APIRouter(
    prefix=PAYMENT_SETTINGS_PATH,
    tags=["Payment"],
    responses={
        401: {"description": "Unauthorized"},
        503: {"description": "API undergoing maintenance"}
    }
)


def get_billing_service(
    settings: Annotated[Settings, Depends(get_settings)]
) -> StripeBillingService:
    """Billing service for the configured Stripe account."""
    return StripeBillingService(settings.stripe_secret_key)


def get_customers_service(
    settings: Annotated[Settings, Depends(get_settings)]
) -> StripeCustomersService:
    """Customers service for the configured Stripe account."""
    return StripeCustomersService(settings.stripe_secret_key)


BillingService = Annotated[StripeBillingService, Depends(get_billing_service)]
CustomersService = Annotated[StripeCustomersService, Depends(get_customers_service)]


@router.get(
    "",
    response_model=PaymentSettings,
    dependencies=[Depends(require_read)],
    summary="Get payment settings"
)
async def get_payment(
    auth: CurrentAuth,
    billing: BillingService,
    customers: CustomersService
) -> PaymentSettings:
    """The user's default payment method, if any."""
    return await get_payment_settings(billing, customers, auth.user)


@router.put(
    "",
    status_code=202,
    response_model=PaymentSettingsSaved,
    dependencies=[Depends(require_write)],
    summary="Save payment settings",
    responses={
        202: {"description": "Payment settings accepted"},
        400: {"description": "Bad Request - Payment method rejected"}
    }
)
async def put_payment(
    body: PaymentSettingsUpdate,
    auth: CurrentAuth,
    billing: BillingService,
    customers: CustomersService
) -> JSONResponse:
    """Make the given payment method the user's default."""
    await save_payment_settings(billing, customers, auth.user, body)
    logger.info(f"Saved payment settings for user {auth.user.id}")

    return JSONResponse(
        status_code=202,
        content=PaymentSettingsSaved(location=PAYMENT_SETTINGS_PATH).model_dump(),
        headers={"Location": PAYMENT_SETTINGS_PATH}
    )
