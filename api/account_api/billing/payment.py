"""Payment settings of a user."""

from ..models.payment import PaymentSettings, PaymentSettingsUpdate
from ..models.users import User
from .stripe_service import StripeBillingService, StripeCustomersService


async def get_payment_settings(
    billing: StripeBillingService,
    customers: StripeCustomersService,
    user: User
) -> PaymentSettings:
    """Current payment settings of a user."""
    customer_id = await customers.get_or_create_for_user(user)
    payment_method = await billing.get_payment_method(customer_id)
    return PaymentSettings(payment_method=payment_method)


async def save_payment_settings(
    billing: StripeBillingService,
    customers: StripeCustomersService,
    user: User,
    update: PaymentSettingsUpdate
) -> None:
    """Make the given payment method the user's default."""
    customer_id = await customers.get_or_create_for_user(user)
    await billing.save_default_payment_method(customer_id, update.method.id)
