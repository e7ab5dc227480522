"""Billing for the Account API."""

from .stripe_service import StripeBillingService, StripeCustomersService
from .payment import get_payment_settings, save_payment_settings

__all__ = [
    "StripeBillingService",
    "StripeCustomersService",
    "get_payment_settings",
    "save_payment_settings"
]
