"""Stripe backed billing and customer services."""

import asyncio
import logging
from typing import Any, Optional

import stripe

from ..db import customers as customers_db
from ..errors.problem_details import BadRequestError, InternalServerError
from ..models.payment import CardDetails, PaymentMethod
from ..models.users import User


logger = logging.getLogger(__name__)


def _payment_method_from_stripe(method: Any) -> PaymentMethod:
    card = method.get("card")
    return PaymentMethod(
        id=method["id"],
        card=CardDetails(
            brand=card.get("brand"),
            last4=card.get("last4"),
            exp_month=card.get("exp_month"),
            exp_year=card.get("exp_year")
        ) if card else None
    )


class StripeBillingService:
    """Reads and updates the default payment method of Stripe customers."""

    def __init__(self, api_key: str):
        if not api_key:
            raise InternalServerError("Stripe is not configured")
        self.api_key = api_key

    def _get_payment_method(self, customer_id: str) -> Optional[PaymentMethod]:
        customer = stripe.Customer.retrieve(
            customer_id,
            api_key=self.api_key,
            expand=["invoice_settings.default_payment_method"]
        )
        if customer.get("deleted"):
            return None

        invoice_settings = customer.get("invoice_settings") or {}
        method = invoice_settings.get("default_payment_method")
        if not method:
            return None
        if isinstance(method, str):
            method = stripe.PaymentMethod.retrieve(method, api_key=self.api_key)

        return _payment_method_from_stripe(method)

    def _save_default_payment_method(self, customer_id: str, method_id: str) -> None:
        stripe.PaymentMethod.attach(method_id, customer=customer_id, api_key=self.api_key)
        stripe.Customer.modify(
            customer_id,
            api_key=self.api_key,
            invoice_settings={"default_payment_method": method_id}
        )

    async def get_payment_method(self, customer_id: str) -> Optional[PaymentMethod]:
        """Default payment method of a customer, or None if none is set.

        Raises:
            InternalServerError: If Stripe cannot be reached
        """
        try:
            return await asyncio.to_thread(self._get_payment_method, customer_id)
        except stripe.StripeError as e:
            logger.error(f"Stripe error retrieving payment method of {customer_id}: {e}")
            raise InternalServerError("Error retrieving payment method")

    async def save_default_payment_method(self, customer_id: str, method_id: str) -> None:
        """Attach a payment method to a customer and make it the default.

        Raises:
            BadRequestError: If Stripe rejects the payment method
            InternalServerError: If Stripe cannot be reached
        """
        try:
            await asyncio.to_thread(self._save_default_payment_method, customer_id, method_id)
        except (stripe.CardError, stripe.InvalidRequestError) as e:
            logger.info(f"Stripe rejected payment method {method_id}: {e}")
            raise BadRequestError(f"Invalid payment method: {e.user_message or method_id}")
        except stripe.StripeError as e:
            logger.error(f"Stripe error saving payment method for {customer_id}: {e}")
            raise InternalServerError("Error saving payment method")

        logger.info(f"Saved default payment method for customer {customer_id}")


class StripeCustomersService:
    """Maps users to Stripe customers, creating customers on demand."""

    def __init__(self, api_key: str):
        if not api_key:
            raise InternalServerError("Stripe is not configured")
        self.api_key = api_key

    def _create_customer(self, user: User) -> str:
        customer = stripe.Customer.create(
            api_key=self.api_key,
            email=user.email,
            name=user.name or None,
            metadata={"user_id": user.id}
        )
        return customer["id"]

    async def get_or_create_for_user(self, user: User) -> str:
        """Stripe customer ID of a user, creating the customer if needed."""
        customer_id = await customers_db.get_customer_id(user.id)
        if customer_id:
            return customer_id

        try:
            created = await asyncio.to_thread(self._create_customer, user)
        except stripe.StripeError as e:
            logger.error(f"Stripe error creating customer for user {user.id}: {e}")
            raise InternalServerError("Error creating billing customer")

        logger.info(f"Created Stripe customer {created} for user {user.id}")
        return await customers_db.save_customer(user.id, created)
