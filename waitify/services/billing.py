"""
Stripe billing service.

Backs the checkout, invoices and subscription endpoints. Customers are
matched to Stripe by email, the same way the hosted checkout created them.
"""

import logging
from datetime import datetime, timezone

import stripe

from waitify.core.config import get_price_ids, get_settings
from waitify.core.features import get_plan

logger = logging.getLogger(__name__)

INACTIVE_SUBSCRIPTION = {
    "active": False,
    "plan": None,
    "current_period_end": None,
    "cancel_at_period_end": False,
    "payment_method": None,
}


class BillingError(Exception):
    """Raised when the payment provider rejects or fails a request."""


class InvalidPlanError(ValueError):
    """Raised for plan ids with no configured Stripe price."""


def _iso(timestamp: int | None) -> str | None:
    if timestamp is None:
        return None
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).isoformat()


class BillingService:
    """Thin wrapper over the Stripe SDK."""

    def __init__(self, api_key: str, price_ids: dict[str, str]):
        stripe.api_key = api_key
        self.price_ids = price_ids
        self.plans_by_price = {price: plan_id for plan_id, price in price_ids.items()}

    def find_customer(self, email: str) -> str | None:
        """Return the Stripe customer id for an email, if any."""
        try:
            customers = stripe.Customer.list(email=email, limit=1)
        except stripe.error.StripeError as e:
            logger.error(f"Stripe error looking up customer {email}: {e}")
            raise BillingError(str(e)) from e
        return customers.data[0].id if customers.data else None

    def get_or_create_customer(self, email: str, user_id: str) -> str:
        customer_id = self.find_customer(email)
        if customer_id:
            return customer_id
        try:
            customer = stripe.Customer.create(
                email=email,
                metadata={"supabase_id": user_id},
            )
        except stripe.error.StripeError as e:
            logger.error(f"Stripe error creating customer {email}: {e}")
            raise BillingError(str(e)) from e
        logger.info(f"Created Stripe customer {customer.id} for user {user_id}")
        return customer.id

    def create_checkout_session(self, email: str, user_id: str, plan_id: str, origin: str) -> str:
        """Create a hosted checkout page for a plan and return its URL."""
        price_id = self.price_ids.get(plan_id)
        if not price_id:
            raise InvalidPlanError(plan_id)

        customer_id = self.get_or_create_customer(email, user_id)
        try:
            session = stripe.checkout.Session.create(
                customer=customer_id,
                payment_method_types=["card"],
                line_items=[{"price": price_id, "quantity": 1}],
                mode="subscription",
                success_url=f"{origin}/settings?tab=business&success=true",
                cancel_url=f"{origin}/settings?tab=business&canceled=true",
                subscription_data={"metadata": {"supabase_id": user_id}},
            )
        except stripe.error.StripeError as e:
            logger.error(f"Stripe error creating checkout session: {e}")
            raise BillingError(str(e)) from e

        logger.info(f"Created checkout session {session.id} for plan {plan_id}")
        return session.url

    def create_portal_session(self, email: str, origin: str) -> str | None:
        """Billing portal URL for managing payment methods, None if no customer."""
        customer_id = self.find_customer(email)
        if not customer_id:
            return None
        try:
            session = stripe.billing_portal.Session.create(
                customer=customer_id,
                return_url=f"{origin}/settings?tab=business",
            )
        except stripe.error.StripeError as e:
            logger.error(f"Stripe error creating portal session: {e}")
            raise BillingError(str(e)) from e
        return session.url

    def list_invoices(self, email: str, limit: int = 10) -> list[dict]:
        """Most recent invoices of the customer, amounts in major units."""
        customer_id = self.find_customer(email)
        if not customer_id:
            return []
        try:
            invoices = stripe.Invoice.list(customer=customer_id, limit=limit)
        except stripe.error.StripeError as e:
            logger.error(f"Stripe error listing invoices: {e}")
            raise BillingError(str(e)) from e

        return [
            {
                "id": invoice.id,
                "number": invoice.number,
                "status": invoice.status,
                "amount_due": invoice.amount_due / 100,
                "currency": invoice.currency,
                "created": _iso(invoice.created),
                "period_start": _iso(invoice.period_start),
                "period_end": _iso(invoice.period_end),
                "invoice_pdf": invoice.invoice_pdf,
                "hosted_invoice_url": invoice.hosted_invoice_url,
            }
            for invoice in invoices.data
        ]

    def get_subscription(self, email: str) -> dict:
        """Current subscription status of the customer."""
        customer_id = self.find_customer(email)
        if not customer_id:
            return dict(INACTIVE_SUBSCRIPTION)

        try:
            subscriptions = stripe.Subscription.list(
                customer=customer_id,
                status="active",
                expand=["data.default_payment_method"],
                limit=1,
            )
        except stripe.error.StripeError as e:
            logger.error(f"Stripe error fetching subscription: {e}")
            raise BillingError(str(e)) from e

        if not subscriptions.data:
            return dict(INACTIVE_SUBSCRIPTION)

        subscription = subscriptions.data[0]
        price_id = subscription["items"]["data"][0]["price"]["id"]

        payment_method = None
        pm = subscription.get("default_payment_method")
        if pm:
            card = pm.get("card")
            payment_method = {
                "type": pm.get("type"),
                "last4": card["last4"] if card else "****",
                "exp_month": card["exp_month"] if card else 0,
                "exp_year": card["exp_year"] if card else 0,
            }

        return {
            "active": subscription["status"] == "active",
            "plan": get_plan(self.plans_by_price.get(price_id)),
            "current_period_end": _iso(subscription.get("current_period_end")),
            "cancel_at_period_end": bool(subscription.get("cancel_at_period_end")),
            "payment_method": payment_method,
        }


# Singleton instance
_billing_service: BillingService | None = None


def get_billing_service() -> BillingService:
    """Get the billing service singleton."""
    global _billing_service
    if _billing_service is None:
        settings = get_settings()
        if not settings.stripe_secret_key:
            logger.warning("STRIPE_SECRET_KEY is not set!")
        _billing_service = BillingService(settings.stripe_secret_key, get_price_ids())
    return _billing_service
