"""
Subscription billing via Stripe: plans, checkout, invoices, status and
the customer portal.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from waitify.core.config import settings
from waitify.core.features import SUBSCRIPTION_PLANS
from waitify.core.permissions import BusinessContext, require_business_access
from waitify.domain.schemas import CheckoutRequest, UrlResponse
from waitify.services.billing import BillingError, BillingService, InvalidPlanError, get_billing_service
from waitify.services.subscription_cache import invalidate_subscription

logger = logging.getLogger(__name__)

router = APIRouter()


def get_origin(request: Request) -> str:
    """Where Stripe should send the browser back to."""
    return (request.headers.get("origin") or settings.web_app_url).rstrip("/")


def require_billing_email(ctx: BusinessContext) -> str:
    if not ctx.email:
        raise HTTPException(status_code=400, detail="Your account has no email address")
    return ctx.email


@router.get("/plans")
def list_plans():
    """The paid plan catalog (free tier is implicit)."""
    return SUBSCRIPTION_PLANS


@router.post("/create-checkout", response_model=UrlResponse)
def create_checkout(
    data: CheckoutRequest,
    request: Request,
    ctx: BusinessContext = Depends(require_business_access),
    billing: BillingService = Depends(get_billing_service),
):
    """Start a hosted Stripe checkout for a plan."""
    email = require_billing_email(ctx)
    try:
        url = billing.create_checkout_session(email, ctx.business_id, data.plan_id, get_origin(request))
    except InvalidPlanError:
        raise HTTPException(status_code=400, detail="Invalid plan ID")
    except BillingError as e:
        raise HTTPException(status_code=502, detail=str(e))

    # The plan changes once checkout completes; don't serve a stale status
    invalidate_subscription(email)
    return UrlResponse(url=url)


@router.api_route("/invoices", methods=["GET", "POST"])
def list_invoices(
    ctx: BusinessContext = Depends(require_business_access),
    billing: BillingService = Depends(get_billing_service),
):
    """The ten most recent invoices, amounts in major units."""
    email = require_billing_email(ctx)
    try:
        return {"invoices": billing.list_invoices(email)}
    except BillingError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.get("/subscription")
def get_subscription(
    ctx: BusinessContext = Depends(require_business_access),
    billing: BillingService = Depends(get_billing_service),
):
    """Live subscription status from Stripe (bypasses the cache)."""
    email = require_billing_email(ctx)
    try:
        return billing.get_subscription(email)
    except BillingError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.post("/portal", response_model=UrlResponse)
def create_portal(
    request: Request,
    ctx: BusinessContext = Depends(require_business_access),
    billing: BillingService = Depends(get_billing_service),
):
    """Stripe billing portal for payment methods and cancellation."""
    email = require_billing_email(ctx)
    try:
        url = billing.create_portal_session(email, get_origin(request))
    except BillingError as e:
        raise HTTPException(status_code=502, detail=str(e))
    if not url:
        raise HTTPException(status_code=404, detail="No billing account found")

    invalidate_subscription(email)
    return UrlResponse(url=url)
