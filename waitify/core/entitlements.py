"""
Entitlement checking for subscription-gated features.

Uses dependency injection pattern consistent with permissions.py.
The caller's plan comes from the billing provider (cached), never from
the request.

Usage:
    @router.post("")
    def create_waitlist(
        ctx: BusinessContext = Depends(require_within_limit("max_waitlists", WaitlistRepository.count)),
    ):
        # Only executes if the caller is a business AND the plan allows it
        pass
"""
import logging
from typing import Callable

from fastapi import Depends, HTTPException, status

from waitify.core.features import (
    NUMERIC_FEATURES,
    get_feature_limits,
    get_limit_description,
    has_feature_access,
    is_within_limits,
)
from waitify.core.permissions import BusinessContext, require_business_access
from waitify.services.billing import BillingError, INACTIVE_SUBSCRIPTION, get_billing_service
from waitify.services.subscription_cache import cache_subscription, get_cached_subscription

logger = logging.getLogger(__name__)


class LimitExceededError(HTTPException):
    """Raised when a plan limit would be exceeded by an operation."""

    def __init__(self, resource: str, limit: int, current: int):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "code": "LIMIT_EXCEEDED",
                "resource": resource,
                "limit": limit,
                "current": current,
                "message": f"Your plan allows {limit} {resource}. You currently have {current}.",
                "upgrade_required": True,
            }
        )


class FeatureNotAvailableError(HTTPException):
    """Raised when a feature is not available in the caller's plan."""

    def __init__(self, feature: str):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "code": "FEATURE_NOT_AVAILABLE",
                "feature": feature,
                "message": f"The '{feature}' feature is not included in your plan.",
                "upgrade_required": True,
            }
        )


def lookup_subscription(email: str | None) -> dict:
    """Subscription status for an email, inactive when unknown or on billing errors."""
    if not email:
        return dict(INACTIVE_SUBSCRIPTION)

    cached = get_cached_subscription(email)
    if cached is not None:
        return cached

    try:
        subscription = get_billing_service().get_subscription(email)
    except BillingError as e:
        logger.error(f"Falling back to free tier for {email}: {e}")
        return dict(INACTIVE_SUBSCRIPTION)

    cache_subscription(email, subscription)
    return subscription


def get_subscription_status(ctx: BusinessContext = Depends(require_business_access)) -> dict:
    """Dependency returning the business's current subscription status."""
    return lookup_subscription(ctx.email)


def get_plan_id(subscription: dict = Depends(get_subscription_status)) -> str | None:
    """Dependency returning the active plan id (None = free tier)."""
    if not subscription.get("active") or not subscription.get("plan"):
        return None
    return subscription["plan"]["id"]


def require_feature(feature: str):
    """Factory to create a dependency that requires a boolean feature.

    Usage:
        @router.post("/send-sms")
        def send_sms(ctx: BusinessContext = Depends(require_feature("has_sms_notifications"))):
            pass
    """
    def dependency(
        ctx: BusinessContext = Depends(require_business_access),
        plan_id: str | None = Depends(get_plan_id),
    ) -> BusinessContext:
        if not has_feature_access(feature, plan_id):
            raise FeatureNotAvailableError(feature)
        return ctx

    return dependency


def require_within_limit(feature: str, counter: Callable[[str], int]):
    """Factory for a dependency that checks a numeric limit before a create.

    Args:
        feature: One of max_waitlists, max_locations, max_customers_per_day
        counter: Returns the business's current count for that resource
    """
    resource = feature.removeprefix("max_").replace("_", " ")

    def dependency(
        ctx: BusinessContext = Depends(require_business_access),
        plan_id: str | None = Depends(get_plan_id),
    ) -> BusinessContext:
        current = counter(ctx.business_id)
        if not is_within_limits(feature, current, plan_id):
            raise LimitExceededError(resource, get_feature_limits(plan_id)[feature], current)
        return ctx

    return dependency


def get_limits_and_usage(plan_id: str | None, usage: dict[str, int]) -> dict:
    """Limits, descriptions and usage for the subscription page."""
    return {
        "plan_id": plan_id or "free",
        "limits": get_feature_limits(plan_id),
        "descriptions": {f: get_limit_description(f, plan_id) for f in NUMERIC_FEATURES},
        "usage": usage,
    }
