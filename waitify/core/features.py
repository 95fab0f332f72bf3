"""
Feature definitions and plan limits.
Single source of truth for subscription entitlements.

This module defines what each subscription tier can access:
- Usage limits (waitlists, locations, customers per day), -1 = unlimited
- Feature flags (SMS, analytics, branding, etc.)

All functions are pure lookups over the static tables below.
"""
from enum import Enum
from typing import Literal, TypedDict

UNLIMITED = -1


class SubscriptionTier(str, Enum):
    """Subscription tier identifiers (Stripe plan ids)."""
    FREE = "free"
    BASIC = "basic"
    PROFESSIONAL = "professional"
    ENTERPRISE = "enterprise"


class FeatureLimits(TypedDict):
    """Type definition for plan limit configuration."""
    max_waitlists: int
    max_locations: int
    max_customers_per_day: int
    has_advanced_analytics: bool
    has_sms_notifications: bool
    has_email_notifications: bool
    has_whitelabel: bool
    has_custom_branding: bool
    has_api_access: bool
    has_priority_support: bool


NumericFeature = Literal["max_waitlists", "max_locations", "max_customers_per_day"]

NUMERIC_FEATURES: tuple[str, ...] = ("max_waitlists", "max_locations", "max_customers_per_day")


# Plan configuration - edit here to change limits
PLAN_LIMITS: dict[SubscriptionTier, FeatureLimits] = {
    SubscriptionTier.FREE: {
        "max_waitlists": 1,
        "max_locations": 1,
        "max_customers_per_day": 50,
        "has_advanced_analytics": False,
        "has_sms_notifications": False,
        "has_email_notifications": True,
        "has_whitelabel": False,
        "has_custom_branding": False,
        "has_api_access": False,
        "has_priority_support": False,
    },
    SubscriptionTier.BASIC: {
        "max_waitlists": 3,
        "max_locations": 1,
        "max_customers_per_day": 100,
        "has_advanced_analytics": False,
        "has_sms_notifications": False,
        "has_email_notifications": True,
        "has_whitelabel": False,
        "has_custom_branding": False,
        "has_api_access": False,
        "has_priority_support": False,
    },
    SubscriptionTier.PROFESSIONAL: {
        "max_waitlists": 10,
        "max_locations": 3,
        "max_customers_per_day": 500,
        "has_advanced_analytics": True,
        "has_sms_notifications": True,
        "has_email_notifications": True,
        "has_whitelabel": False,
        "has_custom_branding": True,
        "has_api_access": False,
        "has_priority_support": True,
    },
    SubscriptionTier.ENTERPRISE: {
        "max_waitlists": UNLIMITED,
        "max_locations": UNLIMITED,
        "max_customers_per_day": UNLIMITED,
        "has_advanced_analytics": True,
        "has_sms_notifications": True,
        "has_email_notifications": True,
        "has_whitelabel": True,
        "has_custom_branding": True,
        "has_api_access": True,
        "has_priority_support": True,
    },
}


# Paid plan catalog shown on the pricing page (prices in INR)
SUBSCRIPTION_PLANS: list[dict] = [
    {
        "id": "basic",
        "name": "Basic",
        "description": "For small businesses just getting started",
        "price": 999,
        "currency": "₹",
        "interval": "monthly",
        "features": [
            "Up to 100 waitlist entries per month",
            "Basic analytics",
            "Email notifications",
            "Single location",
        ],
    },
    {
        "id": "professional",
        "name": "Professional",
        "description": "Perfect for growing businesses",
        "price": 1999,
        "currency": "₹",
        "interval": "monthly",
        "features": [
            "Unlimited waitlist entries",
            "Advanced analytics",
            "SMS & email notifications",
            "Up to 3 locations",
            "Priority support",
        ],
    },
    {
        "id": "enterprise",
        "name": "Enterprise",
        "description": "For large establishments with multiple locations",
        "price": 4999,
        "currency": "₹",
        "interval": "monthly",
        "features": [
            "Unlimited everything",
            "Dedicated account manager",
            "Custom integrations",
            "Unlimited locations",
            "White-label options",
            "24/7 premium support",
        ],
    },
]


def get_plan(plan_id: str | None) -> dict | None:
    """Get a paid plan from the catalog, or None for free/unknown ids."""
    return next((p for p in SUBSCRIPTION_PLANS if p["id"] == plan_id), None)


def get_feature_limits(plan_id: str | None) -> FeatureLimits:
    """Get limits for a subscription plan.

    Args:
        plan_id: 'basic', 'professional', 'enterprise', or None

    Returns:
        FeatureLimits for the plan, free tier if None or unknown
    """
    if not plan_id:
        return PLAN_LIMITS[SubscriptionTier.FREE]
    try:
        return PLAN_LIMITS[SubscriptionTier(plan_id)]
    except ValueError:
        return PLAN_LIMITS[SubscriptionTier.FREE]


def has_feature_access(feature: str, plan_id: str | None) -> bool:
    """Check if a plan has access to a feature.

    Numeric limits grant access when unlimited or positive.
    Unknown feature names are never granted.
    """
    limits = get_feature_limits(plan_id)
    value = limits.get(feature)

    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value == UNLIMITED or value > 0
    return False


def is_within_limits(feature: NumericFeature, current_count: int, plan_id: str | None) -> bool:
    """Check that a resource count is strictly below the plan limit."""
    limit = get_feature_limits(plan_id)[feature]
    return limit == UNLIMITED or current_count < limit


def get_limit_description(feature: NumericFeature, plan_id: str | None) -> str:
    """Human-readable limit: 'Unlimited' or the number."""
    limit = get_feature_limits(plan_id)[feature]
    return "Unlimited" if limit == UNLIMITED else str(limit)


def resolve_gate(
    feature: str,
    plan_id: str | None,
    current_count: int | None = None,
    has_fallback: bool = False,
) -> str:
    """Decide how a gated UI region renders.

    Returns 'render' when the plan allows it, otherwise 'fallback' if the
    caller has a fallback to show, else 'upgrade'.
    """
    if current_count is not None and feature in NUMERIC_FEATURES:
        allowed = is_within_limits(feature, current_count, plan_id)
    else:
        allowed = has_feature_access(feature, plan_id)

    if allowed:
        return "render"
    return "fallback" if has_fallback else "upgrade"
