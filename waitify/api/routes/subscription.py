from fastapi import APIRouter, Depends

from waitify.core.entitlements import get_limits_and_usage, get_plan_id, get_subscription_status
from waitify.core.features import resolve_gate
from waitify.core.permissions import BusinessContext, require_business_access
from waitify.repositories.location import LocationRepository
from waitify.repositories.waitlist import WaitlistRepository
from waitify.services.analytics import count_customers_on, get_business_entries, today

router = APIRouter()


@router.get("/status")
def get_status(subscription: dict = Depends(get_subscription_status)):
    """Cached subscription status used for feature gating."""
    return subscription


@router.get("/usage")
def get_usage(
    ctx: BusinessContext = Depends(require_business_access),
    plan_id: str | None = Depends(get_plan_id),
):
    """Plan limits next to the business's current usage."""
    usage = {
        "max_waitlists": WaitlistRepository.count(ctx.business_id),
        "max_locations": LocationRepository.count(ctx.business_id),
        "max_customers_per_day": count_customers_on(get_business_entries(ctx.business_id), today()),
    }
    return get_limits_and_usage(plan_id, usage)


@router.get("/gate/{feature}")
def check_gate(
    feature: str,
    current_count: int | None = None,
    has_fallback: bool = False,
    plan_id: str | None = Depends(get_plan_id),
):
    """How a gated page region should render: render, fallback or upgrade."""
    return {
        "feature": feature,
        "plan_id": plan_id or "free",
        "decision": resolve_gate(feature, plan_id, current_count, has_fallback),
    }
