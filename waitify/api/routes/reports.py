from fastapi import APIRouter, Depends, Query

from waitify.core.entitlements import FeatureNotAvailableError, get_plan_id
from waitify.core.features import has_feature_access
from waitify.core.permissions import BusinessContext, require_business_access
from waitify.services.analytics import build_report

router = APIRouter()

BASIC_REPORT_DAYS = 7


@router.get("/summary")
def get_report_summary(
    days: int = Query(BASIC_REPORT_DAYS, ge=1, le=90),
    ctx: BusinessContext = Depends(require_business_access),
    plan_id: str | None = Depends(get_plan_id),
):
    """Entry and appointment status counts plus customers per day.

    History beyond a week is part of advanced analytics.
    """
    if days > BASIC_REPORT_DAYS and not has_feature_access("has_advanced_analytics", plan_id):
        raise FeatureNotAvailableError("has_advanced_analytics")
    return build_report(ctx.business_id, days=days)
