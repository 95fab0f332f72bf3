"""Business-side notification sending (in-app, email, waitlist call-ups)."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from waitify.core.entitlements import FeatureNotAvailableError, get_plan_id
from waitify.core.features import has_feature_access
from waitify.core.permissions import BusinessContext, ensure_owned, require_business_access
from waitify.domain.schemas import NotificationSend
from waitify.repositories.waitlist import WaitlistEntryRepository, WaitlistRepository
from waitify.services.notifications import get_user_email, send_notification

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/send")
def send(
    data: NotificationSend,
    ctx: BusinessContext = Depends(require_business_access),
    plan_id: str | None = Depends(get_plan_id),
):
    """Send a notification to a customer.

    With action "get-email" only the customer's auth email is returned.
    """
    if data.action == "get-email":
        return {"email": get_user_email(data.user_id)}
    if data.action:
        raise HTTPException(status_code=400, detail=f"Unknown action: {data.action}")

    if not data.message:
        raise HTTPException(status_code=400, detail="Message is required")

    if data.waitlist_id:
        ensure_owned(WaitlistRepository.get_by_id(data.waitlist_id), ctx, "Waitlist")

    if data.entry_id:
        # The entry must sit on the named waitlist, and that waitlist must be ours
        entry = WaitlistEntryRepository.get_by_id(data.entry_id)
        if not entry or (data.waitlist_id and entry.get("waitlist_id") != data.waitlist_id):
            raise HTTPException(status_code=404, detail="Entry not found")
        ensure_owned(WaitlistRepository.get_by_id(entry["waitlist_id"]), ctx, "Entry")

    if data.phone_number and not has_feature_access("has_sms_notifications", plan_id):
        raise FeatureNotAvailableError("has_sms_notifications")

    try:
        return send_notification(
            user_id=data.user_id,
            message=data.message,
            type=data.type,
            email=data.email,
            phone_number=data.phone_number,
            subject=data.subject,
            waitlist_id=data.waitlist_id,
            entry_id=data.entry_id,
        )
    except RuntimeError as e:
        logger.error(f"Notification to {data.user_id} failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))
