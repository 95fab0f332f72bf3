"""Business waitlist management, entries and join QR codes."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from waitify.core.config import settings
from waitify.core.entitlements import require_within_limit
from waitify.core.permissions import BusinessContext, ensure_owned, get_current_profile, require_business_access
from waitify.domain.schemas import (
    QRCodeResponse,
    WaitlistCreate,
    WaitlistEntryCreate,
    WaitlistEntryUpdate,
    WaitlistUpdate,
)
from waitify.repositories.waitlist import WaitlistEntryRepository, WaitlistRepository
from waitify.services.email import get_email_service
from waitify.services.qr_generator import generate_qr_code_base64
from waitify.services.qr_links import build_waitlist_join_url

logger = logging.getLogger(__name__)

router = APIRouter()


def get_owned_waitlist(waitlist_id: str, ctx: BusinessContext) -> dict:
    return ensure_owned(WaitlistRepository.get_by_id(waitlist_id), ctx, "Waitlist")


def get_entry_in_waitlist(waitlist_id: str, entry_id: str) -> dict:
    entry = WaitlistEntryRepository.get_by_id(entry_id)
    if not entry or entry.get("waitlist_id") != waitlist_id:
        raise HTTPException(status_code=404, detail="Entry not found")
    return entry


def ensure_joinable(waitlist: dict | None) -> dict:
    """404 for unknown waitlists, 400 when closed or full."""
    if not waitlist:
        raise HTTPException(status_code=404, detail="Waitlist not found")
    if not waitlist.get("is_active"):
        raise HTTPException(status_code=400, detail="This waitlist is not accepting new entries")

    capacity = waitlist.get("max_capacity")
    if capacity:
        waiting = WaitlistEntryRepository.get_by_waitlist(waitlist["id"], status="waiting")
        if len(waiting) >= capacity:
            raise HTTPException(status_code=400, detail="This waitlist is full")
    return waitlist


@router.get("")
def list_waitlists(ctx: BusinessContext = Depends(require_business_access)):
    """List the business's waitlists, newest first."""
    return WaitlistRepository.get_by_business(ctx.business_id)


@router.post("", status_code=201)
def create_waitlist(
    data: WaitlistCreate,
    ctx: BusinessContext = Depends(require_within_limit("max_waitlists", WaitlistRepository.count)),
):
    """Create a waitlist (limited by the plan's max_waitlists)."""
    waitlist = WaitlistRepository.create(ctx.business_id, **data.model_dump())
    if not waitlist:
        raise HTTPException(status_code=500, detail="Failed to create waitlist")
    logger.info(f"Business {ctx.business_id} created waitlist {waitlist['id']}")
    return waitlist


@router.get("/{waitlist_id}")
def get_waitlist(waitlist_id: str, ctx: BusinessContext = Depends(require_business_access)):
    return get_owned_waitlist(waitlist_id, ctx)


@router.put("/{waitlist_id}")
def update_waitlist(
    waitlist_id: str,
    data: WaitlistUpdate,
    ctx: BusinessContext = Depends(require_business_access),
):
    waitlist = get_owned_waitlist(waitlist_id, ctx)
    update_data = data.model_dump(exclude_unset=True)
    if not update_data:
        return waitlist

    updated = WaitlistRepository.update(waitlist_id, **update_data)
    if not updated:
        raise HTTPException(status_code=500, detail="Failed to update waitlist")
    return updated


@router.delete("/{waitlist_id}")
def delete_waitlist(waitlist_id: str, ctx: BusinessContext = Depends(require_business_access)):
    get_owned_waitlist(waitlist_id, ctx)
    if not WaitlistRepository.delete(waitlist_id):
        raise HTTPException(status_code=500, detail="Failed to delete waitlist")
    return {"message": "Waitlist deleted"}


@router.get("/{waitlist_id}/qr", response_model=QRCodeResponse)
def get_waitlist_qr(waitlist_id: str, ctx: BusinessContext = Depends(require_business_access)):
    """Join link and QR image to print for a waitlist."""
    get_owned_waitlist(waitlist_id, ctx)
    url = build_waitlist_join_url(settings.web_app_url, waitlist_id)
    return QRCodeResponse(url=url, qr_code=generate_qr_code_base64(url))


# ============================================
# Entries
# ============================================

@router.get("/{waitlist_id}/entries")
def list_entries(
    waitlist_id: str,
    status: str | None = Query(None, pattern=r'^(waiting|notified|seated|cancelled)$'),
    ctx: BusinessContext = Depends(require_business_access),
):
    """Entries in queue order, with the customer's profile."""
    get_owned_waitlist(waitlist_id, ctx)
    return WaitlistEntryRepository.get_by_waitlist(waitlist_id, status=status)


@router.post("/{waitlist_id}/entries", status_code=201)
def add_entry(
    waitlist_id: str,
    data: WaitlistEntryCreate,
    ctx: BusinessContext = Depends(require_business_access),
):
    """Add a walk-in or a known customer at the end of the queue."""
    get_owned_waitlist(waitlist_id, ctx)
    if not data.user_id and not data.guest_name:
        raise HTTPException(status_code=400, detail="Either user_id or guest_name is required")

    entry = WaitlistEntryRepository.add(waitlist_id, status="waiting", **data.model_dump())
    if not entry:
        raise HTTPException(status_code=500, detail="Failed to add entry")
    return entry


@router.put("/{waitlist_id}/entries/{entry_id}")
def update_entry(
    waitlist_id: str,
    entry_id: str,
    data: WaitlistEntryUpdate,
    ctx: BusinessContext = Depends(require_business_access),
):
    """Update an entry's status or notes. Any status may follow any other."""
    waitlist = get_owned_waitlist(waitlist_id, ctx)
    entry = get_entry_in_waitlist(waitlist_id, entry_id)

    update_data = data.model_dump(exclude_unset=True)
    if not update_data:
        return entry

    updated = WaitlistEntryRepository.update(entry_id, **update_data)
    if not updated:
        raise HTTPException(status_code=500, detail="Failed to update entry")

    # Guests have no account to receive in-app notifications
    if update_data.get("status") == "notified" and entry.get("guest_email"):
        try:
            get_email_service().send_waitlist_ready_email(
                to=entry["guest_email"],
                customer_name=entry.get("guest_name"),
                business_name=ctx.profile.get("business_name") or "us",
                waitlist_name=waitlist["name"],
            )
        except Exception as e:
            logger.error(f"Failed to email guest for entry {entry_id}: {e}")

    return updated


@router.delete("/{waitlist_id}/entries/{entry_id}")
def remove_entry(
    waitlist_id: str,
    entry_id: str,
    ctx: BusinessContext = Depends(require_business_access),
):
    """Remove an entry. Other entries keep their positions."""
    get_owned_waitlist(waitlist_id, ctx)
    get_entry_in_waitlist(waitlist_id, entry_id)
    if not WaitlistEntryRepository.delete(entry_id):
        raise HTTPException(status_code=500, detail="Failed to remove entry")
    return {"message": "Entry removed"}


@router.post("/{waitlist_id}/join", status_code=201)
def join_waitlist(waitlist_id: str, profile: dict = Depends(get_current_profile)):
    """Join an active waitlist as the signed-in customer."""
    ensure_joinable(WaitlistRepository.get_by_id(waitlist_id))

    waiting = WaitlistEntryRepository.get_by_waitlist(waitlist_id, status="waiting")
    if any(e.get("user_id") == profile["id"] for e in waiting):
        raise HTTPException(status_code=400, detail="You are already on this waitlist")

    entry = WaitlistEntryRepository.add(waitlist_id, user_id=profile["id"], status="waiting")
    if not entry:
        raise HTTPException(status_code=500, detail="Failed to join waitlist")
    return entry
