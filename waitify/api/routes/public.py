"""Public routes for guest-facing pages (no authentication required)."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from waitify.api.routes.waitlists import ensure_joinable
from waitify.core.business_types import BusinessType
from waitify.core.config import settings
from waitify.core.permissions import get_optional_profile
from waitify.domain.schemas import GuestJoin, QRCodeResponse
from waitify.repositories.clinic import PractitionerRepository, ServiceRepository
from waitify.repositories.profile import ProfileRepository
from waitify.repositories.waitlist import WaitlistEntryRepository, WaitlistRepository
from waitify.services.qr_generator import generate_qr_code_base64
from waitify.services.qr_links import build_appointment_booking_url

logger = logging.getLogger(__name__)

router = APIRouter()

PUBLIC_BUSINESS_FIELDS = ("id", "business_name", "business_type", "avatar_url")


def get_public_business(business_id: str) -> dict:
    profile = ProfileRepository.get_by_id(business_id)
    if not profile or profile.get("role") not in ("business", "admin"):
        raise HTTPException(status_code=404, detail="Business not found")
    return {k: profile.get(k) for k in PUBLIC_BUSINESS_FIELDS}


@router.get("/waitlists")
def list_available_waitlists():
    """Active waitlists customers can join, newest first."""
    return WaitlistRepository.get_available()


@router.get("/waitlists/{waitlist_id}")
def get_waitlist_info(waitlist_id: str):
    """Waitlist name, business and current queue length for the join page."""
    waitlist = WaitlistRepository.get_public(waitlist_id)
    if not waitlist:
        raise HTTPException(status_code=404, detail="Waitlist not found")

    waiting = WaitlistEntryRepository.get_by_waitlist(waitlist_id, status="waiting")
    business = waitlist.get("profiles") or {}
    return {
        "id": waitlist["id"],
        "name": waitlist["name"],
        "description": waitlist.get("description"),
        "is_active": waitlist.get("is_active", False),
        "business_name": business.get("business_name"),
        "business_type": business.get("business_type"),
        "waiting_count": len(waiting),
    }


@router.post("/waitlists/{waitlist_id}/join", status_code=201)
def guest_join_waitlist(
    waitlist_id: str,
    data: GuestJoin,
    profile: Optional[dict] = Depends(get_optional_profile),
):
    """Join a waitlist from a scanned QR code, signed in or as a guest."""
    ensure_joinable(WaitlistRepository.get_by_id(waitlist_id))

    entry = WaitlistEntryRepository.add(
        waitlist_id,
        user_id=profile["id"] if profile else None,
        guest_name=data.name,
        guest_email=data.email,
        guest_phone=data.phone,
        guest_party_size=data.party_size,
        notes=data.notes,
        status="waiting",
    )
    if not entry:
        raise HTTPException(status_code=500, detail="Could not add you to the waitlist")

    logger.info(f"Guest joined waitlist {waitlist_id} at position {entry.get('position')}")
    return {"id": entry["id"], "position": entry["position"], "status": entry["status"]}


@router.get("/businesses/{business_id}/booking")
def get_booking_info(business_id: str):
    """Practitioners and services a guest can book with."""
    business = get_public_business(business_id)
    return {
        "business": business,
        "practitioners": PractitionerRepository.get_by_business(business_id),
        "services": ServiceRepository.get_by_business(business_id),
    }


@router.get("/businesses/{business_id}/booking-qr", response_model=QRCodeResponse)
def get_booking_qr(business_id: str, appointment_id: Optional[str] = Query(None, alias="appointmentId")):
    """Booking link and QR image for a business (optionally one appointment)."""
    get_public_business(business_id)
    url = build_appointment_booking_url(settings.web_app_url, business_id, appointment_id)
    return QRCodeResponse(url=url, qr_code=generate_qr_code_base64(url))


@router.get("/industry-features")
def get_industry_features(type: Optional[str] = None):
    """Feature cards per business type, or for one type when given."""
    if type is not None:
        business_type = BusinessType.resolve(type)
        return {"business_type": business_type.value, "features": business_type.features}
    return {business_type.value: business_type.features for business_type in BusinessType}
