from fastapi import Depends, HTTPException, status

from waitify.core.security import get_current_user, require_auth
from waitify.repositories.profile import ProfileRepository

BUSINESS_ROLES = ("business", "admin")


def get_current_profile(auth_payload: dict = Depends(require_auth)) -> dict:
    """Get the caller's profile row from the auth payload.

    Raises:
        HTTPException 401 if the token has no subject
        HTTPException 404 if the profile has not been created yet
    """
    auth_id = auth_payload.get("sub")
    if not auth_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload: missing sub claim"
        )

    profile = ProfileRepository.get_by_id(auth_id)
    if not profile:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found. Please complete registration."
        )

    # Email lives on the auth user, not the profile row
    profile.setdefault("email", auth_payload.get("email"))
    return profile


def get_optional_profile(auth_payload: dict | None = Depends(get_current_user)) -> dict | None:
    """Profile for guest-allowed routes: None when the caller is anonymous."""
    if not auth_payload or not auth_payload.get("sub"):
        return None
    profile = ProfileRepository.get_by_id(auth_payload["sub"])
    if profile:
        profile.setdefault("email", auth_payload.get("email"))
    return profile


class BusinessContext:
    """Context object for business-scoped routes.

    A business is the owning profile, so business_id is the caller's id.
    """

    def __init__(self, profile: dict):
        self.profile = profile
        self.business_id = profile["id"]
        self.role = profile.get("role")
        self.business_type = profile.get("business_type")
        self.email = profile.get("email")

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def require_business_access(profile: dict = Depends(get_current_profile)) -> BusinessContext:
    """Dependency for the business dashboard routes."""
    if profile.get("role") not in BUSINESS_ROLES:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="This action requires a business account"
        )
    return BusinessContext(profile)


def require_admin(profile: dict = Depends(get_current_profile)) -> dict:
    """Require the 'admin' role - raises 403 for any other role."""
    if profile.get("role") != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return profile


def ensure_owned(record: dict | None, ctx: BusinessContext, label: str) -> dict:
    """404 unless the record exists and belongs to the caller's business."""
    if not record or (record.get("business_id") != ctx.business_id and not ctx.is_admin):
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return record
