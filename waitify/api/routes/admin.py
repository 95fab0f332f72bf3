"""Admin-only API routes for platform administration."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from waitify.core.permissions import require_admin
from waitify.domain.schemas import RoleUpdate
from waitify.repositories.profile import ProfileRepository

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/profiles")
def list_profiles(
    role: Optional[str] = Query(None, pattern=r'^(admin|business|customer)$'),
    _: dict = Depends(require_admin),
):
    """List all profiles, optionally by role (admin only)."""
    return ProfileRepository.get_all(role=role)


@router.put("/profiles/{profile_id}/role")
def change_profile_role(
    profile_id: str,
    data: RoleUpdate,
    admin: dict = Depends(require_admin),
):
    """Change a profile's role (admin only). Profiles are never deleted."""
    if profile_id == admin["id"] and data.role != "admin":
        raise HTTPException(status_code=400, detail="You cannot remove your own admin role")

    if not ProfileRepository.get_by_id(profile_id):
        raise HTTPException(status_code=404, detail="Profile not found")

    updated = ProfileRepository.update_role(profile_id, data.role)
    if not updated:
        raise HTTPException(status_code=500, detail="Failed to update role")

    logger.info(f"Admin {admin['id']} set role of {profile_id} to {data.role}")
    return updated
