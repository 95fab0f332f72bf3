from fastapi import APIRouter, HTTPException, Depends, File, UploadFile

from waitify.domain.schemas import ProfileCreate, ProfileResponse, ProfileUpdate
from waitify.repositories.profile import ProfileRepository
from waitify.core.business_types import BusinessType
from waitify.core.permissions import get_current_profile
from waitify.core.security import require_auth
from waitify.services.storage import get_storage_service

router = APIRouter()


@router.post("", response_model=ProfileResponse, status_code=201)
def create_my_profile(
    data: ProfileCreate,
    auth_payload: dict = Depends(require_auth),
):
    """Create the caller's profile after sign-up (business or customer)."""
    user_id = auth_payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid token payload: missing sub claim")

    if ProfileRepository.get_by_id(user_id):
        raise HTTPException(status_code=400, detail="Profile already exists")

    fields = data.model_dump(exclude_none=True, exclude={"role"})
    if data.role == "business":
        if not data.business_name:
            raise HTTPException(status_code=400, detail="Business name is required")
        fields["business_type"] = BusinessType.resolve(data.business_type).value
    else:
        fields.pop("business_name", None)
        fields.pop("business_type", None)

    profile = ProfileRepository.create(user_id, role=data.role, **fields)
    if not profile:
        raise HTTPException(status_code=500, detail="Failed to create profile")
    return ProfileResponse(**{**profile, "email": auth_payload.get("email")})


@router.get("/me", response_model=ProfileResponse)
def get_my_profile(profile: dict = Depends(get_current_profile)):
    """Get the current user's profile."""
    return ProfileResponse(**profile)


@router.put("/me", response_model=ProfileResponse)
def update_my_profile(
    data: ProfileUpdate,
    profile: dict = Depends(get_current_profile),
):
    """Update the current user's profile."""
    update_data = data.model_dump(exclude_unset=True)
    if not update_data:
        return ProfileResponse(**profile)

    if "business_type" in update_data:
        update_data["business_type"] = BusinessType.resolve(update_data["business_type"]).value

    updated = ProfileRepository.update(profile["id"], **update_data)
    if not updated:
        raise HTTPException(status_code=500, detail="Failed to update profile")
    updated.setdefault("email", profile.get("email"))
    return ProfileResponse(**updated)


@router.post("/avatar")
async def upload_avatar(
    file: UploadFile = File(...),
    profile: dict = Depends(get_current_profile),
):
    """Upload a new profile picture for the current user."""
    if file.content_type not in ["image/png", "image/jpeg"]:
        raise HTTPException(
            status_code=400,
            detail="Invalid file type. Only PNG and JPG are allowed."
        )

    file_data = await file.read()
    if len(file_data) > 2 * 1024 * 1024:
        raise HTTPException(
            status_code=400,
            detail="File too large. Maximum size is 2MB."
        )

    storage = get_storage_service()
    storage.delete_profile_picture(profile["id"])

    new_url = storage.upload_profile_picture(profile["id"], file_data, file.content_type)
    if not new_url:
        raise HTTPException(status_code=500, detail="Failed to upload avatar")

    ProfileRepository.update(profile["id"], avatar_url=new_url)
    return {"url": new_url}


@router.delete("/avatar")
def delete_avatar(profile: dict = Depends(get_current_profile)):
    """Delete the current user's profile picture."""
    if not profile.get("avatar_url"):
        return {"message": "No avatar to delete"}

    get_storage_service().delete_profile_picture(profile["id"])
    ProfileRepository.update(profile["id"], avatar_url=None)
    return {"message": "Avatar deleted successfully"}
