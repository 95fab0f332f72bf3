from fastapi import APIRouter, Depends, HTTPException

from waitify.core.permissions import BusinessContext, ensure_owned, require_business_access
from waitify.domain.schemas import StaffCreate, StaffUpdate
from waitify.repositories.location import LocationRepository, StaffRepository

router = APIRouter()


def check_location(location_id: str | None, ctx: BusinessContext) -> None:
    if location_id:
        ensure_owned(LocationRepository.get_by_id(location_id), ctx, "Location")


@router.get("")
def list_staff(location_id: str | None = None, ctx: BusinessContext = Depends(require_business_access)):
    return StaffRepository.get_by_business(ctx.business_id, location_id=location_id)


@router.post("", status_code=201)
def create_staff_member(data: StaffCreate, ctx: BusinessContext = Depends(require_business_access)):
    check_location(data.location_id, ctx)
    member = StaffRepository.create(ctx.business_id, **data.model_dump())
    if not member:
        raise HTTPException(status_code=500, detail="Failed to create staff member")
    return member


@router.put("/{staff_id}")
def update_staff_member(
    staff_id: str,
    data: StaffUpdate,
    ctx: BusinessContext = Depends(require_business_access),
):
    member = ensure_owned(StaffRepository.get_by_id(staff_id), ctx, "Staff member")
    update_data = data.model_dump(exclude_unset=True)
    if not update_data:
        return member

    check_location(update_data.get("location_id"), ctx)
    updated = StaffRepository.update(staff_id, **update_data)
    if not updated:
        raise HTTPException(status_code=500, detail="Failed to update staff member")
    return updated


@router.delete("/{staff_id}")
def delete_staff_member(staff_id: str, ctx: BusinessContext = Depends(require_business_access)):
    ensure_owned(StaffRepository.get_by_id(staff_id), ctx, "Staff member")
    if not StaffRepository.delete(staff_id):
        raise HTTPException(status_code=500, detail="Failed to delete staff member")
    return {"message": "Staff member deleted"}
