from fastapi import APIRouter, Depends, HTTPException

from waitify.core.entitlements import require_within_limit
from waitify.core.permissions import BusinessContext, ensure_owned, require_business_access
from waitify.domain.schemas import LocationCreate, LocationUpdate
from waitify.repositories.location import LocationRepository, StaffRepository

router = APIRouter()


@router.get("")
def list_locations(ctx: BusinessContext = Depends(require_business_access)):
    return LocationRepository.get_by_business(ctx.business_id)


@router.post("", status_code=201)
def create_location(
    data: LocationCreate,
    ctx: BusinessContext = Depends(require_within_limit("max_locations", LocationRepository.count)),
):
    """Add a location (limited by the plan's max_locations)."""
    location = LocationRepository.create(ctx.business_id, **data.model_dump())
    if not location:
        raise HTTPException(status_code=500, detail="Failed to create location")
    return location


@router.put("/{location_id}")
def update_location(
    location_id: str,
    data: LocationUpdate,
    ctx: BusinessContext = Depends(require_business_access),
):
    location = ensure_owned(LocationRepository.get_by_id(location_id), ctx, "Location")
    update_data = data.model_dump(exclude_unset=True)
    if not update_data:
        return location

    updated = LocationRepository.update(location_id, **update_data)
    if not updated:
        raise HTTPException(status_code=500, detail="Failed to update location")
    return updated


@router.delete("/{location_id}")
def delete_location(location_id: str, ctx: BusinessContext = Depends(require_business_access)):
    ensure_owned(LocationRepository.get_by_id(location_id), ctx, "Location")
    if StaffRepository.get_by_business(ctx.business_id, location_id=location_id):
        raise HTTPException(status_code=400, detail="Reassign this location's staff before deleting it")
    if not LocationRepository.delete(location_id):
        raise HTTPException(status_code=500, detail="Failed to delete location")
    return {"message": "Location deleted"}
