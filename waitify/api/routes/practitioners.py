from fastapi import APIRouter, Depends, HTTPException

from waitify.core.permissions import BusinessContext, ensure_owned, require_business_access
from waitify.domain.schemas import PractitionerCreate, PractitionerUpdate
from waitify.repositories.clinic import PractitionerRepository

router = APIRouter()


@router.get("")
def list_practitioners(ctx: BusinessContext = Depends(require_business_access)):
    return PractitionerRepository.get_by_business(ctx.business_id)


@router.post("", status_code=201)
def create_practitioner(
    data: PractitionerCreate,
    ctx: BusinessContext = Depends(require_business_access),
):
    """Add a practitioner with weekly availability."""
    practitioner = PractitionerRepository.create(ctx.business_id, **data.model_dump())
    if not practitioner:
        raise HTTPException(status_code=500, detail="Failed to create practitioner")
    return practitioner


@router.get("/{practitioner_id}")
def get_practitioner(practitioner_id: str, ctx: BusinessContext = Depends(require_business_access)):
    return ensure_owned(PractitionerRepository.get_by_id(practitioner_id), ctx, "Practitioner")


@router.put("/{practitioner_id}")
def update_practitioner(
    practitioner_id: str,
    data: PractitionerUpdate,
    ctx: BusinessContext = Depends(require_business_access),
):
    practitioner = ensure_owned(PractitionerRepository.get_by_id(practitioner_id), ctx, "Practitioner")
    update_data = data.model_dump(exclude_unset=True)
    if not update_data:
        return practitioner

    updated = PractitionerRepository.update(practitioner_id, **update_data)
    if not updated:
        raise HTTPException(status_code=500, detail="Failed to update practitioner")
    return updated


@router.delete("/{practitioner_id}")
def delete_practitioner(practitioner_id: str, ctx: BusinessContext = Depends(require_business_access)):
    ensure_owned(PractitionerRepository.get_by_id(practitioner_id), ctx, "Practitioner")
    if not PractitionerRepository.delete(practitioner_id):
        raise HTTPException(status_code=500, detail="Failed to delete practitioner")
    return {"message": "Practitioner deleted"}
