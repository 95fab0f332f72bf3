"""Bookable services of a clinic or salon (name, duration, price)."""

from fastapi import APIRouter, Depends, HTTPException

from waitify.core.permissions import BusinessContext, ensure_owned, require_business_access
from waitify.domain.schemas import ServiceCreate, ServiceUpdate
from waitify.repositories.clinic import ServiceRepository

router = APIRouter()


@router.get("")
def list_services(ctx: BusinessContext = Depends(require_business_access)):
    return ServiceRepository.get_by_business(ctx.business_id)


@router.post("", status_code=201)
def create_service(data: ServiceCreate, ctx: BusinessContext = Depends(require_business_access)):
    service = ServiceRepository.create(ctx.business_id, **data.model_dump())
    if not service:
        raise HTTPException(status_code=500, detail="Failed to create service")
    return service


@router.get("/{service_id}")
def get_service(service_id: str, ctx: BusinessContext = Depends(require_business_access)):
    return ensure_owned(ServiceRepository.get_by_id(service_id), ctx, "Service")


@router.put("/{service_id}")
def update_service(
    service_id: str,
    data: ServiceUpdate,
    ctx: BusinessContext = Depends(require_business_access),
):
    service = ensure_owned(ServiceRepository.get_by_id(service_id), ctx, "Service")
    update_data = data.model_dump(exclude_unset=True)
    if not update_data:
        return service

    updated = ServiceRepository.update(service_id, **update_data)
    if not updated:
        raise HTTPException(status_code=500, detail="Failed to update service")
    return updated


@router.delete("/{service_id}")
def delete_service(service_id: str, ctx: BusinessContext = Depends(require_business_access)):
    ensure_owned(ServiceRepository.get_by_id(service_id), ctx, "Service")
    if not ServiceRepository.delete(service_id):
        raise HTTPException(status_code=500, detail="Failed to delete service")
    return {"message": "Service deleted"}
