"""Restaurant floor plan: tables and their live status."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from waitify.core.permissions import BusinessContext, ensure_owned, require_business_access
from waitify.domain.schemas import TableCreate, TableUpdate
from waitify.repositories.restaurant import ReservationRepository, TableRepository
from waitify.services.analytics import today

logger = logging.getLogger(__name__)

router = APIRouter()


def get_owned_table(table_id: str, ctx: BusinessContext) -> dict:
    return ensure_owned(TableRepository.get_by_id(table_id), ctx, "Table")


def set_available(table_id: str) -> dict:
    """Mark the table available. Its reservations are left alone."""
    updated = TableRepository.update_status(table_id, "available")
    if not updated:
        raise HTTPException(status_code=500, detail="Failed to update table status")
    return updated


def held_reservation(reservations: list[dict]) -> dict | None:
    """The reservation a reserved table is being held for.

    That is the earliest one from today on, or the latest past one when
    nothing is upcoming.
    """
    day = today().isoformat()
    ordered = sorted(reservations, key=lambda r: (str(r.get("date")), str(r.get("time"))))
    upcoming = [r for r in ordered if str(r.get("date")) >= day]
    if upcoming:
        return upcoming[0]
    return ordered[-1] if ordered else None


@router.get("")
def list_tables(
    status: str | None = Query(None, pattern=r'^(available|occupied|reserved)$'),
    ctx: BusinessContext = Depends(require_business_access),
):
    return TableRepository.get_by_business(ctx.business_id, status=status)


@router.post("", status_code=201)
def create_table(data: TableCreate, ctx: BusinessContext = Depends(require_business_access)):
    existing = TableRepository.get_by_business(ctx.business_id)
    if any(t.get("number") == data.number for t in existing):
        raise HTTPException(status_code=400, detail=f"Table {data.number} already exists")

    table = TableRepository.create(ctx.business_id, **data.model_dump())
    if not table:
        raise HTTPException(status_code=500, detail="Failed to create table")
    return table


@router.put("/{table_id}")
def update_table(
    table_id: str,
    data: TableUpdate,
    ctx: BusinessContext = Depends(require_business_access),
):
    """Move, resize or renumber a table."""
    table = get_owned_table(table_id, ctx)
    update_data = data.model_dump(exclude_unset=True)
    if not update_data:
        return table

    if update_data.get("status") == "available":
        update_data.pop("status")
        set_available(table_id)
        if not update_data:
            return TableRepository.get_by_id(table_id)

    updated = TableRepository.update(table_id, **update_data)
    if not updated:
        raise HTTPException(status_code=500, detail="Failed to update table")
    return updated


@router.delete("/{table_id}")
def delete_table(table_id: str, ctx: BusinessContext = Depends(require_business_access)):
    get_owned_table(table_id, ctx)
    ReservationRepository.delete_by_table(table_id)
    if not TableRepository.delete(table_id):
        raise HTTPException(status_code=500, detail="Failed to delete table")
    return {"message": "Table deleted"}


@router.post("/{table_id}/seat")
def seat_table(table_id: str, ctx: BusinessContext = Depends(require_business_access)):
    """Guests sat down: the table is occupied."""
    get_owned_table(table_id, ctx)
    updated = TableRepository.update_status(table_id, "occupied")
    if not updated:
        raise HTTPException(status_code=500, detail="Failed to update table status")
    return updated


@router.post("/{table_id}/cancel")
def cancel_table_reservation(table_id: str, ctx: BusinessContext = Depends(require_business_access)):
    """Cancel the reservation held on a reserved table."""
    table = get_owned_table(table_id, ctx)
    if table.get("status") != "reserved":
        raise HTTPException(status_code=400, detail="Table is not reserved")

    reservation = held_reservation(ReservationRepository.get_by_table(table_id))
    if reservation:
        if not ReservationRepository.delete(reservation["id"]):
            raise HTTPException(status_code=500, detail="Failed to cancel reservation")
        logger.info(f"Cancelled reservation {reservation['id']} on table {table_id}")
    return set_available(table_id)


@router.post("/{table_id}/clear")
def clear_table(table_id: str, ctx: BusinessContext = Depends(require_business_access)):
    """Guests left: the table is available again."""
    get_owned_table(table_id, ctx)
    return set_available(table_id)
