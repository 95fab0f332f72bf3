"""Table reservations.

Creating a reservation and flipping the table's status are two separate
writes. If the second one fails the reservation stays and the error is
returned.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from waitify.api.routes.tables import get_owned_table
from waitify.core.permissions import BusinessContext, ensure_owned, require_business_access
from waitify.domain.schemas import ReservationCreate
from waitify.repositories.restaurant import ReservationRepository, TableRepository

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
def list_reservations(date: str | None = None, ctx: BusinessContext = Depends(require_business_access)):
    """Reservations by date and time, optionally for one day."""
    return ReservationRepository.get_by_business(ctx.business_id, date=date)


@router.post("", status_code=201)
def create_reservation(data: ReservationCreate, ctx: BusinessContext = Depends(require_business_access)):
    table = get_owned_table(data.table_id, ctx)
    if data.party_size > table.get("capacity", data.party_size):
        raise HTTPException(
            status_code=400,
            detail=f"Table {table.get('number')} seats at most {table['capacity']}"
        )

    reservation = ReservationRepository.create(ctx.business_id, **data.model_dump())
    if not reservation:
        raise HTTPException(status_code=500, detail="Failed to create reservation")

    if not TableRepository.update_status(data.table_id, "reserved"):
        logger.error(f"Reservation {reservation['id']} created but table {data.table_id} was not marked reserved")
        raise HTTPException(status_code=500, detail="Reservation saved but table status could not be updated")

    return reservation


@router.delete("/{reservation_id}")
def cancel_reservation(reservation_id: str, ctx: BusinessContext = Depends(require_business_access)):
    """Delete a reservation and free its table."""
    reservation = ensure_owned(ReservationRepository.get_by_id(reservation_id), ctx, "Reservation")
    if not ReservationRepository.delete(reservation_id):
        raise HTTPException(status_code=500, detail="Failed to cancel reservation")

    if not TableRepository.update_status(reservation["table_id"], "available"):
        logger.error(f"Reservation {reservation_id} cancelled but table {reservation['table_id']} was not freed")
        raise HTTPException(status_code=500, detail="Reservation cancelled but table status could not be updated")

    return {"message": "Reservation cancelled"}
