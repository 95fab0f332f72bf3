"""Patient invoices issued by a clinic."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from waitify.api.routes.patients import get_business_patient
from waitify.core.permissions import BusinessContext, ensure_owned, require_business_access
from waitify.domain.schemas import InvoiceCreate, InvoiceStatusUpdate
from waitify.repositories.clinic import InvoiceRepository

logger = logging.getLogger(__name__)

router = APIRouter()


def patient_display_name(patient: dict) -> str:
    profile = patient.get("profile") or {}
    name = " ".join(p for p in (profile.get("first_name"), profile.get("last_name")) if p)
    return name or "Patient"


def get_business_invoice(invoice_id: str, ctx: BusinessContext) -> dict:
    """404 unless this business issued the invoice."""
    return ensure_owned(InvoiceRepository.get_by_id(invoice_id), ctx, "Invoice")


@router.get("/patient/{patient_id}")
def list_patient_invoices(patient_id: str, ctx: BusinessContext = Depends(require_business_access)):
    get_business_patient(patient_id, ctx)
    return InvoiceRepository.get_by_patient(patient_id, business_id=None if ctx.is_admin else ctx.business_id)


@router.post("", status_code=201)
def create_invoice(data: InvoiceCreate, ctx: BusinessContext = Depends(require_business_access)):
    """Create an invoice; the total is the sum of quantity * unit price."""
    patient = get_business_patient(data.patient_id, ctx)

    items = [item.model_dump() for item in data.items]
    total = round(sum(i["quantity"] * i["unit_price"] for i in items), 2)

    invoice = InvoiceRepository.create(
        business_id=ctx.business_id,
        patient_id=data.patient_id,
        patient_name=data.patient_name or patient_display_name(patient),
        invoice_date=data.invoice_date,
        due_date=data.due_date,
        items=items,
        total_amount=total,
        status=data.status,
        notes=data.notes,
    )
    if not invoice:
        raise HTTPException(status_code=500, detail="Failed to create invoice")

    logger.info(f"Created invoice {invoice['id']} for patient {data.patient_id}: {total}")
    return invoice


@router.get("/{invoice_id}")
def get_invoice(invoice_id: str, ctx: BusinessContext = Depends(require_business_access)):
    return get_business_invoice(invoice_id, ctx)


@router.put("/{invoice_id}/status")
def update_invoice_status(
    invoice_id: str,
    data: InvoiceStatusUpdate,
    ctx: BusinessContext = Depends(require_business_access),
):
    get_business_invoice(invoice_id, ctx)
    updated = InvoiceRepository.update(invoice_id, status=data.status)
    if not updated:
        raise HTTPException(status_code=500, detail="Failed to update invoice")
    return updated
