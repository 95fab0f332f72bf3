"""Clinic appointments: scheduling, status, prescriptions and booking QR."""

import logging
from datetime import datetime, timedelta

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile

from waitify.core.config import settings
from waitify.core.permissions import BusinessContext, ensure_owned, require_business_access
from waitify.domain.schemas import (
    AppointmentCreate,
    AppointmentStatusUpdate,
    AppointmentUpdate,
    QRCodeResponse,
)
from waitify.repositories.clinic import (
    AppointmentRepository,
    PatientRepository,
    PractitionerRepository,
    ServiceRepository,
)
from waitify.services.qr_generator import generate_qr_code_base64
from waitify.services.qr_links import build_appointment_booking_url
from waitify.services.storage import PRESCRIPTION_CONTENT_TYPES, get_storage_service

logger = logging.getLogger(__name__)

router = APIRouter()

MAX_PRESCRIPTION_SIZE = 5 * 1024 * 1024


def compute_end_time(start_time: str, duration_minutes: int) -> str:
    """Start time plus a duration, as HH:MM.

    Raises:
        ValueError if the appointment would run past midnight
    """
    start = datetime.strptime(start_time[:5], "%H:%M")
    end = start + timedelta(minutes=duration_minutes)
    if end.date() != start.date():
        raise ValueError(f"{duration_minutes} minutes from {start_time} runs past midnight")
    return end.strftime("%H:%M")


def schedule_appointment(
    business_id: str,
    patient_id: str,
    practitioner_id: str,
    service_id: str,
    date: str,
    start_time: str,
    end_time: str | None = None,
    notes: str | None = None,
) -> dict:
    """Validate references and create a scheduled appointment.

    end_time defaults to start_time plus the service duration.
    """
    practitioner = PractitionerRepository.get_by_id(practitioner_id)
    if not practitioner or practitioner.get("business_id") != business_id:
        raise HTTPException(status_code=404, detail="Practitioner not found")

    service = ServiceRepository.get_by_id(service_id)
    if not service or service.get("business_id") != business_id:
        raise HTTPException(status_code=404, detail="Service not found")

    if not end_time:
        try:
            end_time = compute_end_time(start_time, service.get("duration") or 30)
        except ValueError:
            raise HTTPException(status_code=400, detail="Appointment must end on the day it starts")
    elif end_time[:5] <= start_time[:5]:
        raise HTTPException(status_code=400, detail="End time must be after start time")

    appointment = AppointmentRepository.create(
        business_id,
        patient_id=patient_id,
        practitioner_id=practitioner_id,
        service_id=service_id,
        date=date,
        start_time=start_time,
        end_time=end_time,
        notes=notes,
    )
    if not appointment:
        raise HTTPException(status_code=500, detail="Failed to create appointment")

    logger.info(f"Scheduled appointment {appointment['id']} for patient {patient_id}")
    return appointment


def get_owned_appointment(appointment_id: str, ctx: BusinessContext) -> dict:
    return ensure_owned(AppointmentRepository.get_by_id(appointment_id), ctx, "Appointment")


@router.get("")
def list_appointments(
    status: str | None = Query(None, pattern=r'^(scheduled|completed|cancelled|no-show)$'),
    ctx: BusinessContext = Depends(require_business_access),
):
    """Appointments with patient, practitioner and service, by date and time."""
    return AppointmentRepository.get_by_business(ctx.business_id, status=status)


@router.post("", status_code=201)
def create_appointment(
    data: AppointmentCreate,
    ctx: BusinessContext = Depends(require_business_access),
):
    if not PatientRepository.exists(data.patient_id):
        raise HTTPException(status_code=404, detail="Patient not found")
    return schedule_appointment(ctx.business_id, **data.model_dump())


@router.get("/{appointment_id}")
def get_appointment(appointment_id: str, ctx: BusinessContext = Depends(require_business_access)):
    return get_owned_appointment(appointment_id, ctx)


@router.put("/{appointment_id}")
def update_appointment(
    appointment_id: str,
    data: AppointmentUpdate,
    ctx: BusinessContext = Depends(require_business_access),
):
    appointment = get_owned_appointment(appointment_id, ctx)
    update_data = data.model_dump(exclude_unset=True)
    if not update_data:
        return appointment

    for key, repository, label in (
        ("practitioner_id", PractitionerRepository, "Practitioner"),
        ("service_id", ServiceRepository, "Service"),
    ):
        if key in update_data:
            record = repository.get_by_id(update_data[key])
            if not record or record.get("business_id") != appointment["business_id"]:
                raise HTTPException(status_code=404, detail=f"{label} not found")

    updated = AppointmentRepository.update(appointment_id, **update_data)
    if not updated:
        raise HTTPException(status_code=500, detail="Failed to update appointment")
    return updated


@router.put("/{appointment_id}/status")
def update_appointment_status(
    appointment_id: str,
    data: AppointmentStatusUpdate,
    ctx: BusinessContext = Depends(require_business_access),
):
    """Mark an appointment completed, cancelled or no-show (or back to scheduled)."""
    get_owned_appointment(appointment_id, ctx)
    updated = AppointmentRepository.update(appointment_id, status=data.status)
    if not updated:
        raise HTTPException(status_code=500, detail="Failed to update appointment status")
    return updated


@router.delete("/{appointment_id}")
def delete_appointment(appointment_id: str, ctx: BusinessContext = Depends(require_business_access)):
    get_owned_appointment(appointment_id, ctx)
    if not AppointmentRepository.delete(appointment_id):
        raise HTTPException(status_code=500, detail="Failed to delete appointment")
    return {"message": "Appointment deleted"}


@router.post("/{appointment_id}/prescription")
async def upload_prescription(
    appointment_id: str,
    file: UploadFile = File(...),
    notes: str | None = Form(None),
    ctx: BusinessContext = Depends(require_business_access),
):
    """Attach a prescription document (PDF, JPG or PNG) to an appointment."""
    appointment = get_owned_appointment(appointment_id, ctx)

    if file.content_type not in PRESCRIPTION_CONTENT_TYPES:
        raise HTTPException(
            status_code=400,
            detail="Invalid file type. Only PDF, JPG and PNG are allowed."
        )

    file_data = await file.read()
    if len(file_data) > MAX_PRESCRIPTION_SIZE:
        raise HTTPException(status_code=400, detail="File too large. Maximum size is 5MB.")

    url = get_storage_service().upload_prescription(
        patient_id=appointment["patient_id"],
        appointment_id=appointment_id,
        filename=file.filename or f"prescription.{PRESCRIPTION_CONTENT_TYPES[file.content_type]}",
        file_data=file_data,
        content_type=file.content_type,
    )

    update_data = {"prescription_url": url}
    if notes is not None:
        update_data["prescription_notes"] = notes
    updated = AppointmentRepository.update(appointment_id, **update_data)
    if not updated:
        raise HTTPException(status_code=500, detail="Failed to save prescription")
    return updated


@router.get("/{appointment_id}/qr", response_model=QRCodeResponse)
def get_appointment_qr(appointment_id: str, ctx: BusinessContext = Depends(require_business_access)):
    """Booking link for an appointment, shown to the patient as a QR code."""
    appointment = get_owned_appointment(appointment_id, ctx)
    url = build_appointment_booking_url(settings.web_app_url, appointment["business_id"], appointment_id)
    return QRCodeResponse(url=url, qr_code=generate_qr_code_base64(url))
