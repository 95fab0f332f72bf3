"""Customer portal: the signed-in user's queue entries, appointments and notifications."""

from fastapi import APIRouter, Depends, HTTPException

from waitify.api.routes.appointments import schedule_appointment
from waitify.api.routes.patients import create_patient_profile
from waitify.core.permissions import get_current_profile
from waitify.domain.schemas import AppointmentBooking, PatientUpdate
from waitify.repositories.clinic import AppointmentRepository, InvoiceRepository, PatientRepository
from waitify.repositories.notification import NotificationRepository
from waitify.repositories.waitlist import WaitlistEntryRepository

router = APIRouter()


# ============================================
# Waitlist entries
# ============================================

@router.get("/waitlist-entries")
def list_my_entries(profile: dict = Depends(get_current_profile)):
    """My entries, newest first, with waitlist and business name."""
    return WaitlistEntryRepository.get_by_user(profile["id"])


@router.post("/waitlist-entries/{entry_id}/cancel")
def leave_waitlist(entry_id: str, profile: dict = Depends(get_current_profile)):
    entry = WaitlistEntryRepository.get_by_id(entry_id)
    if not entry or entry.get("user_id") != profile["id"]:
        raise HTTPException(status_code=404, detail="Entry not found")

    updated = WaitlistEntryRepository.update(entry_id, status="cancelled")
    if not updated:
        raise HTTPException(status_code=500, detail="Failed to leave waitlist")
    return updated


# ============================================
# Patient profile & appointments
# ============================================

@router.get("/patient-profile")
def get_my_patient_profile(profile: dict = Depends(get_current_profile)):
    patient = PatientRepository.get_by_id(profile["id"])
    if not patient:
        raise HTTPException(status_code=404, detail="Patient profile not found")
    return patient


@router.post("/patient-profile", status_code=201)
def create_my_patient_profile(data: PatientUpdate, profile: dict = Depends(get_current_profile)):
    """Create my patient record before booking the first appointment."""
    return create_patient_profile(profile["id"], data.model_dump(exclude_none=True))


@router.get("/appointments")
def list_my_appointments(profile: dict = Depends(get_current_profile)):
    return AppointmentRepository.get_by_patient(profile["id"])


@router.post("/appointments", status_code=201)
def book_appointment(data: AppointmentBooking, profile: dict = Depends(get_current_profile)):
    """Book an appointment for myself."""
    if not PatientRepository.exists(profile["id"]):
        raise HTTPException(status_code=400, detail="Create your patient profile before booking")

    return schedule_appointment(
        data.business_id,
        patient_id=profile["id"],
        practitioner_id=data.practitioner_id,
        service_id=data.service_id,
        date=data.date,
        start_time=data.start_time,
        notes=data.notes,
    )


@router.post("/appointments/{appointment_id}/cancel")
def cancel_my_appointment(appointment_id: str, profile: dict = Depends(get_current_profile)):
    appointment = AppointmentRepository.get_by_id(appointment_id)
    if not appointment or appointment.get("patient_id") != profile["id"]:
        raise HTTPException(status_code=404, detail="Appointment not found")
    if appointment.get("status") != "scheduled":
        raise HTTPException(status_code=400, detail="Only scheduled appointments can be cancelled")

    updated = AppointmentRepository.update(appointment_id, status="cancelled")
    if not updated:
        raise HTTPException(status_code=500, detail="Failed to cancel appointment")
    return updated


@router.get("/invoices")
def list_my_invoices(profile: dict = Depends(get_current_profile)):
    return InvoiceRepository.get_by_patient(profile["id"])


# ============================================
# Notifications
# ============================================

def get_my_notification(notification_id: str, profile: dict) -> dict:
    notification = NotificationRepository.get_by_id(notification_id)
    if not notification or notification.get("user_id") != profile["id"]:
        raise HTTPException(status_code=404, detail="Notification not found")
    return notification


@router.get("/notifications")
def list_my_notifications(profile: dict = Depends(get_current_profile)):
    return NotificationRepository.get_by_user(profile["id"])


@router.put("/notifications/read-all")
def mark_all_notifications_read(profile: dict = Depends(get_current_profile)):
    updated = NotificationRepository.mark_all_read(profile["id"])
    return {"updated": len(updated)}


@router.put("/notifications/{notification_id}/read")
def mark_notification_read(notification_id: str, profile: dict = Depends(get_current_profile)):
    get_my_notification(notification_id, profile)
    updated = NotificationRepository.mark_read(notification_id)
    if not updated:
        raise HTTPException(status_code=500, detail="Failed to update notification")
    return updated


@router.delete("/notifications/{notification_id}")
def delete_notification(notification_id: str, profile: dict = Depends(get_current_profile)):
    get_my_notification(notification_id, profile)
    if not NotificationRepository.delete(notification_id):
        raise HTTPException(status_code=500, detail="Failed to delete notification")
    return {"message": "Notification deleted"}
