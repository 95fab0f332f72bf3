"""Clinic patients.

A patient record shares its id with the customer's profile; names and
phone live on the profile. A business sees the patients it has
appointments with.
"""

from fastapi import APIRouter, Depends, HTTPException

from waitify.core.permissions import BusinessContext, require_business_access
from waitify.domain.schemas import PatientCreate, PatientUpdate
from waitify.repositories.clinic import AppointmentRepository, InvoiceRepository, PatientRepository
from waitify.repositories.profile import ProfileRepository

router = APIRouter()

PROFILE_FIELDS = ("first_name", "last_name", "phone_number")


def split_patient_fields(data: dict) -> tuple[dict, dict]:
    """Split a patient form into (profile fields, patient record fields)."""
    profile_fields = {k: data.pop(k) for k in PROFILE_FIELDS if k in data}
    return profile_fields, data


def fill_profile_gaps(profile: dict, profile_fields: dict) -> None:
    """Set the name/phone fields the customer left empty. Never overwrites."""
    missing = {k: v for k, v in profile_fields.items() if not profile.get(k)}
    if missing:
        ProfileRepository.update(profile["id"], **missing)


def create_patient_profile(patient_id: str, data: dict, by_business: bool = False) -> dict:
    """Create the patient record and store name/phone on the profile.

    The customer themselves may change their profile. A business may only
    register customers, and only fills in profile fields that are empty.
    """
    profile = ProfileRepository.get_by_id(patient_id)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    if by_business and profile.get("role") != "customer":
        raise HTTPException(status_code=400, detail="Only customer profiles can be registered as patients")
    if PatientRepository.exists(patient_id):
        raise HTTPException(status_code=400, detail="Patient profile already exists")

    profile_fields, patient_fields = split_patient_fields(data)
    if by_business:
        fill_profile_gaps(profile, profile_fields)
    elif profile_fields:
        ProfileRepository.update(patient_id, **profile_fields)

    patient = PatientRepository.create(patient_id, **patient_fields)
    if not patient:
        raise HTTPException(status_code=500, detail="Failed to create patient profile")
    return patient


def business_patient_ids(business_id: str) -> list[str]:
    appointments = AppointmentRepository.get_by_business(business_id)
    return list(dict.fromkeys(a["patient_id"] for a in appointments if a.get("patient_id")))


def get_business_patient(patient_id: str, ctx: BusinessContext) -> dict:
    if not ctx.is_admin and patient_id not in business_patient_ids(ctx.business_id):
        raise HTTPException(status_code=404, detail="Patient not found")
    patient = PatientRepository.get_by_id(patient_id)
    if not patient:
        raise HTTPException(status_code=404, detail="Patient not found")
    return patient


@router.get("")
def list_patients(ctx: BusinessContext = Depends(require_business_access)):
    """Patients with at least one appointment at the business."""
    return PatientRepository.get_by_ids(business_patient_ids(ctx.business_id))


@router.post("", status_code=201)
def create_patient(data: PatientCreate, ctx: BusinessContext = Depends(require_business_access)):
    """Register an existing customer as a patient."""
    fields = data.model_dump(exclude_none=True)
    patient_id = fields.pop("id")
    return create_patient_profile(patient_id, fields, by_business=True)


@router.get("/{patient_id}")
def get_patient(patient_id: str, ctx: BusinessContext = Depends(require_business_access)):
    """Patient record with appointment history and invoices."""
    patient = get_business_patient(patient_id, ctx)
    appointments = [
        a for a in AppointmentRepository.get_by_patient(patient_id)
        if ctx.is_admin or a.get("business_id") == ctx.business_id
    ]
    return {
        **patient,
        "appointments": appointments,
        "invoices": InvoiceRepository.get_by_patient(
            patient_id, business_id=None if ctx.is_admin else ctx.business_id
        ),
    }


@router.put("/{patient_id}")
def update_patient(
    patient_id: str,
    data: PatientUpdate,
    ctx: BusinessContext = Depends(require_business_access),
):
    patient = get_business_patient(patient_id, ctx)
    profile_fields, patient_fields = split_patient_fields(data.model_dump(exclude_unset=True))

    profile = ProfileRepository.get_by_id(patient_id)
    if profile and profile_fields:
        fill_profile_gaps(profile, profile_fields)
    if patient_fields:
        updated = PatientRepository.update(patient_id, **patient_fields)
        if not updated:
            raise HTTPException(status_code=500, detail="Failed to update patient")
        return updated
    return patient
