"""Repositories for the clinic vertical."""

from datetime import datetime, timezone

from database.connection import get_db, with_retry

PATIENT_SELECT = "*, profile:id(first_name, last_name, phone_number)"
APPOINTMENT_SELECT = (
    "*, patient:patient_id(*, profile:id(first_name, last_name, phone_number)), "
    "practitioner:practitioner_id(*), service:service_id(*)"
)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class PractitionerRepository:

    @staticmethod
    @with_retry()
    def create(business_id: str, **fields) -> dict | None:
        db = get_db()
        result = db.table("practitioners").insert({"business_id": business_id, **fields}).execute()
        return result.data[0] if result and result.data else None

    @staticmethod
    @with_retry()
    def get_by_id(practitioner_id: str) -> dict | None:
        db = get_db()
        result = db.table("practitioners").select("*").eq("id", practitioner_id).limit(1).execute()
        return result.data[0] if result and result.data else None

    @staticmethod
    @with_retry()
    def get_by_business(business_id: str) -> list[dict]:
        db = get_db()
        result = db.table("practitioners").select("*").eq("business_id", business_id).execute()
        return result.data if result and result.data else []

    @staticmethod
    @with_retry()
    def update(practitioner_id: str, **kwargs) -> dict | None:
        db = get_db()
        result = db.table("practitioners").update(
            {**kwargs, "updated_at": _now()}
        ).eq("id", practitioner_id).execute()
        return result.data[0] if result and result.data else None

    @staticmethod
    @with_retry()
    def delete(practitioner_id: str) -> bool:
        db = get_db()
        result = db.table("practitioners").delete().eq("id", practitioner_id).execute()
        return bool(result and result.data and len(result.data) > 0)


class ServiceRepository:

    @staticmethod
    @with_retry()
    def create(business_id: str, **fields) -> dict | None:
        db = get_db()
        result = db.table("services").insert({"business_id": business_id, **fields}).execute()
        return result.data[0] if result and result.data else None

    @staticmethod
    @with_retry()
    def get_by_id(service_id: str) -> dict | None:
        db = get_db()
        result = db.table("services").select("*").eq("id", service_id).limit(1).execute()
        return result.data[0] if result and result.data else None

    @staticmethod
    @with_retry()
    def get_by_business(business_id: str) -> list[dict]:
        db = get_db()
        result = db.table("services").select("*").eq("business_id", business_id).execute()
        return result.data if result and result.data else []

    @staticmethod
    @with_retry()
    def update(service_id: str, **kwargs) -> dict | None:
        db = get_db()
        result = db.table("services").update(
            {**kwargs, "updated_at": _now()}
        ).eq("id", service_id).execute()
        return result.data[0] if result and result.data else None

    @staticmethod
    @with_retry()
    def delete(service_id: str) -> bool:
        db = get_db()
        result = db.table("services").delete().eq("id", service_id).execute()
        return bool(result and result.data and len(result.data) > 0)


class PatientRepository:
    """Patients share their id with the customer's profile."""

    @staticmethod
    @with_retry()
    def create(patient_id: str, **fields) -> dict | None:
        db = get_db()
        result = db.table("patients").insert({"id": patient_id, **fields}).execute()
        return result.data[0] if result and result.data else None

    @staticmethod
    @with_retry()
    def get_by_id(patient_id: str) -> dict | None:
        db = get_db()
        result = db.table("patients").select(PATIENT_SELECT).eq("id", patient_id).limit(1).execute()
        return result.data[0] if result and result.data else None

    @staticmethod
    @with_retry()
    def get_by_ids(patient_ids: list[str]) -> list[dict]:
        if not patient_ids:
            return []
        db = get_db()
        result = db.table("patients").select(PATIENT_SELECT).in_("id", patient_ids).execute()
        return result.data if result and result.data else []

    @staticmethod
    @with_retry()
    def exists(patient_id: str) -> bool:
        db = get_db()
        result = db.table("patients").select("id").eq("id", patient_id).limit(1).execute()
        return bool(result and result.data)

    @staticmethod
    @with_retry()
    def update(patient_id: str, **kwargs) -> dict | None:
        db = get_db()
        result = db.table("patients").update(
            {**kwargs, "updated_at": _now()}
        ).eq("id", patient_id).execute()
        return result.data[0] if result and result.data else None


class AppointmentRepository:

    @staticmethod
    @with_retry()
    def create(business_id: str, **fields) -> dict | None:
        db = get_db()
        data = {"business_id": business_id, "status": "scheduled", **fields}
        result = db.table("appointments").insert(data).execute()
        return result.data[0] if result and result.data else None

    @staticmethod
    @with_retry()
    def get_by_id(appointment_id: str) -> dict | None:
        """Get an appointment with patient, practitioner and service."""
        db = get_db()
        result = db.table("appointments").select(APPOINTMENT_SELECT).eq(
            "id", appointment_id
        ).limit(1).execute()
        return result.data[0] if result and result.data else None

    @staticmethod
    @with_retry()
    def get_by_business(business_id: str, status: str | None = None) -> list[dict]:
        db = get_db()
        query = db.table("appointments").select(APPOINTMENT_SELECT).eq("business_id", business_id)
        if status:
            query = query.eq("status", status)
        result = query.order("date").order("start_time").execute()
        return result.data if result and result.data else []

    @staticmethod
    @with_retry()
    def get_by_patient(patient_id: str) -> list[dict]:
        db = get_db()
        result = db.table("appointments").select(
            "*, practitioner:practitioner_id(*), service:service_id(*)"
        ).eq("patient_id", patient_id).order("date", desc=True).execute()
        return result.data if result and result.data else []

    @staticmethod
    @with_retry()
    def update(appointment_id: str, **kwargs) -> dict | None:
        db = get_db()
        result = db.table("appointments").update(
            {**kwargs, "updated_at": _now()}
        ).eq("id", appointment_id).execute()
        return result.data[0] if result and result.data else None

    @staticmethod
    @with_retry()
    def delete(appointment_id: str) -> bool:
        db = get_db()
        result = db.table("appointments").delete().eq("id", appointment_id).execute()
        return bool(result and result.data and len(result.data) > 0)


class InvoiceRepository:

    @staticmethod
    @with_retry()
    def create(**fields) -> dict | None:
        db = get_db()
        result = db.table("invoices").insert(fields).execute()
        return result.data[0] if result and result.data else None

    @staticmethod
    @with_retry()
    def get_by_id(invoice_id: str) -> dict | None:
        db = get_db()
        result = db.table("invoices").select("*").eq("id", invoice_id).limit(1).execute()
        return result.data[0] if result and result.data else None

    @staticmethod
    @with_retry()
    def get_by_patient(patient_id: str, business_id: str | None = None) -> list[dict]:
        """A patient's invoices, optionally only those one business issued."""
        db = get_db()
        query = db.table("invoices").select("*").eq("patient_id", patient_id)
        if business_id:
            query = query.eq("business_id", business_id)
        result = query.order("invoice_date", desc=True).execute()
        return result.data if result and result.data else []

    @staticmethod
    @with_retry()
    def update(invoice_id: str, **kwargs) -> dict | None:
        db = get_db()
        result = db.table("invoices").update(
            {**kwargs, "updated_at": _now()}
        ).eq("id", invoice_id).execute()
        return result.data[0] if result and result.data else None
