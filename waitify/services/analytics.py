"""
Aggregates over waitlist entries and appointments for the customers,
reports and usage pages. Nothing here is stored; every figure is derived
from the rows on each request.
"""

from collections import Counter
from datetime import date, datetime, timedelta, timezone

from waitify.repositories.clinic import AppointmentRepository
from waitify.repositories.profile import ProfileRepository
from waitify.repositories.waitlist import WaitlistEntryRepository, WaitlistRepository

ENTRY_STATUSES = ("waiting", "notified", "seated", "cancelled")
APPOINTMENT_STATUSES = ("scheduled", "completed", "cancelled", "no-show")


def _entry_day(entry: dict) -> date | None:
    created = entry.get("created_at")
    if not created:
        return None
    try:
        return datetime.fromisoformat(str(created).replace("Z", "+00:00")).date()
    except ValueError:
        return None


def get_business_entries(business_id: str) -> list[dict]:
    """Every entry across the business's waitlists, newest first."""
    waitlist_ids = [w["id"] for w in WaitlistRepository.get_by_business(business_id)]
    return WaitlistEntryRepository.get_by_waitlists(waitlist_ids)


def status_counts(rows: list[dict], statuses: tuple[str, ...]) -> dict[str, int]:
    counts = Counter(row.get("status") for row in rows)
    return {status: counts.get(status, 0) for status in statuses}


def count_customers_on(entries: list[dict], day: date) -> int:
    return sum(1 for e in entries if _entry_day(e) == day)


def today() -> date:
    return datetime.now(timezone.utc).date()


def derive_customers(entries: list[dict]) -> list[dict]:
    """Group entries into customers.

    Registered customers are keyed by user id, guests by email, phone or
    name (whichever is present first).
    """
    customers: dict[str, dict] = {}
    for entry in entries:
        if entry.get("user_id"):
            key = f"user:{entry['user_id']}"
        else:
            ident = entry.get("guest_email") or entry.get("guest_phone") or entry.get("guest_name")
            if not ident:
                continue
            key = f"guest:{ident.lower()}"

        customer = customers.get(key)
        if customer is None:
            customer = customers[key] = {
                "id": entry.get("user_id") or key,
                "user_id": entry.get("user_id"),
                "name": entry.get("guest_name"),
                "email": entry.get("guest_email"),
                "phone": entry.get("guest_phone"),
                "visits": 0,
                "last_visit": entry.get("created_at"),
            }
        customer["visits"] += 1
        created = entry.get("created_at")
        if created and (not customer["last_visit"] or str(created) > str(customer["last_visit"])):
            customer["last_visit"] = created

    registered = [c["user_id"] for c in customers.values() if c["user_id"]]
    for profile in ProfileRepository.get_by_ids(registered):
        customer = customers[f"user:{profile['id']}"]
        name = " ".join(p for p in (profile.get("first_name"), profile.get("last_name")) if p)
        customer["name"] = name or profile.get("username") or customer["name"]
        customer["phone"] = profile.get("phone_number") or customer["phone"]

    return sorted(customers.values(), key=lambda c: str(c["last_visit"] or ""), reverse=True)


def build_report(business_id: str, days: int = 7) -> dict:
    entries = get_business_entries(business_id)
    appointments = AppointmentRepository.get_by_business(business_id)

    end = today()
    daily = []
    for offset in range(days - 1, -1, -1):
        day = end - timedelta(days=offset)
        daily.append({"date": day.isoformat(), "customers": count_customers_on(entries, day)})

    return {
        "total_entries": len(entries),
        "entries_by_status": status_counts(entries, ENTRY_STATUSES),
        "total_appointments": len(appointments),
        "appointments_by_status": status_counts(appointments, APPOINTMENT_STATUSES),
        "unique_customers": len(derive_customers(entries)),
        "daily_customers": daily,
    }
