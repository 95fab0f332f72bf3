"""Repositories for the restaurant vertical: floor tables and reservations."""

from database.connection import get_db, with_retry


class TableRepository:

    @staticmethod
    @with_retry()
    def create(business_id: str, **fields) -> dict | None:
        """Create a floor table."""
        db = get_db()
        data = {"business_id": business_id, "status": "available", **fields}
        result = db.table("tables").insert(data).execute()
        return result.data[0] if result and result.data else None

    @staticmethod
    @with_retry()
    def get_by_id(table_id: str) -> dict | None:
        db = get_db()
        result = db.table("tables").select("*").eq("id", table_id).limit(1).execute()
        return result.data[0] if result and result.data else None

    @staticmethod
    @with_retry()
    def get_by_business(business_id: str, status: str | None = None) -> list[dict]:
        """Get a business's tables ordered by table number."""
        db = get_db()
        query = db.table("tables").select("*").eq("business_id", business_id)
        if status:
            query = query.eq("status", status)
        result = query.order("number").execute()
        return result.data if result and result.data else []

    @staticmethod
    @with_retry()
    def update(table_id: str, **kwargs) -> dict | None:
        db = get_db()
        result = db.table("tables").update(kwargs).eq("id", table_id).execute()
        return result.data[0] if result and result.data else None

    @staticmethod
    def update_status(table_id: str, status: str) -> dict | None:
        """Set a table to available, occupied or reserved."""
        return TableRepository.update(table_id, status=status)

    @staticmethod
    @with_retry()
    def delete(table_id: str) -> bool:
        db = get_db()
        result = db.table("tables").delete().eq("id", table_id).execute()
        return bool(result and result.data and len(result.data) > 0)


class ReservationRepository:

    @staticmethod
    @with_retry()
    def create(
        business_id: str,
        table_id: str,
        customer_name: str,
        date: str,
        time: str,
        party_size: int,
        notes: str | None = None,
    ) -> dict | None:
        """Create a reservation. Does not touch the table's status."""
        db = get_db()
        result = db.table("reservations").insert({
            "business_id": business_id,
            "table_id": table_id,
            "customer_name": customer_name,
            "date": date,
            "time": time,
            "party_size": party_size,
            "notes": notes,
        }).execute()
        return result.data[0] if result and result.data else None

    @staticmethod
    @with_retry()
    def get_by_id(reservation_id: str) -> dict | None:
        db = get_db()
        result = db.table("reservations").select("*").eq("id", reservation_id).limit(1).execute()
        return result.data[0] if result and result.data else None

    @staticmethod
    @with_retry()
    def get_by_business(business_id: str, date: str | None = None) -> list[dict]:
        """Get reservations of a business, optionally for a single day."""
        db = get_db()
        query = db.table("reservations").select("*").eq("business_id", business_id)
        if date:
            query = query.eq("date", date)
        result = query.order("date").order("time").execute()
        return result.data if result and result.data else []

    @staticmethod
    @with_retry()
    def get_by_table(table_id: str) -> list[dict]:
        db = get_db()
        result = db.table("reservations").select("*").eq("table_id", table_id).execute()
        return result.data if result and result.data else []

    @staticmethod
    @with_retry()
    def delete(reservation_id: str) -> bool:
        db = get_db()
        result = db.table("reservations").delete().eq("id", reservation_id).execute()
        return bool(result and result.data and len(result.data) > 0)

    @staticmethod
    @with_retry()
    def delete_by_table(table_id: str) -> int:
        """Remove every reservation held on a table. Returns rows deleted."""
        db = get_db()
        result = db.table("reservations").delete().eq("table_id", table_id).execute()
        return len(result.data) if result and result.data else 0
