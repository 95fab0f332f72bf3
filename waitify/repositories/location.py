from database.connection import get_db, with_retry


class LocationRepository:

    @staticmethod
    @with_retry()
    def create(business_id: str, name: str, address: str | None = None, phone: str | None = None) -> dict | None:
        db = get_db()
        result = db.table("locations").insert({
            "business_id": business_id,
            "name": name,
            "address": address,
            "phone": phone,
        }).execute()
        return result.data[0] if result and result.data else None

    @staticmethod
    @with_retry()
    def get_by_id(location_id: str) -> dict | None:
        db = get_db()
        result = db.table("locations").select("*").eq("id", location_id).limit(1).execute()
        return result.data[0] if result and result.data else None

    @staticmethod
    @with_retry()
    def get_by_business(business_id: str) -> list[dict]:
        db = get_db()
        result = db.table("locations").select("*").eq(
            "business_id", business_id
        ).order("created_at").execute()
        return result.data if result and result.data else []

    @staticmethod
    @with_retry()
    def count(business_id: str) -> int:
        db = get_db()
        result = db.table("locations").select(
            "id", count="exact"
        ).eq("business_id", business_id).execute()
        return result.count if result and result.count is not None else 0

    @staticmethod
    @with_retry()
    def update(location_id: str, **kwargs) -> dict | None:
        db = get_db()
        result = db.table("locations").update(kwargs).eq("id", location_id).execute()
        return result.data[0] if result and result.data else None

    @staticmethod
    @with_retry()
    def delete(location_id: str) -> bool:
        db = get_db()
        result = db.table("locations").delete().eq("id", location_id).execute()
        return bool(result and result.data and len(result.data) > 0)


class StaffRepository:

    @staticmethod
    @with_retry()
    def create(business_id: str, **fields) -> dict | None:
        db = get_db()
        result = db.table("staff").insert({"business_id": business_id, **fields}).execute()
        return result.data[0] if result and result.data else None

    @staticmethod
    @with_retry()
    def get_by_id(staff_id: str) -> dict | None:
        db = get_db()
        result = db.table("staff").select("*").eq("id", staff_id).limit(1).execute()
        return result.data[0] if result and result.data else None

    @staticmethod
    @with_retry()
    def get_by_business(business_id: str, location_id: str | None = None) -> list[dict]:
        db = get_db()
        query = db.table("staff").select("*").eq("business_id", business_id)
        if location_id:
            query = query.eq("location_id", location_id)
        result = query.order("name").execute()
        return result.data if result and result.data else []

    @staticmethod
    @with_retry()
    def update(staff_id: str, **kwargs) -> dict | None:
        db = get_db()
        result = db.table("staff").update(kwargs).eq("id", staff_id).execute()
        return result.data[0] if result and result.data else None

    @staticmethod
    @with_retry()
    def delete(staff_id: str) -> bool:
        db = get_db()
        result = db.table("staff").delete().eq("id", staff_id).execute()
        return bool(result and result.data and len(result.data) > 0)
