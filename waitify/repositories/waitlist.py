from database.connection import get_db, with_retry


class WaitlistRepository:

    @staticmethod
    @with_retry()
    def create(
        business_id: str,
        name: str,
        description: str | None = None,
        max_capacity: int | None = None,
        is_active: bool = True,
    ) -> dict | None:
        """Create a waitlist owned by a business."""
        db = get_db()
        data = {
            "business_id": business_id,
            "name": name,
            "description": description,
            "max_capacity": max_capacity,
            "is_active": is_active,
        }
        result = db.table("waitlists").insert(data).execute()
        return result.data[0] if result and result.data else None

    @staticmethod
    @with_retry()
    def get_by_id(waitlist_id: str) -> dict | None:
        """Get a waitlist by ID."""
        db = get_db()
        result = db.table("waitlists").select("*").eq("id", waitlist_id).limit(1).execute()
        return result.data[0] if result and result.data else None

    @staticmethod
    @with_retry()
    def get_public(waitlist_id: str) -> dict | None:
        """Get a waitlist with its business name (join page)."""
        db = get_db()
        result = db.table("waitlists").select(
            "*, profiles:business_id(business_name, business_type)"
        ).eq("id", waitlist_id).limit(1).execute()
        return result.data[0] if result and result.data else None

    @staticmethod
    @with_retry()
    def get_by_business(business_id: str) -> list[dict]:
        """Get all waitlists of a business, newest first."""
        db = get_db()
        result = db.table("waitlists").select("*").eq(
            "business_id", business_id
        ).order("created_at", desc=True).execute()
        return result.data if result and result.data else []

    @staticmethod
    @with_retry()
    def get_available() -> list[dict]:
        """Get active waitlists customers can join, with business info."""
        db = get_db()
        result = db.table("waitlists").select(
            "*, profiles:business_id(business_name, business_type)"
        ).eq("is_active", True).order("created_at", desc=True).execute()
        return result.data if result and result.data else []

    @staticmethod
    @with_retry()
    def count(business_id: str) -> int:
        """Count waitlists of a business."""
        db = get_db()
        result = db.table("waitlists").select(
            "id", count="exact"
        ).eq("business_id", business_id).execute()
        return result.count if result and result.count is not None else 0

    @staticmethod
    @with_retry()
    def update(waitlist_id: str, **kwargs) -> dict | None:
        """Update a waitlist."""
        db = get_db()
        result = db.table("waitlists").update(kwargs).eq("id", waitlist_id).execute()
        return result.data[0] if result and result.data else None

    @staticmethod
    @with_retry()
    def delete(waitlist_id: str) -> bool:
        """Delete a waitlist."""
        db = get_db()
        result = db.table("waitlists").delete().eq("id", waitlist_id).execute()
        return bool(result and result.data and len(result.data) > 0)


class WaitlistEntryRepository:

    @staticmethod
    @with_retry()
    def add(waitlist_id: str, **fields) -> dict | None:
        """Add an entry at the next position of a waitlist.

        The position is taken from the waitlist's counter inside the
        add_waitlist_entry SQL function, so concurrent joins never collide
        and removed positions are never handed out again.
        """
        db = get_db()
        entry = {k: v for k, v in fields.items() if v is not None}
        result = db.rpc("add_waitlist_entry", {
            "p_waitlist_id": waitlist_id,
            "p_entry": entry,
        }).execute()
        return result.data[0] if result and result.data else None

    @staticmethod
    @with_retry()
    def get_by_id(entry_id: str) -> dict | None:
        """Get a waitlist entry by ID."""
        db = get_db()
        result = db.table("waitlist_entries").select("*").eq("id", entry_id).limit(1).execute()
        return result.data[0] if result and result.data else None

    @staticmethod
    @with_retry()
    def get_by_waitlist(waitlist_id: str, status: str | None = None) -> list[dict]:
        """Get entries of a waitlist in queue order, with customer profile."""
        db = get_db()
        query = db.table("waitlist_entries").select(
            "*, profiles:user_id(username, first_name, last_name, phone_number)"
        ).eq("waitlist_id", waitlist_id)
        if status:
            query = query.eq("status", status)
        result = query.order("position").execute()
        return result.data if result and result.data else []

    @staticmethod
    @with_retry()
    def get_by_user(user_id: str) -> list[dict]:
        """Get a customer's entries, newest first, with waitlist and business name."""
        db = get_db()
        result = db.table("waitlist_entries").select(
            "*, waitlists:waitlist_id(name, description, business_id, "
            "profiles:business_id(business_name))"
        ).eq("user_id", user_id).order("created_at", desc=True).execute()
        return result.data if result and result.data else []

    @staticmethod
    @with_retry()
    def get_by_waitlists(waitlist_ids: list[str]) -> list[dict]:
        """Get all entries across several waitlists (customers, reports)."""
        if not waitlist_ids:
            return []
        db = get_db()
        result = db.table("waitlist_entries").select("*").in_(
            "waitlist_id", waitlist_ids
        ).order("created_at", desc=True).execute()
        return result.data if result and result.data else []

    @staticmethod
    @with_retry()
    def update(entry_id: str, **kwargs) -> dict | None:
        """Update an entry. Any status may follow any other."""
        db = get_db()
        result = db.table("waitlist_entries").update(kwargs).eq("id", entry_id).execute()
        return result.data[0] if result and result.data else None

    @staticmethod
    @with_retry()
    def delete(entry_id: str) -> bool:
        """Remove an entry. Remaining positions are left as they are."""
        db = get_db()
        result = db.table("waitlist_entries").delete().eq("id", entry_id).execute()
        return bool(result and result.data and len(result.data) > 0)
