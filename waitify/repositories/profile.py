from database.connection import get_db, with_retry


class ProfileRepository:

    @staticmethod
    @with_retry()
    def get_by_id(profile_id: str) -> dict | None:
        """Get a profile by ID (= auth user id)."""
        db = get_db()
        result = db.table("profiles").select("*").eq("id", profile_id).limit(1).execute()
        return result.data[0] if result and result.data else None

    @staticmethod
    @with_retry()
    def get_all(role: str | None = None) -> list[dict]:
        """Get all profiles, optionally filtered by role."""
        db = get_db()
        query = db.table("profiles").select("*")
        if role:
            query = query.eq("role", role)
        result = query.order("created_at", desc=True).execute()
        return result.data if result and result.data else []

    @staticmethod
    @with_retry()
    def create(profile_id: str, role: str = "customer", **fields) -> dict | None:
        """Create the profile row for a freshly signed-up auth user."""
        db = get_db()
        data = {"id": profile_id, "role": role, **fields}
        result = db.table("profiles").insert(data).execute()
        return result.data[0] if result and result.data else None

    @staticmethod
    @with_retry()
    def update(profile_id: str, **kwargs) -> dict | None:
        """Update a profile."""
        db = get_db()
        result = db.table("profiles").update(kwargs).eq("id", profile_id).execute()
        return result.data[0] if result and result.data else None

    @staticmethod
    def update_role(profile_id: str, role: str) -> dict | None:
        """Change a profile's role (admin action)."""
        return ProfileRepository.update(profile_id, role=role)

    @staticmethod
    @with_retry()
    def get_by_ids(profile_ids: list[str]) -> list[dict]:
        """Get several profiles at once (customer lists)."""
        if not profile_ids:
            return []
        db = get_db()
        result = db.table("profiles").select("*").in_("id", profile_ids).execute()
        return result.data if result and result.data else []
