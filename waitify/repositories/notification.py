from database.connection import get_db, with_retry


class NotificationRepository:

    @staticmethod
    @with_retry()
    def create(user_id: str, title: str, message: str, type: str) -> dict | None:
        """Store a notification for a user."""
        db = get_db()
        result = db.table("notifications").insert({
            "user_id": user_id,
            "title": title,
            "message": message,
            "type": type,
            "is_read": False,
        }).execute()
        return result.data[0] if result and result.data else None

    @staticmethod
    @with_retry()
    def get_by_id(notification_id: str) -> dict | None:
        db = get_db()
        result = db.table("notifications").select("*").eq("id", notification_id).limit(1).execute()
        return result.data[0] if result and result.data else None

    @staticmethod
    @with_retry()
    def get_by_user(user_id: str) -> list[dict]:
        """Get a user's notifications, newest first."""
        db = get_db()
        result = db.table("notifications").select("*").eq(
            "user_id", user_id
        ).order("created_at", desc=True).execute()
        return result.data if result and result.data else []

    @staticmethod
    @with_retry()
    def mark_read(notification_id: str) -> dict | None:
        db = get_db()
        result = db.table("notifications").update({"is_read": True}).eq(
            "id", notification_id
        ).execute()
        return result.data[0] if result and result.data else None

    @staticmethod
    @with_retry()
    def mark_all_read(user_id: str) -> list[dict]:
        """Mark every unread notification of a user as read."""
        db = get_db()
        result = db.table("notifications").update({"is_read": True}).eq(
            "user_id", user_id
        ).eq("is_read", False).execute()
        return result.data if result and result.data else []

    @staticmethod
    @with_retry()
    def delete(notification_id: str) -> bool:
        db = get_db()
        result = db.table("notifications").delete().eq("id", notification_id).execute()
        return bool(result and result.data and len(result.data) > 0)
