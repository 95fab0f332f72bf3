"""
Notification sending: store the in-app notification, optionally email the
customer, and mark the waitlist entry as notified.
"""

import logging

from database.connection import get_db
from waitify.repositories.notification import NotificationRepository
from waitify.repositories.waitlist import WaitlistEntryRepository
from waitify.services.email import get_email_service

logger = logging.getLogger(__name__)


def notification_title(type: str, subject: str | None) -> str:
    if type == "waitlist":
        return "Waitlist Update"
    if type == "email" and subject:
        return subject
    return "Notification"


def get_user_email(user_id: str) -> str | None:
    """Look up the email of an auth user (admin API, service key)."""
    db = get_db()
    try:
        response = db.auth.admin.get_user_by_id(user_id)
    except Exception as e:
        logger.warning(f"Auth user lookup failed for {user_id}: {e}")
        return None
    user = getattr(response, "user", None)
    return user.email if user else None


def send_notification(
    user_id: str,
    message: str,
    type: str,
    email: str | None = None,
    phone_number: str | None = None,
    subject: str | None = None,
    waitlist_id: str | None = None,
    entry_id: str | None = None,
) -> dict:
    """Store a notification and fan it out.

    Only storing the row can fail the call. Email delivery and the entry
    status flip are logged on failure and reported in the result.
    """
    logger.info(f"Sending {type} notification to user {user_id}")

    notification = NotificationRepository.create(
        user_id=user_id,
        title=notification_title(type, subject),
        message=message,
        type=type,
    )
    if not notification:
        raise RuntimeError("Failed to store notification")

    result = {
        "success": True,
        "notification": notification,
        "email_sent": False,
        "sms_sent": False,
        "entry_updated": False,
    }

    if phone_number and type == "waitlist":
        # No SMS provider is wired up yet; the in-app notification stands in
        logger.info(f"SMS to {phone_number} skipped: no SMS provider configured")

    if email and subject and type == "email":
        try:
            get_email_service().send_notification_email(to=email, subject=subject, message=message)
            result["email_sent"] = True
        except Exception as e:
            logger.error(f"Email delivery failed for notification {notification['id']}: {e}")

    if waitlist_id and entry_id and type == "waitlist":
        try:
            updated = WaitlistEntryRepository.update(entry_id, status="notified")
            result["entry_updated"] = bool(updated)
        except Exception as e:
            logger.error(f"Error updating waitlist entry {entry_id}: {e}")

    return result
