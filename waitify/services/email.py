import html
import logging

import resend

from waitify.core.config import get_settings

logger = logging.getLogger(__name__)


class EmailService:
    """Service for sending emails via Resend."""

    def __init__(self):
        settings = get_settings()
        self.api_key = settings.resend_api_key
        resend.api_key = self.api_key
        self.sender = settings.email_from
        self.web_app_url = settings.web_app_url

        if self.api_key:
            logger.info(f"Resend configured with key: {self.api_key[:10]}...")
        else:
            logger.warning("RESEND_API_KEY is not set!")

    def _render(self, heading: str, body: str, business_name: str | None = None) -> str:
        paragraphs = "".join(
            f'<p style="font-size: 16px;">{html.escape(line)}</p>'
            for line in body.splitlines() if line.strip()
        )
        signature = html.escape(business_name) if business_name else "The Waitify Team"
        return f"""
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
</head>
<body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, 'Helvetica Neue', Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
    <div style="background: #4f46e5; padding: 24px; border-radius: 10px 10px 0 0;">
        <h1 style="color: white; margin: 0; font-size: 22px;">{html.escape(heading)}</h1>
    </div>
    <div style="background: #f9fafb; padding: 24px; border-radius: 0 0 10px 10px;">
        {paragraphs}
    </div>
    <div style="text-align: center; padding: 20px;">
        <p style="font-size: 12px; color: #999; margin: 0;">- {signature}</p>
    </div>
</body>
</html>
"""

    def send_notification_email(self, to: str, subject: str, message: str) -> bool:
        """Send a free-form notification written by a business."""
        try:
            logger.info(f"Sending notification email to {to}")
            result = resend.Emails.send({
                "from": self.sender,
                "to": [to],
                "subject": subject,
                "html": self._render(subject, message),
                "text": message,
            })
            logger.info(f"Notification email sent successfully: {result}")
            return True
        except Exception as e:
            logger.error(f"Failed to send notification email to {to}: {e}")
            raise

    def send_waitlist_ready_email(self, to: str, customer_name: str | None, business_name: str, waitlist_name: str) -> bool:
        """Tell a waiting customer their turn has come."""
        greeting = f"Hi {customer_name}," if customer_name else "Hi there,"
        body = (
            f"{greeting}\n"
            f"Good news: it's your turn on the {waitlist_name} waitlist at {business_name}.\n"
            "Please head to the front desk."
        )
        try:
            logger.info(f"Sending waitlist ready email to {to} for {business_name}")
            resend.Emails.send({
                "from": self.sender,
                "to": [to],
                "subject": f"Your turn at {business_name}",
                "html": self._render("You're up!", body, business_name),
                "text": body,
            })
            return True
        except Exception as e:
            logger.error(f"Failed to send waitlist ready email to {to}: {e}")
            raise


# Singleton instance
_email_service: EmailService | None = None


def get_email_service() -> EmailService:
    """Get the email service singleton."""
    global _email_service
    if _email_service is None:
        _email_service = EmailService()
    return _email_service
