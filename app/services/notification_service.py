"""
Notification Service
Delivers staff notifications in-app and/or by email (Resend)
Callers treat every failure as non-fatal; this module only reports it
"""

import html
import logging
from typing import Optional

import resend
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import EMAIL_FROM_ADDRESS, FRONTEND_URL, NOTIFICATION_CHANNEL, RESEND_API_KEY
from ..models import Notification, User

logger = logging.getLogger(__name__)

resend.api_key = RESEND_API_KEY

CHANNELS = {"app", "email", "both"}


class NotificationError(Exception):
    """Raised when a notification could not be delivered on any requested channel"""


def staff_notification_template(title: str, message: str) -> str:
    """Minimal HTML body for staff emails"""
    return f"""
<div style="font-family: sans-serif; max-width: 600px; margin: 0 auto;">
  <h1 style="color: #333; font-size: 22px;">{html.escape(title)}</h1>
  <p style="color: #555; font-size: 16px; line-height: 1.5;">{html.escape(message)}</p>
  <p style="font-size: 14px;"><a href="{FRONTEND_URL}">Open the console</a></p>
  <hr style="border: none; border-top: 1px solid #eee; margin: 20px 0;" />
  <p style="color: #999; font-size: 12px;">This is an automated message. Please do not reply.</p>
</div>
"""


class NotificationDispatcher:
    def __init__(self, db: Session, default_channel: Optional[str] = None):
        self.db = db
        self.default_channel = default_channel or NOTIFICATION_CHANNEL

    def notify(
        self, user_id: int, title: str, message: str, channel: Optional[str] = None
    ) -> dict:
        """
        Send a notification to a staff member

        Args:
            user_id: Recipient user ID
            title: Short title
            message: Body text
            channel: "app", "email" or "both" (defaults to NOTIFICATION_CHANNEL)

        Returns:
            Dict with app_sent and email_sent status

        Raises:
            NotificationError: If the recipient is unknown or any channel fails
        """
        channel = channel or self.default_channel
        if channel not in CHANNELS:
            raise NotificationError(f"Unknown notification channel: {channel}")

        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotificationError(f"Recipient {user_id} not found")

        result = {"app_sent": False, "email_sent": False}

        if channel in ("app", "both"):
            self._send_in_app(user, title, message, channel)
            result["app_sent"] = True

        if channel in ("email", "both"):
            self._send_email(user, title, message)
            result["email_sent"] = True

        return result

    def _send_in_app(self, user: User, title: str, message: str, channel: str) -> None:
        try:
            self.db.add(Notification(user_id=user.id, title=title, message=message, channel=channel))
            self.db.commit()
            logger.info(f"🔔 In-app notification stored for user {user.id}: {title}")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to store notification for user {user.id}: {e}")
            raise NotificationError("Could not store in-app notification") from e

    def _send_email(self, user: User, title: str, message: str) -> None:
        if not RESEND_API_KEY:
            logger.error("❌ No email service configured - RESEND_API_KEY missing")
            raise NotificationError("Email service not configured")
        if not user.email:
            raise NotificationError(f"User {user.id} has no email address")

        try:
            logger.info(f"📧 Sending notification email via Resend to: {user.email}")
            resend.Emails.send(
                {
                    "from": EMAIL_FROM_ADDRESS,
                    "to": [user.email],
                    "subject": title,
                    "html": staff_notification_template(title, message),
                }
            )
            logger.info(f"✅ Notification email sent to {user.email}")
        except Exception as e:
            logger.error(f"❌ Failed to send notification email to {user.email}: {e}")
            raise NotificationError("Could not send notification email") from e
