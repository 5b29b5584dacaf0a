"""
Notification service.
In-app notifications are rows in the Notification table; email goes through
Django's configured email backend.
"""

import logging
from smtplib import SMTPException

from django.conf import settings
from django.core.mail import send_mail

from bongoexpress.exceptions import NotificationDispatchFailed

logger = logging.getLogger("bongoexpress.notifications")


class NotificationService:
    """Create in-app notifications and send email."""

    def notify(self, user, text: str, link: str = ""):
        from apps.notifications.models import Notification
        return Notification.objects.create(user=user, text=text, link=link)

    def notify_admins(self, text: str, link: str = "") -> int:
        """Create one notification per admin account. Returns count created."""
        from apps.authentication.models import User
        from apps.notifications.models import Notification

        admins = list(User.objects.filter(role=User.Role.ADMIN))
        Notification.objects.bulk_create(
            [Notification(user=admin, text=text, link=link) for admin in admins]
        )
        logger.info("Notified %d admins: %s", len(admins), text)
        return len(admins)

    def send_email(self, email: str, subject: str, body: str, html: str = None,
                   fail_silently: bool = True) -> bool:
        """
        Send one email. Returns True on success.
        With fail_silently=False a delivery failure raises NotificationDispatchFailed.
        """
        try:
            send_mail(
                subject=subject,
                message=body,
                from_email=settings.DEFAULT_FROM_EMAIL,
                recipient_list=[email],
                html_message=html,
            )
            logger.info("EMAIL → %s | Subject: %s", email, subject)
            return True
        except (SMTPException, OSError) as exc:
            logger.warning("Email to %s failed: %s", email, exc)
            if not fail_silently:
                raise NotificationDispatchFailed() from exc
        return False
