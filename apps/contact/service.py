"""Replying to contact messages."""

import logging

from django.db import transaction

from apps.authentication.models import User
from apps.contact.models import Message
from apps.notifications.service import NotificationService
from bongoexpress.exceptions import NotificationDispatchFailed

logger = logging.getLogger("bongoexpress.contact")


class MessageService:
    def __init__(self, notification_service=None):
        self.notifier = notification_service or NotificationService()

    def visible_to(self, actor):
        """Admins see every message; staff see messages from customers of their assigned shipments."""
        qs = Message.objects.select_related("user")
        if actor.role == User.Role.STAFF:
            qs = qs.filter(user__shipments__staff=actor).distinct()
        return qs

    def reply(self, message: Message, body: str, replier) -> Message:
        """Email the reply first; the message is only marked Replied once the email went out."""
        html = (
            f"<p>Hello {message.sender},</p><p>{body}</p>"
            f"<p>Best regards,<br/>{replier.name}<br/>BongoExpress Team</p>"
        )
        try:
            self.notifier.send_email(
                email=message.email,
                subject=f"Re: {message.subject}",
                body=body,
                html=html,
                fail_silently=False,
            )
        except NotificationDispatchFailed as exc:
            raise NotificationDispatchFailed("Failed to send reply.") from exc

        with transaction.atomic():
            message.status = Message.Status.REPLIED
            message.reply  = body
            message.save(update_fields=["status", "reply", "updated_at"])
        logger.info("Message %s replied by %s", message.pk, replier.pk)
        return message
