"""Contact-form messages and their replies."""

from django.conf import settings
from django.db import models


class Message(models.Model):
    class Status(models.TextChoices):
        UNREAD  = "Unread",  "Unread"
        REPLIED = "Replied", "Replied"

    sender     = models.CharField(max_length=120)
    email      = models.EmailField()
    subject    = models.CharField(max_length=200)
    body       = models.TextField()
    status     = models.CharField(max_length=10, choices=Status.choices, default=Status.UNREAD)
    reply      = models.TextField(blank=True, default="")
    user       = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
                                   null=True, blank=True, related_name="messages")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes  = [models.Index(fields=["status", "created_at"], name="message_status_created_idx")]

    def __str__(self):
        return f"{self.sender}: {self.subject}"
