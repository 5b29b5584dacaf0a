"""In-app notifications shown on the customer, staff and admin dashboards."""

from django.conf import settings
from django.db import models


class Notification(models.Model):
    user       = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE,
                                   related_name="notifications")
    text       = models.CharField(max_length=255)
    link       = models.CharField(max_length=255, blank=True, default="")
    is_read    = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes  = [models.Index(fields=["user", "is_read"], name="notif_user_read_idx")]

    def __str__(self):
        return f"{self.user_id}: {self.text[:40]}"
