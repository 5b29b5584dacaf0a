"""
Shipment models.
A Shipment moves Pending → In Transit → Delivered | Delayed | Cancelled and keeps
an append-only TrackingEvent history. Status is only written together with a
new history entry (see Shipment.record_status).
"""

import logging
import uuid

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q
from django.utils import timezone

from .owner import resolve_owner

logger = logging.getLogger("bongoexpress.shipments")

# Expected next states. Anything else is accepted but logged.
EXPECTED_TRANSITIONS = {
    "Pending":    {"In Transit", "Delayed", "Cancelled"},
    "In Transit": {"Delivered", "Delayed", "Cancelled"},
    "Delayed":    {"In Transit", "Delivered", "Cancelled"},
    "Delivered":  set(),
    "Cancelled":  set(),
}


class Shipment(models.Model):
    """One cargo movement from origin to destination."""

    class Status(models.TextChoices):
        PENDING    = "Pending",    "Pending"
        IN_TRANSIT = "In Transit", "In Transit"
        DELIVERED  = "Delivered",  "Delivered"
        DELAYED    = "Delayed",    "Delayed"
        CANCELLED  = "Cancelled",  "Cancelled"

    id            = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    shipment_id   = models.CharField(max_length=20, unique=True)

    customer      = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
                                      null=True, blank=True, related_name="shipments")
    guest_name    = models.CharField(max_length=120, blank=True, default="")
    guest_phone   = models.CharField(max_length=20, blank=True, default="")
    created_by    = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
                                      null=True, blank=True, related_name="created_shipments")
    staff         = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
                                      null=True, blank=True, related_name="assigned_shipments")

    branch        = models.CharField(max_length=20, blank=True, default="")
    origin        = models.CharField(max_length=120)
    destination   = models.CharField(max_length=120)
    status        = models.CharField(max_length=12, choices=Status.choices, default=Status.PENDING)
    dispatch_date = models.DateTimeField(default=timezone.now)
    estimated_delivery = models.DateTimeField(null=True, blank=True)
    weight        = models.DecimalField(max_digits=10, decimal_places=2, default=0,
                                        validators=[MinValueValidator(0)])
    package_details = models.TextField(blank=True, default="")
    cost          = models.DecimalField(max_digits=12, decimal_places=2,
                                        validators=[MinValueValidator(0)])

    created_at    = models.DateTimeField(auto_now_add=True)
    updated_at    = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes  = [
            models.Index(fields=["status"], name="shipment_status_idx"),
            models.Index(fields=["staff", "status"], name="shipment_staff_status_idx"),
            models.Index(fields=["created_at"], name="shipment_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(customer__isnull=True) | Q(guest_name=""),
                name="shipment_single_owner",
            ),
            models.CheckConstraint(condition=Q(cost__gte=0), name="shipment_cost_non_negative"),
        ]

    def __str__(self):
        return f"{self.shipment_id} [{self.status}]"

    @property
    def owner(self):
        """RegisteredOwner, GuestOwner, or None once a linked customer was deleted."""
        if self.customer_id is None and not self.guest_name:
            return None
        return resolve_owner(self.customer, self.guest_name, self.guest_phone)

    def record_status(self, status, location=None, when=None):
        """
        Append a history entry and set the current status to match.
        Call inside a transaction so the two writes land together.
        """
        if status not in EXPECTED_TRANSITIONS.get(self.status, set()) and status != self.status:
            logger.warning("Unusual status change for %s: %s → %s", self.shipment_id, self.status, status)

        event = TrackingEvent.objects.create(
            shipment  = self,
            status    = status,
            location  = location or self.destination,
            timestamp = when or timezone.now(),
        )
        self.status = status
        self.save(update_fields=["status", "updated_at"])
        return event


class TrackingEvent(models.Model):
    """Append-only history entry: status, location, time."""
    shipment  = models.ForeignKey(Shipment, on_delete=models.CASCADE, related_name="history")
    status    = models.CharField(max_length=12, choices=Shipment.Status.choices)
    location  = models.CharField(max_length=120, blank=True, default="")
    timestamp = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["timestamp", "id"]
        indexes  = [models.Index(fields=["status", "timestamp"], name="tracking_status_time_idx")]

    def __str__(self):
        return f"{self.shipment_id}: {self.status} @ {self.location}"
