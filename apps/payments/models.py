"""
Payment records.
Every shipment gets one when it is booked; admins may add more by hand.
"""

import secrets
import string
import uuid

from django.conf import settings
from django.db import models
from django.utils import timezone

ID_ALPHABET = string.digits + string.ascii_uppercase
ID_LENGTH   = 10


def generate_payment_id() -> str:
    suffix = "".join(secrets.choice(ID_ALPHABET) for _ in range(ID_LENGTH))
    return f"PAY-{suffix}"


def invoice_id_for(shipment) -> str:
    return f"INV-{shipment.shipment_id}"


class Payment(models.Model):
    class Method(models.TextChoices):
        MPESA = "M-Pesa", "M-Pesa"
        CASH  = "Cash",   "Cash"
        CARD  = "Card",   "Card"

    class Status(models.TextChoices):
        COMPLETED = "Completed", "Completed"
        PENDING   = "Pending",   "Pending"
        FAILED    = "Failed",    "Failed"
        REFUNDED  = "Refunded",  "Refunded"

    id               = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    payment_id       = models.CharField(max_length=30, unique=True, default=generate_payment_id)
    shipment         = models.ForeignKey("shipments.Shipment", on_delete=models.CASCADE,
                                         related_name="payments")
    customer         = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
                                         null=True, blank=True, related_name="payments")
    amount           = models.DecimalField(max_digits=12, decimal_places=2)
    method           = models.CharField(max_length=10, choices=Method.choices)
    status           = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING)
    transaction_date = models.DateTimeField(default=timezone.now)
    created_at       = models.DateTimeField(auto_now_add=True)
    updated_at       = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-transaction_date"]
        indexes  = [
            models.Index(fields=["status", "created_at"], name="payment_status_created_idx"),
            models.Index(fields=["customer", "created_at"], name="payment_customer_created_idx"),
        ]

    def __str__(self):
        return f"{self.payment_id} – {self.status} ({self.amount})"
