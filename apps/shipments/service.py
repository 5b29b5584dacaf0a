"""
ShipmentService: booking and lifecycle of shipments.

Flow:  create_shipment  →  (Pending event + Payment + notifications)
                │
          update_status  →  one TrackingEvent per change
          update_cost    →  shipment.cost and payment amount move together
"""

import logging
import secrets
import string
from decimal import Decimal, InvalidOperation

from django.db import IntegrityError, transaction
from django.utils import timezone
from django_filters.utils import translate_validation
from rest_framework import serializers
from rest_framework.exceptions import NotFound

from apps.authentication.models import User
from apps.notifications.service import NotificationService
from apps.payments.models import Payment, invoice_id_for
from apps.shipments.filters import ShipmentFilter
from apps.shipments.models import Shipment
from apps.shipments.owner import owner_fields, resolve_owner
from bongoexpress.exceptions import TrackingIdUnavailable

logger = logging.getLogger("bongoexpress.shipments")

TRACKING_ALPHABET = string.digits + string.ascii_uppercase
TRACKING_LENGTH   = 10
MAX_ID_ATTEMPTS   = 5
NOT_ASSIGNED      = "Shipment not found or not assigned to you."


def generate_tracking_id() -> str:
    return "SHP" + "".join(secrets.choice(TRACKING_ALPHABET) for _ in range(TRACKING_LENGTH))


class GuestTariff:
    """Guest bookings pay per kg with a floor."""

    MINIMUM     = Decimal("20")
    RATE_PER_KG = Decimal("5")

    def calculate(self, weight) -> Decimal:
        return max(self.MINIMUM, Decimal(str(weight)) * self.RATE_PER_KG)


def positive_cost(value) -> Decimal:
    """Parse a cost, rejecting anything that is not a finite number above zero."""
    try:
        cost = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        cost = None
    if cost is None or not cost.is_finite() or cost <= 0:
        raise serializers.ValidationError({"cost": "Cost must be a positive number"})
    return cost.quantize(Decimal("0.01"))


class ShipmentService:
    """
    Shipment orchestration.
    Dependencies are injected so they can be swapped in tests.
    """

    def __init__(self, notification_service=None, tariff=None, id_generator=None):
        self.notifier    = notification_service or NotificationService()
        self.tariff      = tariff or GuestTariff()
        self.generate_id = id_generator or generate_tracking_id

    # ── Create ────────────────────────────────────────────────────────────────
    def create_shipment(self, details: dict, creator=None) -> Shipment:
        """
        Book a shipment.
        creator=None is a public guest booking: owner matched by email, cost from weight.
        Otherwise staff/admin booking: owner matched by phone, explicit cost.
        """
        guest = creator is None
        if guest:
            customer = self._customer_by(email__iexact=details["sender_email"])
            owner = resolve_owner(customer, details["sender_name"], details["sender_phone"])
            cost  = self.tariff.calculate(details["weight"])
        else:
            customer = self._customer_by(phone=details["customer_phone"])
            owner = resolve_owner(customer, details["customer_name"], details["customer_phone"])
            cost  = positive_cost(details.get("cost"))

        now = timezone.now()
        with transaction.atomic():
            shipment = self._insert(
                created_by         = creator,
                staff              = details.get("staff"),
                branch             = details.get("branch") or (creator.branch if creator else ""),
                origin             = details["origin"],
                destination        = details["destination"],
                status             = Shipment.Status.PENDING,
                dispatch_date      = now,
                estimated_delivery = details.get("estimated_delivery"),
                weight             = details.get("weight") or 0,
                package_details    = details.get("package_details", ""),
                cost               = cost,
                **owner_fields(owner),
            )
            shipment.history.create(status=Shipment.Status.PENDING, location=shipment.origin, timestamp=now)

            payment = Payment.objects.create(
                shipment         = shipment,
                customer         = customer,
                amount           = cost,
                transaction_date = now,
                **self._payment_terms(shipment, details, guest),
            )
            self._announce(shipment, owner, customer, guest)

        logger.info(
            "Shipment %s booked (%s owner, cost %s, payment %s)",
            shipment.shipment_id, owner.kind, cost, payment.payment_id,
        )
        return shipment

    def _insert(self, **fields) -> Shipment:
        """Insert with a fresh tracking id, retrying on collision."""
        for attempt in range(1, MAX_ID_ATTEMPTS + 1):
            shipment_id = self.generate_id()
            if Shipment.objects.filter(shipment_id=shipment_id).exists():
                logger.warning("Tracking id %s taken (attempt %d)", shipment_id, attempt)
                continue
            try:
                with transaction.atomic():
                    return Shipment.objects.create(shipment_id=shipment_id, **fields)
            except IntegrityError:
                if not Shipment.objects.filter(shipment_id=shipment_id).exists():
                    raise
                logger.warning("Tracking id %s raced (attempt %d)", shipment_id, attempt)
        raise TrackingIdUnavailable()

    def _payment_terms(self, shipment, details, guest) -> dict:
        if guest:
            return {
                "payment_id": invoice_id_for(shipment),
                "method":     Payment.Method.MPESA,
                "status":     Payment.Status.PENDING,
            }
        return {
            "method": details.get("payment_method") or Payment.Method.CASH,
            "status": details.get("payment_status") or Payment.Status.PENDING,
        }

    def _announce(self, shipment, owner, customer, guest):
        if guest:
            self.notifier.notify_admins(
                f"New guest shipment ({shipment.shipment_id}) booked by {owner.name}.",
                link="/admin/dashboard/shipments",
            )
        elif customer is not None:
            self.notifier.notify(
                customer,
                f"Your shipment {shipment.shipment_id} from {shipment.origin} to "
                f"{shipment.destination} has been created. Cost: KSh {shipment.cost}",
                link="/customer/dashboard/shipments",
            )

    def _customer_by(self, **lookup):
        if not any(lookup.values()):
            return None
        return User.objects.filter(role=User.Role.CUSTOMER, **lookup).first()

    # ── Lifecycle ─────────────────────────────────────────────────────────────
    def scoped(self, actor):
        """Shipments `actor` may work on: staff see their assignments, admins everything."""
        qs = Shipment.objects.select_related("customer", "staff", "created_by")
        if actor is not None and actor.role == User.Role.STAFF:
            qs = qs.filter(staff=actor)
        return qs

    def get_shipment(self, pk, actor) -> Shipment:
        try:
            return self.scoped(actor).prefetch_related("history").get(pk=pk)
        except Shipment.DoesNotExist:
            raise NotFound(NOT_ASSIGNED)

    def _locked(self, pk, actor) -> Shipment:
        try:
            return self.scoped(actor).select_for_update(of=("self",)).get(pk=pk)
        except Shipment.DoesNotExist:
            raise NotFound(NOT_ASSIGNED)

    def update_status(self, pk, status, location=None, actor=None) -> Shipment:
        if status not in Shipment.Status.values:
            raise serializers.ValidationError({"status": f'"{status}" is not a valid status.'})
        with transaction.atomic():
            shipment = self._locked(pk, actor)
            shipment.record_status(status, location)
        logger.info("Shipment %s → %s by %s", shipment.shipment_id, status,
                    getattr(actor, "pk", "system"))
        return shipment

    def update_cost(self, pk, cost, actor=None) -> Shipment:
        cost = positive_cost(cost)
        with transaction.atomic():
            shipment = self._locked(pk, actor)
            self._apply_cost(shipment, cost)
        logger.info("Shipment %s cost set to %s", shipment.shipment_id, cost)
        return shipment

    def _apply_cost(self, shipment, cost):
        shipment.cost = cost
        shipment.save(update_fields=["cost", "updated_at"])
        Payment.objects.filter(shipment=shipment).update(amount=cost, updated_at=timezone.now())

    def update_shipment(self, pk, data: dict, actor=None) -> Shipment:
        """Generic edit. Status and cost changes take the same paths as their dedicated operations."""
        data     = dict(data)
        status   = data.pop("status", None)
        location = data.pop("location", None)
        cost     = data.pop("cost", None)
        if cost is not None:
            cost = positive_cost(cost)

        with transaction.atomic():
            shipment = self._locked(pk, actor)
            if data:
                for field, value in data.items():
                    setattr(shipment, field, value)
                shipment.save(update_fields=list(data) + ["updated_at"])
            if status and status != shipment.status:
                shipment.record_status(status, location)
            if cost is not None and cost != shipment.cost:
                self._apply_cost(shipment, cost)
        return shipment

    def delete_shipment(self, pk) -> None:
        deleted, _ = Shipment.objects.filter(pk=pk).delete()
        if not deleted:
            raise NotFound("No shipment found with that ID")
        logger.info("Shipment %s deleted", pk)

    # ── Listing ───────────────────────────────────────────────────────────────
    def list_shipments(self, filters, actor=None):
        """Filtered queryset, newest first. Pagination is applied by the caller."""
        filterset = ShipmentFilter(filters, queryset=self.scoped(actor))
        if not filterset.is_valid():
            raise translate_validation(filterset.errors)
        return filterset.qs.order_by("-created_at")

    def track(self, tracking_id) -> Shipment:
        """Public lookup by tracking id, case-insensitive exact match."""
        shipment = (
            Shipment.objects.select_related("customer")
            .prefetch_related("history")
            .filter(shipment_id__iexact=(tracking_id or "").strip())
            .first()
        )
        if shipment is None:
            raise NotFound("Shipment not found with that tracking ID.")
        return shipment
