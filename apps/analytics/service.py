"""Loads rows for the dashboard statistics and caches the admin summary."""

import logging

from django.conf import settings
from django.core.cache import cache
from django.db.models import F
from django.db.models.functions import Coalesce
from django.utils import timezone

from apps.analytics import stats
from apps.authentication.models import User
from apps.payments.models import Payment
from apps.shipments.models import Shipment, TrackingEvent

logger = logging.getLogger("bongoexpress.analytics")

DASHBOARD_CACHE_KEY = "analytics:dashboard-stats"


class DashboardStatsService:
    def __init__(self, cache_backend=None, cache_seconds=None):
        self.cache = cache_backend or cache
        self.cache_seconds = (
            settings.DASHBOARD_STATS_CACHE_SECONDS if cache_seconds is None else cache_seconds
        )

    def compute(self, now=None) -> dict:
        now = timezone.localtime(now or timezone.now())
        shipments = Shipment.objects.values(
            "id", "status", "created_at",
            owner_name=Coalesce(F("customer__name"), F("guest_name")),
        )
        payments  = Payment.objects.values("status", "amount", "created_at")
        customers = User.objects.filter(role=User.Role.CUSTOMER).values("id", "name", "created_at")
        return stats.dashboard_summary(shipments, payments, customers, now)

    def get(self) -> dict:
        if self.cache_seconds <= 0:
            return self.compute()
        data = self.cache.get(DASHBOARD_CACHE_KEY)
        if data is None:
            data = self.refresh()
        return data

    def refresh(self) -> dict:
        data = self.compute()
        if self.cache_seconds > 0:
            self.cache.set(DASHBOARD_CACHE_KEY, data, self.cache_seconds)
        logger.info("Dashboard stats refreshed (%d shipments)", data["metrics"]["total_shipments"])
        return data

    def staff_overview(self, staff, now=None) -> dict:
        now = timezone.localtime(now or timezone.now())
        shipments = Shipment.objects.filter(staff=staff).values(
            "id", "shipment_id", "status", "origin", "destination", "estimated_delivery",
            customer_name=Coalesce(F("customer__name"), F("guest_name")),
            customer_phone=Coalesce(F("customer__phone"), F("guest_phone")),
        )
        events = TrackingEvent.objects.filter(
            shipment__staff=staff, status=Shipment.Status.DELIVERED,
        ).values("shipment", "status", "timestamp")
        return stats.staff_summary(shipments, events, now)
