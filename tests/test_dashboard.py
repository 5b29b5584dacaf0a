"""
BongoExpress Test Suite: Dashboards, Payments, Messages, People
================================================================
Covers: dashboard statistics | staff overview | payments ledger |
        contact messages | notifications | staff & customer admin | health | start-up

Run:
    pytest tests/test_dashboard.py -v
"""

import os
import subprocess
import sys
from datetime import datetime, timedelta, timezone as dt_timezone
from decimal import Decimal
from pathlib import Path
from smtplib import SMTPException
from unittest.mock import patch

import pytest
from django.utils import timezone

UTC = dt_timezone.utc

CONTACT = {
    "sender":  "Njeri",
    "email":   "njeri@example.com",
    "subject": "Where is my parcel?",
    "body":    "It has been a week.",
}


def at(year, month, day, hour=12):
    return datetime(year, month, day, hour, tzinfo=UTC)


# ═══════════════════════════════════════════════════════════════════════════════
# UNIT TESTS — Statistics
# ═══════════════════════════════════════════════════════════════════════════════

class TestStats:

    def test_delivery_rate(self):
        from apps.analytics.stats import delivery_success_rate

        assert delivery_success_rate([]) == 0.0
        rows = [{"status": "Delivered"}, {"status": "Pending"}, {"status": "Delivered"},
                {"status": "Cancelled"}]
        assert delivery_success_rate(rows) == 50.0

    def test_trailing_months_cross_year(self):
        from apps.analytics.stats import month_label, trailing_months

        months = trailing_months(at(2024, 2, 15))
        assert months == [(2023, 9), (2023, 10), (2023, 11), (2023, 12), (2024, 1), (2024, 2)]
        assert [month_label(m) for m in months] == ["Sep", "Oct", "Nov", "Dec", "Jan", "Feb"]

    def test_shipment_series(self):
        from apps.analytics.stats import shipment_series

        rows = [
            {"status": "Delivered", "created_at": at(2024, 2, 1)},
            {"status": "Pending",   "created_at": at(2024, 1, 5)},
            {"status": "Pending",   "created_at": at(2023, 1, 5)},   # outside the window
        ]
        series = shipment_series(rows, at(2024, 2, 15))
        assert len(series) == 6
        assert series[-1] == {"name": "Feb", "Pending": 0, "In Transit": 0, "Delivered": 1,
                              "Delayed": 0, "Cancelled": 0}
        assert series[-2]["Pending"] == 1
        assert sum(row["Pending"] for row in series) == 1

    def test_revenue_series_counts_completed_only(self):
        from apps.analytics.stats import completed_revenue, revenue_series

        payments = [
            {"status": "Completed", "amount": Decimal("100"), "created_at": at(2024, 2, 3)},
            {"status": "Pending",   "amount": Decimal("50"),  "created_at": at(2024, 2, 4)},
            {"status": "Completed", "amount": Decimal("30"),  "created_at": at(2023, 12, 9)},
        ]
        series = {row["name"]: row["revenue"] for row in revenue_series(payments, at(2024, 2, 15))}
        assert series["Feb"] == Decimal("100")
        assert series["Dec"] == Decimal("30")
        assert series["Jan"] == Decimal("0")
        assert completed_revenue(payments) == Decimal("130")

    def test_customer_growth(self):
        from apps.analytics.stats import customer_series

        customers = [
            {"created_at": at(2024, 1, 10)},
            {"created_at": at(2024, 3, 1)},
            {"created_at": at(2023, 5, 1)},
        ]
        series = customer_series(customers, at(2024, 3, 15))
        assert [row["name"] for row in series] == ["Oct", "Nov", "Dec", "Jan", "Feb", "Mar"]
        assert [row["customers"] for row in series] == [1, 1, 1, 2, 2, 3]

    def test_recent_activities(self):
        from apps.analytics.stats import recent_activities

        shipments = [{"id": i, "created_at": at(2024, 3, i), "owner_name": f"Owner {i}"} for i in range(1, 5)]
        customers = [{"id": f"c{i}", "name": f"Customer {i}", "created_at": at(2024, 3, i, 18)}
                     for i in range(1, 4)]
        feed = recent_activities(shipments, customers)
        assert len(feed) == 4
        stamps = [a["timestamp"] for a in feed]
        assert stamps == sorted(stamps, reverse=True)
        assert feed[0]["text"] == "New shipment created for Owner 4."
        assert feed[1] == {"id": "c3", "type": "customer", "text": "New customer registered: Customer 3.",
                           "timestamp": at(2024, 3, 3, 18)}
        assert [a["type"] for a in feed] == ["shipment", "customer", "shipment", "customer"]

    def test_staff_summary(self):
        from apps.analytics.stats import staff_summary

        now = at(2024, 3, 15)
        shipments = [
            {"id": "a", "status": "Pending",    "estimated_delivery": None},
            {"id": "b", "status": "In Transit", "estimated_delivery": now + timedelta(days=2)},
            {"id": "c", "status": "Delivered",  "estimated_delivery": None},
            {"id": "d", "status": "Delivered",  "estimated_delivery": None},
            {"id": "e", "status": "Pending",    "estimated_delivery": now + timedelta(days=1)},
        ]
        events = [
            {"shipment": "c", "status": "Delivered", "timestamp": now - timedelta(hours=1)},
            {"shipment": "d", "status": "Delivered", "timestamp": now - timedelta(days=1)},
        ]
        summary = staff_summary(shipments, events, now)
        assert summary["metrics"] == {
            "assigned_shipments": 5,
            "pending_deliveries": 3,
            "completed_today":    1,
            "delivery_rate":      40.0,
        }
        assert [s["id"] for s in summary["priority_shipments"]] == ["e", "b", "a"]


# ═══════════════════════════════════════════════════════════════════════════════
# INTEGRATION — Dashboards
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestDashboards:

    def test_admin_dashboard(self, admin_client, customer, book, quiet_service):
        from apps.analytics.stats import MONTH_NAMES

        delivered = book()
        book()
        quiet_service.update_status(delivered.pk, "Delivered")
        payment = delivered.payments.get()
        admin_client.patch(f"/api/payments/{payment.pk}/", {"status": "Completed"}, format="json")

        resp = admin_client.get("/api/dashboard/stats/")
        assert resp.status_code == 200
        data = resp.data["data"]
        assert data["metrics"] == {
            "total_shipments":       2,
            "total_customers":       1,
            "total_revenue":         Decimal("150.00"),
            "delivery_success_rate": 50.0,
        }
        charts = data["charts"]
        assert len(charts["shipment_data"]) == 6
        assert charts["shipment_data"][-1]["name"] == MONTH_NAMES[timezone.localdate().month - 1]
        assert charts["shipment_data"][-1]["Delivered"] == 1
        assert {"name": "Delivered", "value": 1} in charts["status_distribution"]
        assert charts["revenue_data"][-1]["revenue"] == Decimal("150.00")
        assert charts["customer_growth_data"][-1]["customers"] == 1
        assert [a["type"] for a in data["recent_activities"]].count("shipment") == 2
        assert len(data["recent_activities"]) == 3

    def test_dashboard_cache(self, book):
        from apps.analytics.service import DashboardStatsService
        from apps.analytics.tasks import refresh_dashboard_stats

        svc = DashboardStatsService(cache_seconds=60)
        book()
        assert svc.get()["metrics"]["total_shipments"] == 1
        book()
        assert svc.get()["metrics"]["total_shipments"] == 1   # served from cache
        assert svc.refresh()["metrics"]["total_shipments"] == 2
        assert refresh_dashboard_stats() == 2

    def test_staff_stats(self, staff_client, staff_member, book, quiet_service):
        done = book(staff=staff_member)
        open_ = book(staff=staff_member, estimated_delivery=timezone.now() + timedelta(days=1))
        book()
        quiet_service.update_status(done.pk, "Delivered")

        resp = staff_client.get("/api/staff-dashboard/stats/")
        assert resp.status_code == 200
        data = resp.data["data"]
        assert data["metrics"] == {
            "assigned_shipments": 2,
            "pending_deliveries": 1,
            "completed_today":    1,
            "delivery_rate":      50.0,
        }
        assert [s["shipment_id"] for s in data["priority_shipments"]] == [open_.shipment_id]


# ═══════════════════════════════════════════════════════════════════════════════
# INTEGRATION — Payments
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestPayments:

    def test_list_and_filter(self, admin_client, customer, book):
        book(customer_name=customer.name, customer_phone=customer.phone)
        book()

        resp = admin_client.get("/api/payments/")
        assert resp.status_code == 200
        assert resp.data["data"]["pagination"]["total"] == 2

        resp = admin_client.get("/api/payments/?search=wanjiru&status=Pending")
        payments = resp.data["data"]["payments"]
        assert len(payments) == 1
        assert payments[0]["customer_name"] == "Wanjiru"

        assert admin_client.get("/api/payments/?status=Completed").data["data"]["pagination"]["total"] == 0

    def test_record_payment_defaults_to_cost(self, admin_client, book):
        shipment = book(cost="275.00")
        resp = admin_client.post("/api/payments/", {"shipment": str(shipment.pk), "method": "Card"},
                                 format="json")
        assert resp.status_code == 201
        payment = resp.data["data"]["payment"]
        assert payment["amount"] == "275.00"
        assert payment["status"] == "Pending"
        assert payment["payment_id"].startswith("PAY-")
        assert shipment.payments.count() == 2

    def test_mark_completed(self, admin_client, book):
        payment = book().payments.get()
        resp = admin_client.patch(f"/api/payments/{payment.pk}/", {"status": "Completed"}, format="json")
        assert resp.status_code == 200
        assert resp.data["data"]["payment"]["status"] == "Completed"

        resp = admin_client.patch(f"/api/payments/{payment.pk}/", {"status": "Settled"}, format="json")
        assert resp.status_code == 400

    def test_staff_sees_payments_of_assignments(self, staff_client, staff_member, book):
        mine = book(staff=staff_member)
        book()
        resp = staff_client.get("/api/staff-dashboard/payments/")
        assert resp.status_code == 200
        assert [p["shipment_id"] for p in resp.data["data"]["payments"]] == [mine.shipment_id]


# ═══════════════════════════════════════════════════════════════════════════════
# INTEGRATION — Contact Messages
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestMessages:

    def test_public_message_and_admin_inbox(self, api_client, admin_client):
        resp = api_client.post("/api/messages/", CONTACT, format="json")
        assert resp.status_code == 201
        assert resp.data["data"]["message"]["status"] == "Unread"
        assert resp.data["data"]["message"]["user"] is None

        resp = admin_client.get("/api/messages/?status=Unread")
        assert resp.data["data"]["pagination"]["total"] == 1
        assert admin_client.get("/api/messages/?status=Replied").data["data"]["pagination"]["total"] == 0

    def test_inbox_is_admin_only(self, api_client, db):
        assert api_client.get("/api/messages/").status_code == 401

    def test_form_links_sender_only_for_a_valid_token(self, api_client, customer_client, customer):
        from apps.authentication.tokens import TokenIssuer

        resp = customer_client.post("/api/messages/", CONTACT, format="json")
        assert resp.status_code == 201
        assert resp.data["data"]["message"]["user"] == customer.pk

        stale = TokenIssuer(lifetime=timedelta(seconds=-10)).issue(customer)
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {stale}")
        resp = api_client.post("/api/messages/", CONTACT, format="json")
        assert resp.status_code == 201
        assert resp.data["data"]["message"]["user"] is None

        # the admin inbox on the same route keeps strict checking
        assert api_client.get("/api/messages/").status_code == 401

    def test_reply_emails_sender(self, api_client, admin_client, mailoutbox):
        from apps.contact.models import Message

        api_client.post("/api/messages/", CONTACT, format="json")
        message = Message.objects.get()

        resp = admin_client.post(f"/api/messages/{message.pk}/reply/",
                                 {"reply_body": "It arrives tomorrow."}, format="json")
        assert resp.status_code == 200
        assert resp.data["data"]["message"]["status"] == "Replied"

        assert len(mailoutbox) == 1
        assert mailoutbox[0].to == ["njeri@example.com"]
        assert mailoutbox[0].subject == "Re: Where is my parcel?"
        message.refresh_from_db()
        assert message.reply == "It arrives tomorrow."

    def test_failed_reply_leaves_message_unread(self, api_client, admin_client):
        from apps.contact.models import Message

        api_client.post("/api/messages/", CONTACT, format="json")
        message = Message.objects.get()

        with patch("apps.notifications.service.send_mail", side_effect=SMTPException("relay down")):
            resp = admin_client.post(f"/api/messages/{message.pk}/reply/",
                                     {"reply_body": "It arrives tomorrow."}, format="json")
        assert resp.status_code == 500
        assert resp.data == {"status": "error", "message": "Failed to send reply."}
        message.refresh_from_db()
        assert message.status == "Unread"
        assert message.reply == ""

    def test_staff_inbox_scoped_to_their_customers(self, api_client, customer_client, customer,
                                                   staff_client, staff_member, book, mailoutbox):
        from apps.contact.models import Message

        book(staff=staff_member, customer_name=customer.name, customer_phone=customer.phone)
        customer_client.post("/api/messages/", {**CONTACT, "sender": customer.name, "email": customer.email},
                             format="json")
        api_client.post("/api/messages/", CONTACT, format="json")

        resp = staff_client.get("/api/staff-dashboard/messages/")
        messages = resp.data["data"]["messages"]
        assert len(messages) == 1
        assert messages[0]["user"] == customer.pk

        mine = Message.objects.get(user=customer)
        stranger = Message.objects.get(user__isnull=True)
        assert staff_client.post(f"/api/staff-dashboard/messages/{mine.pk}/reply/",
                                 {"reply_body": "On its way"}, format="json").status_code == 200
        assert staff_client.post(f"/api/staff-dashboard/messages/{stranger.pk}/reply/",
                                 {"reply_body": "On its way"}, format="json").status_code == 404
        assert len(mailoutbox) == 1


# ═══════════════════════════════════════════════════════════════════════════════
# INTEGRATION — Notifications
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestNotifications:

    def test_list_and_mark_read(self, api_client, admin_client, admin_account, customer_client):
        from apps.notifications.models import Notification

        api_client.post("/api/shipments/guest-booking/", {
            "sender_name": "Kamau", "sender_email": "kamau@example.com", "sender_phone": "0733",
            "origin": "Nairobi", "destination": "Kisumu", "weight": "3", "package_details": "Box",
        }, format="json")

        resp = admin_client.get("/api/notifications/")
        items = resp.data["data"]["notifications"]
        assert len(items) == 1
        assert items[0]["is_read"] is False

        note_id = items[0]["id"]
        assert customer_client.patch(f"/api/notifications/{note_id}/read/").status_code == 404
        assert admin_client.patch(f"/api/notifications/{note_id}/read/").status_code == 200
        assert Notification.objects.get(pk=note_id).is_read is True


# ═══════════════════════════════════════════════════════════════════════════════
# INTEGRATION — Staff & Customer Administration
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestPeopleAdmin:

    def test_staff_lifecycle(self, admin_client):
        resp = admin_client.post("/api/staff/", {
            "name": "Mutua", "email": "mutua@bongoexpress.test", "password": "staffpass1",
            "branch": "Kisumu", "phone": "0701000000",
        }, format="json")
        assert resp.status_code == 201
        staff = resp.data["data"]["staff"]
        assert staff["role"] == "staff"
        assert staff["branch"] == "Kisumu"

        resp = admin_client.put(f"/api/staff/{staff['id']}/", {"status": "Idle"}, format="json")
        assert resp.status_code == 200
        assert resp.data["data"]["staff"]["status"] == "Idle"

        summary = admin_client.get("/api/staff/summary/").data["data"]
        assert summary == {"total": 1, "active": 0, "inactive": 0, "idle": 1}

        assert admin_client.get("/api/staff/?status=Idle").data["data"]["pagination"]["total"] == 1
        assert admin_client.get("/api/staff/?branch=Nairobi").data["data"]["pagination"]["total"] == 0
        brief = admin_client.get("/api/staff/list/").data["data"]["staff"]
        assert [s["name"] for s in brief] == ["Mutua"]

        assert admin_client.delete(f"/api/staff/{staff['id']}/").status_code == 204
        assert admin_client.delete(f"/api/staff/{staff['id']}/").status_code == 404

    def test_staff_email_must_be_unique(self, admin_client, customer):
        resp = admin_client.post("/api/staff/", {
            "name": "Dup", "email": customer.email, "password": "staffpass1",
        }, format="json")
        assert resp.status_code == 400

    def test_customer_search(self, admin_client, customer, make_user):
        make_user(name="Otieno")
        resp = admin_client.get("/api/customers/?search=wanj")
        customers = resp.data["data"]["customers"]
        assert [c["email"] for c in customers] == [customer.email]


# ═══════════════════════════════════════════════════════════════════════════════
# OPS — Health
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestHealth:

    def test_health_without_auth(self, api_client):
        resp = api_client.get("/api/health/")
        assert resp.status_code == 200
        assert resp.data["data"]["checks"] == {"database": "ok", "cache": "ok"}


# ═══════════════════════════════════════════════════════════════════════════════
# OPS — Project boots
# ═══════════════════════════════════════════════════════════════════════════════

REPO_ROOT = Path(__file__).resolve().parent.parent


class TestProjectBoots:

    def run_fresh(self, *args):
        """Run in a new interpreter so import order matches a real start-up."""
        env = {**os.environ, "DJANGO_SETTINGS_MODULE": "bongoexpress.settings_dev"}
        return subprocess.run(
            [sys.executable, *args], cwd=REPO_ROOT, env=env,
            capture_output=True, text=True, timeout=120,
        )

    def test_manage_check_under_dev_settings(self):
        result = self.run_fresh("manage.py", "check")
        assert result.returncode == 0, result.stderr

    def test_auth_classes_import_before_drf_views(self):
        result = self.run_fresh("-c", (
            "import django; django.setup(); "
            "import apps.authentication.tokens; "
            "import bongoexpress.urls"
        ))
        assert result.returncode == 0, result.stderr

    def test_docs_route_resolves(self):
        from django.urls import resolve
        from drf_spectacular.views import SpectacularSwaggerView

        assert resolve("/api/docs/").func.view_class is SpectacularSwaggerView
