"""
BongoExpress Load Test: Locust Script
=======================================
Simulates the public side of the platform (customers registering, logging in,
booking as guests and tracking parcels) plus a small pool of admins and staff
refreshing their dashboards.

Usage:
    locust -f locust_tests/locustfile.py --host=http://localhost:8000 \
           --users=500 --spawn-rate=50 --run-time=5m --headless

Run against settings_dev (throttling off) or raise the auth/guest_booking
rates first, otherwise most bookings come back 429.
Seed accounts with `python manage.py seed_demo_data` before starting.
"""

import random
import uuid

from locust import HttpUser, between, events, task
from locust.exception import StopUser

TOWNS = ["Nairobi", "Mombasa", "Kisumu", "Nakuru", "Eldoret", "Thika", "Malindi"]
PASSWORD = "LoadTest@2024"

# Accounts created by seed_demo_data
ADMIN_EMAIL    = "admin@bongoexpress.com"
STAFF_EMAIL    = "staff.msa@bongoexpress.com"
SEED_PASSWORD  = "bongo-demo-123"


def _phone():
    return "07" + str(random.randint(10000000, 99999999))


class Customer(HttpUser):
    """
    A typical customer session.
    Tasks weighted to reflect real-world usage patterns.
    """
    wait_time = between(0.5, 2.0)   # realistic think-time between actions
    weight    = 8
    token     = None

    def on_start(self):
        """Register and log in at the start of each simulated session."""
        self.email = f"load-{uuid.uuid4().hex[:10]}@example.com"
        self.tracking_ids = []
        self.client.post(
            "/api/auth/register/",
            json={"name": "Load Tester", "email": self.email, "password": PASSWORD, "phone": _phone()},
            name="/api/auth/register/",
        )
        resp = self.client.post(
            "/api/auth/login/",
            json={"email": self.email, "password": PASSWORD},
            name="/api/auth/login/",
        )
        if resp.status_code == 200:
            self.token = resp.json().get("token")
        else:
            raise StopUser()

    def _headers(self):
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    # ── Tasks (weighted) ──────────────────────────────────────────────────────

    @task(5)
    def track_parcel(self):
        """Most common action: look up a tracking number."""
        if not self.tracking_ids:
            return
        self.client.get(
            f"/api/track/{random.choice(self.tracking_ids)}/",
            name="/api/track/[tracking_id]/",
        )

    @task(3)
    def guest_booking(self):
        origin, destination = random.sample(TOWNS, 2)
        resp = self.client.post(
            "/api/shipments/guest-booking/",
            json={
                "sender_name":     "Load Tester",
                "sender_email":    self.email,
                "sender_phone":    _phone(),
                "origin":          origin,
                "destination":     destination,
                "weight":          str(random.randint(1, 80)),
                "package_details": "Load test parcel",
            },
            name="/api/shipments/guest-booking/",
        )
        if resp.status_code == 201:
            self.tracking_ids.append(resp.json()["data"]["shipment"]["shipment_id"])

    @task(2)
    def notifications(self):
        self.client.get("/api/notifications/", headers=self._headers(), name="/api/notifications/")

    @task(1)
    def me(self):
        self.client.get("/api/auth/me/", headers=self._headers(), name="/api/auth/me/")

    @task(1)
    def unknown_tracking_id(self):
        with self.client.get("/api/track/SHPNOSUCHPARCEL/", name="/api/track/[unknown]/",
                             catch_response=True) as resp:
            if resp.status_code == 404:
                resp.success()

    @task(1)
    def health_check(self):
        """Monitoring pings; the health endpoint must stay fast."""
        self.client.get("/api/health/", name="/api/health/")


class Operator(HttpUser):
    """
    Admins and staff (fewer, but heavier queries).
    """
    wait_time = between(2, 5)
    weight    = 1
    token     = None

    def on_start(self):
        self.is_admin = random.random() < 0.5
        email = ADMIN_EMAIL if self.is_admin else STAFF_EMAIL
        resp = self.client.post("/api/auth/login/", json={"email": email, "password": SEED_PASSWORD})
        if resp.status_code == 200 and resp.json().get("token"):
            self.token = resp.json()["token"]
        else:
            raise StopUser()

    def _h(self):
        return {"Authorization": f"Bearer {self.token}"}

    @task(3)
    def dashboard(self):
        if self.is_admin:
            self.client.get("/api/dashboard/stats/", headers=self._h(), name="/api/dashboard/stats/")
        else:
            self.client.get("/api/staff-dashboard/stats/", headers=self._h(), name="/api/staff-dashboard/stats/")

    @task(2)
    def shipment_list(self):
        status = random.choice(["All", "Pending", "In Transit", "Delivered"])
        path = "/api/shipments/" if self.is_admin else "/api/staff-dashboard/shipments/"
        self.client.get(path, params={"status": status, "page": 1, "limit": 10},
                        headers=self._h(), name=path)

    @task(1)
    def payments(self):
        path = "/api/payments/" if self.is_admin else "/api/staff-dashboard/payments/"
        self.client.get(path, headers=self._h(), name=path)


# ── Custom events for Locust reporting ────────────────────────────────────────
@events.test_stop.add_listener
def on_test_stop(environment, **kwargs):
    print("\n=== BongoExpress Load Test Complete ===")
    stats = environment.stats.total
    print(f"Total requests:      {stats.num_requests}")
    print(f"Failures:            {stats.num_failures}")
    print(f"Avg response time:   {stats.avg_response_time:.0f}ms")
    print(f"95th percentile:     {stats.get_response_time_percentile(0.95):.0f}ms")
    print(f"Requests/sec:        {stats.current_rps:.1f}")
    if stats.num_failures / max(stats.num_requests, 1) > 0.01:
        print("⚠ FAILURE RATE > 1%")
    else:
        print("✓ System stable under load")
