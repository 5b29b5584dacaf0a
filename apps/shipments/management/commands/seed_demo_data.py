"""
Management command: seed demo accounts and a handful of shipments.

Usage:
    python manage.py seed_demo_data
    python manage.py seed_demo_data --password S3cret-pass
"""

from decimal import Decimal

from django.core.management.base import BaseCommand

from apps.authentication.models import User
from apps.shipments.models import Shipment
from apps.shipments.service import ShipmentService

ACCOUNTS = [
    # email,                       name,            role,     branch,    phone
    ("admin@bongoexpress.com",    "Amina Wanjiru",  "admin",    "Nairobi", "+254700000001"),
    ("staff.msa@bongoexpress.com","Brian Otieno",   "staff",    "Mombasa", "+254700000002"),
    ("staff.ksm@bongoexpress.com","Cynthia Achieng","staff",    "Kisumu",  "+254700000003"),
    ("customer@example.com",      "David Kamau",    "customer", "Nairobi", "+254711000001"),
]

SHIPMENTS = [
    # customer phone,   customer name,   origin,    destination, weight,  cost
    ("+254711000001",   "David Kamau",   "Nairobi", "Mombasa",    "12.50", "1500.00"),
    ("+254722555010",   "Esther Njeri",  "Mombasa", "Kisumu",     "3.00",  "650.00"),
    ("+254733777020",   "Felix Mutua",   "Nakuru",  "Eldoret",    "40.00", "4200.00"),
]


class Command(BaseCommand):
    help = "Seed demo admin/staff/customer accounts and sample shipments"

    def add_arguments(self, parser):
        parser.add_argument("--password", default="bongo-demo-123", help="Password for every seeded account")

    def handle(self, *args, **options):
        created_users = 0
        for email, name, role, branch, phone in ACCOUNTS:
            if User.objects.filter(email__iexact=email).exists():
                continue
            User.objects.create_user(
                email=email, password=options["password"], name=name,
                role=role, branch=branch, phone=phone,
                is_staff=(role == User.Role.ADMIN),
            )
            created_users += 1

        created_shipments = 0
        if not Shipment.objects.exists():
            service = ShipmentService()
            staff = list(User.objects.filter(role=User.Role.STAFF).order_by("email"))
            for index, (phone, name, origin, destination, weight, cost) in enumerate(SHIPMENTS):
                creator = staff[index % len(staff)]
                service.create_shipment(
                    {
                        "customer_name":   name,
                        "customer_phone":  phone,
                        "origin":          origin,
                        "destination":     destination,
                        "weight":          Decimal(weight),
                        "cost":            Decimal(cost),
                        "package_details": "Demo parcel",
                        "staff":           creator,
                    },
                    creator=creator,
                )
                created_shipments += 1

        self.stdout.write(self.style.SUCCESS(
            f"Seeded {created_users} accounts and {created_shipments} shipments."
        ))
