import django.core.validators
import django.db.models.deletion
import django.utils.timezone
import uuid
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Shipment",
            fields=[
                ("id",            models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("shipment_id",   models.CharField(max_length=20, unique=True)),
                ("guest_name",    models.CharField(blank=True, default="", max_length=120)),
                ("guest_phone",   models.CharField(blank=True, default="", max_length=20)),
                ("branch",        models.CharField(blank=True, default="", max_length=20)),
                ("origin",        models.CharField(max_length=120)),
                ("destination",   models.CharField(max_length=120)),
                ("status",        models.CharField(
                    choices=[
                        ("Pending", "Pending"), ("In Transit", "In Transit"), ("Delivered", "Delivered"),
                        ("Delayed", "Delayed"), ("Cancelled", "Cancelled"),
                    ],
                    default="Pending", max_length=12,
                )),
                ("dispatch_date", models.DateTimeField(default=django.utils.timezone.now)),
                ("estimated_delivery", models.DateTimeField(blank=True, null=True)),
                ("weight",        models.DecimalField(
                    decimal_places=2, default=0, max_digits=10,
                    validators=[django.core.validators.MinValueValidator(0)],
                )),
                ("package_details", models.TextField(blank=True, default="")),
                ("cost",          models.DecimalField(
                    decimal_places=2, max_digits=12,
                    validators=[django.core.validators.MinValueValidator(0)],
                )),
                ("created_at",    models.DateTimeField(auto_now_add=True)),
                ("updated_at",    models.DateTimeField(auto_now=True)),
                ("customer",      models.ForeignKey(
                    blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                    related_name="shipments", to=settings.AUTH_USER_MODEL,
                )),
                ("created_by",    models.ForeignKey(
                    blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                    related_name="created_shipments", to=settings.AUTH_USER_MODEL,
                )),
                ("staff",         models.ForeignKey(
                    blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                    related_name="assigned_shipments", to=settings.AUTH_USER_MODEL,
                )),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status"], name="shipment_status_idx"),
                    models.Index(fields=["staff", "status"], name="shipment_staff_status_idx"),
                    models.Index(fields=["created_at"], name="shipment_created_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("customer__isnull", True), ("guest_name", ""), _connector="OR"),
                        name="shipment_single_owner",
                    ),
                    models.CheckConstraint(condition=models.Q(("cost__gte", 0)), name="shipment_cost_non_negative"),
                ],
            },
        ),
        migrations.CreateModel(
            name="TrackingEvent",
            fields=[
                ("id",        models.BigAutoField(auto_created=True, primary_key=True, serialize=False)),
                ("status",    models.CharField(
                    choices=[
                        ("Pending", "Pending"), ("In Transit", "In Transit"), ("Delivered", "Delivered"),
                        ("Delayed", "Delayed"), ("Cancelled", "Cancelled"),
                    ],
                    max_length=12,
                )),
                ("location",  models.CharField(blank=True, default="", max_length=120)),
                ("timestamp", models.DateTimeField(default=django.utils.timezone.now)),
                ("shipment",  models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="history", to="shipments.shipment",
                )),
            ],
            options={
                "ordering": ["timestamp", "id"],
                "indexes": [models.Index(fields=["status", "timestamp"], name="tracking_status_time_idx")],
            },
        ),
    ]
