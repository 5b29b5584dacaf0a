import apps.payments.models
import django.db.models.deletion
import django.utils.timezone
import uuid
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("shipments", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Payment",
            fields=[
                ("id",         models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("payment_id", models.CharField(
                    default=apps.payments.models.generate_payment_id, max_length=30, unique=True,
                )),
                ("amount",     models.DecimalField(decimal_places=2, max_digits=12)),
                ("method",     models.CharField(
                    choices=[("M-Pesa", "M-Pesa"), ("Cash", "Cash"), ("Card", "Card")], max_length=10,
                )),
                ("status",     models.CharField(
                    choices=[
                        ("Completed", "Completed"), ("Pending", "Pending"),
                        ("Failed", "Failed"), ("Refunded", "Refunded"),
                    ],
                    default="Pending", max_length=10,
                )),
                ("transaction_date", models.DateTimeField(default=django.utils.timezone.now)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("shipment",   models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="payments", to="shipments.shipment",
                )),
                ("customer",   models.ForeignKey(
                    blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                    related_name="payments", to=settings.AUTH_USER_MODEL,
                )),
            ],
            options={
                "ordering": ["-transaction_date"],
                "indexes": [
                    models.Index(fields=["status", "created_at"], name="payment_status_created_idx"),
                    models.Index(fields=["customer", "created_at"], name="payment_customer_created_idx"),
                ],
            },
        ),
    ]
