import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Message",
            fields=[
                ("id",         models.BigAutoField(auto_created=True, primary_key=True, serialize=False)),
                ("sender",     models.CharField(max_length=120)),
                ("email",      models.EmailField(max_length=254)),
                ("subject",    models.CharField(max_length=200)),
                ("body",       models.TextField()),
                ("status",     models.CharField(
                    choices=[("Unread", "Unread"), ("Replied", "Replied")], default="Unread", max_length=10,
                )),
                ("reply",      models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("user",       models.ForeignKey(
                    blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                    related_name="messages", to=settings.AUTH_USER_MODEL,
                )),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [models.Index(fields=["status", "created_at"], name="message_status_created_idx")],
            },
        ),
    ]
