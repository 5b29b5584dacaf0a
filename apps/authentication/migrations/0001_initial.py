import uuid
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("auth", "0012_alter_user_first_name_max_length"),
    ]

    operations = [
        migrations.CreateModel(
            name="User",
            fields=[
                ("password",        models.CharField(max_length=128, verbose_name="password")),
                ("last_login",      models.DateTimeField(blank=True, null=True, verbose_name="last login")),
                ("is_superuser",    models.BooleanField(
                    default=False,
                    help_text="Designates that this user has all permissions without explicitly assigning them.",
                    verbose_name="superuser status",
                )),
                ("id",              models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name",            models.CharField(max_length=120)),
                ("email",           models.EmailField(max_length=254, unique=True)),
                ("role",            models.CharField(
                    choices=[("customer", "Customer"), ("staff", "Staff"), ("admin", "Admin")],
                    default="customer",
                    max_length=10,
                )),
                ("status",          models.CharField(
                    choices=[("Active", "Active"), ("Inactive", "Inactive"), ("Idle", "Idle")],
                    default="Active",
                    max_length=10,
                )),
                ("phone",           models.CharField(blank=True, default="", max_length=20)),
                ("location",        models.CharField(blank=True, default="", max_length=120)),
                ("branch",          models.CharField(
                    choices=[
                        ("Nairobi", "Nairobi"),
                        ("Mombasa", "Mombasa"),
                        ("Kisumu", "Kisumu"),
                        ("Nakuru", "Nakuru"),
                        ("Eldoret", "Eldoret"),
                    ],
                    default="Nairobi",
                    max_length=10,
                )),
                ("profile_picture", models.CharField(blank=True, default="", max_length=255)),
                ("is_active",       models.BooleanField(default=True)),
                ("is_staff",        models.BooleanField(default=False)),
                ("created_at",      models.DateTimeField(auto_now_add=True)),
                ("updated_at",      models.DateTimeField(auto_now=True)),
                ("password_reset_token",      models.CharField(blank=True, default="", max_length=64)),
                ("password_reset_expires",    models.DateTimeField(blank=True, null=True)),
                ("two_factor_enabled",        models.BooleanField(default=False)),
                ("two_factor_secret",         models.CharField(blank=True, default="", max_length=64)),
                ("two_factor_recovery_codes", models.JSONField(blank=True, default=list)),
                ("two_factor_last_step",      models.BigIntegerField(blank=True, null=True)),
                ("groups",          models.ManyToManyField(
                    blank=True,
                    help_text="The groups this user belongs to. A user will get all permissions granted to each of their groups.",
                    related_name="user_set",
                    related_query_name="user",
                    to="auth.group",
                    verbose_name="groups",
                )),
                ("user_permissions", models.ManyToManyField(
                    blank=True,
                    help_text="Specific permissions for this user.",
                    related_name="user_set",
                    related_query_name="user",
                    to="auth.permission",
                    verbose_name="user permissions",
                )),
            ],
            options={"verbose_name": "User", "ordering": ["-created_at"]},
        ),
        migrations.AddIndex(
            model_name="user",
            index=models.Index(fields=["role"], name="auth_user_role_idx"),
        ),
        migrations.AddIndex(
            model_name="user",
            index=models.Index(fields=["phone"], name="auth_user_phone_idx"),
        ),
        migrations.AddIndex(
            model_name="user",
            index=models.Index(fields=["role", "created_at"], name="auth_user_role_created_idx"),
        ),
    ]
