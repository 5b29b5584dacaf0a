"""
Authentication models.
User is the custom AUTH_USER_MODEL and covers the Customer, Staff and Admin roles.
"""

import uuid
from django.db import models
from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin, BaseUserManager


class UserManager(BaseUserManager):
    def create_user(self, email, password=None, **extra):
        if not email:
            raise ValueError("Email is required.")
        user = self.model(email=self.normalize_email(email).lower(), **extra)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password, **extra):
        extra.setdefault("role", User.Role.ADMIN)
        extra.setdefault("is_staff", True)
        extra.setdefault("is_superuser", True)
        return self.create_user(email, password, **extra)

    def get_by_natural_key(self, email):
        return self.get(email__iexact=email)


class User(AbstractBaseUser, PermissionsMixin):
    """Every human actor in BongoExpress, identified by email."""

    class Role(models.TextChoices):
        CUSTOMER = "customer", "Customer"
        STAFF    = "staff",    "Staff"
        ADMIN    = "admin",    "Admin"

    class Status(models.TextChoices):
        ACTIVE   = "Active",   "Active"
        INACTIVE = "Inactive", "Inactive"
        IDLE     = "Idle",     "Idle"

    class Branch(models.TextChoices):
        NAIROBI = "Nairobi", "Nairobi"
        MOMBASA = "Mombasa", "Mombasa"
        KISUMU  = "Kisumu",  "Kisumu"
        NAKURU  = "Nakuru",  "Nakuru"
        ELDORET = "Eldoret", "Eldoret"

    id              = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name            = models.CharField(max_length=120)
    email           = models.EmailField(unique=True)
    role            = models.CharField(max_length=10, choices=Role.choices, default=Role.CUSTOMER)
    status          = models.CharField(max_length=10, choices=Status.choices, default=Status.ACTIVE)
    phone           = models.CharField(max_length=20, blank=True, default="")
    location        = models.CharField(max_length=120, blank=True, default="")
    branch          = models.CharField(max_length=10, choices=Branch.choices, default=Branch.NAIROBI)
    profile_picture = models.CharField(max_length=255, blank=True, default="")
    is_active       = models.BooleanField(default=True)
    is_staff        = models.BooleanField(default=False)   # Django admin site access only
    created_at      = models.DateTimeField(auto_now_add=True)
    updated_at      = models.DateTimeField(auto_now=True)

    # Password reset: only the sha256 of the emailed token is stored
    password_reset_token   = models.CharField(max_length=64, blank=True, default="")
    password_reset_expires = models.DateTimeField(null=True, blank=True)

    # Two-factor authentication (TOTP)
    two_factor_enabled        = models.BooleanField(default=False)
    two_factor_secret         = models.CharField(max_length=64, blank=True, default="")
    two_factor_recovery_codes = models.JSONField(default=list, blank=True)
    two_factor_last_step      = models.BigIntegerField(null=True, blank=True)

    USERNAME_FIELD  = "email"
    EMAIL_FIELD     = "email"
    REQUIRED_FIELDS = ["name"]

    objects = UserManager()

    class Meta:
        verbose_name = "User"
        ordering     = ["-created_at"]
        indexes = [
            models.Index(fields=["role"], name="auth_user_role_idx"),
            models.Index(fields=["phone"], name="auth_user_phone_idx"),
            models.Index(fields=["role", "created_at"], name="auth_user_role_created_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.role})"

    def save(self, *args, **kwargs):
        if self.email:
            self.email = self.email.strip().lower()
        super().save(*args, **kwargs)

    def clear_password_reset(self):
        self.password_reset_token   = ""
        self.password_reset_expires = None

    def clear_two_factor(self):
        self.two_factor_enabled        = False
        self.two_factor_secret         = ""
        self.two_factor_recovery_codes = []
        self.two_factor_last_step      = None
