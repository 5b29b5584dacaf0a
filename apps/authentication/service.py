"""
Authentication services.

IdentityService       : accounts, credentials, profile and password changes
TwoFactorService      : TOTP enrolment and the two-step login
PasswordResetService  : emailed one-time reset tokens

Login flow:  login_with_password ──(2FA off)──→ token
                      │
                  (2FA on) → "2fa_required" → login_with_two_factor → token
"""

import hashlib
import logging
import secrets
from datetime import timedelta

from django.conf import settings
from django.db import transaction
from django.utils import timezone
from rest_framework import serializers
from rest_framework.exceptions import NotFound

from apps.authentication import two_factor
from apps.authentication.models import User
from apps.authentication.tokens import TokenIssuer
from apps.notifications.service import NotificationService
from bongoexpress.exceptions import (
    InvalidCredentials,
    InvalidOrExpiredToken,
    InvalidTwoFactorCode,
    TwoFactorNotEnabled,
    WrongEndpoint,
)

logger = logging.getLogger("bongoexpress.auth")

PROFILE_FIELDS = ("name", "email", "phone", "profile_picture")
MIN_PASSWORD_LENGTH = 8


class LoginResult:
    """Outcome of a password login: either a token or a 2FA challenge."""

    def __init__(self, user, token=None):
        self.user  = user
        self.token = token

    @property
    def challenge(self) -> bool:
        return self.token is None


class IdentityService:
    def __init__(self, token_issuer=None):
        self.tokens = token_issuer or TokenIssuer()

    def create_user(self, name, email, password, role=User.Role.CUSTOMER, **extra) -> User:
        errors = {}
        if not name:
            errors["name"] = "Please provide your name"
        if not email:
            errors["email"] = "Please provide your email"
        if not password or len(password) < MIN_PASSWORD_LENGTH:
            errors["password"] = f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        if errors:
            raise serializers.ValidationError(errors)

        email = email.strip().lower()
        if User.objects.filter(email__iexact=email).exists():
            raise serializers.ValidationError({"email": "A user with this email already exists."})

        user = User.objects.create_user(email=email, password=password, name=name, role=role, **extra)
        logger.info("User %s registered with role %s", user.pk, user.role)
        return user

    def verify_credentials(self, email, password) -> User:
        """Same failure for unknown email and wrong password."""
        user = User.objects.filter(email__iexact=(email or "").strip()).first()
        if user is None or not user.check_password(password or ""):
            logger.warning("Failed login attempt for %s", email)
            raise InvalidCredentials()
        return user

    def update_profile(self, user, data: dict) -> User:
        if "password" in data or "password_confirm" in data:
            raise WrongEndpoint()

        changed = []
        for field in PROFILE_FIELDS:
            if field not in data:
                continue
            value = data[field]
            # phone may be cleared, other fields ignore empty values
            if field != "phone" and not value:
                continue
            if field == "email":
                value = value.strip().lower()
                if User.objects.filter(email__iexact=value).exclude(pk=user.pk).exists():
                    raise serializers.ValidationError({"email": "A user with this email already exists."})
            setattr(user, field, value)
            changed.append(field)

        if changed:
            user.save(update_fields=changed + ["updated_at"])
        return user

    def update_password(self, user, current_password, new_password) -> str:
        if not user.check_password(current_password or ""):
            raise InvalidCredentials("Your current password is wrong.")
        if not new_password or len(new_password) < MIN_PASSWORD_LENGTH:
            raise serializers.ValidationError(
                {"password": f"Password must be at least {MIN_PASSWORD_LENGTH} characters"}
            )
        user.set_password(new_password)
        user.save(update_fields=["password", "updated_at"])
        logger.info("Password changed for user %s", user.pk)
        return self.tokens.issue(user)


class TwoFactorService:
    """
    Enrolment:  Disabled → begin_setup → PendingSetup → confirm_setup → Enabled
    disable() returns to Disabled from any state.
    """

    def __init__(self, identity_service=None, token_issuer=None, issuer_name=None):
        self.tokens   = token_issuer or TokenIssuer()
        self.identity = identity_service or IdentityService(token_issuer=self.tokens)
        self.issuer   = issuer_name or settings.TWO_FACTOR_ISSUER

    # ── Enrolment ─────────────────────────────────────────────────────────────
    def begin_setup(self, user) -> dict:
        secret = two_factor.new_secret()
        user.two_factor_secret    = secret
        user.two_factor_last_step = None
        user.save(update_fields=["two_factor_secret", "two_factor_last_step", "updated_at"])

        uri = two_factor.provisioning_uri(secret, user.email, self.issuer)
        logger.info("2FA setup started for user %s", user.pk)
        return {
            "qr_code":         two_factor.qr_data_url(uri),
            "secret":          secret,
            "otpauth_url":     uri,
        }

    def confirm_setup(self, user, code, for_time=None) -> list:
        """Enable 2FA. Returns the freshly issued recovery codes (shown once)."""
        step = self._accept_code(user, code, for_time)
        if step is None:
            raise InvalidTwoFactorCode()

        plain, hashed = two_factor.new_recovery_codes()
        user.two_factor_enabled        = True
        user.two_factor_last_step      = step
        user.two_factor_recovery_codes = hashed
        user.save(update_fields=[
            "two_factor_enabled", "two_factor_last_step",
            "two_factor_recovery_codes", "updated_at",
        ])
        logger.info("2FA enabled for user %s", user.pk)
        return plain

    def disable(self, user) -> None:
        user.clear_two_factor()
        user.save(update_fields=[
            "two_factor_enabled", "two_factor_secret",
            "two_factor_recovery_codes", "two_factor_last_step", "updated_at",
        ])
        logger.info("2FA disabled for user %s", user.pk)

    # ── Login ─────────────────────────────────────────────────────────────────
    def login_with_password(self, email, password) -> LoginResult:
        user = self.identity.verify_credentials(email, password)
        if user.two_factor_enabled:
            return LoginResult(user)
        return LoginResult(user, token=self.tokens.issue_for_login(user))

    def login_with_two_factor(self, email, password, code, for_time=None) -> LoginResult:
        user = self.identity.verify_credentials(email, password)
        if not user.two_factor_enabled or not user.two_factor_secret:
            raise TwoFactorNotEnabled()

        step = self._accept_code(user, code, for_time)
        if step is not None:
            user.two_factor_last_step = step
            user.save(update_fields=["two_factor_last_step"])
        elif not self._consume_recovery_code(user, code):
            logger.warning("Invalid 2FA code for user %s", user.pk)
            raise InvalidTwoFactorCode()

        return LoginResult(user, token=self.tokens.issue_for_login(user))

    # ── Helpers ───────────────────────────────────────────────────────────────
    def _accept_code(self, user, code, for_time):
        """Matching time-step for `code`, refusing steps at or before the last one used."""
        step = two_factor.matching_step(user.two_factor_secret, code, for_time=for_time)
        if step is None:
            return None
        if user.two_factor_last_step is not None and step <= user.two_factor_last_step:
            return None
        return step

    def _consume_recovery_code(self, user, code) -> bool:
        if not code or not user.two_factor_recovery_codes:
            return False
        hashed = two_factor.hash_recovery_code(str(code))
        if hashed not in user.two_factor_recovery_codes:
            return False
        user.two_factor_recovery_codes = [c for c in user.two_factor_recovery_codes if c != hashed]
        user.save(update_fields=["two_factor_recovery_codes"])
        logger.info("Recovery code used by user %s (%d left)",
                    user.pk, len(user.two_factor_recovery_codes))
        return True


def hash_reset_token(raw_token: str) -> str:
    return hashlib.sha256(raw_token.encode()).hexdigest()


class PasswordResetService:
    def __init__(self, notification_service=None, token_issuer=None,
                 timeout_minutes=None, frontend_url=None):
        self.notifier = notification_service or NotificationService()
        self.tokens   = token_issuer or TokenIssuer()
        self.timeout  = timedelta(minutes=timeout_minutes or settings.PASSWORD_RESET_TIMEOUT_MINUTES)
        self.frontend_url = (frontend_url or settings.FRONTEND_URL).rstrip("/")

    def request_reset(self, email) -> None:
        user = User.objects.filter(email__iexact=(email or "").strip()).first()
        if user is None:
            raise NotFound("There is no user with that email address.")

        raw_token = secrets.token_hex(32)
        user.password_reset_token   = hash_reset_token(raw_token)
        user.password_reset_expires = timezone.now() + self.timeout
        user.save(update_fields=["password_reset_token", "password_reset_expires"])

        minutes = int(self.timeout.total_seconds() // 60)
        reset_url = f"{self.frontend_url}/reset-password/{raw_token}"
        body = (
            f"Forgot your password? Set a new one here: {reset_url}\n"
            f"If you didn't forget your password, please ignore this email!"
        )
        try:
            self.notifier.send_email(
                email=user.email,
                subject=f"Your password reset token (valid for {minutes} min)",
                body=body,
                fail_silently=False,
            )
        except Exception:
            user.clear_password_reset()
            user.save(update_fields=["password_reset_token", "password_reset_expires"])
            raise
        logger.info("Password reset requested for user %s", user.pk)

    def complete_reset(self, raw_token, new_password) -> str:
        if not new_password or len(new_password) < MIN_PASSWORD_LENGTH:
            raise serializers.ValidationError(
                {"password": f"Password must be at least {MIN_PASSWORD_LENGTH} characters"}
            )
        hashed = hash_reset_token(raw_token or "")
        with transaction.atomic():
            user = (
                User.objects.select_for_update()
                .filter(password_reset_token=hashed, password_reset_expires__gt=timezone.now())
                .first()
            )
            if user is None:
                raise InvalidOrExpiredToken()
            user.set_password(new_password)
            user.clear_password_reset()
            user.save(update_fields=[
                "password", "password_reset_token", "password_reset_expires", "updated_at",
            ])
        logger.info("Password reset completed for user %s", user.pk)
        return self.tokens.issue(user)


def expired_reset_tokens():
    return User.objects.filter(password_reset_expires__lte=timezone.now())
