"""
BongoExpress Test Suite: Accounts & Access
===========================================
Covers: registration | login | two-factor | password reset | bearer tokens | roles

Run:
    pytest tests/test_auth.py -v
"""

import re
from datetime import timedelta
from smtplib import SMTPException
from unittest.mock import patch

import pyotp
import pytest
from django.utils import timezone
from rest_framework import serializers, status
from rest_framework.test import APIClient

PASSWORD = "Cargo@2024"


def enable_two_factor(user, at=None):
    """Enrol `user` with a code from 90 seconds ago so a current code is still fresh."""
    from apps.authentication.service import TwoFactorService

    svc = TwoFactorService()
    svc.begin_setup(user)
    at = at or timezone.now() - timedelta(seconds=90)
    codes = svc.confirm_setup(user, pyotp.TOTP(user.two_factor_secret).at(at), for_time=at)
    return svc, codes


# ═══════════════════════════════════════════════════════════════════════════════
# UNIT TESTS — IdentityService
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestIdentityService:

    def setup_method(self):
        from apps.authentication.service import IdentityService
        self.svc = IdentityService()

    def test_create_user_hashes_password(self):
        user = self.svc.create_user("Baraka", "Baraka@Example.com", "longenough")
        assert user.email == "baraka@example.com"
        assert user.password != "longenough"
        assert user.check_password("longenough")
        assert user.role == "customer"

    def test_short_password_rejected(self):
        with pytest.raises(serializers.ValidationError):
            self.svc.create_user("Baraka", "baraka@example.com", "short")

    def test_duplicate_email_rejected_case_insensitively(self, customer):
        with pytest.raises(serializers.ValidationError):
            self.svc.create_user("Other", customer.email.upper(), "longenough")

    def test_verify_credentials(self, customer):
        from bongoexpress.exceptions import InvalidCredentials

        assert self.svc.verify_credentials(customer.email, PASSWORD) == customer
        with pytest.raises(InvalidCredentials):
            self.svc.verify_credentials(customer.email, "wrong-password")
        with pytest.raises(InvalidCredentials):
            self.svc.verify_credentials("nobody@example.com", PASSWORD)

    def test_profile_update_ignores_unknown_fields(self, customer):
        self.svc.update_profile(customer, {"name": "Wanjiru K", "role": "admin", "phone": ""})
        customer.refresh_from_db()
        assert customer.name == "Wanjiru K"
        assert customer.role == "customer"
        assert customer.phone == ""


# ═══════════════════════════════════════════════════════════════════════════════
# INTEGRATION — Register & Login
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestRegisterAndLogin:

    def test_register_then_login(self, api_client):
        resp = api_client.post("/api/auth/register/", {
            "name": "Achieng", "email": "achieng@example.com",
            "password": "securepass1", "phone": "0722000111",
        }, format="json")
        assert resp.status_code == status.HTTP_201_CREATED
        assert resp.data["status"] == "success"

        resp = api_client.post("/api/auth/login/", {
            "email": "achieng@example.com", "password": "securepass1",
        }, format="json")
        assert resp.status_code == 200
        assert resp.data["status"] == "success"
        assert resp.data["token"]
        user = resp.data["data"]["user"]
        assert user["email"] == "achieng@example.com"
        assert user["role"] == "customer"
        assert "password" not in user
        assert "two_factor_secret" not in user

    def test_register_duplicate_email(self, api_client, customer):
        resp = api_client.post("/api/auth/register/", {
            "name": "Copy", "email": customer.email, "password": "securepass1",
        }, format="json")
        assert resp.status_code == 400
        assert resp.data["status"] == "fail"
        assert "email" in resp.data["errors"]

    def test_login_wrong_password(self, api_client, customer):
        resp = api_client.post("/api/auth/login/", {
            "email": customer.email, "password": "not-the-password",
        }, format="json")
        assert resp.status_code == 401
        assert resp.data == {"status": "fail", "message": "Incorrect email or password."}

    def test_login_token_opens_me(self, api_client, customer):
        resp = api_client.post("/api/auth/login/", {"email": customer.email, "password": PASSWORD},
                               format="json")
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {resp.data['token']}")
        me = api_client.get("/api/auth/me/")
        assert me.status_code == 200
        assert me.data["data"]["user"]["id"] == str(customer.pk)


# ═══════════════════════════════════════════════════════════════════════════════
# INTEGRATION — Two-Factor Authentication
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestTwoFactor:

    def test_setup_returns_qr_and_secret(self, customer_client, customer):
        resp = customer_client.post("/api/auth/2fa/setup/")
        assert resp.status_code == 200
        data = resp.data["data"]
        assert data["qr_code"].startswith("data:image/png;base64,")
        assert data["otpauth_url"].startswith("otpauth://totp/")
        customer.refresh_from_db()
        assert customer.two_factor_secret == data["secret"]
        assert customer.two_factor_enabled is False

    def test_verify_enables_and_returns_recovery_codes(self, customer_client, customer):
        secret = customer_client.post("/api/auth/2fa/setup/").data["data"]["secret"]
        resp = customer_client.post("/api/auth/2fa/verify/", {"token": pyotp.TOTP(secret).now()},
                                    format="json")
        assert resp.status_code == 200
        assert len(resp.data["data"]["recovery_codes"]) == 8
        customer.refresh_from_db()
        assert customer.two_factor_enabled is True

    def test_verify_with_wrong_code(self, customer_client, customer):
        customer_client.post("/api/auth/2fa/setup/")
        resp = customer_client.post("/api/auth/2fa/verify/", {"token": "12ab56"}, format="json")
        assert resp.status_code == 401
        assert resp.data["message"] == "Invalid 2FA token."
        customer.refresh_from_db()
        assert customer.two_factor_enabled is False

    def test_code_from_other_secret_fails(self, customer):
        from apps.authentication.service import TwoFactorService
        from bongoexpress.exceptions import InvalidTwoFactorCode

        svc = TwoFactorService()
        svc.begin_setup(customer)
        other = pyotp.random_base32()
        with pytest.raises(InvalidTwoFactorCode):
            svc.confirm_setup(customer, pyotp.TOTP(other).now())

    def test_login_challenge_then_code(self, api_client, customer):
        enable_two_factor(customer)

        resp = api_client.post("/api/auth/login/", {"email": customer.email, "password": PASSWORD},
                               format="json")
        assert resp.status_code == 200
        assert resp.data == {"status": "2fa_required", "message": "Please enter your 2FA token."}

        code = pyotp.TOTP(customer.two_factor_secret).now()
        resp = api_client.post("/api/auth/2fa/login/", {
            "email": customer.email, "password": PASSWORD, "token": code,
        }, format="json")
        assert resp.status_code == 200
        assert resp.data["token"]

        # same code again is a replay
        resp = api_client.post("/api/auth/2fa/login/", {
            "email": customer.email, "password": PASSWORD, "token": code,
        }, format="json")
        assert resp.status_code == 401
        assert resp.data["message"] == "Invalid 2FA token."

    def test_code_accepted_once_per_window(self, customer):
        from bongoexpress.exceptions import InvalidTwoFactorCode

        at = timezone.now()
        svc, _ = enable_two_factor(customer, at=at)
        code = pyotp.TOTP(customer.two_factor_secret).at(at)
        with pytest.raises(InvalidTwoFactorCode):
            svc.login_with_two_factor(customer.email, PASSWORD, code, for_time=at)

    def test_recovery_code_is_single_use(self, customer):
        from bongoexpress.exceptions import InvalidTwoFactorCode

        svc, codes = enable_two_factor(customer)
        result = svc.login_with_two_factor(customer.email, PASSWORD, codes[0])
        assert result.token
        customer.refresh_from_db()
        assert len(customer.two_factor_recovery_codes) == 7

        with pytest.raises(InvalidTwoFactorCode):
            svc.login_with_two_factor(customer.email, PASSWORD, codes[0])

    def test_two_factor_login_when_not_enabled(self, api_client, customer):
        resp = api_client.post("/api/auth/2fa/login/", {
            "email": customer.email, "password": PASSWORD, "token": "123456",
        }, format="json")
        assert resp.status_code == 400
        assert resp.data["message"] == "2FA is not enabled for this account."

    def test_disable(self, client_for, customer):
        enable_two_factor(customer)
        resp = client_for(customer).post("/api/auth/2fa/disable/")
        assert resp.status_code == 200
        customer.refresh_from_db()
        assert customer.two_factor_enabled is False
        assert customer.two_factor_secret == ""
        assert customer.two_factor_recovery_codes == []


# ═══════════════════════════════════════════════════════════════════════════════
# INTEGRATION — Profile & Password
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestProfileAndPassword:

    def test_update_me(self, customer_client):
        resp = customer_client.patch("/api/auth/update-me/", {"name": "Wanjiru M", "phone": "0711111111"},
                                     format="json")
        assert resp.status_code == 200
        assert resp.data["data"]["user"]["name"] == "Wanjiru M"
        assert resp.data["data"]["user"]["phone"] == "0711111111"

    def test_update_me_rejects_password(self, customer_client):
        resp = customer_client.patch("/api/auth/update-me/", {"password": "newpassword"}, format="json")
        assert resp.status_code == 400
        assert "update-password" in resp.data["message"]

    @pytest.mark.parametrize("body, field", [
        ({"phone": None},            "phone"),
        ({"email": 12345},           "email"),
        ({"email": "not-an-email"},  "email"),
        ({"name": "x" * 121},        "name"),
    ])
    def test_update_me_validates_input(self, customer_client, customer, body, field):
        resp = customer_client.patch("/api/auth/update-me/", body, format="json")
        assert resp.status_code == 400
        assert resp.data["status"] == "fail"
        assert field in resp.data["errors"]
        customer.refresh_from_db()
        assert customer.email == "wanjiru@example.com"
        assert customer.phone == "0712345678"

    def test_update_me_normalises_email(self, customer_client, customer):
        resp = customer_client.patch("/api/auth/update-me/", {"email": "  Wanjiru.M@Example.com "},
                                     format="json")
        assert resp.status_code == 200
        customer.refresh_from_db()
        assert customer.email == "wanjiru.m@example.com"

    def test_update_password(self, customer_client, customer):
        resp = customer_client.patch("/api/auth/update-password/", {
            "current_password": PASSWORD, "password": "brand-new-pass",
        }, format="json")
        assert resp.status_code == 200
        assert resp.data["token"]
        customer.refresh_from_db()
        assert customer.check_password("brand-new-pass")

    def test_update_password_wrong_current(self, customer_client):
        resp = customer_client.patch("/api/auth/update-password/", {
            "current_password": "not-it", "password": "brand-new-pass",
        }, format="json")
        assert resp.status_code == 401
        assert resp.data["message"] == "Your current password is wrong."


# ═══════════════════════════════════════════════════════════════════════════════
# INTEGRATION — Password Reset
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestPasswordReset:

    def request_token(self, api_client, mailoutbox, email):
        resp = api_client.post("/api/auth/forgot-password/", {"email": email}, format="json")
        assert resp.status_code == 200
        assert resp.data["message"] == "Token sent to email!"
        match = re.search(r"reset-password/([0-9a-f]{64})", mailoutbox[-1].body)
        return match.group(1)

    def test_reset_flow(self, api_client, mailoutbox, customer):
        raw = self.request_token(api_client, mailoutbox, customer.email)
        assert mailoutbox[-1].to == [customer.email]
        assert mailoutbox[-1].body.count("http://frontend.test/reset-password/") == 1

        customer.refresh_from_db()
        assert customer.password_reset_token != raw   # only the hash is stored

        resp = api_client.patch(f"/api/auth/reset-password/{raw}/", {"password": "fresh-password"},
                                format="json")
        assert resp.status_code == 200
        assert resp.data["token"]

        customer.refresh_from_db()
        assert customer.check_password("fresh-password")
        assert customer.password_reset_token == ""
        assert customer.password_reset_expires is None

        # token is single use
        resp = api_client.patch(f"/api/auth/reset-password/{raw}/", {"password": "another-password"},
                                format="json")
        assert resp.status_code == 400

    def test_expired_token(self, api_client, mailoutbox, customer):
        raw = self.request_token(api_client, mailoutbox, customer.email)
        customer.refresh_from_db()
        customer.password_reset_expires = timezone.now() - timedelta(minutes=1)
        customer.save()

        resp = api_client.patch(f"/api/auth/reset-password/{raw}/", {"password": "fresh-password"},
                                format="json")
        assert resp.status_code == 400
        assert resp.data["message"] == "Token is invalid or has expired."

    def test_unknown_email(self, api_client, db):
        resp = api_client.post("/api/auth/forgot-password/", {"email": "ghost@example.com"}, format="json")
        assert resp.status_code == 404
        assert resp.data["message"] == "There is no user with that email address."

    def test_mail_failure_clears_token(self, api_client, customer):
        with patch("apps.notifications.service.send_mail", side_effect=SMTPException("relay down")):
            resp = api_client.post("/api/auth/forgot-password/", {"email": customer.email}, format="json")
        assert resp.status_code == 500
        assert resp.data["status"] == "error"
        customer.refresh_from_db()
        assert customer.password_reset_token == ""
        assert customer.password_reset_expires is None

    def test_purge_expired_tokens(self, customer, make_user):
        from apps.authentication.tasks import purge_expired_reset_tokens

        fresh = make_user()
        customer.password_reset_token = "a" * 64
        customer.password_reset_expires = timezone.now() - timedelta(hours=1)
        customer.save()
        fresh.password_reset_token = "b" * 64
        fresh.password_reset_expires = timezone.now() + timedelta(minutes=5)
        fresh.save()

        assert purge_expired_reset_tokens() == 1
        customer.refresh_from_db()
        fresh.refresh_from_db()
        assert customer.password_reset_token == ""
        assert fresh.password_reset_token == "b" * 64


# ═══════════════════════════════════════════════════════════════════════════════
# SECURITY — Tokens & Roles
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.django_db
class TestAccessControl:

    def test_missing_token(self, api_client):
        resp = api_client.get("/api/auth/me/")
        assert resp.status_code == 401
        assert resp.data == {
            "status":  "fail",
            "message": "You are not logged in. Please log in to get access.",
        }

    def test_garbage_token(self, db):
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION="Bearer not.a.jwt")
        resp = client.get("/api/auth/me/")
        assert resp.status_code == 401
        assert resp.data["message"] == "Invalid token. Please log in again."

    def test_token_of_deleted_user(self, client_for, make_user):
        user = make_user()
        client = client_for(user)
        user.delete()
        resp = client.get("/api/auth/me/")
        assert resp.status_code == 401
        assert resp.data["message"] == "The user belonging to this token no longer exists."

    @pytest.mark.parametrize("path", [
        "/api/dashboard/stats/",
        "/api/shipments/",
        "/api/staff/",
        "/api/payments/",
    ])
    def test_customer_cannot_reach_admin_routes(self, customer_client, path):
        resp = customer_client.get(path)
        assert resp.status_code == 403
        assert resp.data["status"] == "fail"

    def test_staff_cannot_reach_admin_routes(self, staff_client):
        assert staff_client.get("/api/dashboard/stats/").status_code == 403

    def test_customer_cannot_reach_staff_dashboard(self, customer_client):
        assert customer_client.get("/api/staff-dashboard/shipments/").status_code == 403
