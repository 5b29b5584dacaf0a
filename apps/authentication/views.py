"""Authentication: registration, login, two-factor, password management."""

import logging

from drf_spectacular.utils import extend_schema
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import (
    ForgotPasswordSerializer,
    LoginSerializer,
    RegisterSerializer,
    ResetPasswordSerializer,
    TwoFactorCodeSerializer,
    TwoFactorLoginSerializer,
    UpdateMeSerializer,
    UpdatePasswordSerializer,
    UserSerializer,
)
from .service import IdentityService, PasswordResetService, TwoFactorService

logger = logging.getLogger("bongoexpress.auth")

identity_service   = IdentityService()
two_factor_service = TwoFactorService(identity_service=identity_service)
reset_service      = PasswordResetService()


def token_response(user, token, http_status=status.HTTP_200_OK):
    return Response(
        {"status": "success", "token": token, "data": {"user": UserSerializer(user).data}},
        status=http_status,
    )


# ── POST /api/auth/register/ ──────────────────────────────────────────────────
@extend_schema(tags=["Auth"], summary="Create a customer account", request=RegisterSerializer)
class RegisterView(APIView):
    permission_classes     = [permissions.AllowAny]
    authentication_classes = []

    def post(self, request):
        ser = RegisterSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        identity_service.create_user(**ser.validated_data)
        return Response(
            {"status": "success", "message": "User registered successfully."},
            status=status.HTTP_201_CREATED,
        )


# ── POST /api/auth/login/ ─────────────────────────────────────────────────────
@extend_schema(tags=["Auth"], summary="Log in with email and password", request=LoginSerializer)
class LoginView(APIView):
    permission_classes     = [permissions.AllowAny]
    authentication_classes = []
    throttle_scope         = "auth"

    def post(self, request):
        ser = LoginSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        result = two_factor_service.login_with_password(**ser.validated_data)
        if result.challenge:
            return Response({"status": "2fa_required", "message": "Please enter your 2FA token."})
        return token_response(result.user, result.token)


# ── POST /api/auth/2fa/login/ ─────────────────────────────────────────────────
@extend_schema(tags=["Auth"], summary="Complete a login with a TOTP or recovery code",
               request=TwoFactorLoginSerializer)
class TwoFactorLoginView(APIView):
    permission_classes     = [permissions.AllowAny]
    authentication_classes = []
    throttle_scope         = "auth"

    def post(self, request):
        ser = TwoFactorLoginSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        d = ser.validated_data
        result = two_factor_service.login_with_two_factor(d["email"], d["password"], d["token"])
        return token_response(result.user, result.token)


# ── POST /api/auth/2fa/setup|verify|disable/ ──────────────────────────────────
@extend_schema(tags=["Auth"], summary="Start 2FA enrolment (returns QR code and secret)", request=None)
class TwoFactorSetupView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        data = two_factor_service.begin_setup(request.user)
        return Response({"status": "success", "data": data})


@extend_schema(tags=["Auth"], summary="Confirm 2FA enrolment with a first code",
               request=TwoFactorCodeSerializer)
class TwoFactorVerifyView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        ser = TwoFactorCodeSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        codes = two_factor_service.confirm_setup(request.user, ser.validated_data["token"])
        return Response({
            "status":  "success",
            "message": "2FA enabled successfully.",
            "data":    {"recovery_codes": codes},
        })


@extend_schema(tags=["Auth"], summary="Turn 2FA off", request=None)
class TwoFactorDisableView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        two_factor_service.disable(request.user)
        return Response({"status": "success", "message": "2FA disabled."})


# ── Password reset ────────────────────────────────────────────────────────────
@extend_schema(tags=["Auth"], summary="Email a password reset link", request=ForgotPasswordSerializer)
class ForgotPasswordView(APIView):
    permission_classes     = [permissions.AllowAny]
    authentication_classes = []
    throttle_scope         = "auth"

    def post(self, request):
        ser = ForgotPasswordSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        reset_service.request_reset(ser.validated_data["email"])
        return Response({"status": "success", "message": "Token sent to email!"})


@extend_schema(tags=["Auth"], summary="Set a new password with an emailed token",
               request=ResetPasswordSerializer)
class ResetPasswordView(APIView):
    permission_classes     = [permissions.AllowAny]
    authentication_classes = []

    def patch(self, request, token):
        ser = ResetPasswordSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        new_token = reset_service.complete_reset(token, ser.validated_data["password"])
        return Response({"status": "success", "token": new_token})


# ── Self-service ──────────────────────────────────────────────────────────────
@extend_schema(tags=["Auth"], summary="Current account")
class MeView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response({"status": "success", "data": {"user": UserSerializer(request.user).data}})


@extend_schema(tags=["Auth"], summary="Update name, email, phone or profile picture",
               request=UpdateMeSerializer)
class UpdateMeView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def patch(self, request):
        ser = UpdateMeSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        user = identity_service.update_profile(request.user, ser.validated_data)
        return Response({"status": "success", "data": {"user": UserSerializer(user).data}})


@extend_schema(tags=["Auth"], summary="Change password (returns a fresh token)",
               request=UpdatePasswordSerializer)
class UpdatePasswordView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def patch(self, request):
        ser = UpdatePasswordSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        d = ser.validated_data
        token = identity_service.update_password(request.user, d["current_password"], d["password"])
        return token_response(request.user, token)
