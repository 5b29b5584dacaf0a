"""Authentication and account serializers."""

from rest_framework import serializers

from bongoexpress.exceptions import WrongEndpoint

from .models import User
from .service import MIN_PASSWORD_LENGTH


class UserSerializer(serializers.ModelSerializer):
    """Public view of an account. Password, reset token and 2FA material never leave the server."""

    class Meta:
        model  = User
        fields = [
            "id", "name", "email", "role", "status", "phone", "location", "branch",
            "profile_picture", "two_factor_enabled", "last_login", "created_at", "updated_at",
        ]
        read_only_fields = fields


class RegisterSerializer(serializers.Serializer):
    name     = serializers.CharField(max_length=120)
    email    = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=MIN_PASSWORD_LENGTH)
    phone    = serializers.CharField(max_length=20, required=False, allow_blank=True)


class LoginSerializer(serializers.Serializer):
    email    = serializers.CharField()
    password = serializers.CharField(write_only=True)


class TwoFactorLoginSerializer(LoginSerializer):
    token = serializers.CharField(max_length=20)


class TwoFactorCodeSerializer(serializers.Serializer):
    token = serializers.CharField(max_length=20)


class ForgotPasswordSerializer(serializers.Serializer):
    email = serializers.CharField()


class ResetPasswordSerializer(serializers.Serializer):
    password = serializers.CharField(write_only=True, min_length=MIN_PASSWORD_LENGTH)


class UpdatePasswordSerializer(serializers.Serializer):
    current_password = serializers.CharField(write_only=True)
    password         = serializers.CharField(write_only=True, min_length=MIN_PASSWORD_LENGTH)


class UpdateMeSerializer(serializers.Serializer):
    """Self-service profile fields. Blank name, email or picture leaves the stored value alone."""
    name            = serializers.CharField(max_length=120, required=False, allow_blank=True)
    email           = serializers.EmailField(max_length=254, required=False, allow_blank=True)
    phone           = serializers.CharField(max_length=20, required=False, allow_blank=True)
    profile_picture = serializers.CharField(max_length=255, required=False, allow_blank=True)

    def to_internal_value(self, data):
        if hasattr(data, "keys") and {"password", "password_confirm"} & set(data.keys()):
            raise WrongEndpoint()
        return super().to_internal_value(data)


# ── Admin: staff & customers ──────────────────────────────────────────────────
class StaffCreateSerializer(serializers.Serializer):
    name     = serializers.CharField(max_length=120)
    email    = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=MIN_PASSWORD_LENGTH)
    phone    = serializers.CharField(max_length=20, required=False, allow_blank=True)
    location = serializers.CharField(max_length=120, required=False, allow_blank=True)
    branch   = serializers.ChoiceField(choices=User.Branch.choices, required=False)
    status   = serializers.ChoiceField(choices=User.Status.choices, required=False)


class StaffUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model  = User
        fields = ["name", "email", "phone", "location", "branch", "status"]

    def validate_email(self, value):
        value = value.strip().lower()
        qs = User.objects.filter(email__iexact=value)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError("A user with this email already exists.")
        return value


class StaffBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model  = User
        fields = ["id", "name"]
