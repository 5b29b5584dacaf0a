"""
Bearer token issuance and verification.

Tokens are HS256 JWTs (djangorestframework-simplejwt AccessToken) whose only
identity claim is the user id. Lifetime comes from SIMPLE_JWT.
"""

import logging

from django.contrib.auth.models import update_last_login
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken

from bongoexpress.exceptions import InvalidToken, UserGone

logger = logging.getLogger("bongoexpress.auth")


class TokenIssuer:
    """Issues access tokens; lifetime can be overridden per instance."""

    def __init__(self, lifetime=None):
        self.lifetime = lifetime

    def issue(self, user) -> str:
        token = AccessToken.for_user(user)
        if self.lifetime is not None:
            token.set_exp(lifetime=self.lifetime)
        return str(token)

    def issue_for_login(self, user) -> str:
        """Issue a token and stamp last_login. A failed stamp never fails the login."""
        try:
            update_last_login(None, user)
        except DatabaseError as exc:
            logger.warning("Could not record last login for %s: %s", user.pk, exc)
        return self.issue(user)


def issue_token(user) -> str:
    return TokenIssuer().issue(user)


class BearerAuthentication(JWTAuthentication):
    """
    `Authorization: Bearer <token>` authentication.
    Fails closed: bad signature / expiry → InvalidToken, deleted user → UserGone.
    """

    def get_validated_token(self, raw_token):
        try:
            return AccessToken(raw_token)
        except TokenError as exc:
            raise InvalidToken() from exc

    def get_user(self, validated_token):
        user_id = validated_token.get(api_settings.USER_ID_CLAIM)
        if user_id is None:
            raise InvalidToken()
        try:
            return self.user_model.objects.get(**{api_settings.USER_ID_FIELD: user_id})
        except (self.user_model.DoesNotExist, DjangoValidationError, ValueError):
            raise UserGone()


class OptionalBearerAuthentication(BearerAuthentication):
    """For public forms: a valid token identifies the sender, a stale one is ignored."""

    def authenticate(self, request):
        try:
            return super().authenticate(request)
        except AuthenticationFailed:
            return None
