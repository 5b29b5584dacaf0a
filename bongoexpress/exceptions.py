"""
Domain errors and the API error envelope.

Every failure leaves the API as ``{"status": "fail"|"error", "message": ...}``:
4xx responses are ``fail``, 5xx responses are ``error``.
"""

import logging

from rest_framework import exceptions, status
from rest_framework.response import Response

logger = logging.getLogger("bongoexpress.errors")


# ── Authentication / authorisation ────────────────────────────────────────────
class Unauthenticated(exceptions.NotAuthenticated):
    default_detail = "You are not logged in. Please log in to get access."
    default_code   = "unauthenticated"


class InvalidToken(exceptions.AuthenticationFailed):
    default_detail = "Invalid token. Please log in again."
    default_code   = "invalid_token"


class UserGone(exceptions.AuthenticationFailed):
    default_detail = "The user belonging to this token no longer exists."
    default_code   = "user_gone"


class InvalidCredentials(exceptions.AuthenticationFailed):
    default_detail = "Incorrect email or password."
    default_code   = "invalid_credentials"


class InvalidTwoFactorCode(exceptions.AuthenticationFailed):
    default_detail = "Invalid 2FA token."
    default_code   = "invalid_2fa_code"


class Forbidden(exceptions.PermissionDenied):
    default_detail = "You do not have permission to perform this action."
    default_code   = "forbidden"


# ── Request-shape errors ──────────────────────────────────────────────────────
class WrongEndpoint(exceptions.APIException):
    status_code    = status.HTTP_400_BAD_REQUEST
    default_detail = "This route is not for password updates. Please use /update-password."
    default_code   = "wrong_endpoint"


class TwoFactorNotEnabled(exceptions.APIException):
    status_code    = status.HTTP_400_BAD_REQUEST
    default_detail = "2FA is not enabled for this account."
    default_code   = "2fa_not_enabled"


class InvalidOrExpiredToken(exceptions.APIException):
    status_code    = status.HTTP_400_BAD_REQUEST
    default_detail = "Token is invalid or has expired."
    default_code   = "invalid_or_expired_token"


# ── Downstream failures ───────────────────────────────────────────────────────
class NotificationDispatchFailed(exceptions.APIException):
    status_code    = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "There was an error sending the email. Try again later!"
    default_code   = "notification_dispatch_failed"


class TrackingIdUnavailable(exceptions.APIException):
    status_code    = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Could not allocate a tracking number. Please try again."
    default_code   = "tracking_id_unavailable"


GENERIC_ERROR_MESSAGE = "Something went wrong."


def _first_message(detail):
    """Flatten DRF error detail (str / list / dict) into one readable line."""
    if isinstance(detail, dict):
        for field, value in detail.items():
            text = _first_message(value)
            if field in ("non_field_errors", "detail"):
                return text
            return f"{field}: {text}"
        return ""
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else ""
    return str(detail)


def envelope_exception_handler(exc, context):
    """DRF EXCEPTION_HANDLER: wrap every error in the response envelope."""
    # rest_framework.views loads the auth classes, which import this module
    from rest_framework.views import exception_handler

    if isinstance(exc, exceptions.NotAuthenticated) and not isinstance(exc, Unauthenticated):
        exc.detail = exceptions.ErrorDetail(Unauthenticated.default_detail, exc.default_code)

    response = exception_handler(exc, context)

    if response is None:
        view = context.get("view")
        logger.exception("Unhandled error in %s", type(view).__name__ if view else "unknown view")
        return Response(
            {"status": "error", "message": GENERIC_ERROR_MESSAGE},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    body = {
        "status":  "error" if response.status_code >= 500 else "fail",
        "message": _first_message(response.data),
    }
    if isinstance(exc, exceptions.ValidationError) and isinstance(exc.detail, dict):
        body["errors"] = response.data
    response.data = body
    return response
