"""
pytest configuration for BongoExpress.
Sets Django settings and provides shared fixtures.
"""

from datetime import timedelta

import django
import pytest
from django.conf import settings


def pytest_configure(config):
    """Configure Django settings before tests run."""
    if not settings.configured:
        settings.configure(
            DATABASES={
                "default": {
                    "ENGINE": "django.db.backends.sqlite3",
                    "NAME":   ":memory:",
                }
            },
            INSTALLED_APPS=[
                "django.contrib.admin",
                "django.contrib.contenttypes",
                "django.contrib.auth",
                "django.contrib.sessions",
                "django.contrib.messages",
                "django.contrib.staticfiles",
                "rest_framework",
                "rest_framework_simplejwt",
                "drf_spectacular",
                "django_filters",
                "corsheaders",
                "apps.authentication",
                "apps.shipments",
                "apps.payments",
                "apps.notifications",
                "apps.contact",
                "apps.tracking",
                "apps.analytics",
                "apps.ops",
            ],
            AUTH_USER_MODEL="authentication.User",
            PASSWORD_HASHERS=["django.contrib.auth.hashers.MD5PasswordHasher"],
            REST_FRAMEWORK={
                "DEFAULT_AUTHENTICATION_CLASSES": [
                    "apps.authentication.tokens.BearerAuthentication",
                ],
                "DEFAULT_PERMISSION_CLASSES": [
                    "rest_framework.permissions.IsAuthenticated",
                ],
                "DEFAULT_FILTER_BACKENDS": [
                    "django_filters.rest_framework.DjangoFilterBackend",
                ],
                "DEFAULT_PAGINATION_CLASS": "bongoexpress.pagination.EnvelopePagination",
                "PAGE_SIZE": 10,
                "EXCEPTION_HANDLER": "bongoexpress.exceptions.envelope_exception_handler",
                "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",
                # no throttling under test
                "DEFAULT_THROTTLE_CLASSES": [],
            },
            SPECTACULAR_SETTINGS={
                "TITLE": "BongoExpress API",
                "DESCRIPTION": "Cargo logistics: bookings, tracking, staff fulfilment, payments",
                "VERSION": "1.0.0",
                "SERVE_INCLUDE_SCHEMA": False,
            },
            SECRET_KEY="test-secret-key-not-for-production",
            DEBUG=True,
            USE_TZ=True,
            TIME_ZONE="Africa/Nairobi",
            ROOT_URLCONF="bongoexpress.urls",
            DEFAULT_AUTO_FIELD="django.db.models.BigAutoField",
            TEMPLATES=[{
                "BACKEND": "django.template.backends.django.DjangoTemplates",
                "DIRS": [],
                "APP_DIRS": True,
                "OPTIONS": {
                    "context_processors": [
                        "django.template.context_processors.debug",
                        "django.template.context_processors.request",
                        "django.contrib.auth.context_processors.auth",
                        "django.contrib.messages.context_processors.messages",
                    ],
                },
            }],
            MIDDLEWARE=[
                "django.middleware.security.SecurityMiddleware",
                "corsheaders.middleware.CorsMiddleware",
                "django.contrib.sessions.middleware.SessionMiddleware",
                "django.middleware.common.CommonMiddleware",
                "django.middleware.csrf.CsrfViewMiddleware",
                "django.contrib.auth.middleware.AuthenticationMiddleware",
                "django.contrib.messages.middleware.MessageMiddleware",
            ],
            STATIC_URL="/static/",
            STATIC_ROOT="/tmp/staticfiles_test",
            CACHES={
                "default": {
                    "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
                }
            },
            EMAIL_BACKEND="django.core.mail.backends.locmem.EmailBackend",
            DEFAULT_FROM_EMAIL="BongoExpress <no-reply@bongoexpress.test>",
            CELERY_TASK_ALWAYS_EAGER=True,   # Execute tasks synchronously in tests
            CELERY_TASK_EAGER_PROPAGATES=True,
            CORS_ALLOW_ALL_ORIGINS=True,
            SIMPLE_JWT={
                "ACCESS_TOKEN_LIFETIME": timedelta(hours=72),
                "ALGORITHM": "HS256",
                "AUTH_HEADER_TYPES": ("Bearer",),
                "USER_ID_FIELD": "id",
                "USER_ID_CLAIM": "id",
                "UPDATE_LAST_LOGIN": False,
            },
            PASSWORD_RESET_TIMEOUT_MINUTES=10,
            TWO_FACTOR_ISSUER="BongoExpressCargo",
            FRONTEND_URL="http://frontend.test",
            DASHBOARD_STATS_CACHE_SECONDS=0,
        )
        django.setup()


# ═══════════════════════════════════════════════════════════════════════════════
# SHARED FIXTURES
# ═══════════════════════════════════════════════════════════════════════════════

PASSWORD = "Cargo@2024"   # every fixture account logs in with this


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    from rest_framework.test import APIClient
    return APIClient()


@pytest.fixture
def make_user(db):
    from apps.authentication.models import User

    counter = {"n": 0}

    def _make(role="customer", email=None, name=None, password=PASSWORD, **extra):
        counter["n"] += 1
        n = counter["n"]
        return User.objects.create_user(
            email=email or f"{role}{n}@bongoexpress.test",
            password=password,
            name=name or f"{role.title()} {n}",
            role=role,
            **extra,
        )
    return _make


@pytest.fixture
def admin_account(make_user):
    return make_user(role="admin", email="admin@bongoexpress.test", name="Amina Admin")


@pytest.fixture
def staff_member(make_user):
    return make_user(role="staff", email="staff@bongoexpress.test", name="Otieno Staff",
                     phone="0700000001", branch="Mombasa")


@pytest.fixture
def customer(make_user):
    return make_user(role="customer", email="wanjiru@example.com", name="Wanjiru",
                     phone="0712345678")


@pytest.fixture
def client_for():
    """APIClient carrying a real bearer token for `user`."""
    from rest_framework.test import APIClient
    from apps.authentication.tokens import issue_token

    def _client(user):
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {issue_token(user)}")
        return client
    return _client


@pytest.fixture
def admin_client(client_for, admin_account):
    return client_for(admin_account)


@pytest.fixture
def staff_client(client_for, staff_member):
    return client_for(staff_member)


@pytest.fixture
def customer_client(client_for, customer):
    return client_for(customer)


@pytest.fixture
def quiet_service():
    """ShipmentService with notifications swapped out."""
    from unittest.mock import MagicMock
    from apps.shipments.service import ShipmentService
    return ShipmentService(notification_service=MagicMock())


@pytest.fixture
def book(quiet_service, admin_account):
    """Book a shipment as the admin; keyword overrides go into the request details."""
    def _book(**overrides):
        details = {
            "customer_name":  "Walk-in Client",
            "customer_phone": "0799999999",
            "origin":         "Nairobi",
            "destination":    "Mombasa",
            "weight":         10,
            "cost":           "150.00",
            **overrides,
        }
        return quiet_service.create_shipment(details, creator=admin_account)
    return _book
