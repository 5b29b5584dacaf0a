"""BongoExpress root URL configuration."""

from django.contrib import admin
from django.urls import path, include
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from apps.authentication.staff_urls import customer_urlpatterns, staff_urlpatterns

urlpatterns = [
    path("admin/", admin.site.urls),

    # OpenAPI / Interactive Docs
    path("api/schema/",  SpectacularAPIView.as_view(),       name="schema"),
    path("api/docs/",    SpectacularSwaggerView.as_view(),   name="swagger-ui"),

    # Auth
    path("api/auth/",    include("apps.authentication.urls")),

    # Shipments, tracking, payments
    path("api/shipments/",       include("apps.shipments.urls")),
    path("api/staff-dashboard/", include("apps.shipments.staff_urls")),
    path("api/track/",           include("apps.tracking.urls")),
    path("api/payments/",        include("apps.payments.urls")),

    # Admin: people
    path("api/staff/",     include(staff_urlpatterns)),
    path("api/customers/", include(customer_urlpatterns)),

    # Messages & notifications
    path("api/messages/",      include("apps.contact.urls")),
    path("api/notifications/", include("apps.notifications.urls")),

    # Dashboard
    path("api/dashboard/", include("apps.analytics.urls")),

    # Ops
    path("api/health/", include("apps.ops.urls")),
]
