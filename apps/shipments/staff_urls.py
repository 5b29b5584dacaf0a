"""/api/staff-dashboard/: everything a staff member works with day to day."""

from django.urls import path

from apps.analytics.views import StaffStatsView
from apps.contact.views import StaffMessageListView, StaffMessageReplyView
from apps.payments.views import StaffPaymentListView

from . import views

urlpatterns = [
    path("stats/",                    StaffStatsView.as_view(),                     name="staff-stats"),
    path("shipments/",                views.StaffShipmentListCreateView.as_view(),  name="staff-shipments"),
    path("shipments/<uuid:pk>/",      views.StaffShipmentDetailView.as_view(),      name="staff-shipment-detail"),
    path("shipments/<uuid:pk>/cost/", views.StaffShipmentCostView.as_view(),        name="staff-shipment-cost"),
    path("messages/",                 StaffMessageListView.as_view(),               name="staff-messages"),
    path("messages/<int:pk>/reply/",  StaffMessageReplyView.as_view(),              name="staff-message-reply"),
    path("payments/",                 StaffPaymentListView.as_view(),               name="staff-payments"),
]
