from django.urls import path

from . import views

urlpatterns = [
    path("",                views.ShipmentListCreateView.as_view(), name="shipment-list"),
    path("summary/",        views.ShipmentSummaryView.as_view(),    name="shipment-summary"),
    path("guest-booking/",  views.GuestBookingView.as_view(),       name="guest-booking"),
    path("<uuid:pk>/",      views.ShipmentDetailView.as_view(),     name="shipment-detail"),
]
