from django.urls import path

from . import views

urlpatterns = [
    path("<str:tracking_id>/", views.TrackShipmentView.as_view(), name="track-shipment"),
]
