"""Public shipment tracking."""

from drf_spectacular.utils import extend_schema
from rest_framework import permissions
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.shipments.serializers import PublicShipmentSerializer
from apps.shipments.views import shipment_service


@extend_schema(tags=["Tracking"], summary="Look up a shipment by tracking number")
class TrackShipmentView(APIView):
    """GET /api/track/{tracking_id}/: case-insensitive exact match, no login needed."""
    permission_classes     = [permissions.AllowAny]
    authentication_classes = []

    def get(self, request, tracking_id):
        shipment = shipment_service.track(tracking_id)
        return Response({"status": "success", "data": {"shipment": PublicShipmentSerializer(shipment).data}})
