"""Shipment API views: admin management, guest booking, staff dashboard."""

import logging

from drf_spectacular.utils import extend_schema
from rest_framework import generics, permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.analytics import stats
from apps.authentication.models import User
from apps.authentication.permissions import IsAdmin, IsStaffOrAdmin
from apps.payments.serializers import PaymentSerializer

from . import serializers as sz
from .models import Shipment
from .service import ShipmentService

logger = logging.getLogger("bongoexpress.shipments")
shipment_service = ShipmentService()


def shipment_response(shipment, http_status=status.HTTP_200_OK, **extra):
    data = {"shipment": sz.ShipmentSerializer(shipment).data, **extra}
    return Response({"status": "success", "data": data}, status=http_status)


# ── GET/POST /api/shipments/ ──────────────────────────────────────────────────
@extend_schema(tags=["Shipments"], summary="List shipments (search, status, branch, staff, date) or create one")
class ShipmentListCreateView(generics.ListAPIView):
    serializer_class   = sz.ShipmentSerializer
    permission_classes = [IsAdmin]
    results_key        = "shipments"

    def get_queryset(self):
        return shipment_service.list_shipments(self.request.query_params).prefetch_related("history")

    @extend_schema(request=sz.ShipmentCreateSerializer)
    def post(self, request):
        ser = sz.ShipmentCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        shipment = shipment_service.create_shipment(ser.validated_data, creator=request.user)
        return shipment_response(shipment, status.HTTP_201_CREATED)


# ── GET /api/shipments/summary/ ───────────────────────────────────────────────
@extend_schema(tags=["Shipments"], summary="Shipment counts: total, pending, in transit, delivered")
class ShipmentSummaryView(APIView):
    permission_classes = [IsAdmin]

    def get(self, request):
        rows = Shipment.objects.values("status")
        return Response({"status": "success", "data": stats.shipment_summary(rows)})


# ── PUT/DELETE /api/shipments/{id}/ ───────────────────────────────────────────
@extend_schema(tags=["Shipments"], summary="Edit or delete a shipment")
class ShipmentDetailView(APIView):
    permission_classes = [IsAdmin]

    def get(self, request, pk):
        return shipment_response(shipment_service.get_shipment(pk, request.user))

    @extend_schema(request=sz.ShipmentUpdateSerializer)
    def put(self, request, pk):
        ser = sz.ShipmentUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        shipment = shipment_service.update_shipment(pk, ser.validated_data, actor=request.user)
        return shipment_response(shipment_service.get_shipment(shipment.pk, request.user))

    def delete(self, request, pk):
        shipment_service.delete_shipment(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


# ── POST /api/shipments/guest-booking/ ────────────────────────────────────────
@extend_schema(tags=["Shipments"], summary="Book a shipment without an account",
               request=sz.GuestBookingSerializer)
class GuestBookingView(APIView):
    permission_classes     = [permissions.AllowAny]
    authentication_classes = []
    throttle_scope         = "guest_booking"

    def post(self, request):
        ser = sz.GuestBookingSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        shipment = shipment_service.create_shipment(ser.validated_data)
        return shipment_response(shipment, status.HTTP_201_CREATED)


# ── Staff dashboard: /api/staff-dashboard/shipments/ ──────────────────────────
@extend_schema(tags=["Staff Dashboard"], summary="Shipments assigned to me, or book one")
class StaffShipmentListCreateView(generics.ListAPIView):
    serializer_class   = sz.ShipmentSerializer
    permission_classes = [IsStaffOrAdmin]
    results_key        = "shipments"

    def get_queryset(self):
        # admins see their own assignments here too
        params = self.request.query_params.copy()
        params["staff"] = str(self.request.user.pk)
        return shipment_service.list_shipments(params).prefetch_related("history")

    @extend_schema(request=sz.ShipmentCreateSerializer)
    def post(self, request):
        ser = sz.ShipmentCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        details = dict(ser.validated_data)
        # staff book onto themselves; admins pick (or leave) the assignee
        if request.user.role == User.Role.STAFF:
            details["staff"] = request.user
        shipment = shipment_service.create_shipment(details, creator=request.user)
        payment = shipment.payments.first()
        return shipment_response(
            shipment, status.HTTP_201_CREATED,
            payment=PaymentSerializer(payment).data,
        )


@extend_schema(tags=["Staff Dashboard"], summary="View or update the status of an assigned shipment")
class StaffShipmentDetailView(APIView):
    permission_classes = [IsStaffOrAdmin]

    def get(self, request, pk):
        return shipment_response(shipment_service.get_shipment(pk, request.user))

    @extend_schema(request=sz.StatusUpdateSerializer)
    def patch(self, request, pk):
        ser = sz.StatusUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        d = ser.validated_data
        shipment = shipment_service.update_status(pk, d["status"], d.get("location"), actor=request.user)
        return shipment_response(shipment_service.get_shipment(shipment.pk, request.user))


@extend_schema(tags=["Staff Dashboard"], summary="Change a shipment's cost (payment amount follows)",
               request=sz.CostUpdateSerializer)
class StaffShipmentCostView(APIView):
    permission_classes = [IsStaffOrAdmin]

    def patch(self, request, pk):
        ser = sz.CostUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        shipment = shipment_service.update_cost(pk, ser.validated_data["cost"], actor=request.user)
        return Response({
            "status":  "success",
            "message": "Shipment cost updated successfully",
            "data":    {"shipment": sz.ShipmentSerializer(shipment).data},
        })
