"""Payment views: admin ledger and the staff view of their shipments' payments."""

import logging

from django.db import transaction
from django.db.models import Q
from django.shortcuts import get_object_or_404
from drf_spectacular.utils import extend_schema
from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.authentication.permissions import IsAdmin, IsStaffOrAdmin
from apps.payments.models import Payment
from apps.payments.serializers import PaymentCreateSerializer, PaymentSerializer, PaymentStatusSerializer

logger = logging.getLogger("bongoexpress.payments")

ALL = "All"


def filter_payments(qs, params):
    """`search` matches payment id, customer name or phone; `status` is exact ("All" = no filter)."""
    search = params.get("search", "").strip()
    if search:
        qs = qs.filter(
            Q(payment_id__icontains=search)
            | Q(customer__name__icontains=search)
            | Q(customer__phone__icontains=search)
        )
    status_filter = params.get("status")
    if status_filter and status_filter != ALL:
        qs = qs.filter(status=status_filter)
    return qs


# ── GET/POST /api/payments/ ───────────────────────────────────────────────────
@extend_schema(tags=["Payments"], summary="List payments or record one by hand")
class PaymentListCreateView(generics.ListAPIView):
    serializer_class   = PaymentSerializer
    permission_classes = [IsAdmin]
    results_key        = "payments"

    def get_queryset(self):
        qs = Payment.objects.select_related("shipment", "customer")
        return filter_payments(qs, self.request.query_params)

    @extend_schema(request=PaymentCreateSerializer)
    def post(self, request):
        ser = PaymentCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        d = ser.validated_data
        shipment = d["shipment"]

        with transaction.atomic():
            payment = Payment.objects.create(
                shipment = shipment,
                customer = shipment.customer,
                amount   = d.get("amount", shipment.cost),
                method   = d["method"],
                status   = d.get("status", Payment.Status.PENDING),
                **({"transaction_date": d["transaction_date"]} if "transaction_date" in d else {}),
            )
        logger.info("Payment %s recorded for %s by %s", payment.payment_id, shipment.shipment_id, request.user.pk)
        return Response(
            {"status": "success", "data": {"payment": PaymentSerializer(payment).data}},
            status=status.HTTP_201_CREATED,
        )


# ── GET/PATCH /api/payments/{id}/ ─────────────────────────────────────────────
@extend_schema(tags=["Payments"], summary="View a payment or change its status")
class PaymentDetailView(APIView):
    permission_classes = [IsAdmin]

    def get(self, request, pk):
        payment = get_object_or_404(Payment.objects.select_related("shipment", "customer"), pk=pk)
        return Response({"status": "success", "data": {"payment": PaymentSerializer(payment).data}})

    @extend_schema(request=PaymentStatusSerializer)
    def patch(self, request, pk):
        payment = get_object_or_404(Payment, pk=pk)
        ser = PaymentStatusSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        payment.status = ser.validated_data["status"]
        payment.save(update_fields=["status", "updated_at"])
        logger.info("Payment %s marked %s", payment.payment_id, payment.status)
        return Response({"status": "success", "data": {"payment": PaymentSerializer(payment).data}})


# ── GET /api/staff-dashboard/payments/ ────────────────────────────────────────
@extend_schema(tags=["Staff Dashboard"], summary="Payments for shipments assigned to me")
class StaffPaymentListView(generics.ListAPIView):
    serializer_class   = PaymentSerializer
    permission_classes = [IsStaffOrAdmin]
    results_key        = "payments"

    def get_queryset(self):
        qs = Payment.objects.filter(shipment__staff=self.request.user).select_related("shipment", "customer")
        return filter_payments(qs, self.request.query_params)
