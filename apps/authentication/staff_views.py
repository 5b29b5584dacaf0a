"""Admin management of staff and customer accounts."""

import logging

from django.db.models import Count, Q
from django.shortcuts import get_object_or_404
from drf_spectacular.utils import extend_schema
from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import User
from .permissions import IsAdmin
from .serializers import StaffBriefSerializer, StaffCreateSerializer, StaffUpdateSerializer, UserSerializer
from .views import identity_service

logger = logging.getLogger("bongoexpress.auth")

ALL = "All"


def filter_accounts(qs, params):
    """`search` matches name or email; `status` and `branch` are exact ("All" = no filter)."""
    search = params.get("search", "").strip()
    if search:
        qs = qs.filter(Q(name__icontains=search) | Q(email__icontains=search))
    for field in ("status", "branch"):
        value = params.get(field)
        if value and value != ALL:
            qs = qs.filter(**{field: value})
    return qs


# ── /api/staff/ ───────────────────────────────────────────────────────────────
@extend_schema(tags=["Staff"], summary="List or create staff accounts")
class StaffListCreateView(generics.ListAPIView):
    serializer_class   = UserSerializer
    permission_classes = [IsAdmin]
    results_key        = "staff"

    def get_queryset(self):
        return filter_accounts(User.objects.filter(role=User.Role.STAFF), self.request.query_params)

    @extend_schema(request=StaffCreateSerializer)
    def post(self, request):
        ser = StaffCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        staff = identity_service.create_user(role=User.Role.STAFF, **ser.validated_data)
        logger.info("Admin %s created staff %s", request.user.pk, staff.pk)
        return Response(
            {"status": "success", "data": {"staff": UserSerializer(staff).data}},
            status=status.HTTP_201_CREATED,
        )


@extend_schema(tags=["Staff"], summary="Update or delete a staff account")
class StaffDetailView(APIView):
    permission_classes = [IsAdmin]

    def get_object(self, pk):
        return get_object_or_404(User, pk=pk, role=User.Role.STAFF)

    @extend_schema(request=StaffUpdateSerializer)
    def put(self, request, pk):
        staff = self.get_object(pk)
        ser = StaffUpdateSerializer(staff, data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        ser.save()
        return Response({"status": "success", "data": {"staff": UserSerializer(staff).data}})

    def delete(self, request, pk):
        staff = self.get_object(pk)
        staff.delete()
        logger.info("Admin %s deleted staff %s", request.user.pk, pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(tags=["Staff"], summary="Staff counts by status")
class StaffSummaryView(APIView):
    permission_classes = [IsAdmin]

    def get(self, request):
        counts = User.objects.filter(role=User.Role.STAFF).aggregate(
            total=Count("id"),
            active=Count("id", filter=Q(status=User.Status.ACTIVE)),
            inactive=Count("id", filter=Q(status=User.Status.INACTIVE)),
            idle=Count("id", filter=Q(status=User.Status.IDLE)),
        )
        return Response({"status": "success", "data": counts})


@extend_schema(tags=["Staff"], summary="Staff id/name pairs for assignment pickers")
class StaffBriefListView(APIView):
    permission_classes = [IsAdmin]

    def get(self, request):
        qs = User.objects.filter(role=User.Role.STAFF).order_by("name")
        return Response({"status": "success", "data": {"staff": StaffBriefSerializer(qs, many=True).data}})


# ── /api/customers/ ───────────────────────────────────────────────────────────
@extend_schema(tags=["Customers"], summary="List customer accounts")
class CustomerListView(generics.ListAPIView):
    serializer_class   = UserSerializer
    permission_classes = [IsAdmin]
    results_key        = "customers"

    def get_queryset(self):
        return filter_accounts(User.objects.filter(role=User.Role.CUSTOMER), self.request.query_params)


@extend_schema(tags=["Customers"], summary="Delete a customer account")
class CustomerDetailView(APIView):
    permission_classes = [IsAdmin]

    def get(self, request, pk):
        customer = get_object_or_404(User, pk=pk, role=User.Role.CUSTOMER)
        return Response({"status": "success", "data": {"customer": UserSerializer(customer).data}})

    def delete(self, request, pk):
        customer = get_object_or_404(User, pk=pk, role=User.Role.CUSTOMER)
        customer.delete()
        logger.info("Admin %s deleted customer %s", request.user.pk, pk)
        return Response(status=status.HTTP_204_NO_CONTENT)
