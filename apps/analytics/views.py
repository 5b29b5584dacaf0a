"""Dashboard statistics views."""

from drf_spectacular.utils import extend_schema
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.authentication.permissions import IsAdmin, IsStaffOrAdmin

from .service import DashboardStatsService

stats_service = DashboardStatsService()


@extend_schema(tags=["Dashboard"], summary="Admin dashboard: metrics, charts, recent activity")
class DashboardStatsView(APIView):
    permission_classes = [IsAdmin]

    def get(self, request):
        return Response({"status": "success", "data": stats_service.get()})


@extend_schema(tags=["Staff Dashboard"], summary="My assigned, pending and delivered-today counts")
class StaffStatsView(APIView):
    permission_classes = [IsStaffOrAdmin]

    def get(self, request):
        return Response({"status": "success", "data": stats_service.staff_overview(request.user)})
