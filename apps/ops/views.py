"""Liveness / readiness check for load balancers and uptime probes."""

import logging

from django.core.cache import cache
from django.db import DatabaseError, connection
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

logger = logging.getLogger("bongoexpress.ops")


# ── GET /api/health/ ──────────────────────────────────────────────────────────
@extend_schema(tags=["Ops"], summary="Health check: database and cache")
class HealthView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request):
        checks = {}

        try:
            with connection.cursor() as cur:
                cur.execute("SELECT 1")
            checks["database"] = "ok"
        except DatabaseError as exc:
            logger.error("Health check: database unreachable: %s", exc)
            checks["database"] = "error"

        try:
            cache.set("healthcheck", "1", 5)
            checks["cache"] = "ok" if cache.get("healthcheck") == "1" else "miss"
        except Exception as exc:  # cache backends raise their own client errors
            logger.error("Health check: cache unreachable: %s", exc)
            checks["cache"] = "error"

        healthy = all(value == "ok" for value in checks.values())
        return Response(
            {"status": "success" if healthy else "error", "data": {"checks": checks}},
            status=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        )
