"""Celery tasks for dashboard statistics."""

import logging
from celery import shared_task

logger = logging.getLogger("bongoexpress.analytics")


@shared_task
def refresh_dashboard_stats():
    """Beat task: recompute the admin dashboard and store it in the cache."""
    from apps.analytics.service import DashboardStatsService

    data = DashboardStatsService().refresh()
    return data["metrics"]["total_shipments"]
