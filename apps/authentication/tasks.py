"""Celery tasks for account housekeeping."""

import logging
from celery import shared_task

logger = logging.getLogger("bongoexpress.auth")


@shared_task
def purge_expired_reset_tokens():
    """Cron task: clear password reset tokens whose expiry has passed."""
    from apps.authentication.service import expired_reset_tokens

    cleared = expired_reset_tokens().update(password_reset_token="", password_reset_expires=None)
    logger.info("Cleared %d expired password reset tokens", cleared)
    return cleared
