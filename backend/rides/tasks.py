"""Celery tasks for ride-related background processing."""

from celery import shared_task
import logging

logger = logging.getLogger(__name__)


@shared_task
def purge_stale_postings_task(days=None):
    """
    Remove ride postings that nobody booked within the retention window.

    Scheduled daily by celery beat (see rideshare_backend/celery.py).
    """
    from rides.services.stale_postings import purge_stale_postings

    try:
        deleted = purge_stale_postings(days=days)
    except Exception:
        logger.exception("Error purging stale ride postings")
        raise

    logger.info("Purged %s stale ride posting(s)", deleted)
    return deleted
