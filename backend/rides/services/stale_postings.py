"""
Housekeeping for ride postings nobody booked.

Postings are only ever removed by a booking, so rides whose poster has long
since left would otherwise stay listed forever.
"""

from datetime import timedelta
from typing import Optional

from django.conf import settings
from django.db import close_old_connections
from django.utils import timezone

from rides.models import RidePosting


def find_stale_postings(days: Optional[int] = None):
    """Postings created more than `days` days ago."""
    if days is None:
        days = settings.RIDESHARE["STALE_POSTING_DAYS"]
    cutoff = timezone.now() - timedelta(days=days)
    return RidePosting.objects.filter(created_at__lt=cutoff)


def purge_stale_postings(days: Optional[int] = None, dry_run: bool = False) -> int:
    """
    Delete stale postings.

    Returns the number of postings deleted (or that would be, on a dry run).
    """
    stale = find_stale_postings(days)
    count = stale.count()
    if not dry_run and count:
        stale.delete()

    # Close stale DB connections for long-running workers
    close_old_connections()
    return count
