from django.conf import settings
from django.core.management.base import BaseCommand
from rides.services.stale_postings import find_stale_postings, purge_stale_postings
import logging

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Delete ride postings that nobody booked within the retention window."

    def add_arguments(self, parser):
        parser.add_argument(
            "--days",
            type=int,
            default=settings.RIDESHARE["STALE_POSTING_DAYS"],
            help="Delete postings older than this many days (default: STALE_POSTING_DAYS).",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show what would be deleted without actually deleting.",
        )

    def handle(self, *args, **options):
        days = options["days"]
        dry_run = options["dry_run"]

        if dry_run:
            count = find_stale_postings(days).count()
            self.stdout.write(
                self.style.WARNING(
                    f"DRY RUN: Would delete {count} ride postings older than {days} days."
                )
            )
            return

        count = purge_stale_postings(days=days)
        logger.info("Cleaned up %s stale ride postings", count)
        self.stdout.write(
            self.style.SUCCESS(
                f"Deleted {count} ride postings older than {days} days."
            )
        )
