"""Celery application for background housekeeping tasks."""

import os

from celery import Celery
from celery.schedules import crontab

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "rideshare_backend.settings.settings")

app = Celery("rideshare_backend")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()

app.conf.beat_schedule = {
    "purge-stale-postings-daily": {
        "task": "rides.tasks.purge_stale_postings_task",
        "schedule": crontab(hour=3, minute=0),
    },
}
