import os

import redis
from django.conf import settings
from django.contrib.sessions.models import Session
from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response
from channels.layers import get_channel_layer

from rides.models import RidePosting
from rides.tasks import purge_stale_postings_task


def _check_database():
    RidePosting.objects.exists()


def _check_claim_cache():
    # "Your Rides" lives in the session table
    if settings.SESSION_ENGINE == "django.contrib.sessions.backends.db":
        Session.objects.exists()


def _check_redis():
    client = redis.Redis.from_url(
        os.getenv("REDIS_URL", "redis://localhost:6379/0"),
        socket_timeout=3,
    )
    client.ping()


def _check_channels():
    if get_channel_layer() is None:
        raise RuntimeError("no channel layer")


def _check_celery():
    if purge_stale_postings_task.name not in purge_stale_postings_task.app.tasks:
        raise RuntimeError("task not registered")


HEALTH_CHECKS = (
    ("database", _check_database),
    ("claim_cache", _check_claim_cache),
    ("redis", _check_redis),
    ("channels", _check_channels),
    ("celery", _check_celery),
)


@api_view(["GET"])
def health_check(request):
    """Health check endpoint for monitoring system status"""
    services = {}
    healthy = True

    for name, check in HEALTH_CHECKS:
        try:
            check()
            services[name] = "healthy"
        except Exception as e:
            services[name] = f"unhealthy: {e}"
            healthy = False

    return Response(
        {
            "status": "healthy" if healthy else "unhealthy",
            "timestamp": timezone.now().isoformat(),
            "services": services,
        },
        status=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
    )
