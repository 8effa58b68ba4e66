from unittest.mock import patch

from django.test import TestCase
from rest_framework.test import APIClient


class HealthCheckTests(TestCase):
    def setUp(self):
        self.client = APIClient()

    @patch("rideshare_backend.views.redis.Redis")
    def test_healthy(self, mock_redis):
        mock_redis.from_url.return_value.ping.return_value = True

        response = self.client.get("/health/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["status"], "healthy")
        self.assertEqual(response.data["services"]["database"], "healthy")
        self.assertEqual(response.data["services"]["claim_cache"], "healthy")

    @patch("rideshare_backend.views.redis.Redis")
    def test_redis_down(self, mock_redis):
        mock_redis.from_url.return_value.ping.side_effect = ConnectionError("refused")

        response = self.client.get("/health/")

        self.assertEqual(response.status_code, 503)
        self.assertTrue(response.data["services"]["redis"].startswith("unhealthy"))
