from unittest.mock import patch

from asgiref.sync import async_to_sync, sync_to_async
from channels.layers import get_channel_layer
from channels.routing import URLRouter
from channels.testing import WebsocketCommunicator
from django.test import SimpleTestCase

from .notifications import listing_group, notify_listing_event, notify_ride_claimed, notify_ride_posted
from .routing import websocket_urlpatterns

application = URLRouter(websocket_urlpatterns)


class RideListingConsumerTests(SimpleTestCase):
    def tearDown(self):
        async_to_sync(get_channel_layer().flush)()

    def test_connect_to_vehicle_feed(self):
        async def scenario():
            communicator = WebsocketCommunicator(application, "/ws/rides/car/")
            connected, _ = await communicator.connect()
            self.assertTrue(connected)

            message = await communicator.receive_json_from()
            self.assertEqual(message["type"], "connection_established")
            self.assertEqual(message["vehicle"], "car")

            await communicator.send_json_to({"type": "ping"})
            self.assertEqual(await communicator.receive_json_from(), {"type": "pong"})

            await communicator.send_json_to({"type": "subscribe"})
            error = await communicator.receive_json_from()
            self.assertEqual(error["type"], "error")

            await communicator.disconnect()

        async_to_sync(scenario)()

    def test_unknown_vehicle_rejected(self):
        async def scenario():
            communicator = WebsocketCommunicator(application, "/ws/rides/boat/")
            connected, _ = await communicator.connect()
            self.assertFalse(connected)

        async_to_sync(scenario)()

    def test_posted_and_claimed_events_reach_listeners(self):
        async def scenario():
            car = WebsocketCommunicator(application, "/ws/rides/car/")
            bike = WebsocketCommunicator(application, "/ws/rides/bike/")
            await car.connect()
            await bike.connect()
            await car.receive_json_from()
            await bike.receive_json_from()

            sent = await sync_to_async(notify_ride_posted)({"id": "abc123", "vehicle": "car"})
            self.assertTrue(sent)
            posted = await car.receive_json_from()
            self.assertEqual(posted["type"], "ride_posted")
            self.assertEqual(posted["ride"]["id"], "abc123")

            await sync_to_async(notify_ride_claimed)("abc123", "car")
            claimed = await car.receive_json_from()
            self.assertEqual(claimed["type"], "ride_claimed")
            self.assertEqual(claimed["ride_id"], "abc123")

            # Other vehicle feeds hear nothing
            self.assertTrue(await bike.receive_nothing())

            await car.disconnect()
            await bike.disconnect()

        async_to_sync(scenario)()


class NotificationTests(SimpleTestCase):
    def test_listing_group_name(self):
        self.assertEqual(listing_group("auto"), "rides_auto")

    @patch("realtime.notifications.get_channel_layer", side_effect=RuntimeError("redis down"))
    def test_broadcast_failure_is_not_raised(self, mock_layer):
        self.assertFalse(notify_listing_event("ride_claimed", "car", ride_id="abc123"))

    @patch("realtime.notifications.get_channel_layer", return_value=None)
    def test_missing_channel_layer(self, mock_layer):
        self.assertFalse(notify_ride_claimed("abc123", "car"))
