"""Live feed of one vehicle kind's ride listings."""

import logging

from rides.models import RidePosting
from ..notifications import listing_group
from .base import BaseConsumer

logger = logging.getLogger(__name__)

VEHICLE_KINDS = {kind for kind, _ in RidePosting.VEHICLE_CHOICES}


class RideListingConsumer(BaseConsumer):
    """
    WebSocket consumer for the "Available bikes/cars/autos" pages.

    Relays server-side events to the client:
        - ride_posted: a new ride was shared
        - ride_claimed: a ride was booked and left the listings
    """

    def get_groups(self):
        self.vehicle = self.scope["url_route"]["kwargs"].get("vehicle")
        if self.vehicle not in VEHICLE_KINDS:
            logger.info("Rejecting listing socket for unknown vehicle %r", self.vehicle)
            return None
        return [listing_group(self.vehicle)]

    async def on_connect(self):
        await self.send_event(
            "connection_established",
            vehicle=self.vehicle,
            message=f"Listening for {self.vehicle} rides",
        )

    async def on_ping(self, data):
        await self.send_event("pong")

    # Channel layer events

    async def ride_posted(self, event):
        await self.send_event("ride_posted", ride=event.get("ride", {}))

    async def ride_claimed(self, event):
        """Clients drop the ride from their listing."""
        await self.send_event(
            "ride_claimed",
            ride_id=event.get("ride_id"),
            message=event.get("message", "This ride has been booked."),
        )
