"""
Notification helpers for pushing ride listing events to connected clients.

Broadcasting is best-effort: a failure is logged and reported through the
return value, never raised into the HTTP request that triggered it.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer

logger = logging.getLogger(__name__)


def listing_group(vehicle: str) -> str:
    """Channel group of everyone browsing one vehicle kind."""
    return f"rides_{vehicle}"


def notify_listing_event(event_type: str, vehicle: str, **payload: Any) -> bool:
    """
    Send an event to every client watching a vehicle's listings.

    Args:
        event_type: "ride_posted" or "ride_claimed" (consumer handler name)
        vehicle: bike / car / auto
        **payload: extra keys for the event (ride, ride_id, message)

    Returns:
        True if the event was handed to the channel layer
    """
    try:
        channel_layer = get_channel_layer()
        if channel_layer is None:
            logger.warning("No channel layer configured; %s not broadcast", event_type)
            return False
        message: Dict[str, Any] = {"type": event_type, **payload}
        async_to_sync(channel_layer.group_send)(listing_group(vehicle), message)
        return True
    except Exception:
        logger.exception("Failed to broadcast %s to %s listings", event_type, vehicle)
        return False


def notify_ride_posted(ride_data: Dict[str, Any]) -> bool:
    return notify_listing_event("ride_posted", ride_data["vehicle"], ride=dict(ride_data))


def notify_ride_claimed(ride_id: str, vehicle: str) -> bool:
    return notify_listing_event(
        "ride_claimed",
        vehicle,
        ride_id=ride_id,
        message="This ride has been booked.",
    )
