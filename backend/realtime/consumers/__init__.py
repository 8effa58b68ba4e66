"""Realtime consumers for WebSocket communication."""

from .base import BaseConsumer
from .listing_consumer import RideListingConsumer

__all__ = [
    "BaseConsumer",
    "RideListingConsumer",
]
