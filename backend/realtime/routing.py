"""WebSocket URL routing for the realtime app."""

from django.urls import re_path

from .consumers.listing_consumer import RideListingConsumer

websocket_urlpatterns = [
    # Live listing feed per vehicle kind
    # URL: ws://localhost:8000/ws/rides/<bike|car|auto>/
    re_path(
        r"ws/rides/(?P<vehicle>\w+)/$",
        RideListingConsumer.as_asgi(),
        name="ride-listing-ws"
    ),
]
