"""
Realtime app for live ride listing updates over WebSockets.

Clients browsing a vehicle's listings connect to ws/rides/<vehicle>/ and
are told when rides are shared or booked, so booked rides disappear from
every open listing, not only from the booker's.

Key Components:
    - consumers/: WebSocket consumers (listing feed)
    - notifications.py: helpers that push listing events to the channel layer
    - routing.py: WebSocket URL patterns
"""
