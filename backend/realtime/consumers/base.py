"""Base WebSocket consumer for the realtime feeds."""

import logging
from typing import Any, Dict, Iterable, Optional

from channels.generic.websocket import AsyncJsonWebsocketConsumer

logger = logging.getLogger(__name__)


class BaseConsumer(AsyncJsonWebsocketConsumer):
    """
    Joins the groups a subclass asks for and dispatches client messages.

    Subclasses override:
        - get_groups(): groups to join, or None to refuse the socket
        - on_<type>(data) coroutines for each client message type they accept
    """

    async def connect(self):
        self.joined_groups = set()

        groups = self.get_groups()
        if groups is None:
            await self.close()
            return

        for group in groups:
            await self.channel_layer.group_add(group, self.channel_name)
            self.joined_groups.add(group)

        await self.accept()
        await self.on_connect()

    def get_groups(self) -> Optional[Iterable[str]]:
        return []

    async def on_connect(self):
        await self.send_event("connection_established")

    async def disconnect(self, close_code):
        for group in list(getattr(self, "joined_groups", ())):
            try:
                await self.channel_layer.group_discard(group, self.channel_name)
            except Exception:
                logger.exception("Could not leave %s for channel %s", group, self.channel_name)
            self.joined_groups.discard(group)

    async def receive_json(self, content: Dict[str, Any], **kwargs):
        msg_type = content.get("type")
        if not msg_type:
            await self.send_error("Message type is required")
            return

        handler = getattr(self, f"on_{msg_type}", None)
        if handler is None or msg_type == "connect":
            await self.send_error(f"Unknown message type: {msg_type}")
            return

        try:
            await handler(content)
        except Exception:
            logger.exception("Error handling message type %s", msg_type)
            await self.send_error(f"Error processing {msg_type}")

    async def send_event(self, event_type: str, **payload: Any):
        await self.send_json({"type": event_type, **payload})

    async def send_error(self, message: str):
        await self.send_event("error", message=message)
