"""Process-wide owner of the single chat channel."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable

from chat_sync.application.exceptions import NotConnectedError
from chat_sync.application.ports.channel import Channel, EventHandler
from chat_sync.domain.value_objects.enums import ConnectionState
from chat_sync.infrastructure.channel.protocol import CONNECT, DISCONNECT

logger = logging.getLogger(__name__)

ChannelFactory = Callable[[], Channel]


class ConnectionManager:
    """Lazily creates one channel, binds subscriptions, and routes inbound events.

    Every subscription is bound to the channel before it connects, so no
    response to an outbound emission can arrive unobserved.
    """

    def __init__(self, channel_factory: ChannelFactory, url: str) -> None:
        self._channel_factory = channel_factory
        self._url = url
        self._channel: Channel | None = None
        self._handlers: dict[str, list[EventHandler]] = {}
        self._state = ConnectionState.UNINITIALIZED
        self._lock = asyncio.Lock()
        self.subscribe(CONNECT, self._on_connect)
        self.subscribe(DISCONNECT, self._on_disconnect)

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def connected(self) -> bool:
        return self._channel is not None and self._channel.connected

    def subscribe(self, event: str, handler: EventHandler) -> None:
        handlers = self._handlers.get(event)
        if handlers is None:
            handlers = self._handlers[event] = []
            if self._channel is not None:
                self._channel.on(event, self._dispatcher(event))
        handlers.append(handler)

    async def ensure_connected(self) -> Channel:
        async with self._lock:
            if self._channel is None:
                channel = self._channel_factory()
                for event in self._handlers:
                    channel.on(event, self._dispatcher(event))
                self._channel = channel
                logger.info("Channel created for %s", self._url)
            if not self._channel.connected and self._state == ConnectionState.UNINITIALIZED:
                try:
                    await self._channel.connect(self._url)
                except Exception as exc:
                    logger.exception("Failed to connect to %s", self._url)
                    raise NotConnectedError(f"Could not connect to {self._url}") from exc
                if self._channel.connected:
                    self._state = ConnectionState.CONNECTED
            return self._channel

    async def emit(self, event: str, payload: Any) -> bool:
        """Send a named event. Returns False (and logs) instead of raising."""
        if self._channel is None:
            logger.error("Cannot emit %s: channel not created", event)
            return False
        if not self._channel.connected:
            logger.error("Cannot emit %s: channel not connected", event)
            return False
        try:
            await self._channel.emit(event, payload)
        except Exception:
            logger.exception("Failed to emit %s", event)
            return False
        logger.debug("Emitted %s", event)
        return True

    async def close(self) -> None:
        if self._channel is not None and self._channel.connected:
            await self._channel.disconnect()
        if self._state == ConnectionState.CONNECTED:
            self._state = ConnectionState.DISCONNECTED

    def _dispatcher(self, event: str) -> EventHandler:
        async def dispatch(*args: Any) -> None:
            for handler in list(self._handlers.get(event, ())):
                try:
                    await handler(*args)
                except Exception:
                    logger.exception("Error handling inbound %s", event)

        return dispatch

    async def _on_connect(self, *_args: Any) -> None:
        self._state = ConnectionState.CONNECTED
        logger.info("Channel connected")

    async def _on_disconnect(self, *_args: Any) -> None:
        self._state = ConnectionState.DISCONNECTED
        logger.warning("Channel disconnected")
