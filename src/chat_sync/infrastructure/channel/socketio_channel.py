"""python-socketio client adapter for the Channel port."""
from __future__ import annotations

import logging
from typing import Any

import socketio
from socketio.exceptions import ConnectionError as SocketIOConnectionError

from chat_sync.application.ports.channel import EventHandler

logger = logging.getLogger(__name__)


class SocketIOChannel:
    """Implements application.ports.channel.Channel."""

    def __init__(
        self,
        *,
        transports: list[str] | None = None,
        reconnection: bool = True,
        reconnection_delay: float = 1.0,
        client: socketio.AsyncClient | None = None,
    ) -> None:
        self._client = client or socketio.AsyncClient(
            reconnection=reconnection,
            reconnection_delay=reconnection_delay,
        )
        self._transports = transports
        self._reconnection = reconnection

    @property
    def connected(self) -> bool:
        return bool(self._client.connected)

    async def connect(self, url: str) -> None:
        try:
            await self._client.connect(url, transports=self._transports, retry=self._reconnection)
        except SocketIOConnectionError:
            # Release the transport session left open by the failed attempt.
            try:
                await self._client.disconnect()
            except Exception:
                logger.debug("Cleanup after failed connect raised", exc_info=True)
            raise
        logger.info("Socket.IO connected to %s (sid=%s)", url, self._client.sid)

    async def disconnect(self) -> None:
        await self._client.disconnect()
        logger.info("Socket.IO disconnected")

    async def emit(self, event: str, data: Any) -> None:
        await self._client.emit(event, data)

    def on(self, event: str, handler: EventHandler) -> None:
        self._client.on(event, handler)
