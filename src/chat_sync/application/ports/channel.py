from __future__ import annotations

from typing import Any, Awaitable, Callable, Protocol

EventHandler = Callable[..., Awaitable[None]]


class Channel(Protocol):
    """Persistent bidirectional named-event connection."""

    @property
    def connected(self) -> bool: ...

    async def connect(self, url: str) -> None: ...

    async def disconnect(self) -> None: ...

    async def emit(self, event: str, data: Any) -> None: ...

    def on(self, event: str, handler: EventHandler) -> None: ...
