from __future__ import annotations

import asyncio
import logging
from typing import Callable

logger = logging.getLogger(__name__)


class Deadline:
    """Calls ``on_expire`` unless cancelled within ``seconds``. ``None`` disables it."""

    def __init__(self, seconds: float | None, on_expire: Callable[[], None], name: str) -> None:
        self._handle: asyncio.TimerHandle | None = None
        if seconds is None or seconds <= 0:
            return
        self._on_expire = on_expire
        self._name = name
        self._handle = asyncio.get_running_loop().call_later(seconds, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        logger.warning("No response for %s before deadline", self._name)
        self._on_expire()
