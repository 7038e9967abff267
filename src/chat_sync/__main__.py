"""Entrypoint: python -m chat_sync"""
from __future__ import annotations

import asyncio
import logging

from chat_sync.app import ChatSyncClient, create_client
from chat_sync.application.exceptions import NotConnectedError
from chat_sync.config import settings
from chat_sync.infrastructure.identity.settings_provider import SettingsIdentityProvider

logger = logging.getLogger(__name__)


async def run(client: ChatSyncClient | None = None) -> None:
    client = client or create_client(SettingsIdentityProvider(settings))
    try:
        try:
            await client.start()
        except NotConnectedError as exc:
            logger.error("Chat server unreachable, exiting: %s", exc.detail)
            return
        logger.info(
            "Chat sync running against %s (registered=%s)",
            settings.CHAT_SERVER_URL,
            client.registrar.is_registered,
        )
        await asyncio.Event().wait()
    finally:
        await client.close()


def main() -> None:
    logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")


if __name__ == "__main__":
    main()
