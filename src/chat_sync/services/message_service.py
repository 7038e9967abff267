from __future__ import annotations

import logging
from typing import Iterable

from chat_sync.application.dto.session import SessionContext
from chat_sync.application.exceptions import IdentityUnavailableError
from chat_sync.application.policies.read_receipts import resolve_current_user_id, unread_from_others
from chat_sync.application.ports.clock import Clock, SystemClock, to_epoch_ms
from chat_sync.application.ports.identity import IdentityProvider
from chat_sync.domain.entities.identity import Identity
from chat_sync.domain.entities.message import Message
from chat_sync.domain.value_objects.ids import ConversationId, MessageId
from chat_sync.infrastructure.channel.manager import ConnectionManager
from chat_sync.infrastructure.channel.mappers import identity_to_payload
from chat_sync.infrastructure.channel.protocol import (
    READ_MESSAGES,
    SEND_MESSAGE,
    ReadMessagesRequest,
    SendMessageRequest,
)

logger = logging.getLogger(__name__)


class MessageDispatcher:
    """Outbound sends and read receipts."""

    def __init__(
        self,
        connection: ConnectionManager,
        identity_provider: IdentityProvider | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._connection = connection
        self._identity_provider = identity_provider
        self._clock = clock or SystemClock()

    async def send(
        self,
        conversation_id: ConversationId,
        sender: Identity,
        content: str,
        timestamp: int | None = None,
    ) -> bool:
        """Fire-and-forget. The stored message arrives later with a ``newMessage`` push."""
        request = SendMessageRequest(
            room_id=conversation_id,
            sender=identity_to_payload(sender),
            message=content,
            timestamp=timestamp if timestamp is not None else to_epoch_ms(self._clock.now()),
        )
        return await self._connection.emit(SEND_MESSAGE, request.to_wire())

    async def mark_read(
        self,
        conversation_id: ConversationId,
        candidates: Iterable[Message],
        session: SessionContext,
    ) -> list[MessageId]:
        """Send a read receipt for messages from other participants that are still unread.

        Returns the ids included in the receipt; nothing is emitted when there are none.
        Raises IdentityUnavailableError when the current user cannot be determined.
        """
        try:
            user_id = resolve_current_user_id(session, self._identity_provider)
        except IdentityUnavailableError:
            logger.error("No current user id, read receipt for %s not sent", conversation_id)
            raise

        message_ids = unread_from_others(candidates, user_id)
        if not message_ids:
            return []

        request = ReadMessagesRequest(room_id=conversation_id, unread_messages=list(message_ids))
        sent = await self._connection.emit(READ_MESSAGES, request.to_wire())
        return message_ids if sent else []
