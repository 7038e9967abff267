from __future__ import annotations

from dataclasses import dataclass

from chat_sync.domain.entities.identity import Identity
from chat_sync.domain.value_objects.ids import ConversationId, MessageId


@dataclass(frozen=True, slots=True)
class Message:
    message_id: MessageId
    conversation_id: ConversationId
    sender: Identity
    content: str
    timestamp: int  # epoch milliseconds, logical send time
    is_received: bool = False
    is_read: bool = False
    is_deleted: bool = False
