from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Mapping

from chat_sync.domain.entities.conversation import Conversation
from chat_sync.domain.entities.message import Message
from chat_sync.domain.value_objects.enums import LoadState
from chat_sync.domain.value_objects.ids import ConversationId, UserId
from chat_sync.infrastructure.channel.manager import ConnectionManager
from chat_sync.infrastructure.channel.mappers import (
    message_to_payload,
    parse_conversation,
    parse_messages_list,
)
from chat_sync.infrastructure.channel.protocol import (
    LIST_MESSAGES,
    RECEIVE_MESSAGE,
    ListMessagesRequest,
)
from chat_sync.services._deadline import Deadline

logger = logging.getLogger(__name__)


class ConversationStore:
    """Per-conversation message history plus the selected conversation.

    Both a fetch response and a push replace the stored conversation
    wholesale, and whichever arrives last wins. A push that lands while a
    fetch for the same conversation is in flight is lost when the older
    fetch response is applied after it.
    """

    def __init__(self, connection: ConnectionManager, request_timeout: float | None = None) -> None:
        self._connection = connection
        self._request_timeout = request_timeout
        self._conversations: dict[ConversationId, Conversation] = {}
        self._load_states: dict[ConversationId, LoadState] = {}
        self._deadlines: dict[ConversationId, Deadline] = {}
        self._selected: ConversationId | None = None

    @property
    def conversations(self) -> Mapping[ConversationId, Conversation]:
        return MappingProxyType(self._conversations)

    @property
    def selected_conversation_id(self) -> ConversationId | None:
        return self._selected

    @property
    def displayed_messages(self) -> tuple[Message, ...]:
        if self._selected is None:
            return ()
        conversation = self._conversations.get(self._selected)
        return conversation.messages if conversation is not None else ()

    @property
    def is_loading(self) -> bool:
        return any(state == LoadState.LOADING for state in self._load_states.values())

    def get(self, conversation_id: ConversationId) -> Conversation | None:
        return self._conversations.get(conversation_id)

    def load_state(self, conversation_id: ConversationId) -> LoadState:
        return self._load_states.get(conversation_id, LoadState.IDLE)

    def select(self, conversation_id: ConversationId | None) -> None:
        self._selected = conversation_id

    async def fetch(self, conversation_id: ConversationId, user_id: UserId) -> bool:
        self._selected = conversation_id
        self._load_states[conversation_id] = LoadState.LOADING
        request = ListMessagesRequest(room_id=conversation_id, user_id=user_id)
        sent = await self._connection.emit(LIST_MESSAGES, request.to_wire())
        if not sent:
            self._load_states[conversation_id] = LoadState.FAILED
            return False
        self._arm_deadline(conversation_id)
        return True

    async def on_messages_list(self, payload: Any) -> Conversation:
        conversation = parse_messages_list(payload)
        cid = conversation.conversation_id
        self._clear_deadline(cid)
        if cid not in self._conversations:
            logger.debug("Caching new conversation %s", cid)
        self._conversations[cid] = conversation
        self._load_states[cid] = LoadState.LOADED
        return conversation

    async def on_push(self, payload: Any) -> Conversation:
        conversation = parse_conversation(payload)
        self._conversations[conversation.conversation_id] = conversation
        logger.debug(
            "Push for %s (%d messages)", conversation.conversation_id, len(conversation.messages),
        )

        if not conversation.messages:
            logger.warning("Push for %s carried no messages, nothing to acknowledge", conversation.conversation_id)
            return conversation
        await self._connection.emit(RECEIVE_MESSAGE, message_to_payload(conversation.messages[0]).to_wire())
        return conversation

    def _arm_deadline(self, conversation_id: ConversationId) -> None:
        self._clear_deadline(conversation_id)
        self._deadlines[conversation_id] = Deadline(
            self._request_timeout,
            lambda: self._expire(conversation_id),
            f"{LIST_MESSAGES} {conversation_id}",
        )

    def _clear_deadline(self, conversation_id: ConversationId) -> None:
        deadline = self._deadlines.pop(conversation_id, None)
        if deadline is not None:
            deadline.cancel()

    def _expire(self, conversation_id: ConversationId) -> None:
        self._deadlines.pop(conversation_id, None)
        if self._load_states.get(conversation_id) == LoadState.LOADING:
            self._load_states[conversation_id] = LoadState.FAILED
