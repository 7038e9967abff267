from __future__ import annotations

import logging
from typing import Any, Iterable

from chat_sync.domain.entities.conversation import Conversation, ConversationSummary
from chat_sync.domain.value_objects.enums import LoadState
from chat_sync.domain.value_objects.ids import ConversationId, UserId
from chat_sync.infrastructure.channel.manager import ConnectionManager
from chat_sync.infrastructure.channel.mappers import parse_summaries
from chat_sync.infrastructure.channel.protocol import LIST_CHAT_ROOMS, ListChatsRequest
from chat_sync.services._deadline import Deadline

logger = logging.getLogger(__name__)


def sort_summaries(summaries: Iterable[ConversationSummary]) -> list[ConversationSummary]:
    """Newest first. Equal timestamps keep their incoming order."""
    return sorted(
        summaries,
        key=lambda s: s.latest_message.timestamp if s.latest_message is not None else float("-inf"),
        reverse=True,
    )


class ChatDirectory:
    """Ordered conversation summaries for the current user."""

    def __init__(self, connection: ConnectionManager, request_timeout: float | None = None) -> None:
        self._connection = connection
        self._request_timeout = request_timeout
        self._summaries: list[ConversationSummary] = []
        self._state = LoadState.IDLE
        self._deadline: Deadline | None = None

    @property
    def summaries(self) -> tuple[ConversationSummary, ...]:
        return tuple(self._summaries)

    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def is_loading(self) -> bool:
        return self._state == LoadState.LOADING

    @property
    def is_loaded(self) -> bool:
        return self._state == LoadState.LOADED

    def get(self, conversation_id: ConversationId) -> ConversationSummary | None:
        for summary in self._summaries:
            if summary.conversation_id == conversation_id:
                return summary
        return None

    async def refresh(self, user_id: UserId) -> bool:
        self._state = LoadState.LOADING
        sent = await self._connection.emit(LIST_CHAT_ROOMS, ListChatsRequest(user_id=user_id).to_wire())
        if not sent:
            self._state = LoadState.FAILED
            return False
        self._arm_deadline()
        return True

    async def on_chats_list(self, payload: Any) -> None:
        summaries = parse_summaries(payload)
        self._clear_deadline()
        # TODO: drop the client-side sort once listChatRooms returns newest first
        self._summaries = sort_summaries(summaries)
        self._state = LoadState.LOADED
        logger.info("Chat list loaded (%d conversations)", len(self._summaries))

    async def on_list_chats_error(self, error: Any = None) -> None:
        logger.error("Error listing chats: %s", error)
        self._clear_deadline()
        self._state = LoadState.FAILED

    def observe(self, conversation: Conversation) -> None:
        """Bring the summary for ``conversation`` up to date with the stored history."""
        latest = conversation.latest_message
        for i, summary in enumerate(self._summaries):
            if summary.conversation_id != conversation.conversation_id:
                continue
            if latest is None:
                return
            if summary.latest_message is not None and summary.latest_message.timestamp >= latest.timestamp:
                return
            self._summaries[i] = ConversationSummary.of(conversation)
            self._summaries = sort_summaries(self._summaries)
            return

        self._summaries = sort_summaries([*self._summaries, ConversationSummary.of(conversation)])

    def _arm_deadline(self) -> None:
        self._clear_deadline()
        self._deadline = Deadline(self._request_timeout, self._expire, LIST_CHAT_ROOMS)

    def _clear_deadline(self) -> None:
        if self._deadline is not None:
            self._deadline.cancel()
            self._deadline = None

    def _expire(self) -> None:
        self._deadline = None
        if self._state == LoadState.LOADING:
            self._state = LoadState.FAILED
