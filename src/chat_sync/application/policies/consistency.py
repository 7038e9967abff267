from __future__ import annotations

from typing import Iterable, Mapping

from chat_sync.domain.entities.conversation import Conversation, ConversationSummary
from chat_sync.domain.value_objects.ids import ConversationId


def find_summary_drift(
    summaries: Iterable[ConversationSummary],
    conversations: Mapping[ConversationId, Conversation],
) -> list[ConversationId]:
    """Conversation ids whose summary is older than the stored history."""
    drifted: list[ConversationId] = []
    for summary in summaries:
        conversation = conversations.get(summary.conversation_id)
        if conversation is None:
            continue
        stored_latest = conversation.latest_message
        if stored_latest is None:
            continue
        if summary.latest_message is None or summary.latest_message.timestamp < stored_latest.timestamp:
            drifted.append(summary.conversation_id)
    return drifted
