from __future__ import annotations

from dataclasses import dataclass, field

from chat_sync.domain.entities.identity import Identity
from chat_sync.domain.entities.message import Message
from chat_sync.domain.value_objects.ids import ConversationId, UserId


def unique_participants(participants: tuple[Identity, ...] | list[Identity]) -> tuple[Identity, ...]:
    """Collapse participants by user_id, keeping the first occurrence."""
    seen: dict[UserId, Identity] = {}
    for participant in participants:
        seen.setdefault(participant.user_id, participant)
    return tuple(seen.values())


def latest_of(messages: tuple[Message, ...]) -> Message | None:
    if not messages:
        return None
    return max(messages, key=lambda m: m.timestamp)


@dataclass(frozen=True, slots=True)
class Conversation:
    conversation_id: ConversationId
    participants: tuple[Identity, ...] = field(default_factory=tuple)
    messages: tuple[Message, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "participants", unique_participants(self.participants))
        object.__setattr__(self, "messages", tuple(self.messages))

    @property
    def latest_message(self) -> Message | None:
        return latest_of(self.messages)


@dataclass(frozen=True, slots=True)
class ConversationSummary:
    """Directory projection of a conversation."""

    conversation_id: ConversationId
    participants: tuple[Identity, ...]
    latest_message: Message | None

    def __post_init__(self) -> None:
        object.__setattr__(self, "participants", unique_participants(self.participants))

    @classmethod
    def of(cls, conversation: Conversation) -> ConversationSummary:
        return cls(
            conversation_id=conversation.conversation_id,
            participants=conversation.participants,
            latest_message=conversation.latest_message,
        )
