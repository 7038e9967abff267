from __future__ import annotations

from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from chat_sync.application.exceptions import ProtocolError
from chat_sync.domain.entities.conversation import Conversation, ConversationSummary
from chat_sync.domain.entities.identity import Identity
from chat_sync.domain.entities.message import Message
from chat_sync.domain.value_objects.ids import ConversationId, MessageId, UserId
from chat_sync.infrastructure.channel.protocol import (
    ChatMessagePayload,
    ChatPayload,
    ChatSummaryPayload,
    ChatUserPayload,
    MessagesListPayload,
    UserRegisteredPayload,
)


def _parse(model: type[BaseModel], raw: Any) -> Any:
    try:
        return model.model_validate(raw)
    except PydanticValidationError as exc:
        raise ProtocolError(f"Invalid {model.__name__}: {exc}") from exc


def identity_to_payload(identity: Identity) -> ChatUserPayload:
    return ChatUserPayload(
        user_id=identity.user_id,
        user_type=identity.user_type,
        preferred_name=identity.preferred_name,
        first_name=identity.first_name,
        last_name=identity.last_name,
        profile_picture_url=identity.profile_picture_url,
    )


def identity_to_domain(payload: ChatUserPayload) -> Identity:
    return Identity(
        user_id=UserId(payload.user_id),
        user_type=payload.user_type or "",
        preferred_name=payload.preferred_name or "",
        first_name=payload.first_name or "",
        last_name=payload.last_name or "",
        profile_picture_url=payload.profile_picture_url or "",
    )


def message_to_domain(payload: ChatMessagePayload) -> Message:
    return Message(
        message_id=MessageId(payload.message_id),
        conversation_id=ConversationId(payload.chat_id),
        sender=identity_to_domain(payload.sender),
        content=payload.content or "",
        timestamp=payload.timestamp,
        is_received=payload.is_received,
        is_read=payload.is_read,
        is_deleted=payload.is_deleted,
    )


def message_to_payload(message: Message) -> ChatMessagePayload:
    return ChatMessagePayload(
        message_id=message.message_id,
        chat_id=message.conversation_id,
        sender=identity_to_payload(message.sender),
        content=message.content,
        timestamp=message.timestamp,
        is_received=message.is_received,
        is_read=message.is_read,
        is_deleted=message.is_deleted,
    )


def parse_user_registered(raw: Any) -> UserId:
    return UserId(_parse(UserRegisteredPayload, raw).user_id)


def parse_conversation(raw: Any) -> Conversation:
    payload: ChatPayload = _parse(ChatPayload, raw)
    return Conversation(
        conversation_id=ConversationId(payload.chat_id),
        participants=tuple(identity_to_domain(p) for p in payload.participants),
        messages=tuple(message_to_domain(m) for m in payload.messages),
    )


def parse_messages_list(raw: Any) -> Conversation:
    payload: MessagesListPayload = _parse(MessagesListPayload, raw)
    return Conversation(
        conversation_id=ConversationId(payload.chat_id),
        participants=tuple(identity_to_domain(p) for p in payload.participants),
        messages=tuple(message_to_domain(m) for m in payload.messages_list),
    )


def parse_summaries(raw: Any) -> list[ConversationSummary]:
    if not isinstance(raw, list):
        raise ProtocolError(f"Expected a list of chat summaries, got {type(raw).__name__}")
    summaries = []
    for item in raw:
        payload: ChatSummaryPayload = _parse(ChatSummaryPayload, item)
        summaries.append(
            ConversationSummary(
                conversation_id=ConversationId(payload.chat_id),
                participants=tuple(identity_to_domain(p) for p in payload.participants),
                latest_message=(
                    message_to_domain(payload.latest_message)
                    if payload.latest_message is not None
                    else None
                ),
            )
        )
    return summaries
