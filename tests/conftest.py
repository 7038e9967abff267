"""Shared test fixtures."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import pytest

from chat_sync.application.ports.channel import EventHandler
from chat_sync.domain.entities.identity import Identity
from chat_sync.domain.entities.message import Message
from chat_sync.domain.value_objects.ids import ConversationId, MessageId, UserId
from chat_sync.infrastructure.channel.manager import ConnectionManager

SERVER_URL = "http://chat.test"


@dataclass
class FakeChannel:
    """In-memory Channel: records emissions, lets tests fire inbound events."""

    connected: bool = False
    fail_connect: bool = False
    fail_emit: bool = False
    emitted: list[tuple[str, Any]] = field(default_factory=list)
    handlers: dict[str, EventHandler] = field(default_factory=dict)
    bound_at_connect: set[str] = field(default_factory=set)
    connect_calls: int = 0
    url: str | None = None

    async def connect(self, url: str) -> None:
        self.connect_calls += 1
        if self.fail_connect:
            raise ConnectionError("refused")
        self.url = url
        self.bound_at_connect = set(self.handlers)
        self.connected = True
        await self.fire("connect")

    async def disconnect(self) -> None:
        self.connected = False
        await self.fire("disconnect")

    async def emit(self, event: str, data: Any) -> None:
        if self.fail_emit:
            raise RuntimeError("transport closed")
        self.emitted.append((event, data))

    def on(self, event: str, handler: EventHandler) -> None:
        self.handlers[event] = handler

    async def fire(self, event: str, *args: Any) -> None:
        handler = self.handlers.get(event)
        if handler is not None:
            await handler(*args)

    async def drop(self) -> None:
        """Simulate the transport losing the connection."""
        self.connected = False
        await self.fire("disconnect", "transport close")

    async def restore(self) -> None:
        """Simulate the transport reconnecting on its own."""
        self.connected = True
        await self.fire("connect")

    def sent(self, event: str) -> list[Any]:
        return [data for name, data in self.emitted if name == event]


@dataclass
class CountingChannelFactory:
    channel: FakeChannel = field(default_factory=FakeChannel)
    created: int = 0

    def __call__(self) -> FakeChannel:
        self.created += 1
        return self.channel


@dataclass
class FakeIdentityProvider:
    current: Identity | None = None
    stored: Identity | None = None
    refresh_calls: int = 0

    def current_identity(self) -> Identity | None:
        return self.current

    def refresh_identity(self) -> Identity | None:
        self.refresh_calls += 1
        return self.stored


@dataclass
class FixedClock:
    at: datetime = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self.at


@pytest.fixture
def channel() -> FakeChannel:
    return FakeChannel()


@pytest.fixture
def factory(channel: FakeChannel) -> CountingChannelFactory:
    return CountingChannelFactory(channel)


@pytest.fixture
def manager(factory: CountingChannelFactory) -> ConnectionManager:
    return ConnectionManager(factory, SERVER_URL)


def make_identity(
    user_id: str = "t1",
    *,
    user_type: str = "teacher",
    preferred_name: str = "A",
    first_name: str = "B",
    last_name: str = "C",
    profile_picture_url: str = "",
) -> Identity:
    return Identity(
        user_id=UserId(user_id),
        user_type=user_type,
        preferred_name=preferred_name,
        first_name=first_name,
        last_name=last_name,
        profile_picture_url=profile_picture_url,
    )


def make_message(
    message_id: str = "m1",
    *,
    conversation_id: str = "c1",
    sender_id: str = "t2",
    content: str = "hello",
    timestamp: int = 1_000,
    is_read: bool = False,
) -> Message:
    return Message(
        message_id=MessageId(message_id),
        conversation_id=ConversationId(conversation_id),
        sender=make_identity(sender_id),
        content=content,
        timestamp=timestamp,
        is_read=is_read,
    )


def user_wire(user_id: str = "t1", **overrides: Any) -> dict[str, Any]:
    data = {
        "userId": user_id,
        "userType": "teacher",
        "preferredName": "A",
        "firstName": "B",
        "lastName": "C",
        "profilePictureUrl": "",
    }
    data.update(overrides)
    return data


def message_wire(
    message_id: str,
    *,
    chat_id: str = "c1",
    sender_id: str = "t2",
    timestamp: int = 1_000,
    content: str = "hello",
    is_read: bool = False,
) -> dict[str, Any]:
    return {
        "messageId": message_id,
        "chatId": chat_id,
        "sender": user_wire(sender_id),
        "content": content,
        "timestamp": timestamp,
        "isReceived": False,
        "isRead": is_read,
        "isDeleted": False,
    }


def chat_wire(chat_id: str, messages: list[dict[str, Any]], participants: list[str] | None = None) -> dict[str, Any]:
    return {
        "chatId": chat_id,
        "participants": [user_wire(p) for p in (participants or ["t1", "t2"])],
        "messages": messages,
    }


def messages_list_wire(chat_id: str, messages: list[dict[str, Any]], participants: list[str] | None = None) -> dict[str, Any]:
    return {
        "chatId": chat_id,
        "participants": [user_wire(p) for p in (participants or ["t1", "t2"])],
        "messagesList": messages,
    }


def summary_wire(chat_id: str, timestamp: int, participants: list[str] | None = None) -> dict[str, Any]:
    return {
        "chatId": chat_id,
        "participants": [user_wire(p) for p in (participants or ["t1", "t2"])],
        "latestMessage": message_wire(f"{chat_id}-latest", chat_id=chat_id, timestamp=timestamp),
    }
