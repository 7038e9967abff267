"""Socket.IO event names and payload models."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Outbound
REGISTER_USER = "registerUser"
LIST_CHAT_ROOMS = "listChatRooms"
LIST_MESSAGES = "listMessages"
SEND_MESSAGE = "sendMessage"
READ_MESSAGES = "readMessages"
RECEIVE_MESSAGE = "receiveMessage"

# Inbound
USER_REGISTERED = "userRegistered"
REGISTER_USER_ERROR = "registerUserError"
CHATS_LIST = "chatsList"
LIST_CHATS_ERROR = "listChatsError"
MESSAGES_LIST = "messagesList"
MESSAGE_RECEIVED = "messageReceived"
MESSAGE_READ = "messageRead"
NEW_MESSAGE = "newMessage"

# Lifecycle
CONNECT = "connect"
DISCONNECT = "disconnect"


class WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class ChatUserPayload(WireModel):
    user_id: str = Field(alias="userId")
    user_type: str | None = Field(default="", alias="userType")
    preferred_name: str | None = Field(default="", alias="preferredName")
    first_name: str | None = Field(default="", alias="firstName")
    last_name: str | None = Field(default="", alias="lastName")
    profile_picture_url: str | None = Field(default="", alias="profilePictureUrl")


class ChatMessagePayload(WireModel):
    message_id: str = Field(alias="messageId")
    chat_id: str = Field(alias="chatId")
    sender: ChatUserPayload
    content: str | None = ""
    timestamp: int
    is_received: bool = Field(default=False, alias="isReceived")
    is_read: bool = Field(default=False, alias="isRead")
    is_deleted: bool = Field(default=False, alias="isDeleted")


class ChatPayload(WireModel):
    """Full conversation, as pushed with ``newMessage``."""

    chat_id: str = Field(alias="chatId")
    participants: list[ChatUserPayload] = []
    messages: list[ChatMessagePayload] = []


class ChatSummaryPayload(WireModel):
    chat_id: str = Field(alias="chatId")
    participants: list[ChatUserPayload] = []
    latest_message: ChatMessagePayload | None = Field(default=None, alias="latestMessage")


class MessagesListPayload(WireModel):
    chat_id: str = Field(alias="chatId")
    participants: list[ChatUserPayload] = []
    messages_list: list[ChatMessagePayload] = Field(default=[], alias="messagesList")


class UserRegisteredPayload(WireModel):
    user_id: str = Field(alias="userId")


class ListChatsRequest(WireModel):
    user_id: str = Field(alias="userId")


class ListMessagesRequest(WireModel):
    room_id: str = Field(alias="roomId")
    user_id: str = Field(alias="userId")


class SendMessageRequest(WireModel):
    room_id: str = Field(alias="roomId")
    sender: ChatUserPayload
    message: str
    timestamp: int


class ReadMessagesRequest(WireModel):
    room_id: str = Field(alias="roomId")
    unread_messages: list[str] = Field(alias="unreadMessages")
