from __future__ import annotations

import logging
from typing import Any, Iterable

from chat_sync.application.dto.session import SessionContext
from chat_sync.application.exceptions import IdentityConflictError, IdentityUnavailableError, SummaryDriftError
from chat_sync.application.policies.consistency import find_summary_drift
from chat_sync.application.ports.clock import Clock
from chat_sync.application.ports.identity import IdentityProvider
from chat_sync.config import Settings, settings as default_settings
from chat_sync.domain.entities.conversation import ConversationSummary
from chat_sync.domain.entities.identity import Identity
from chat_sync.domain.entities.message import Message
from chat_sync.domain.value_objects.ids import ConversationId, MessageId, UserId
from chat_sync.infrastructure.channel import protocol
from chat_sync.infrastructure.channel.manager import ChannelFactory, ConnectionManager
from chat_sync.infrastructure.channel.socketio_channel import SocketIOChannel
from chat_sync.services.conversation_service import ConversationStore
from chat_sync.services.directory_service import ChatDirectory
from chat_sync.services.message_service import MessageDispatcher
from chat_sync.services.registration_service import IdentityRegistrar

logger = logging.getLogger(__name__)


class ChatSyncClient:
    """Wires the components to one channel and reconciles inbound events."""

    def __init__(
        self,
        connection: ConnectionManager,
        identity_provider: IdentityProvider | None = None,
        *,
        request_timeout: float | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.connection = connection
        self.identity_provider = identity_provider
        self.session = SessionContext()
        self.directory = ChatDirectory(connection, request_timeout)
        self.store = ConversationStore(connection, request_timeout)
        self.dispatcher = MessageDispatcher(connection, identity_provider, clock)
        self.registrar = IdentityRegistrar(connection, on_registered=self.directory.refresh)
        _register_handlers(self)

    @property
    def summaries(self) -> tuple[ConversationSummary, ...]:
        return self.directory.summaries

    @property
    def displayed_messages(self) -> tuple[Message, ...]:
        return self.store.displayed_messages

    async def start(self) -> None:
        """Connect, then register with whatever identity the provider already has."""
        await self.connection.ensure_connected()
        if self.identity_provider is not None:
            await self.set_identity(self.identity_provider.current_identity())

    async def close(self) -> None:
        await self.connection.close()

    async def set_identity(self, identity: Identity | None) -> None:
        bound = self.registrar.identity
        if (self.registrar.is_registering or self.registrar.is_registered) and bound is not None:
            if identity is None or identity.user_id != bound.user_id:
                logger.warning(
                    "Identity change to %s refused, session registered as %s",
                    identity.user_id if identity is not None else None,
                    bound.user_id,
                )
                raise IdentityConflictError(f"Session already registered as {bound.user_id}")
        self.session = SessionContext(identity=identity)
        await self.registrar.on_identity_changed(identity)

    async def refresh_chats(self) -> bool:
        user_id = self._require_user_id()
        return await self.directory.refresh(user_id)

    async def open_conversation(self, conversation_id: ConversationId) -> bool:
        user_id = self._require_user_id()
        return await self.store.fetch(conversation_id, user_id)

    async def send_message(self, conversation_id: ConversationId, content: str, timestamp: int | None = None) -> bool:
        if self.session.identity is None:
            raise IdentityUnavailableError("No identity to send as")
        return await self.dispatcher.send(conversation_id, self.session.identity, content, timestamp)

    async def mark_read(
        self,
        conversation_id: ConversationId,
        candidates: Iterable[Message] | None = None,
    ) -> list[MessageId]:
        if candidates is None:
            conversation = self.store.get(conversation_id)
            candidates = conversation.messages if conversation is not None else ()
        return await self.dispatcher.mark_read(conversation_id, candidates, self.session)

    def find_summary_drift(self) -> list[ConversationId]:
        return find_summary_drift(self.directory.summaries, self.store.conversations)

    def verify_consistency(self) -> None:
        drifted = self.find_summary_drift()
        if drifted:
            raise SummaryDriftError(drifted)

    async def on_chats_list(self, payload: Any) -> None:
        await self.directory.on_chats_list(payload)
        self._reconcile_directory()

    async def on_messages_list(self, payload: Any) -> None:
        conversation = await self.store.on_messages_list(payload)
        self.directory.observe(conversation)
        self._reconcile_directory()

    async def on_new_message(self, payload: Any) -> None:
        conversation = await self.store.on_push(payload)
        self.directory.observe(conversation)
        self._reconcile_directory()

    async def on_message_received(self, message: Any = None) -> None:
        # Delivery acks are not applied to local state.
        logger.debug("messageReceived ignored: %s", message)

    async def on_message_read(self, message_id: Any = None) -> None:
        # Read acks are not applied to local state.
        logger.debug("messageRead ignored: %s", message_id)

    def _reconcile_directory(self) -> None:
        drifted = self.find_summary_drift()
        if not drifted:
            return
        logger.error("Directory summaries behind stored history: %s", ", ".join(drifted))
        for conversation_id in drifted:
            conversation = self.store.get(conversation_id)
            if conversation is not None:
                self.directory.observe(conversation)

    def _require_user_id(self) -> UserId:
        user_id = self.session.user_id or self.registrar.registered_user_id
        if not user_id:
            raise IdentityUnavailableError("No current user")
        return user_id


def _register_handlers(client: ChatSyncClient) -> None:
    conn = client.connection
    conn.subscribe(protocol.CONNECT, client.registrar.on_connected)
    conn.subscribe(protocol.DISCONNECT, client.registrar.on_disconnected)
    conn.subscribe(protocol.USER_REGISTERED, client.registrar.on_user_registered)
    conn.subscribe(protocol.REGISTER_USER_ERROR, client.registrar.on_register_user_error)
    conn.subscribe(protocol.CHATS_LIST, client.on_chats_list)
    conn.subscribe(protocol.LIST_CHATS_ERROR, client.directory.on_list_chats_error)
    conn.subscribe(protocol.MESSAGES_LIST, client.on_messages_list)
    conn.subscribe(protocol.NEW_MESSAGE, client.on_new_message)
    conn.subscribe(protocol.MESSAGE_RECEIVED, client.on_message_received)
    conn.subscribe(protocol.MESSAGE_READ, client.on_message_read)


def create_client(
    identity_provider: IdentityProvider | None = None,
    *,
    config: Settings | None = None,
    channel_factory: ChannelFactory | None = None,
) -> ChatSyncClient:
    cfg = config or default_settings

    def _socketio_channel() -> SocketIOChannel:
        return SocketIOChannel(
            transports=cfg.CHAT_SOCKETIO_TRANSPORTS,
            reconnection=cfg.CHAT_RECONNECTION,
            reconnection_delay=cfg.CHAT_RECONNECTION_DELAY_SECONDS,
        )

    connection = ConnectionManager(channel_factory or _socketio_channel, cfg.CHAT_SERVER_URL)
    return ChatSyncClient(
        connection,
        identity_provider,
        request_timeout=cfg.CHAT_REQUEST_TIMEOUT_SECONDS,
    )
