from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

from chat_sync.application.exceptions import IncompleteIdentityError
from chat_sync.domain.entities.identity import Identity
from chat_sync.domain.value_objects.enums import RegistrationState
from chat_sync.domain.value_objects.ids import UserId
from chat_sync.infrastructure.channel.manager import ConnectionManager
from chat_sync.infrastructure.channel.mappers import identity_to_payload, parse_user_registered
from chat_sync.infrastructure.channel.protocol import REGISTER_USER

logger = logging.getLogger(__name__)

OnRegistered = Callable[[UserId], Awaitable[None]]


class IdentityRegistrar:
    """Registration handshake: UNREGISTERED -> REGISTERING -> REGISTERED.

    Entering REGISTERED awaits ``on_registered(user_id)``; the client wires
    that to the directory refresh, so the initial chat list is requested
    without any caller action.
    """

    def __init__(self, connection: ConnectionManager, on_registered: OnRegistered | None = None) -> None:
        self._connection = connection
        self._on_registered = on_registered
        self._state = RegistrationState.UNREGISTERED
        self._identity: Identity | None = None
        self._registered_user_id: UserId | None = None

    @property
    def identity(self) -> Identity | None:
        return self._identity

    @property
    def state(self) -> RegistrationState:
        return self._state

    @property
    def is_registering(self) -> bool:
        return self._state == RegistrationState.REGISTERING

    @property
    def is_registered(self) -> bool:
        return self._state == RegistrationState.REGISTERED

    @property
    def registered_user_id(self) -> UserId | None:
        return self._registered_user_id

    async def register(self, identity: Identity) -> bool:
        """Emit ``registerUser``. Returns False when nothing could be sent."""
        if not identity.is_complete:
            raise IncompleteIdentityError("userId, preferredName, firstName and lastName are required")

        self._identity = identity
        self._state = RegistrationState.REGISTERING
        sent = await self._connection.emit(REGISTER_USER, identity_to_payload(identity).to_wire())
        if not sent:
            self._state = RegistrationState.UNREGISTERED
            return False
        logger.info("Registering user %s", identity.user_id)
        return True

    async def on_identity_changed(self, identity: Identity | None) -> None:
        was_complete = self._identity is not None and self._identity.is_complete
        self._identity = identity
        if identity is None or not identity.is_complete or was_complete:
            return
        await self._maybe_register()

    async def on_connected(self, *_args: Any) -> None:
        await self._maybe_register()

    async def on_disconnected(self, *_args: Any) -> None:
        # The server binds registration to the socket session.
        if self._state != RegistrationState.UNREGISTERED:
            logger.info("Registration dropped with the connection")
        self._state = RegistrationState.UNREGISTERED
        self._registered_user_id = None

    async def on_user_registered(self, payload: Any) -> None:
        user_id = parse_user_registered(payload)
        self._state = RegistrationState.REGISTERED
        self._registered_user_id = user_id
        logger.info("User %s registered", user_id)
        if self._on_registered is not None:
            await self._on_registered(user_id)

    async def on_register_user_error(self, error: Any = None) -> None:
        logger.error("Error registering user: %s", error)
        self._state = RegistrationState.UNREGISTERED

    async def _maybe_register(self) -> None:
        if self._state != RegistrationState.UNREGISTERED:
            return
        if self._identity is None or not self._identity.is_complete:
            return
        if not self._connection.connected:
            logger.debug("Identity complete but channel not connected, deferring registration")
            return
        await self.register(self._identity)
