from __future__ import annotations

import logging
from typing import Iterable

from chat_sync.application.dto.session import SessionContext
from chat_sync.application.exceptions import IdentityUnavailableError
from chat_sync.application.ports.identity import IdentityProvider
from chat_sync.domain.entities.message import Message
from chat_sync.domain.value_objects.ids import MessageId, UserId

logger = logging.getLogger(__name__)


def resolve_current_user_id(
    session: SessionContext,
    provider: IdentityProvider | None,
) -> UserId:
    """Return the current user id from the session, else from the provider.

    Raises IdentityUnavailableError when neither yields an id.
    """
    if session.user_id:
        return session.user_id

    if provider is not None:
        logger.warning("No user id in session, re-reading identity from provider")
        identity = provider.refresh_identity()
        if identity is not None and identity.user_id:
            return identity.user_id

    raise IdentityUnavailableError("Current user id could not be resolved")


def unread_from_others(messages: Iterable[Message], user_id: UserId) -> list[MessageId]:
    """Ids of messages sent by someone else that are not yet read, in input order."""
    return [
        m.message_id
        for m in messages
        if m.sender.user_id != user_id and not m.is_read
    ]
