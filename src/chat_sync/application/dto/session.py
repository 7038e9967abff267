from __future__ import annotations

from dataclasses import dataclass

from chat_sync.domain.entities.identity import Identity
from chat_sync.domain.value_objects.ids import UserId


@dataclass(frozen=True, slots=True)
class SessionContext:
    """Live session state handed to operations that act on behalf of the user."""

    identity: Identity | None = None

    @property
    def user_id(self) -> UserId | None:
        if self.identity is None or not self.identity.user_id:
            return None
        return self.identity.user_id
