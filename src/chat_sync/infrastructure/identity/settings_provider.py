from __future__ import annotations

from chat_sync.config import Settings
from chat_sync.domain.entities.identity import Identity
from chat_sync.domain.value_objects.ids import UserId


class SettingsIdentityProvider:
    """Implements application.ports.identity.IdentityProvider from environment settings."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._identity = self._read()

    def current_identity(self) -> Identity | None:
        return self._identity

    def refresh_identity(self) -> Identity | None:
        """Re-read the environment and ``.env`` so a changed identity is picked up."""
        self._settings = type(self._settings)()
        self._identity = self._read()
        return self._identity

    def _read(self) -> Identity | None:
        s = self._settings
        if not s.CHAT_USER_ID:
            return None
        return Identity(
            user_id=UserId(s.CHAT_USER_ID),
            user_type=s.CHAT_USER_TYPE,
            preferred_name=s.CHAT_PREFERRED_NAME,
            first_name=s.CHAT_FIRST_NAME,
            last_name=s.CHAT_LAST_NAME,
            profile_picture_url=s.CHAT_PROFILE_PICTURE_URL,
        )
