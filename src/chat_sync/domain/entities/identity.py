from __future__ import annotations

from dataclasses import dataclass

from chat_sync.domain.value_objects.ids import UserId


@dataclass(frozen=True, slots=True)
class Identity:
    user_id: UserId
    user_type: str
    preferred_name: str
    first_name: str
    last_name: str
    profile_picture_url: str = ""

    @property
    def is_complete(self) -> bool:
        """All fields the server requires for registration are non-empty."""
        return bool(
            self.user_id
            and self.preferred_name
            and self.first_name
            and self.last_name
        )
