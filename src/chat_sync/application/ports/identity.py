from __future__ import annotations

from typing import Protocol

from chat_sync.domain.entities.identity import Identity


class IdentityProvider(Protocol):
    def current_identity(self) -> Identity | None:
        """Return the identity as currently known; may be incomplete."""
        ...

    def refresh_identity(self) -> Identity | None:
        """Re-read the identity from storage. Used as a fallback only."""
        ...
