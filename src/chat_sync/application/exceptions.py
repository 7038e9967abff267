from __future__ import annotations


class AppError(Exception):
    """Base application error."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(detail)


class NotConnectedError(AppError):
    pass


class IncompleteIdentityError(AppError):
    pass


class IdentityUnavailableError(AppError):
    pass


class ProtocolError(AppError):
    """Inbound payload does not match the wire contract."""


class SummaryDriftError(AppError):
    """A directory summary is older than the conversation held in the store."""

    def __init__(self, conversation_ids: list[str]) -> None:
        self.conversation_ids = conversation_ids
        super().__init__(f"Summary behind store for: {', '.join(conversation_ids)}")


class IdentityConflictError(AppError):
    """The session is already registered under a different user."""
