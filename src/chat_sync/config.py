from __future__ import annotations

from pydantic import ConfigDict
from pydantic_settings import BaseSettings

from chat_sync.domain.value_objects.enums import UserType


class Settings(BaseSettings):
    CHAT_SERVER_URL: str = "http://localhost:11114"
    CHAT_SOCKETIO_TRANSPORTS: list[str] = ["websocket", "polling"]
    CHAT_RECONNECTION: bool = True
    CHAT_RECONNECTION_DELAY_SECONDS: float = 1.0

    CHAT_REQUEST_TIMEOUT_SECONDS: float | None = 30.0

    CHAT_USER_TYPE: UserType = UserType.TEACHER
    CHAT_USER_ID: str = ""
    CHAT_PREFERRED_NAME: str = ""
    CHAT_FIRST_NAME: str = ""
    CHAT_LAST_NAME: str = ""
    CHAT_PROFILE_PICTURE_URL: str = ""

    LOG_LEVEL: str = "INFO"

    model_config = ConfigDict(
        env_file=".env",
        extra="ignore",
    )


settings = Settings()
