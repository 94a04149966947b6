# helpdesk/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    DATABASE_URL: str = Field(default="sqlite:///./helpdesk.db")
    APP_NAME: str = "Helpdesk API"
    APP_DESC: str = "Internal helpdesk: tickets, attachments, feedback and assignment notifications"
    APP_VERSION: str = "1.0.0"

    # Comma separated, "*" allows every origin
    CORS_ORIGINS: str = "*"

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    # Attachments
    UPLOAD_DIR: str = "./uploads"
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024
    MAX_IMAGES_PER_UPLOAD: int = 5

    # Directory holding UserData.json / UserTicket.json / UserFeedback.json
    LEGACY_DATA_DIR: str | None = None

    ENFORCE_STATUS_TRANSITIONS: bool = False

    # Notification poller (client side)
    API_BASE_URL: str = "http://localhost:8000"
    POLL_INTERVAL_SECONDS: float = 60.0
    TOAST_TTL_SECONDS: float = 7.0
    PANEL_MAX_ITEMS: int = 50

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()


__all__ = ["Settings", "get_settings"]
