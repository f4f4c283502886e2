from datetime import timedelta

from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from guestbook.infrastructure.logging import get_logger


logger = get_logger(__name__)

ENV_PREFIX = "GGB_"


class _GuestbookSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class AppConfig(_GuestbookSettings):
    APP_NAME: str = "Guestbook"
    DEBUG: bool = False
    LISTEN: str
    URL: str
    ADMIN_EMAIL: str
    ANTI_SPAM_CODE: str
    ENTRY_WAIT_SECONDS: float = Field(..., ge=0)
    CORS_ALLOWED_ORIGINS: str = "*"
    STATIC_DIR: str | None = None

    @property
    def entry_wait(self) -> timedelta:
        return timedelta(seconds=self.ENTRY_WAIT_SECONDS)

    def get_listen_address(self) -> tuple[str, int]:
        host, _, port = self.LISTEN.rpartition(":")
        return host or "0.0.0.0", int(port)

    def get_moderation_url(self, entry_id: str) -> str:
        return f"{self.URL}?GgbEntryID={entry_id}"


class DatabaseConfig(_GuestbookSettings):
    DB_FILE: str

    def get_url(self, is_async: bool = True) -> str:
        driver = "sqlite+aiosqlite" if is_async else "sqlite"
        return f"{driver}:///{self.DB_FILE}"


class SmtpConfig(_GuestbookSettings):
    SMTP_HOST: str
    SMTP_PORT: int
    SMTP_USER: str
    SMTP_PASS: str
    SMTP_USE_TLS: bool = True
    SMTP_FROM: str | None = None


class GuestbookConfig(BaseModel):
    app: AppConfig
    db: DatabaseConfig
    smtp: SmtpConfig


def load_config() -> GuestbookConfig:
    """
    Read the whole configuration from ``GGB_*`` environment variables.

    Every required variable must be present; a missing or malformed value
    is logged and re-raised so the process never starts half-configured.
    """
    try:
        return GuestbookConfig(
            app=AppConfig(),
            db=DatabaseConfig(),
            smtp=SmtpConfig(),
        )
    except ValidationError as exc:
        logger.critical(
            "config_invalid",
            fields=[ENV_PREFIX + str(error["loc"][0]) for error in exc.errors()],
        )
        raise
