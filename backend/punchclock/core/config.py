from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    DATABASE_URL: str = "postgresql+asyncpg://punch:punch_secret@db:5432/punchclock"

    # Shared secret of the badge readers. Unset means the punch route answers 500.
    PUNCH_API_KEY: str | None = None
    PUNCH_API_KEY_HEADER: str = "x-api-key"

    # IANA zone that defines where a calendar day starts. UTC midnight by default.
    ATTENDANCE_TIMEZONE: str = "UTC"

    PUNCH_SOURCE: str = "card"

    CORS_ALLOW_ORIGINS: list[str] = ["*"]
    CORS_ALLOW_HEADERS: list[str] = [
        "authorization",
        "x-client-info",
        "apikey",
        "content-type",
        "x-api-key",
    ]

    RUN_MIGRATIONS_ON_STARTUP: bool = True

    @field_validator("ATTENDANCE_TIMEZONE")
    @classmethod
    def known_zone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown time zone: {v!r}") from exc
        return v


settings = Settings()


def get_settings() -> Settings:
    """FastAPI dependency; tests override it with their own Settings."""
    return settings
