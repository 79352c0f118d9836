from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="WEDLEDGER_", env_file=".env", extra="ignore")
    DATABASE_URL: str = "sqlite:///./wedledger.db"

    SECRET_KEY: str = "change-me"
    ACCESS_TOKEN_MIN: int = 60 * 24 * 30

    # Public origin of the web client, used to build shareable invite links
    BASE_URL: str = "http://localhost:3000"
    INVITE_EXPIRY_DAYS: int = 7
    DEFAULT_LANGUAGE: str = "he"

    BASE_CURRENCY: str = "ILS"
    EXCHANGE_RATE_URL: str = "https://api.frankfurter.dev/v1/latest"
    REQUEST_TIMEOUT_SECONDS: float = 10.0

    SMS_API_URL: str | None = None
    SMS_API_KEY: str | None = None
    SMS_PHONE_NUMBER: str | None = None
    SMS_PASS: str | None = None
    SMS_SENDER: str = "WedLedger"
    SEND_INVITE_SMS: bool = False

    LOG_LEVEL: str = "INFO"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
