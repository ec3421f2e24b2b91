from decimal import Decimal
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import Field, PostgresDsn, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    VERSION: str = Field(default="0.1.0")
    API_PREFIX: str = Field(default="api")
    DEBUG: bool = Field(default=True)
    LOG_LEVEL: str = Field(default="INFO")
    LOG_TO_FILE: bool = Field(default=True)

    # "postgres" for production, "memory" for local runs and tests
    STORAGE_BACKEND: str = Field(default="postgres")

    POSTGRES_USER: str = Field(default="postgres")
    POSTGRES_PASSWORD: str = Field(default="postgres")
    POSTGRES_HOST: str = Field(default="localhost")
    POSTGRES_PORT: str = Field(default="5432")
    POSTGRES_DB: str = Field(default="farmpro")
    POSTGRES_URL: Optional[str] = Field(default=None, validate_default=True)

    REDIS_HOST: str = Field(default="")
    REDIS_PORT: str = Field(default="6379")
    REDIS_PASSWORD: str = Field(default="")

    DB_POOL_SIZE: int = Field(default=83)
    WEB_CONCURRENCY: int = Field(default=9)
    MAX_OVERFLOW: int = Field(default=64)
    POOL_SIZE: Optional[int] = Field(default=None, validate_default=True)

    # Telegram
    TELEGRAM_BOT_TOKEN: str = Field(default="")
    TELEGRAM_BOT_USERNAME: str = Field(default="usdtm1nerr_bot")
    TELEGRAM_API_URL: str = Field(default="https://api.telegram.org")
    WEBAPP_URL: str = Field(default="http://localhost:8000")

    SENTRY_DSN: str = Field(default="")

    # Farming policy
    FARMING_SESSION_HOURS: int = Field(default=4)
    DEFAULT_FARMING_RATE: Decimal = Field(default=Decimal("120.00"))
    WELCOME_BONUS: Decimal = Field(default=Decimal("5000.00"))

    # Wallet policy
    MIN_WITHDRAWAL: Decimal = Field(default=Decimal("12"))
    FIRST_DEPOSIT_MIN: Decimal = Field(default=Decimal("5"))
    WITHDRAWAL_DEPOSIT_SURCHARGE: Decimal = Field(default=Decimal("3"))

    REFERRAL_MAX_DEPTH: int = Field(default=3)

    CATALOG_CACHE_SECONDS: int = Field(default=60)

    @field_validator("POOL_SIZE", mode="before")
    def build_pool(cls, v: Optional[int], values: ValidationInfo) -> Any:
        if isinstance(v, int):
            return v

        return max(values.data.get("DB_POOL_SIZE") // values.data.get("WEB_CONCURRENCY"), 5)  # type: ignore

    @field_validator("POSTGRES_URL", mode="plain")
    def build_db_connection(cls, v: Optional[str], values: ValidationInfo) -> Any:
        if isinstance(v, str):
            return v

        return PostgresDsn.build(
            scheme="postgresql+asyncpg",
            username=values.data.get("POSTGRES_USER"),
            password=values.data.get("POSTGRES_PASSWORD"),
            host=values.data.get("POSTGRES_HOST"),
            port=int(values.data.get("POSTGRES_PORT")),
            path=f"{values.data.get('POSTGRES_DB') or ''}",
        ).unicode_string()

    @property
    def REDIS_URL(self) -> Optional[str]:
        if not self.REDIS_HOST:
            return None
        return f"redis://:{self.REDIS_PASSWORD}@{self.REDIS_HOST}:{self.REDIS_PORT}"


settings = Settings()
