"""Application settings and configuration helpers."""
from functools import lru_cache
import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()

DEV_SECRET_KEY = "printquote-dev-secret-change-me"


class Settings(BaseModel):
    """Runtime configuration loaded from environment variables."""

    database_url: str = Field(
        default="sqlite+aiosqlite:///./printquote.db", alias="DATABASE_URL"
    )
    secret_key: str = Field(default=DEV_SECRET_KEY, alias="SECRET_KEY")
    environment: str = Field(default="development", alias="ENVIRONMENT")
    master_admin_username: str = Field(default="master", alias="MASTER_ADMIN_USERNAME")
    session_ttl_minutes: int = Field(default=60 * 24, alias="SESSION_TTL_MINUTES")
    session_cookie_name: str = Field(default="printquote_session", alias="SESSION_COOKIE_NAME")
    session_cookie_secure: bool = Field(default=False, alias="SESSION_COOKIE_SECURE")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=False, alias="LOG_JSON")
    postal_code_primary_url: str = Field(
        default="https://brasilapi.com.br/api/cep/v1/{cep}",
        alias="POSTAL_CODE_PRIMARY_URL",
    )
    postal_code_fallback_url: str = Field(
        default="https://viacep.com.br/ws/{cep}/json/",
        alias="POSTAL_CODE_FALLBACK_URL",
    )
    postal_code_timeout_seconds: float = Field(default=5.0, alias="POSTAL_CODE_TIMEOUT_SECONDS")

    model_config = {
        "populate_by_name": True,
        "extra": "ignore",
    }

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"

    def check_runtime(self) -> None:
        """Refuse to run a production deployment on the development secret."""

        if self.is_production and (not self.secret_key or self.secret_key == DEV_SECRET_KEY):
            raise RuntimeError("SECRET_KEY must be set when ENVIRONMENT=production")

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the process environment, keeping defaults for unset keys."""

        values = {}
        for name, field in cls.model_fields.items():
            raw = os.getenv(field.alias or name.upper())
            if raw is not None and raw != "":
                values[name] = raw
        return cls(**values)


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""

    return Settings.from_env()
