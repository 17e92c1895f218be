"""Tests for runtime configuration."""
import pytest

from printquote.config import DEV_SECRET_KEY, Settings
from printquote.database import normalize_database_url
from printquote.main import create_app


def test_from_env_reads_environment(monkeypatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///./other.db")
    monkeypatch.setenv("SESSION_TTL_MINUTES", "30")
    monkeypatch.setenv("SESSION_COOKIE_SECURE", "true")
    monkeypatch.setenv("MASTER_ADMIN_USERNAME", "root")
    monkeypatch.setenv("LOG_JSON", "")

    settings = Settings.from_env()

    assert settings.database_url == "sqlite+aiosqlite:///./other.db"
    assert settings.session_ttl_minutes == 30
    assert settings.session_cookie_secure is True
    assert settings.master_admin_username == "root"
    assert settings.log_json is False


def test_production_refuses_development_secret() -> None:
    with pytest.raises(RuntimeError):
        Settings(environment="production").check_runtime()
    with pytest.raises(RuntimeError):
        Settings(environment="Production", secret_key="").check_runtime()

    Settings(environment="production", secret_key="a-real-secret").check_runtime()
    Settings(environment="development", secret_key=DEV_SECRET_KEY).check_runtime()


def test_create_app_refuses_to_start_insecurely(tmp_path) -> None:
    settings = Settings(
        environment="production",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'prod.db'}",
    )

    with pytest.raises(RuntimeError):
        create_app(settings)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("postgres://u:p@db/app", "postgresql+asyncpg://u:p@db/app"),
        ("postgresql://u:p@db/app", "postgresql+asyncpg://u:p@db/app"),
        ("sqlite:///./local.db", "sqlite+aiosqlite:///./local.db"),
        ("sqlite+aiosqlite:///./local.db", "sqlite+aiosqlite:///./local.db"),
    ],
)
def test_database_url_uses_async_drivers(raw: str, expected: str) -> None:
    assert normalize_database_url(raw) == expected
