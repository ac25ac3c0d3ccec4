# tests/test_settings.py
import pytest

from guildhall.core.settings import Settings, to_psycopg_url


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("postgres://u:p@db/guild", "postgresql+psycopg://u:p@db/guild"),
        ("postgresql://u:p@db/guild", "postgresql+psycopg://u:p@db/guild"),
        ("postgresql+asyncpg://u:p@db/guild", "postgresql+psycopg://u:p@db/guild"),
        ("postgresql+psycopg://u:p@db/guild", "postgresql+psycopg://u:p@db/guild"),
        ("sqlite:///./guildhall.db", "sqlite:///./guildhall.db"),
    ],
)
def test_to_psycopg_url(url, expected):
    assert to_psycopg_url(url) == expected


def test_testing_database_override():
    config = Settings(
        SECRET_KEY="x",
        DATABASE_URL="postgresql://u:p@db/live",
        TEST_DATABASE_URL="sqlite://",
        USE_TEST_DATABASE=True,
        _env_file=None,
    )
    assert config.effective_database_url == "sqlite://"
    assert config.database_url_sync == "sqlite://"


def test_storage_configured_needs_every_credential(monkeypatch):
    monkeypatch.delenv("CLOUDINARY_API_SECRET", raising=False)
    partial = Settings(
        SECRET_KEY="x", CLOUDINARY_CLOUD_NAME="demo", CLOUDINARY_API_KEY="k", _env_file=None
    )
    full = Settings(
        SECRET_KEY="x",
        CLOUDINARY_CLOUD_NAME="demo",
        CLOUDINARY_API_KEY="k",
        CLOUDINARY_API_SECRET="s",
        _env_file=None,
    )
    assert partial.storage_configured is False
    assert full.storage_configured is True


def test_token_lifetime_defaults_to_seven_days(monkeypatch):
    monkeypatch.delenv("ACCESS_TOKEN_EXPIRE_MINUTES", raising=False)
    assert Settings(SECRET_KEY="x", _env_file=None).access_token_expire_minutes == 60 * 24 * 7
