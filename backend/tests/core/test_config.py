"""Configuration — settings parsing and transport construction.

Tests cover:
    - postgresql:// URLs rewritten for asyncpg
    - SMTP backend fails fast with InvalidEnvError when credentials are missing
    - console backend is the default
    - public_base_url is mandatory outside development
"""

import pytest
from pydantic import ValidationError

from tasklist.config import Settings
from tasklist.core.errors import InvalidEnvError
from tasklist.infrastructure.mailer import ConsoleMailer, SmtpMailer, build_mailer


def test_postgres_url_converted_to_asyncpg():
    settings = Settings(database_url="postgresql://u:p@db:5432/tasks")
    assert settings.database_url == "postgresql+asyncpg://u:p@db:5432/tasks"


def test_sqlite_url_left_alone():
    settings = Settings(database_url="sqlite+aiosqlite:///x.db")
    assert settings.database_url == "sqlite+aiosqlite:///x.db"


def test_console_mailer_by_default():
    assert isinstance(build_mailer(Settings(mail_backend="console")), ConsoleMailer)


def test_smtp_without_credentials_fails_fast():
    with pytest.raises(InvalidEnvError, match="SMTP_HOST"):
        build_mailer(Settings(mail_backend="smtp", smtp_host=None))


def test_smtp_with_credentials_builds_smtp_mailer():
    mailer = build_mailer(Settings(
        mail_backend="smtp", smtp_host="smtp.x.com", smtp_port=587,
        smtp_username="u", smtp_password="p",
    ))
    assert isinstance(mailer, SmtpMailer)


def test_production_requires_public_base_url():
    with pytest.raises(ValidationError, match="PUBLIC_BASE_URL"):
        Settings(environment="production", public_base_url=None)


def test_production_with_public_base_url():
    settings = Settings(environment="production", public_base_url="https://tasks.example")
    assert not settings.is_development


def test_development_allows_missing_public_base_url():
    assert Settings(environment="development", public_base_url=None).is_development
