"""Root conftest — shared test configuration."""

import os

# Ensure tests never pick up a real secret, database or SMTP relay
os.environ.setdefault("JWT_SECRET", "test-secret-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("MAIL_BACKEND", "console")
os.environ.setdefault("ENVIRONMENT", "development")
