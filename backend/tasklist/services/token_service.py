"""Session Token Service — issues and verifies signed, time-bounded session tokens.

Invariants:
    - Tokens embed {sub: user id, username} plus iat/exp; validity is fixed at construction (1h default)
    - verify_token raises InvalidTokenError on bad signature, expiry or malformed claims
    - No refresh: callers re-authenticate after expiry
    - The signing secret is owned by the instance, never read from module globals

Design Decisions:
    - PyJWT HS256: exp verification handled by the library
    - Missing secret falls back to a constant with one warning at build time (dev only)
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt

from tasklist.config import Settings
from tasklist.core.domain_types import UserId
from tasklist.core.errors import InvalidTokenError

logger = logging.getLogger(__name__)

FALLBACK_SECRET = "default_test_secret"


@dataclass(frozen=True)
class SessionClaims:
    """Identity asserted by a verified session token."""
    user_id: UserId
    username: str


class TokenService:
    """Signs and verifies session tokens with one process-wide secret."""

    def __init__(
        self, secret: str, algorithm: str = "HS256",
        ttl: timedelta = timedelta(hours=1),
    ):
        self._secret = secret
        self._algorithm = algorithm
        self.ttl = ttl

    def issue_token(self, user, now: datetime | None = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "sub": str(user.id),
            "username": user.username,
            "iat": issued_at,
            "exp": issued_at + self.ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify_token(self, token: str) -> SessionClaims:
        try:
            payload = jwt.decode(
                token, self._secret, algorithms=[self._algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise InvalidTokenError("Token has expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError("Invalid token") from e
        try:
            return SessionClaims(
                user_id=UserId(UUID(payload["sub"])),
                username=payload.get("username", ""),
            )
        except (TypeError, ValueError) as e:
            raise InvalidTokenError("Invalid token") from e


def build_token_service(settings: Settings) -> TokenService:
    """Build the process-wide token service from settings."""
    secret = settings.jwt_secret
    if not secret:
        logger.warning(
            "JWT_SECRET is not set; using the default secret. "
            "Set a unique secret in production.",
        )
        secret = FALLBACK_SECRET
    return TokenService(
        secret,
        algorithm=settings.jwt_algorithm,
        ttl=timedelta(minutes=settings.session_token_ttl_minutes),
    )
