"""Request Dependencies — authentication and service construction per request.

Invariants:
    - Token service and mailer are built once in the lifespan and read from app.state
    - get_current_user rejects missing/invalid bearer tokens before any service runs
    - Services get the request's AsyncSession plus the process-wide collaborators

Design Decisions:
    - HTTPBearer(auto_error=False): a missing header becomes our own 401 envelope
      instead of FastAPI's default 403 body
"""

from datetime import timedelta

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from tasklist.config import get_settings
from tasklist.core.errors import InvalidTokenError
from tasklist.infrastructure.database import get_db
from tasklist.infrastructure.mailer import Mailer
from tasklist.services.list_service import ListService
from tasklist.services.todo_service import ToDoService
from tasklist.services.token_service import SessionClaims, TokenService
from tasklist.services.user_service import UserService

bearer_scheme = HTTPBearer(auto_error=False)


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_mailer(request: Request) -> Mailer:
    return request.app.state.mailer


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    tokens: TokenService = Depends(get_token_service),
) -> SessionClaims:
    """Resolve the requester identity from the Authorization header."""
    if credentials is None:
        raise InvalidTokenError("Access denied. No token provided.")
    return tokens.verify_token(credentials.credentials)


def get_user_service(
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
    mailer: Mailer = Depends(get_mailer),
) -> UserService:
    settings = get_settings()
    return UserService(
        db, tokens, mailer,
        activation_ttl=timedelta(minutes=settings.activation_token_ttl_minutes),
        reset_ttl=timedelta(minutes=settings.reset_token_ttl_minutes),
    )


def get_list_service(db: AsyncSession = Depends(get_db)) -> ListService:
    return ListService(db)


def get_todo_service(db: AsyncSession = Depends(get_db)) -> ToDoService:
    return ToDoService(db)
