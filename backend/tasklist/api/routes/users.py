"""User Routes — registration, activation, login, password recovery and lookups.

Invariants:
    - register/login/activation/recovery are public; lookups require a session token
    - Lookups return only the requester's own record (UnauthorizedError otherwise)
    - Responses are UserResponse views: no password hash, no one-time tokens
    - The reset token is returned in the body only in development; otherwise it
      reaches the user by email alone
"""

from fastapi import APIRouter, Depends, Query, Request, status

from tasklist.api.dependencies import get_current_user, get_user_service
from tasklist.config import Settings, get_settings
from tasklist.core.domain_types import SortOrder, UserId, UserSortField
from tasklist.core.enforce_access import check_owner, parse_id
from tasklist.core.errors import NotFoundError
from tasklist.models.user import User
from tasklist.schemas.envelope import Envelope
from tasklist.schemas.user import (
    AuthResponse, PasswordRecover, RecoveryTokenResponse, UserLogin,
    UserRegister, UserResponse,
)
from tasklist.services.token_service import SessionClaims
from tasklist.services.user_service import UserService

router = APIRouter(prefix="/api/user", tags=["user"])


@router.post(
    "/register", response_model=Envelope[AuthResponse],
    status_code=status.HTTP_201_CREATED,
)
async def register(
    body: UserRegister,
    request: Request,
    users: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_settings),
):
    # Settings guarantee public_base_url outside development
    base_url = settings.public_base_url or str(request.base_url)
    user, token = await users.register(body, base_url)
    return Envelope(
        status=201, message="User registered successfully",
        data=AuthResponse(token=token, user=UserResponse.model_validate(user)),
    )


@router.get("/activate-account/{token}", response_model=Envelope[UserResponse])
async def activate_account(
    token: str, users: UserService = Depends(get_user_service),
):
    user = await users.activate_account(token)
    return Envelope(
        status=200, message="User activated successfully",
        data=UserResponse.model_validate(user),
    )


@router.post("/login", response_model=Envelope[AuthResponse])
async def login(body: UserLogin, users: UserService = Depends(get_user_service)):
    user, token = await users.login(body)
    return Envelope(
        status=200, message="User logged in successfully",
        data=AuthResponse(token=token, user=UserResponse.model_validate(user)),
    )


@router.post(
    "/send-recover-password-token/{email}",
    response_model=Envelope[RecoveryTokenResponse],
)
async def send_recover_password_token(
    email: str,
    users: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_settings),
):
    token = await users.send_recover_password_token(email)
    # The token only ever leaves through email, except for local development
    data = RecoveryTokenResponse(token=token) if settings.is_development else None
    return Envelope(
        status=200, message="Password recovery email sent", data=data,
    )


@router.post("/recover-password", response_model=Envelope[UserResponse])
async def recover_password(
    body: PasswordRecover, users: UserService = Depends(get_user_service),
):
    user = await users.recover_password(body)
    return Envelope(
        status=200, message="Password recovered successfully",
        data=UserResponse.model_validate(user),
    )


@router.get("", response_model=Envelope[list[UserResponse]])
async def get_all_users(
    page: int = Query(1),
    limit: int = Query(10),
    sort: str = Query(UserSortField.CREATED_AT.value),
    order: str = Query(SortOrder.DESC.value),
    search: str = Query(""),
    claims: SessionClaims = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
):
    found = await users.get_all_users(page, limit, sort, order, search)
    return Envelope(
        status=200, message="Users found",
        data=[UserResponse.model_validate(u) for u in found],
    )


@router.get("/username/{username}", response_model=Envelope[UserResponse])
async def get_user_by_username(
    username: str,
    claims: SessionClaims = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
):
    user = await users.get_user_by_username(username)
    return _own_record(user, claims)


@router.get("/email/{email}", response_model=Envelope[UserResponse])
async def get_user_by_email(
    email: str,
    claims: SessionClaims = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
):
    user = await users.get_user_by_email(email)
    return _own_record(user, claims)


@router.get("/{user_id}", response_model=Envelope[UserResponse])
async def get_user_by_id(
    user_id: str,
    claims: SessionClaims = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
):
    user = await users.get_user_by_id(UserId(parse_id(user_id, "user")))
    return _own_record(user, claims)


def _own_record(user: User | None, claims: SessionClaims) -> Envelope:
    if user is None:
        raise NotFoundError("User not found")
    check_owner(
        user.id, claims.user_id,
        "You can only access your own user information",
    )
    return Envelope(
        status=200, message="User found", data=UserResponse.model_validate(user),
    )
