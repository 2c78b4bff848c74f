"""User Lifecycle Service — registration, activation, login and password recovery.

Invariants:
    - State machine: Pending -> Activated; Pending -> Deleted (lazily, on login after expiry)
    - Activated users carry an orthogonal reset sub-state: NoResetPending <-> ResetPending
    - Registration issues a session token immediately; only login is gated on activation
    - Re-registering an unactivated email replaces the stale record in the same transaction
    - Emails are fire-and-forget: delivery outcome never changes a caller-visible result
    - Lookups perform no authorization; callers compare the returned identity

Design Decisions:
    - Expired-pending login answers "User not found" for both cases (no account probing)
    - Activation consumes the token (cleared after use)
"""

import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from tasklist.core.domain_types import SortOrder, UserId, UserRole, UserSortField
from tasklist.core.enforce_access import check_passwords_match, is_expired
from tasklist.core.errors import BadRequestError, NotFoundError
from tasklist.core.passwords import (
    generate_activation_token, generate_reset_token, hash_password, verify_password,
)
from tasklist.infrastructure.error_adapter import persistence_boundary
from tasklist.infrastructure.mailer import (
    Mailer, activation_email, password_recovery_email,
)
from tasklist.models.user import User
from tasklist.schemas.user import (
    PasswordRecover, UserLogin, UserRegister, normalize_email,
)
from tasklist.services.token_service import TokenService

logger = logging.getLogger(__name__)


class UserService:
    """Owns the account lifecycle for one request's database session."""

    def __init__(
        self,
        db: AsyncSession,
        tokens: TokenService,
        mailer: Mailer,
        activation_ttl: timedelta = timedelta(hours=1),
        reset_ttl: timedelta = timedelta(hours=1),
    ):
        self.db = db
        self.tokens = tokens
        self.mailer = mailer
        self.activation_ttl = activation_ttl
        self.reset_ttl = reset_ttl

    async def register(self, data: UserRegister, base_url: str) -> tuple[User, str]:
        """Create a pending account and mail its activation link."""
        check_passwords_match(data.password, data.confirm_password)
        now = datetime.now(timezone.utc)
        activation_token = generate_activation_token()

        async with persistence_boundary(self.db):
            existing = await self._find_one(User.email == data.email)
            if existing:
                if existing.is_activated:
                    raise BadRequestError("Email already exists")
                logger.info(
                    "Replacing abandoned registration",
                    extra={"user_id": existing.id},
                )
                await self.db.delete(existing)
                await self.db.flush()

            user = User(
                username=data.username,
                email=data.email,
                password_hash=hash_password(data.password),
                is_activated=False,
                activation_token=activation_token,
                activation_expires_at=now + self.activation_ttl,
                role=UserRole.USER.value,
                lists=[],
            )
            self.db.add(user)
            await self.db.commit()

        session_token = self.tokens.issue_token(user)
        activation_url = (
            f"{base_url.rstrip('/')}/api/user/activate-account/{activation_token}"
        )
        self.mailer.send_in_background(
            activation_email(user.email, user.username, activation_url),
        )
        logger.info("User registered", extra={"user_id": user.id})
        return user, session_token

    async def activate_account(self, activation_token: str) -> User:
        now = datetime.now(timezone.utc)
        async with persistence_boundary(self.db):
            user = await self._find_one(
                User.activation_token == activation_token,
                User.activation_expires_at > now,
            )
            if not user:
                raise NotFoundError(
                    "Account activation token is invalid or has expired",
                )
            user.is_activated = True
            user.activation_token = None
            user.activation_expires_at = None
            await self.db.commit()
        logger.info("User activated", extra={"user_id": user.id})
        return user

    async def login(self, data: UserLogin) -> tuple[User, str]:
        now = datetime.now(timezone.utc)
        async with persistence_boundary(self.db):
            user = await self._find_one(User.email == data.email)
            if not user:
                raise BadRequestError("User not found")

            if not user.is_activated and is_expired(user.activation_expires_at, now):
                logger.info(
                    "Deleting abandoned registration on login",
                    extra={"user_id": user.id},
                )
                await self.db.delete(user)
                await self.db.commit()
                raise BadRequestError("User not found")

        if not user.is_activated:
            raise BadRequestError("Account is not activated, please check your email")
        if not verify_password(data.password, user.password_hash):
            raise BadRequestError("Invalid credentials")
        return user, self.tokens.issue_token(user)

    async def send_recover_password_token(self, email: str) -> str:
        now = datetime.now(timezone.utc)
        async with persistence_boundary(self.db):
            user = await self._find_one(User.email == normalize_email(email))
            if not user:
                raise NotFoundError("User not found")
            reset_token = generate_reset_token()
            user.reset_token = reset_token
            user.reset_expires_at = now + self.reset_ttl
            await self.db.commit()

        self.mailer.send_in_background(
            password_recovery_email(user.email, user.username, reset_token),
        )
        logger.info("Password reset token issued", extra={"user_id": user.id})
        return reset_token

    async def recover_password(self, data: PasswordRecover) -> User:
        check_passwords_match(data.password, data.confirm_password)
        now = datetime.now(timezone.utc)
        async with persistence_boundary(self.db):
            user = await self._find_one(
                User.reset_token == data.token,
                User.reset_expires_at > now,
            )
            if not user:
                raise BadRequestError(
                    "Password reset token is invalid or has expired",
                )
            user.password_hash = hash_password(data.password)
            user.reset_token = None
            user.reset_expires_at = None
            await self.db.commit()
        logger.info("Password recovered", extra={"user_id": user.id})
        return user

    # ─── Lookups (no authorization) ─────────────────────────────

    async def get_user_by_id(self, user_id: UserId) -> User | None:
        async with persistence_boundary(self.db):
            return await self.db.get(User, user_id)

    async def get_user_by_username(self, username: str) -> User | None:
        async with persistence_boundary(self.db):
            return await self._find_one(User.username == username)

    async def get_user_by_email(self, email: str) -> User | None:
        async with persistence_boundary(self.db):
            return await self._find_one(User.email == normalize_email(email))

    async def get_all_users(
        self,
        page: int = 1,
        limit: int = 10,
        sort: str = UserSortField.CREATED_AT.value,
        order: str = SortOrder.DESC.value,
        search: str = "",
    ) -> list[User]:
        """Offset-paginated listing; search is a case-insensitive substring
        match over username or email."""
        if page < 1 or limit < 1:
            raise BadRequestError("page and limit must be positive integers")
        try:
            sort_field = UserSortField(sort)
            sort_order = SortOrder(order.lower())
        except ValueError:
            raise BadRequestError(f"Cannot sort users by '{sort}' '{order}'")

        column = getattr(User, sort_field.value)
        query = select(User)
        if search:
            pattern = f"%{_escape_like(search)}%"
            query = query.where(or_(
                User.username.ilike(pattern, escape="\\"),
                User.email.ilike(pattern, escape="\\"),
            ))
        query = (
            query.order_by(column.asc() if sort_order is SortOrder.ASC else column.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        async with persistence_boundary(self.db):
            result = await self.db.execute(query)
            return list(result.scalars().all())

    async def _find_one(self, *criteria) -> User | None:
        result = await self.db.execute(select(User).where(*criteria))
        return result.scalar_one_or_none()


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
