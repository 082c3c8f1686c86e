"""Request Gate: wires services per request and resolves the bearer token to a user.

Invariants:
    - Every protected route depends on get_current_user; nothing downstream
      re-checks identity
    - Missing header, malformed header, bad token and unknown user all produce
      the same 401 (InvalidTokenError)
    - PasswordHasher and TokenCodec are built once per process from settings and
      never mutated

Design Decisions:
    - lru_cache singletons over module globals: built lazily after settings load,
      overridable in tests via app.dependency_overrides
"""

from functools import lru_cache
from datetime import timedelta

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.core.domain_types import VALID_CATEGORIES
from app.core.errors import InvalidTokenError, UserNotFoundError
from app.core.password_hasher import PasswordHasher
from app.core.records import UserRecord
from app.core.token_codec import TokenCodec
from app.infrastructure.database import get_db
from app.infrastructure.expense_repository import SqlExpenseRepository
from app.infrastructure.user_repository import SqlUserRepository
from app.services.auth_service import AuthService
from app.services.expense_service import ExpenseService

_bearer = HTTPBearer(auto_error=False)


@lru_cache
def get_password_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=get_settings().bcrypt_rounds)


@lru_cache
def get_token_codec() -> TokenCodec:
    settings = get_settings()
    return TokenCodec(
        settings.jwt_secret, ttl=timedelta(hours=settings.token_ttl_hours),
    )


def get_auth_service(
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenCodec = Depends(get_token_codec),
) -> AuthService:
    return AuthService(SqlUserRepository(db), hasher, tokens)


def get_expense_service(db: AsyncSession = Depends(get_db)) -> ExpenseService:
    return ExpenseService(SqlExpenseRepository(db), categories=VALID_CATEGORIES)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    auth: AuthService = Depends(get_auth_service),
) -> UserRecord:
    """Anonymous -> Authenticated, or 401."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise InvalidTokenError()
    user_id = auth.validate_token(credentials.credentials)
    try:
        return await auth.get_user_by_id(user_id)
    except UserNotFoundError as e:
        raise InvalidTokenError() from e
