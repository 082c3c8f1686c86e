"""Auth Service: registration, login, identity lookup, token validation.

Invariants:
    - validate_token is the single trust boundary: every protected route depends on it
    - Unknown email and wrong password raise the same InvalidCredentialsError and
      both pay one bcrypt verification
    - Hash before persist: a hashing failure leaves nothing in the store
    - No retries: a store failure propagates as-is
    - bcrypt runs in the threadpool; the event loop never waits on a hash

Design Decisions:
    - Collaborators injected (repository, hasher, codec): the service holds no
      process-wide state and tests swap the repository for an in-memory fake
    - exists_by_email pre-check is advisory; the unique index is authoritative and
      the repository reports a lost race as EmailAlreadyExistsError
"""

import logging

from starlette.concurrency import run_in_threadpool

from app.core.credential_policy import check_registration
from app.core.domain_types import UserId
from app.core.errors import (
    EmailAlreadyExistsError, InvalidCredentialsError, UserNotFoundError,
)
from app.core.password_hasher import PasswordHasher
from app.core.records import AuthResult, NewUser, UserRecord
from app.core.repository_protocols import UserRepository
from app.core.token_codec import TokenCodec

logger = logging.getLogger(__name__)


class AuthService:
    """Credential and session-token operations."""

    def __init__(
        self, users: UserRepository, hasher: PasswordHasher, tokens: TokenCodec,
    ):
        self._users = users
        self._hasher = hasher
        self._tokens = tokens

    async def register(self, name: str, email: str, password: str) -> AuthResult:
        check_registration(name, password)

        if await self._users.exists_by_email(email):
            raise EmailAlreadyExistsError()

        password_hash = await run_in_threadpool(self._hasher.hash, password)
        user = await self._users.create(
            NewUser(name=name, email=email, password_hash=password_hash),
        )
        logger.info("User registered", extra={"user_id": str(user.id)})

        return AuthResult(user=user.to_public(), token=self._tokens.issue(user.id))

    async def login(self, email: str, password: str) -> AuthResult:
        user = await self._users.find_by_email(email)
        if user is None:
            await run_in_threadpool(self._hasher.verify_dummy, password)
            raise InvalidCredentialsError()

        if not await run_in_threadpool(
            self._hasher.verify, user.password_hash, password,
        ):
            raise InvalidCredentialsError()

        return AuthResult(user=user.to_public(), token=self._tokens.issue(user.id))

    async def get_user_by_id(self, user_id: UserId) -> UserRecord:
        user = await self._users.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    def validate_token(self, token: str) -> UserId:
        return self._tokens.verify(token)
