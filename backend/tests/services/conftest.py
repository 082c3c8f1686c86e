"""Service test fixtures: in-memory repositories, fast hasher, controllable clocks.

Invariants:
    - Services are wired exactly as in production, only the repositories are fakes
    - bcrypt runs at its minimum cost (4) to keep the suite fast
"""

from datetime import datetime, timedelta, timezone

import pytest

from app.core.password_hasher import PasswordHasher
from app.core.token_codec import TokenCodec
from app.services.auth_service import AuthService
from app.services.expense_service import ExpenseService
from tests.services.fake_repositories import (
    InMemoryExpenseRepository, InMemoryUserRepository,
)

TEST_SECRET = "unit-test-secret"


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture(scope="session")
def hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 3, 15, 10, 30, tzinfo=timezone.utc))


@pytest.fixture
def token_codec():
    return TokenCodec(TEST_SECRET)


@pytest.fixture
def user_repo():
    return InMemoryUserRepository()


@pytest.fixture
def expense_repo():
    return InMemoryExpenseRepository()


@pytest.fixture
def auth_service(user_repo, hasher, token_codec):
    return AuthService(user_repo, hasher, token_codec)


@pytest.fixture
def expense_service(expense_repo, clock):
    return ExpenseService(expense_repo, clock=clock)
