"""Boundary Protocols: contracts between core and shell.

Invariants:
    - Core NEVER imports from shell: dependency arrows point inward only
    - Every ExpenseRepository method takes the owner id; there is no unscoped read
    - UserRepository.create raises EmailAlreadyExistsError when the unique email
      index rejects the row (authoritative over any prior exists_by_email)

Design Decisions:
    - Protocol over ABC: structural subtyping, so in-memory fakes in tests need
      no inheritance
    - Async in Protocol: implementations do IO
"""

from typing import Protocol

from app.core.domain_types import ExpenseId, UserId
from app.core.records import (
    ExpenseFilter, ExpenseRecord, ExpenseStats, NewExpense, NewUser,
    StatsWindow, UserRecord,
)


class UserRepository(Protocol):
    """Contract for credential persistence, implemented by shell."""
    async def create(self, user: NewUser) -> UserRecord: ...
    async def find_by_email(self, email: str) -> UserRecord | None: ...
    async def find_by_id(self, user_id: UserId) -> UserRecord | None: ...
    async def exists_by_email(self, email: str) -> bool: ...


class ExpenseRepository(Protocol):
    """Contract for expense persistence, implemented by shell."""
    async def create(self, expense: NewExpense) -> ExpenseRecord: ...
    async def find_by_id(
        self, expense_id: ExpenseId, user_id: UserId,
    ) -> ExpenseRecord | None: ...
    async def find_filtered(
        self, expense_filter: ExpenseFilter,
    ) -> tuple[list[ExpenseRecord], int]: ...
    async def save(self, expense: ExpenseRecord) -> ExpenseRecord: ...
    async def delete(self, expense_id: ExpenseId, user_id: UserId) -> None: ...
    async def aggregate(
        self, user_id: UserId, window: StatsWindow,
    ) -> ExpenseStats: ...
