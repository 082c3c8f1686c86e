"""Expense Service: validation, owner-scoped CRUD orchestration, statistics.

Invariants:
    - Every operation takes the owner id and passes it to every repository call
    - A record owned by someone else is indistinguishable from a missing one
      (ExpenseNotFoundError in both cases)
    - Validation happens before any write: a rejected input persists nothing
    - update() refreshes updated_at on every successful call, even with no changes
    - delete() checks existence+ownership before deleting

Design Decisions:
    - Category set and clock injected at construction: immutable configuration,
      deterministic tests
    - Window arithmetic lives in core/stats_window.py (pure); aggregation is
      delegated to the repository (the store sums, not Python)
"""

import logging
from collections.abc import Callable
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from app.core.domain_types import (
    DATE_FORMAT, VALID_CATEGORIES, ExpenseId, StatsPeriod, UserId,
)
from app.core.errors import (
    ExpenseNotFoundError, InvalidAmountError, InvalidCategoryError, InvalidDateError,
)
from app.core.records import (
    UNSET, ExpenseFilter, ExpenseRecord, ExpenseStats, ExpenseUpdate, NewExpense,
)
from app.core.repository_protocols import ExpenseRepository
from app.core.stats_window import resolve_stats_window

logger = logging.getLogger(__name__)

_CENT = Decimal("0.01")
# NUMERIC(15,2): 13 integer digits
_MAX_AMOUNT = Decimal("9999999999999.99")


def _local_now() -> datetime:
    return datetime.now().astimezone()


def parse_expense_date(value: str) -> date:
    """Strict YYYY-MM-DD parse; rejects impossible dates like 2024-13-40."""
    if not isinstance(value, str) or len(value) != 10:
        raise InvalidDateError(str(value))
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError as e:
        raise InvalidDateError(value) from e


def normalize_amount(value: Decimal | int | float | str) -> Decimal:
    """Positive, at most 2 fractional digits, fits NUMERIC(15,2)."""
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise InvalidAmountError() from e
    if not amount.is_finite() or amount <= 0 or amount > _MAX_AMOUNT:
        raise InvalidAmountError()
    if amount != amount.quantize(_CENT):
        raise InvalidAmountError()
    return amount.quantize(_CENT)


class ExpenseService:
    """Owner-scoped expense operations."""

    def __init__(
        self,
        repo: ExpenseRepository,
        categories: frozenset[str] = VALID_CATEGORIES,
        clock: Callable[[], datetime] = _local_now,
    ):
        self._repo = repo
        self._categories = categories
        self._clock = clock

    def _check_category(self, category: str) -> str:
        if category not in self._categories:
            raise InvalidCategoryError(category)
        return category

    async def create(
        self,
        user_id: UserId,
        amount: Decimal,
        category: str,
        date_string: str,
        note: str | None = None,
    ) -> ExpenseRecord:
        self._check_category(category)
        expense_date = parse_expense_date(date_string)
        normalized = normalize_amount(amount)

        now = self._clock()
        expense = await self._repo.create(NewExpense(
            user_id=user_id,
            amount=normalized,
            category=category,
            date=expense_date,
            note=note,
            created_at=now,
            updated_at=now,
        ))
        logger.info(
            "Expense created",
            extra={"user_id": str(user_id), "expense_id": str(expense.id)},
        )
        return expense

    async def get_by_id(self, expense_id: ExpenseId, user_id: UserId) -> ExpenseRecord:
        expense = await self._repo.find_by_id(expense_id, user_id)
        if expense is None:
            raise ExpenseNotFoundError(expense_id)
        return expense

    async def get_all(
        self, expense_filter: ExpenseFilter,
    ) -> tuple[list[ExpenseRecord], int]:
        return await self._repo.find_filtered(expense_filter)

    async def update(
        self, expense_id: ExpenseId, user_id: UserId, changes: ExpenseUpdate,
    ) -> ExpenseRecord:
        expense = await self.get_by_id(expense_id, user_id)

        # Validate everything before touching the record
        amount = normalize_amount(changes.amount) if changes.amount is not UNSET else UNSET
        category = (
            self._check_category(changes.category)
            if changes.category is not UNSET else UNSET
        )
        expense_date = (
            parse_expense_date(changes.date) if changes.date is not UNSET else UNSET
        )

        if amount is not UNSET:
            expense.amount = amount
        if category is not UNSET:
            expense.category = category
        if expense_date is not UNSET:
            expense.date = expense_date
        if changes.note is not UNSET:
            expense.note = changes.note

        expense.updated_at = self._clock()
        return await self._repo.save(expense)

    async def delete(self, expense_id: ExpenseId, user_id: UserId) -> None:
        await self.get_by_id(expense_id, user_id)
        await self._repo.delete(expense_id, user_id)
        logger.info(
            "Expense deleted",
            extra={"user_id": str(user_id), "expense_id": str(expense_id)},
        )

    async def get_stats(
        self, user_id: UserId, period: StatsPeriod | str | None = StatsPeriod.MONTH,
    ) -> ExpenseStats:
        window = resolve_stats_window(period, self._clock())
        return await self._repo.aggregate(user_id, window)
