"""SQL Expense Repository: owner-scoped expense store and aggregates.

Invariants:
    - Every statement carries `user_id = :owner`; there is no unscoped query
    - find_filtered counts the filtered set before LIMIT/OFFSET
    - Listing order: date DESC, created_at DESC
    - aggregate() runs three queries over the same owner+window predicate:
      overall, per category (sum DESC), per day (date ASC)

Design Decisions:
    - Sums computed by the database (NUMERIC), converted to Decimal at the edge
    - Window compared on calendar dates: the column has no time-of-day, so the
      inclusive [start, end] instants reduce to [start.date(), end.date()]
"""

from decimal import Decimal

from sqlalchemy import Select, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import ExpenseId, UserId
from app.core.errors import ExpenseNotFoundError
from app.core.records import (
    CategoryTotal, DailyTotal, ExpenseFilter, ExpenseRecord, ExpenseStats,
    NewExpense, StatsWindow,
)
from app.models.expense import Expense

_CENT = Decimal("0.01")


def _to_decimal(value) -> Decimal:
    if value is None:
        return Decimal("0.00")
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(_CENT)


def _to_record(row: Expense) -> ExpenseRecord:
    return ExpenseRecord(
        id=ExpenseId(row.id),
        user_id=UserId(row.user_id),
        amount=_to_decimal(row.amount),
        category=row.category,
        date=row.date,
        note=row.note,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _apply_filter(query: Select, expense_filter: ExpenseFilter) -> Select:
    query = query.where(Expense.user_id == expense_filter.user_id)
    if expense_filter.start_date is not None:
        query = query.where(Expense.date >= expense_filter.start_date)
    if expense_filter.end_date is not None:
        query = query.where(Expense.date <= expense_filter.end_date)
    if expense_filter.category:
        query = query.where(Expense.category == expense_filter.category)
    return query


def _in_window(query: Select, user_id: UserId, window: StatsWindow) -> Select:
    return query.where(
        Expense.user_id == user_id,
        Expense.date >= window.start_date,
        Expense.date <= window.end_date,
    )


class SqlExpenseRepository:
    """ExpenseRepository backed by an AsyncSession."""

    def __init__(self, db: AsyncSession):
        self._db = db

    async def _get_row(self, expense_id: ExpenseId, user_id: UserId) -> Expense | None:
        result = await self._db.execute(
            select(Expense).where(
                Expense.id == expense_id, Expense.user_id == user_id,
            ),
        )
        return result.scalar_one_or_none()

    async def create(self, expense: NewExpense) -> ExpenseRecord:
        row = Expense(
            user_id=expense.user_id,
            amount=expense.amount,
            category=expense.category,
            date=expense.date,
            note=expense.note,
            created_at=expense.created_at,
            updated_at=expense.updated_at,
        )
        self._db.add(row)
        await self._db.commit()
        await self._db.refresh(row)
        return _to_record(row)

    async def find_by_id(
        self, expense_id: ExpenseId, user_id: UserId,
    ) -> ExpenseRecord | None:
        row = await self._get_row(expense_id, user_id)
        return _to_record(row) if row else None

    async def find_filtered(
        self, expense_filter: ExpenseFilter,
    ) -> tuple[list[ExpenseRecord], int]:
        count_query = _apply_filter(
            select(func.count(Expense.id)), expense_filter,
        )
        total = (await self._db.execute(count_query)).scalar_one()

        page_query = (
            _apply_filter(select(Expense), expense_filter)
            .order_by(Expense.date.desc(), Expense.created_at.desc())
            .limit(expense_filter.limit)
            .offset(expense_filter.offset)
        )
        rows = (await self._db.execute(page_query)).scalars().all()
        return [_to_record(r) for r in rows], int(total)

    async def save(self, expense: ExpenseRecord) -> ExpenseRecord:
        row = await self._get_row(expense.id, expense.user_id)
        if row is None:
            raise ExpenseNotFoundError(expense.id)
        row.amount = expense.amount
        row.category = expense.category
        row.date = expense.date
        row.note = expense.note
        row.updated_at = expense.updated_at
        await self._db.commit()
        await self._db.refresh(row)
        return _to_record(row)

    async def delete(self, expense_id: ExpenseId, user_id: UserId) -> None:
        await self._db.execute(
            delete(Expense).where(
                Expense.id == expense_id, Expense.user_id == user_id,
            ),
        )
        await self._db.commit()

    async def aggregate(self, user_id: UserId, window: StatsWindow) -> ExpenseStats:
        overall = (await self._db.execute(_in_window(
            select(
                func.coalesce(func.sum(Expense.amount), 0),
                func.count(Expense.id),
            ),
            user_id, window,
        ))).one()

        category_total = func.sum(Expense.amount).label("total")
        by_category = (await self._db.execute(
            _in_window(
                select(Expense.category, category_total, func.count(Expense.id)),
                user_id, window,
            )
            .group_by(Expense.category)
            .order_by(category_total.desc(), Expense.category.asc()),
        )).all()

        by_day = (await self._db.execute(
            _in_window(
                select(Expense.date, func.sum(Expense.amount)),
                user_id, window,
            )
            .group_by(Expense.date)
            .order_by(Expense.date.asc()),
        )).all()

        return ExpenseStats(
            total=_to_decimal(overall[0]),
            count=int(overall[1]),
            by_category=[
                CategoryTotal(category=c, total=_to_decimal(t), count=int(n))
                for c, t, n in by_category
            ],
            daily_trend=[
                DailyTotal(date=d, total=_to_decimal(t)) for d, t in by_day
            ],
        )
