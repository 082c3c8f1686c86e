"""Expense Routes: owner-scoped CRUD, listing, and statistics.

Invariants:
    - Owner id always comes from the request gate, never from the body or query
    - List query parameters are parsed leniently, per field:
        start_date/end_date  ignored unless YYYY-MM-DD
        category             passed through verbatim
        limit                default from settings; ignored unless a positive int
        offset               default 0; ignored unless a non-negative int
    - /stats is declared before /{expense_id} so it is not parsed as an id

Design Decisions:
    - Raw str query params + local parsing instead of typed Query(): a malformed
      value falls back to the default rather than failing the whole request
"""

import logging
from datetime import date, datetime
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from app.api.dependencies import get_current_user, get_expense_service
from app.config import get_settings
from app.core.domain_types import DATE_FORMAT, ExpenseId, StatsPeriod
from app.core.records import ExpenseFilter, UserRecord
from app.schemas.expense import (
    ExpenseCreateRequest, ExpenseListResponse, ExpenseResponse,
    ExpenseStatsResponse, ExpenseUpdateRequest, Pagination,
)
from app.services.expense_service import ExpenseService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/expenses", tags=["expenses"])


def _parse_optional_date(raw: str | None) -> date | None:
    if not raw:
        return None
    try:
        return datetime.strptime(raw, DATE_FORMAT).date()
    except ValueError:
        return None


def _parse_int(raw: str | None, default: int, minimum: int) -> int:
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value >= minimum else default


def build_expense_filter(
    user: UserRecord,
    start_date: str | None,
    end_date: str | None,
    category: str | None,
    limit: str | None,
    offset: str | None,
) -> ExpenseFilter:
    return ExpenseFilter(
        user_id=user.id,
        start_date=_parse_optional_date(start_date),
        end_date=_parse_optional_date(end_date),
        category=category or None,
        limit=_parse_int(limit, get_settings().default_page_limit, 1),
        offset=_parse_int(offset, 0, 0),
    )


@router.post(
    "", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED,
)
async def create_expense(
    body: ExpenseCreateRequest,
    user: UserRecord = Depends(get_current_user),
    expenses: ExpenseService = Depends(get_expense_service),
):
    """Record a new expense for the current user."""
    record = await expenses.create(
        user.id, body.amount, body.category, body.date, body.note,
    )
    return ExpenseResponse.from_record(record)


@router.get("", response_model=ExpenseListResponse)
async def list_expenses(
    start_date: str | None = Query(None),
    end_date: str | None = Query(None),
    category: str | None = Query(None),
    limit: str | None = Query(None),
    offset: str | None = Query(None),
    user: UserRecord = Depends(get_current_user),
    expenses: ExpenseService = Depends(get_expense_service),
):
    """List expenses, most recent first, with optional filters."""
    expense_filter = build_expense_filter(
        user, start_date, end_date, category, limit, offset,
    )
    records, total = await expenses.get_all(expense_filter)
    return ExpenseListResponse(
        expenses=[ExpenseResponse.from_record(r) for r in records],
        pagination=Pagination(
            total=total, limit=expense_filter.limit, offset=expense_filter.offset,
        ),
    )


@router.get("/stats", response_model=ExpenseStatsResponse)
async def expense_stats(
    period: str = Query(StatsPeriod.MONTH.value),
    user: UserRecord = Depends(get_current_user),
    expenses: ExpenseService = Depends(get_expense_service),
):
    """Totals, per-category breakdown and daily trend for day/week/month."""
    resolved = StatsPeriod.parse(period)
    stats = await expenses.get_stats(user.id, resolved)
    return ExpenseStatsResponse.from_stats(resolved.value, stats)


@router.get("/{expense_id}", response_model=ExpenseResponse)
async def get_expense(
    expense_id: UUID,
    user: UserRecord = Depends(get_current_user),
    expenses: ExpenseService = Depends(get_expense_service),
):
    record = await expenses.get_by_id(ExpenseId(expense_id), user.id)
    return ExpenseResponse.from_record(record)


@router.put("/{expense_id}", response_model=ExpenseResponse)
async def update_expense(
    expense_id: UUID,
    body: ExpenseUpdateRequest,
    user: UserRecord = Depends(get_current_user),
    expenses: ExpenseService = Depends(get_expense_service),
):
    """Apply only the fields present in the body."""
    record = await expenses.update(ExpenseId(expense_id), user.id, body.to_update())
    return ExpenseResponse.from_record(record)


@router.delete("/{expense_id}")
async def delete_expense(
    expense_id: UUID,
    user: UserRecord = Depends(get_current_user),
    expenses: ExpenseService = Depends(get_expense_service),
):
    await expenses.delete(ExpenseId(expense_id), user.id)
    return {"message": "Expense deleted successfully"}
