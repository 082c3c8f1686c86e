"""Expense Schemas: request/response models with field-level validation.

Invariants:
    - amount > 0 with at most 2 decimal places
    - category and date arrive as raw strings; the service owns their validation
      so the domain error codes (INVALID_CATEGORY, INVALID_DATE) reach the client
    - ExpenseUpdateRequest: amount/category/date may be omitted but not null;
      note may be null (clears it)

Design Decisions:
    - model_dump(exclude_unset=True) drives the partial update, so "omitted" and
      "explicit null" stay distinguishable
"""

import datetime as dt
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from app.core.records import (
    CategoryTotal, DailyTotal, ExpenseRecord, ExpenseStats, ExpenseUpdate,
)

_NON_NULLABLE = ("amount", "category", "date")


class ExpenseCreateRequest(BaseModel):
    amount: Decimal = Field(gt=0, max_digits=15, decimal_places=2)
    category: str
    date: str
    note: str | None = None


class ExpenseUpdateRequest(BaseModel):
    amount: Decimal | None = Field(None, gt=0, max_digits=15, decimal_places=2)
    category: str | None = None
    date: str | None = None
    note: str | None = None

    @model_validator(mode="after")
    def reject_null_required_fields(self) -> "ExpenseUpdateRequest":
        for name in _NON_NULLABLE:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def to_update(self) -> ExpenseUpdate:
        return ExpenseUpdate(**self.model_dump(exclude_unset=True))


class ExpenseResponse(BaseModel):
    id: UUID
    user_id: UUID
    amount: Decimal
    category: str
    date: dt.date
    note: str | None = None
    created_at: dt.datetime
    updated_at: dt.datetime

    @classmethod
    def from_record(cls, record: ExpenseRecord) -> "ExpenseResponse":
        return cls(
            id=record.id,
            user_id=record.user_id,
            amount=record.amount,
            category=record.category,
            date=record.date,
            note=record.note,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


class Pagination(BaseModel):
    total: int
    limit: int
    offset: int


class ExpenseListResponse(BaseModel):
    expenses: list[ExpenseResponse]
    pagination: Pagination


class CategoryTotalResponse(BaseModel):
    category: str
    total: Decimal
    count: int

    @classmethod
    def from_record(cls, item: CategoryTotal) -> "CategoryTotalResponse":
        return cls(category=item.category, total=item.total, count=item.count)


class DailyTotalResponse(BaseModel):
    date: dt.date
    total: Decimal

    @classmethod
    def from_record(cls, item: DailyTotal) -> "DailyTotalResponse":
        return cls(date=item.date, total=item.total)


class ExpenseStatsResponse(BaseModel):
    period: str
    total: Decimal
    count: int
    by_category: list[CategoryTotalResponse]
    daily_trend: list[DailyTotalResponse]

    @classmethod
    def from_stats(cls, period: str, stats: ExpenseStats) -> "ExpenseStatsResponse":
        return cls(
            period=period,
            total=stats.total,
            count=stats.count,
            by_category=[CategoryTotalResponse.from_record(c) for c in stats.by_category],
            daily_trend=[DailyTotalResponse.from_record(d) for d in stats.daily_trend],
        )
