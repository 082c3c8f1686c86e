"""Domain Records: plain data passed between core services and store contracts.

Invariants:
    - Core never sees ORM objects; repositories translate to/from these records
    - UserRecord.password_hash never leaves the core: PublicUser is the outward view
    - ExpenseUpdate distinguishes "field omitted" (UNSET) from "field set to None"

Design Decisions:
    - Dataclasses over Pydantic in the core: no validation side effects, cheap to
      build in tests and fakes
    - UNSET is a singleton sentinel, not None, because `note=None` is a legitimate
      update (clear the note)
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from app.core.domain_types import ExpenseId, UserId


class _Unset:
    """Marker for a partial-update field the caller did not supply."""
    _instance: "_Unset | None" = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


# ─── Users ───────────────────────────────────────────────────────

@dataclass
class NewUser:
    name: str
    email: str
    password_hash: str


@dataclass
class UserRecord:
    id: UserId
    name: str
    email: str
    password_hash: str
    created_at: datetime
    updated_at: datetime

    def to_public(self) -> "PublicUser":
        return PublicUser(id=self.id, name=self.name, email=self.email)


@dataclass(frozen=True)
class PublicUser:
    id: UserId
    name: str
    email: str


@dataclass(frozen=True)
class AuthResult:
    user: PublicUser
    token: str


# ─── Expenses ────────────────────────────────────────────────────

@dataclass
class NewExpense:
    user_id: UserId
    amount: Decimal
    category: str
    date: date
    note: str | None
    created_at: datetime
    updated_at: datetime


@dataclass
class ExpenseRecord:
    id: ExpenseId
    user_id: UserId
    amount: Decimal
    category: str
    date: date
    note: str | None
    created_at: datetime
    updated_at: datetime


@dataclass
class ExpenseUpdate:
    """Partial update: only fields not UNSET are applied."""
    amount: Any = UNSET
    category: Any = UNSET
    date: Any = UNSET
    note: Any = UNSET


@dataclass
class ExpenseFilter:
    user_id: UserId
    start_date: date | None = None
    end_date: date | None = None
    category: str | None = None
    limit: int = 10
    offset: int = 0


# ─── Statistics ──────────────────────────────────────────────────

@dataclass(frozen=True)
class StatsWindow:
    """Inclusive [start, end] wall-clock window."""
    start: datetime
    end: datetime

    @property
    def start_date(self) -> date:
        return self.start.date()

    @property
    def end_date(self) -> date:
        return self.end.date()


@dataclass
class CategoryTotal:
    category: str
    total: Decimal
    count: int


@dataclass
class DailyTotal:
    date: date
    total: Decimal


@dataclass
class ExpenseStats:
    total: Decimal = Decimal("0")
    count: int = 0
    by_category: list[CategoryTotal] = field(default_factory=list)
    daily_trend: list[DailyTotal] = field(default_factory=list)
